"""Configuration settings for the marketplace API."""
import os
from typing import List


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


# Storage Configuration
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")  # memory | database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./marketplace.db")
SEED_DATA = _env_flag("SEED_DATA", "true")

# Cart behaviour
MERGE_CART_ITEMS = _env_flag("MERGE_CART_ITEMS", "true")

# Search queries shorter than this are answered with empty results
SEARCH_MIN_QUERY_LENGTH = int(os.getenv("SEARCH_MIN_QUERY_LENGTH", "3"))

# Single placeholder identity used for every request
DEMO_USER_ID = os.getenv("DEMO_USER_ID", "demo-user")

# Observability
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
OTEL_EXPORTER_OTLP_ENDPOINT = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "")

# HTTP
CORS_ORIGINS: List[str] = [
    origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
]

# Application Settings
SERVICE_NAME = os.getenv("SERVICE_NAME", "marketplace-api")
API_VERSION = os.getenv("API_VERSION", "1.0.0")
