"""Main application entry point."""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from starlette.exceptions import HTTPException as StarletteHTTPException

from marketplace.config import (
    API_VERSION,
    CORS_ORIGINS,
    DATABASE_URL,
    DEMO_USER_ID,
    LOG_LEVEL,
    MERGE_CART_ITEMS,
    SEED_DATA,
    STORAGE_BACKEND,
)
from marketplace.logging_config import setup_logging
from marketplace.routers import bookings, cart, catalog, orders, search, users
from marketplace.seed import DEMO_USER_PROFILE, seed_storage
from marketplace.services.user_service import UserService
from marketplace.storage import MemoryStorage, Storage

# Setup structured logging
setup_logging(LOG_LEVEL)
logger = logging.getLogger(__name__)


def build_storage(backend: str = STORAGE_BACKEND) -> Storage:
    """
    Build the configured storage backend.

    Args:
        backend: ``memory`` or ``database``

    Returns:
        Storage instance with tables created (database backend)
    """
    if backend == "memory":
        return MemoryStorage()

    if backend == "database":
        from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
        from marketplace.database import DatabaseStorage, create_db_engine, init_db

        engine = create_db_engine(DATABASE_URL)
        SQLAlchemyInstrumentor().instrument(engine=engine)
        init_db(engine)
        return DatabaseStorage(engine)

    raise ValueError(f"Unknown storage backend: {backend}")


def create_app(
    storage: Optional[Storage] = None,
    seed: bool = SEED_DATA,
    merge_cart_items: bool = MERGE_CART_ITEMS
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        storage: Store to serve from; built from configuration when omitted
        seed: Load the reference catalog into an empty store at startup
        merge_cart_items: Merge repeated adds of a product into one cart row

    Returns:
        Configured application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting application...")
        if seed:
            seed_storage(app.state.storage)
            UserService(app.state.storage).ensure_user(DEMO_USER_ID, DEMO_USER_PROFILE)
        logger.info("Application startup complete", extra={
            "storage": type(app.state.storage).__name__
        })

        yield

        logger.info("Application shutdown complete")

    app = FastAPI(
        title="Marketplace API",
        version=API_VERSION,
        lifespan=lifespan
    )
    app.state.storage = storage if storage is not None else build_storage()
    app.state.merge_cart_items = merge_cart_items

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"message": exc.detail})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"message": "Invalid request data", "errors": jsonable_encoder(exc.errors())}
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error", extra={
            "path": request.url.path,
            "method": request.method
        })
        return JSONResponse(status_code=500, content={"message": "Internal server error"})

    FastAPIInstrumentor.instrument_app(app)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy"}

    app.include_router(catalog.router)
    app.include_router(cart.router)
    app.include_router(orders.router)
    app.include_router(bookings.router)
    app.include_router(search.router)
    app.include_router(users.router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
