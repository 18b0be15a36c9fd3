"""Domain errors raised by the marketplace core.

Lookups by id never raise: absence is returned as ``None`` (or ``False``
for deletes) and the HTTP layer turns it into a 404. Only malformed
input is an exception.
"""
from typing import Any, Dict, List, Optional


class MarketplaceError(Exception):
    """Base class for marketplace errors."""


class ValidationError(MarketplaceError, ValueError):
    """
    Input rejected by the core.

    Args:
        message: Summary of what was wrong
        errors: Field-level details, each ``{"field": ..., "message": ...}``
    """

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationError":
        """Build an error about a single field."""
        return cls(message, [{"field": field, "message": message}])

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "errors": self.errors}
