# src/wellcoach/domain/errors.py
"""
Error taxonomy shared by services and the HTTP layer.

The API maps each class to one status code (see interfaces/api/main.py);
services never build HTTP responses themselves.
"""

from typing import Any, Dict, List, Optional


class WellCoachError(Exception):
    """Base class for all application errors."""


class ValidationError(WellCoachError):
    """Malformed or missing input. Raised before anything is written."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    @classmethod
    def from_pydantic(cls, exc: Any, message: str = "Invalid request data") -> "ValidationError":
        """Build field-level detail from a pydantic ValidationError."""
        return cls(message, errors=format_field_errors(exc.errors()))


class NotFoundError(WellCoachError):
    """The target does not exist or is not owned by the caller."""


class DependencyError(WellCoachError):
    """The datastore or another collaborator failed. Details stay in the logs."""


class RecommendationGenerationError(WellCoachError):
    """Rule evaluation failed after the triggering event was stored."""


def format_field_errors(raw_errors: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Flatten pydantic/FastAPI error dicts into `{field, message, type}` items."""
    formatted = []
    for err in raw_errors:
        loc = [str(part) for part in err.get("loc", ()) if part != "body"]
        formatted.append({
            "field": ".".join(loc) or None,
            "message": err.get("msg", ""),
            "type": err.get("type"),
        })
    return formatted
