"""Domain errors raised by the services.

They are ``HTTPException`` subclasses so FastAPI renders them directly, while
the bulk coordinator can still catch them per element.
"""
from typing import Any

from fastapi import HTTPException


class DiveCenterError(HTTPException):
    """Base error for rental, basket and package operations."""

    status_code = 500

    def __init__(self, detail: Any):
        super().__init__(status_code=self.status_code, detail=detail)

    @property
    def message(self) -> str:
        if isinstance(self.detail, dict):
            return str(self.detail.get("message", ""))
        return str(self.detail)


class NotFoundError(DiveCenterError):
    """Entity is absent or belongs to another dive center."""

    status_code = 404


class ValidationError(DiveCenterError):
    """Malformed or missing input, wrong date order."""

    status_code = 422


class StateError(DiveCenterError):
    """Operation is not allowed in the entity's current state."""

    status_code = 400


class ConflictError(DiveCenterError):
    """Requested window overlaps an active assignment of the same item."""

    status_code = 409

    def __init__(self, message: str, conflicts: list[dict], **context: Any):
        self.conflicts = conflicts
        super().__init__({"message": message, **context, "conflicting_assignments": conflicts})
