"""
Error taxonomy shared by the record store, the pricing workflows and the API.

Every failure is scoped to a single user operation; nothing here is fatal to
the process.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class FreightDeskError(Exception):
    """Base exception for FreightDesk domain errors"""
    pass


class ValidationError(FreightDeskError):
    """Raised when one or more fields fail validation.

    ``errors`` maps field names to the messages shown next to them.
    """

    def __init__(self, errors: Dict[str, List[str]], message: Optional[str] = None):
        self.errors = {field: list(msgs) for field, msgs in errors.items()}
        super().__init__(message or "Validation failed")


class TransitionError(ValidationError):
    """Raised when a status change is not allowed by the lifecycle"""

    def __init__(self, entity: str, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            {"status": [f"{entity} cannot move from '{current}' to '{requested}'."]},
            message=f"Illegal {entity} status transition {current} -> {requested}",
        )


class NotFoundError(FreightDeskError):
    """Raised when a lookup by id returns nothing"""

    def __init__(self, entity: str, record_id: str):
        self.entity = entity
        self.record_id = record_id
        super().__init__(f"{entity} {record_id} not found")


class ExternalServiceError(FreightDeskError):
    """Raised when an external provider (summary generation) fails"""
    pass


class CompensationError(FreightDeskError):
    """Raised when a multi-step operation failed part way through."""

    def __init__(self, message: str, completed_steps: Optional[List[str]] = None, restored: bool = False):
        self.completed_steps = list(completed_steps or [])
        self.restored = restored
        super().__init__(message)


def api_exception_handler(exc, context):
    """DRF exception handler that maps domain errors to ``{'detail': ...}`` payloads."""
    if isinstance(exc, ValidationError):
        return Response({"detail": str(exc), "errors": exc.errors}, status=status.HTTP_400_BAD_REQUEST)
    if isinstance(exc, NotFoundError):
        return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(exc, ExternalServiceError):
        return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)
    if isinstance(exc, CompensationError):
        logger.error("Compensation failure surfaced to client: %s", exc)
        return Response(
            {"detail": str(exc), "completed_steps": exc.completed_steps, "restored": exc.restored},
            status=status.HTTP_409_CONFLICT,
        )
    if isinstance(exc, drf_exceptions.ValidationError) and isinstance(exc.detail, dict):
        return Response({"detail": "Validation failed", "errors": exc.detail}, status=status.HTTP_400_BAD_REQUEST)
    return exception_handler(exc, context)
