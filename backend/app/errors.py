"""
Domain error taxonomy.

Services raise these; app.main maps them to HTTP responses. Every failure
is scoped to a single request.
"""
from typing import Optional


class CareerBridgeError(Exception):
    """Base class for all domain errors."""


class ValidationError(CareerBridgeError):
    """Missing or malformed required field. Caller-facing, not retried."""

    def __init__(self, message: str, fields: Optional[list[str]] = None):
        super().__init__(message)
        self.fields = fields or []


class AuthError(CareerBridgeError):
    """Credentials rejected or account locked."""


class AuthorizationError(CareerBridgeError):
    """
    Role or ownership check failed.

    Surfaced as a redirect (soft deny). The message is for logs only; the
    response carries nothing but the redirect target.
    """

    def __init__(self, message: str, redirect_to: str = "/"):
        super().__init__(message)
        self.redirect_to = redirect_to


class NotFoundError(CareerBridgeError):
    """Referenced job, application or user is absent (or not visible)."""


class ConflictError(CareerBridgeError):
    """Operation conflicts with the current stored state."""


class DuplicateApplicationError(ConflictError):
    """Second application for the same student and job."""


class InvalidTransitionError(ConflictError):
    """Raised when an invalid status transition is attempted"""


class StoreError(CareerBridgeError):
    """Underlying store operation failed. Safe to retry."""


class StoreConflict(StoreError):
    """A store-level uniqueness constraint rejected the write."""


class StoreTimeout(StoreError):
    """Store round trip exceeded the configured timeout. Safe to retry."""
