"""Domain-level exceptions raised by the service layer.

These never import FastAPI; ``src/api/errors.py`` translates them into the
JSON response envelope.
"""

from sqlalchemy.exc import IntegrityError


def violates(exc: IntegrityError, constraint_name: str) -> bool:
    """Check whether an IntegrityError originates from a specific constraint.

    PostgreSQL includes the constraint name in the message; SQLite reports
    the offending columns instead, so the caller may pass either.
    """
    message = str(exc.orig).lower() if exc.orig else ""
    return constraint_name.lower() in message


class DashboardError(Exception):
    """Base class for all service-level errors."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(DashboardError):
    """Malformed or missing input."""

    status_code = 400
    default_message = "Invalid request"


class ConflictError(DashboardError):
    """Uniqueness violation, e.g. an email that is already registered."""

    status_code = 400
    default_message = "Resource already exists"


class UnauthenticatedError(DashboardError):
    """Missing, invalid or expired token, or bad credentials."""

    status_code = 401
    default_message = "Authentication required"


class InvalidTokenError(DashboardError):
    """Token signature, structure or validity window check failed."""

    status_code = 401
    default_message = "Invalid or expired token"


class StoreError(DashboardError):
    """Durable-store failure not otherwise classified."""

    status_code = 500
    default_message = "Database error"
