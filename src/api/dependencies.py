"""FastAPI dependencies for authentication and the stores."""

import logging
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from src.database import get_db
from src.errors import InvalidTokenError, UnauthenticatedError
from src.services.auth import CredentialStore, TokenService
from src.services.dashboard import DashboardStore

logger = logging.getLogger(__name__)

# auto_error=False so a missing header reaches our own 401 envelope
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class SessionUser:
    """Verified identity attached to an authenticated request."""

    user_id: int
    email: str


def get_token_service(request: Request) -> TokenService:
    """Get the token service built by the application factory."""
    return request.app.state.token_service


def get_credential_store(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> CredentialStore:
    """Get credential store with dependencies."""
    settings = request.app.state.settings
    return CredentialStore(
        db,
        pwd_context=request.app.state.pwd_context,
        password_min_length=settings.password_min_length,
    )


def get_dashboard_store(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
) -> DashboardStore:
    """Get dashboard store with dependencies."""
    return DashboardStore(
        db,
        strict_widget_validation=request.app.state.settings.strict_widget_validation,
    )


def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
) -> SessionUser:
    """Resolve the caller's identity from the bearer token.

    Never touches the database; the token is self-contained.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Access token required")

    try:
        claims = token_service.validate(credentials.credentials)
    except InvalidTokenError as e:
        logger.debug(f"Rejected token: {e.message}")
        raise UnauthenticatedError("Invalid or expired token") from e
    except Exception as e:
        logger.warning(f"Unexpected error validating token: {e}")
        raise UnauthenticatedError("Invalid or expired token") from e

    return SessionUser(user_id=claims.user_id, email=claims.email)
