"""Authentication API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import (
    SessionUser,
    get_credential_store,
    get_current_session,
    get_token_service,
)
from src.schemas.auth import (
    AuthResponse,
    Credentials,
    MessageResponse,
    SessionIdentity,
    UserResponse,
    VerifyResponse,
)
from src.services.auth import CredentialStore, TokenService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    credentials: Credentials,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
):
    """Register a new user."""
    user = store.register(credentials.email, credentials.password)
    token = token_service.issue(user.id, user.email)

    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    credentials: Credentials,
    store: Annotated[CredentialStore, Depends(get_credential_store)],
    token_service: Annotated[TokenService, Depends(get_token_service)],
):
    """Login with email and password."""
    user = store.authenticate(credentials.email, credentials.password)
    token = token_service.issue(user.id, user.email)

    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=MessageResponse)
def logout(
    session: Annotated[SessionUser, Depends(get_current_session)],
):
    """Logout (client should discard token)."""
    return MessageResponse(message="Logged out successfully")


@router.get("/verify", response_model=VerifyResponse)
def verify(
    session: Annotated[SessionUser, Depends(get_current_session)],
):
    """Confirm the token and echo the identity it carries."""
    return VerifyResponse(user=SessionIdentity(user_id=session.user_id, email=session.email))
