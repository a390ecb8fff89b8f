"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """Email and password for registration or login.

    Presence and length are checked by CredentialStore so both endpoints
    report the same messages.
    """

    email: str | None = Field(None, max_length=255)
    password: str | None = Field(None, max_length=128)


class UserResponse(BaseModel):
    """User information response."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    email: str
    created_at: datetime = Field(..., alias="createdAt")


class AuthResponse(BaseModel):
    """Authentication response with token and user info."""

    success: bool = True
    message: str
    token: str
    user: UserResponse


class SessionIdentity(BaseModel):
    """Identity resolved from a verified token."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: int = Field(..., alias="userId")
    email: str


class VerifyResponse(BaseModel):
    """Token verification response."""

    success: bool = True
    user: SessionIdentity


class MessageResponse(BaseModel):
    """Plain acknowledgement envelope."""

    success: bool = True
    message: str
