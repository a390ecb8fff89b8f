"""Pydantic schemas for API requests and responses."""

from src.schemas.auth import AuthResponse, Credentials, UserResponse, VerifyResponse
from src.schemas.dashboard import DashboardResponse, DashboardSave, DashboardSaveResponse
from src.schemas.widget import Widget, WidgetType, new_widget, validate_widget

__all__ = [
    "Credentials",
    "AuthResponse",
    "UserResponse",
    "VerifyResponse",
    "DashboardSave",
    "DashboardResponse",
    "DashboardSaveResponse",
    "Widget",
    "WidgetType",
    "new_widget",
    "validate_widget",
]
