"""Dashboard schemas."""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.schemas.widget import Widget


class DashboardSave(BaseModel):
    """Save request. ``widgets`` is type-checked by DashboardStore."""

    widgets: Any = None


class DashboardResponse(BaseModel):
    """Widget collection and last save time."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    widgets: list[Any]
    updated_at: datetime = Field(..., alias="updatedAt")

    @field_validator("updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        """SQLite drops the offset; stored timestamps are always UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class DashboardSaveResponse(DashboardResponse):
    """Save acknowledgement echoing the stored collection."""

    message: str = "Dashboard saved successfully"


class WidgetTypeInfo(BaseModel):
    """Catalog entry for one widget type."""

    type: str
    name: str
    description: str


class WidgetTypesResponse(BaseModel):
    """Widget catalog response."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    widget_types: list[WidgetTypeInfo] = Field(..., alias="widgetTypes")


class NewWidgetRequest(BaseModel):
    """Request for a fresh widget of a given type."""

    type: str | None = None
    id: str | None = Field(None, max_length=255)
    position: int | float | None = None


class NewWidgetResponse(BaseModel):
    """Freshly built, unsaved widget."""

    success: bool = True
    widget: Widget
