"""Widget schemas.

A widget is a tagged union keyed by ``type``. The payload shape in ``data``
depends on the type; the dashboard store itself treats it as opaque JSON.
"""

import time
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from src.errors import ValidationError


class WidgetType(str, Enum):
    """Recognized widget types."""

    CLOCK = "clock"
    NOTES = "notes"
    TODO = "todo"


class TodoEntry(BaseModel):
    """Single entry in a todo widget."""

    model_config = ConfigDict(extra="allow")

    id: str | int
    text: str
    completed: bool = False


class NotesData(BaseModel):
    model_config = ConfigDict(extra="allow")

    text: str = ""


class TodoData(BaseModel):
    model_config = ConfigDict(extra="allow")

    todos: list[TodoEntry] = Field(default_factory=list)


class WidgetBase(BaseModel):
    """Fields shared by every widget."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., min_length=1, max_length=255)
    position: int | float = 0  # ordering hint only, not unique


class ClockWidget(WidgetBase):
    type: Literal["clock"]
    data: dict[str, Any] = Field(default_factory=dict)


class NotesWidget(WidgetBase):
    type: Literal["notes"]
    data: NotesData = Field(default_factory=NotesData)


class TodoWidget(WidgetBase):
    type: Literal["todo"]
    data: TodoData = Field(default_factory=TodoData)


Widget = Annotated[ClockWidget | NotesWidget | TodoWidget, Field(discriminator="type")]

widget_adapter: TypeAdapter[Widget] = TypeAdapter(Widget)


# Catalog shown when picking a widget to add
WIDGET_CATALOG: list[dict[str, str]] = [
    {
        "type": WidgetType.CLOCK.value,
        "name": "Clock",
        "description": "Display current time and date",
    },
    {
        "type": WidgetType.NOTES.value,
        "name": "Notes",
        "description": "Take quick notes",
    },
    {
        "type": WidgetType.TODO.value,
        "name": "Todo List",
        "description": "Manage your tasks",
    },
]


def validate_widget(payload: Any) -> Widget:
    """Validate a single widget payload against the tagged union.

    Raises:
        ValidationError: the type tag is missing or unknown, or the payload
            does not match the shape for its type.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Widget must be an object")

    widget_type = payload.get("type")
    if not isinstance(widget_type, str) or widget_type not in {t.value for t in WidgetType}:
        raise ValidationError(f"Unknown widget type: {widget_type!r}")

    try:
        return widget_adapter.validate_python(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise ValidationError(f"Invalid {widget_type} widget: {location}: {first['msg']}") from e


def new_widget(
    widget_type: WidgetType | str,
    widget_id: str | None = None,
    position: int | float | None = None,
) -> Widget:
    """Build a widget of the given type with its default payload."""
    try:
        widget_type = WidgetType(widget_type)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"Unknown widget type: {widget_type!r}") from e

    millis = int(time.time() * 1000)
    widget_id = widget_id or f"widget-{millis}"
    position = millis if position is None else position

    if widget_type is WidgetType.CLOCK:
        return ClockWidget(id=widget_id, type="clock", position=position, data={})
    if widget_type is WidgetType.NOTES:
        return NotesWidget(id=widget_id, type="notes", position=position, data=NotesData())
    if widget_type is WidgetType.TODO:
        return TodoWidget(id=widget_id, type="todo", position=position, data=TodoData())
    raise ValidationError(f"Unknown widget type: {widget_type!r}")
