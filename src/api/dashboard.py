"""Dashboard API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from src.api.dependencies import SessionUser, get_current_session, get_dashboard_store
from src.schemas.dashboard import (
    DashboardResponse,
    DashboardSave,
    DashboardSaveResponse,
    NewWidgetRequest,
    NewWidgetResponse,
    WidgetTypesResponse,
)
from src.schemas.widget import WIDGET_CATALOG, new_widget
from src.services.dashboard import DashboardStore

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
def get_dashboard(
    session: Annotated[SessionUser, Depends(get_current_session)],
    store: Annotated[DashboardStore, Depends(get_dashboard_store)],
):
    """Get the current user's widgets, creating an empty dashboard on first read."""
    dashboard = store.get_or_create(session.user_id)
    return DashboardResponse(widgets=dashboard.widgets, updated_at=dashboard.updated_at)


@router.post("", response_model=DashboardSaveResponse)
def save_dashboard(
    payload: DashboardSave,
    session: Annotated[SessionUser, Depends(get_current_session)],
    store: Annotated[DashboardStore, Depends(get_dashboard_store)],
):
    """Replace the current user's whole widget collection."""
    updated_at = store.replace(session.user_id, payload.widgets)
    return DashboardSaveResponse(widgets=payload.widgets, updated_at=updated_at)


@router.get("/widget-types", response_model=WidgetTypesResponse)
def list_widget_types(
    session: Annotated[SessionUser, Depends(get_current_session)],
):
    """List the widget types a dashboard accepts."""
    return WidgetTypesResponse(widget_types=WIDGET_CATALOG)


@router.post("/widgets/new", response_model=NewWidgetResponse, status_code=status.HTTP_201_CREATED)
def create_widget(
    payload: NewWidgetRequest,
    session: Annotated[SessionUser, Depends(get_current_session)],
):
    """Build a new widget with its default payload.

    Nothing is persisted; the client appends the widget to its collection
    and saves the whole dashboard.
    """
    widget = new_widget(payload.type, widget_id=payload.id, position=payload.position)
    return NewWidgetResponse(widget=widget)
