"""Dashboard store: one widget document per user."""

import logging
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.errors import StoreError, ValidationError
from src.models.dashboard import Dashboard
from src.schemas.widget import validate_widget

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DashboardStore:
    """Get-or-create reads and atomic last-write-wins replaces.

    Both writes are single ``INSERT ... ON CONFLICT`` statements on the
    unique ``user_id`` column, so concurrent first writes for the same user
    can never produce two rows.
    """

    def __init__(self, db: Session, strict_widget_validation: bool = False):
        self.db = db
        self.strict_widget_validation = strict_widget_validation

    def _insert(self):
        dialect = self.db.get_bind().dialect.name
        try:
            insert = _INSERT_BY_DIALECT[dialect]
        except KeyError:
            raise StoreError(f"Upsert is not supported on {dialect}") from None
        return insert(Dashboard)

    def _find(self, user_id: int) -> Dashboard | None:
        return (
            self.db.query(Dashboard)
            .filter(Dashboard.user_id == user_id)
            .populate_existing()
            .first()
        )

    def get_or_create(self, user_id: int) -> Dashboard:
        """Return the user's dashboard, creating an empty one if absent."""
        try:
            dashboard = self._find(user_id)
            if dashboard is not None:
                return dashboard

            now = datetime.now(UTC)
            stmt = (
                self._insert()
                .values(user_id=user_id, widgets=[], created_at=now, updated_at=now)
                .on_conflict_do_nothing(index_elements=["user_id"])
            )
            self.db.execute(stmt)
            self.db.commit()
            logger.info(f"Created empty dashboard for user {user_id}")
            return self._find(user_id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error fetching dashboard for user {user_id}: {e}")
            raise StoreError("Error fetching dashboard") from e

    def replace(self, user_id: int, widgets: Any) -> datetime:
        """Overwrite the user's whole widget collection.

        Returns the new ``updated_at``. No merge with the stored collection
        takes place.
        """
        if not isinstance(widgets, list):
            raise ValidationError("Widgets must be an array")

        if self.strict_widget_validation:
            for widget in widgets:
                validate_widget(widget)

        now = datetime.now(UTC)
        stmt = self._insert().values(
            user_id=user_id, widgets=widgets, created_at=now, updated_at=now
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={"widgets": stmt.excluded.widgets, "updated_at": stmt.excluded.updated_at},
        )
        try:
            self.db.execute(stmt)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving dashboard for user {user_id}: {e}")
            raise StoreError("Error saving dashboard") from e

        logger.debug(f"Saved {len(widgets)} widgets for user {user_id}")
        return now
