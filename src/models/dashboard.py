"""Dashboard model."""

from sqlalchemy import JSON, Column, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from src.database import Base
from src.models.mixins import TimestampMixin

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
WidgetsType = JSON().with_variant(JSONB(), "postgresql")


class Dashboard(Base, TimestampMixin):
    """One widget document per user.

    ``widgets`` is replaced wholesale on every save; ``updated_at`` comes
    from TimestampMixin and is set explicitly by the upsert.
    """

    __tablename__ = "dashboards"
    __table_args__ = (UniqueConstraint("user_id", name="uq_dashboards_user_id"),)

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    widgets = Column(WidgetsType, nullable=False, default=list)

    # Relationships
    user = relationship("User", back_populates="dashboard")
