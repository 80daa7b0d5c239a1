from datetime import datetime, timezone
from sqlalchemy import Boolean, Column

from app.core.utils.db_fields import TZAwareDateTime


class ActiveFlagMixin:
    """Rows are never hard deleted; they are switched off instead."""

    is_active = Column(Boolean, default=True, nullable=False, index=True)

    def deactivate(self):
        self.is_active = False

    def reactivate(self):
        self.is_active = True


class TimestampsMixin:
    created_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at = Column(
        TZAwareDateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
