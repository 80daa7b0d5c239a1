from sqlalchemy import Column, Integer, String

from app.db.base import AbstractSQLModel
from app.db.mixins import ActiveFlagMixin, TimestampsMixin

DEFAULT_CATEGORY_COLOR = "#6366F1"


class EventCategories(AbstractSQLModel, TimestampsMixin, ActiveFlagMixin):
    __tablename__ = "event_categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    category_name = Column(String(100), nullable=False, unique=True)
    code = Column(String(20), nullable=False, unique=True)
    description = Column(String(500), nullable=True)
    color_hex = Column(String(7), nullable=True, default=DEFAULT_CATEGORY_COLOR)
