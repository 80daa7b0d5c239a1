import uuid
from sqlalchemy import Column, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship

from app.core.utils.db_fields import TZAwareDateTime, utcnow
from app.db.base import AbstractSQLModel, JSONType
from app.db.mixins import ActiveFlagMixin, TimestampsMixin


class RoleDefinitions(AbstractSQLModel, TimestampsMixin, ActiveFlagMixin):
    __tablename__ = "role_definitions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    role_name = Column(String(50), nullable=False, unique=True)
    display_name = Column(String(100), nullable=False)
    description = Column(String(500), nullable=True)
    permissions = Column(JSONType, nullable=False, default=dict)
    # lower number = more privileged
    hierarchy_level = Column(Integer, nullable=False, default=0)


class UserRoles(AbstractSQLModel, TimestampsMixin, ActiveFlagMixin):
    __tablename__ = "user_roles"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    volunteer_id = Column(
        Uuid, ForeignKey("volunteers.id", ondelete="CASCADE"), nullable=False
    )
    role_definition_id = Column(
        Uuid, ForeignKey("role_definitions.id", ondelete="CASCADE"), nullable=False
    )
    assigned_by = Column(
        Uuid, ForeignKey("volunteers.id", ondelete="SET NULL"), nullable=True
    )
    assigned_at = Column(TZAwareDateTime(timezone=True), default=utcnow, nullable=False)
    expires_at = Column(TZAwareDateTime(timezone=True), nullable=True)

    volunteer = relationship(
        "Volunteers", back_populates="roles", foreign_keys=[volunteer_id]
    )
    role_definition = relationship("RoleDefinitions")
