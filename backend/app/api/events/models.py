import enum
import uuid
from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    Uuid,
    distinct,
    func,
    select,
)
from sqlalchemy.orm import column_property, relationship

from app.api.volunteers.models import enum_values
from app.core.utils.db_fields import TZAwareDateTime, utcnow
from app.db.base import AbstractSQLModel
from app.db.mixins import ActiveFlagMixin, TimestampsMixin


class EventStatus(enum.Enum):
    planned = "planned"
    registration_open = "registration_open"
    registration_closed = "registration_closed"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


class ParticipationStatus(enum.Enum):
    registered = "registered"
    present = "present"
    absent = "absent"
    partially_present = "partially_present"
    excused = "excused"


class ApprovalStatus(enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class Events(AbstractSQLModel, TimestampsMixin, ActiveFlagMixin):
    __tablename__ = "events"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_name = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=True)
    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=False)
    declared_hours = Column(Integer, nullable=False)
    category_id = Column(Integer, ForeignKey("event_categories.id"), nullable=False)
    min_participants = Column(Integer, nullable=True)
    max_participants = Column(Integer, nullable=True)
    event_status = Column(
        Enum(EventStatus, name="event_status", values_callable=enum_values),
        nullable=False,
        default=EventStatus.planned,
    )
    location = Column(String(500), nullable=True)
    registration_deadline = Column(TZAwareDateTime(timezone=True), nullable=True)
    created_by_volunteer_id = Column(
        Uuid, ForeignKey("volunteers.id", ondelete="RESTRICT"), nullable=False
    )

    category = relationship("EventCategories")
    created_by = relationship("Volunteers")
    participations = relationship("EventParticipation", back_populates="event")

    @property
    def creator_name(self):
        return self.created_by.full_name if self.created_by else None

    __table_args__ = (
        CheckConstraint(
            "declared_hours >= 0 AND declared_hours <= 100",
            name="declared_hours_range",
        ),
    )


class EventParticipation(AbstractSQLModel, TimestampsMixin):
    __tablename__ = "event_participation"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    event_id = Column(
        Uuid, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    volunteer_id = Column(
        Uuid,
        ForeignKey("volunteers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    hours_attended = Column(Integer, nullable=False, default=0)
    declared_hours = Column(Integer, nullable=True, default=0)
    approved_hours = Column(Integer, nullable=True)
    participation_status = Column(
        Enum(
            ParticipationStatus,
            name="participation_status",
            values_callable=enum_values,
        ),
        nullable=False,
        default=ParticipationStatus.registered,
    )
    registration_date = Column(TZAwareDateTime(timezone=True), default=utcnow)
    attendance_date = Column(TZAwareDateTime(timezone=True), nullable=True)
    notes = Column(String(1000), nullable=True)
    feedback = Column(String(2000), nullable=True)
    recorded_by_volunteer_id = Column(
        Uuid, ForeignKey("volunteers.id", ondelete="RESTRICT"), nullable=True
    )

    approval_status = Column(
        Enum(ApprovalStatus, name="approval_status", values_callable=enum_values),
        nullable=False,
        default=ApprovalStatus.pending,
        index=True,
    )
    approved_by = Column(
        Uuid, ForeignKey("volunteers.id", ondelete="SET NULL"), nullable=True
    )
    approved_at = Column(TZAwareDateTime(timezone=True), nullable=True)
    approval_notes = Column(String(500), nullable=True)

    event = relationship("Events", back_populates="participations")
    volunteer = relationship(
        "Volunteers", back_populates="participations", foreign_keys=[volunteer_id]
    )
    approver = relationship("Volunteers", foreign_keys=[approved_by])

    __table_args__ = (
        UniqueConstraint(
            "event_id", "volunteer_id", name="uq_event_participation_event_volunteer"
        ),
        CheckConstraint(
            "hours_attended >= 0 AND hours_attended <= 24",
            name="hours_attended_range",
        ),
    )


Events.participant_count = column_property(
    select(func.count(distinct(EventParticipation.volunteer_id)))
    .where(EventParticipation.event_id == Events.id)
    .correlate_except(EventParticipation)
    .scalar_subquery()
)
