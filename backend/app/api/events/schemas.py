from datetime import date, datetime
from typing import Annotated
from uuid import UUID

from pydantic import AwareDatetime, Field, model_validator

from app.api.categories.schemas import CategoryMin
from app.api.events.models import ApprovalStatus, EventStatus, ParticipationStatus
from app.api.volunteers.schemas import VolunteerMin
from app.core.response.base_model import CustomBaseModel

HoursAttended = Annotated[int, Field(ge=0, le=24)]


class EventMin(CustomBaseModel):
    id: UUID
    event_name: str
    start_date: date
    end_date: date
    declared_hours: int
    category: CategoryMin | None = None


class EventBase(CustomBaseModel):
    event_name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    start_date: date = Field(...)
    end_date: date = Field(...)
    declared_hours: int = Field(..., ge=0, le=100)
    category_id: int = Field(...)
    min_participants: int | None = Field(None, ge=0)
    max_participants: int | None = Field(None, ge=1)
    event_status: EventStatus = Field(EventStatus.planned)
    location: str | None = Field(None, max_length=500)
    registration_deadline: AwareDatetime | None = Field(None)


class EventCreate(EventBase):
    @model_validator(mode="after")
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must be on or after start_date")
        if (
            self.min_participants is not None
            and self.max_participants is not None
            and self.min_participants > self.max_participants
        ):
            raise ValueError("min_participants cannot exceed max_participants")
        return self


class EventUpdate(CustomBaseModel):
    event_name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=2000)
    start_date: date | None = Field(None)
    end_date: date | None = Field(None)
    declared_hours: int | None = Field(None, ge=0, le=100)
    category_id: int | None = Field(None)
    min_participants: int | None = Field(None, ge=0)
    max_participants: int | None = Field(None, ge=1)
    event_status: EventStatus | None = Field(None)
    location: str | None = Field(None, max_length=500)
    registration_deadline: AwareDatetime | None = Field(None)


class EventPublic(CustomBaseModel):
    id: UUID
    event_name: str
    description: str | None = None
    start_date: date
    end_date: date
    declared_hours: int
    category_id: int
    min_participants: int | None = None
    max_participants: int | None = None
    event_status: EventStatus
    location: str | None = None
    registration_deadline: datetime | None = None
    created_by_volunteer_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
    category: CategoryMin | None = None


class EventListItem(EventPublic):
    participant_count: int = 0
    creator_name: str | None = None


class ParticipationPublic(CustomBaseModel):
    id: UUID
    event_id: UUID
    volunteer_id: UUID
    hours_attended: int
    declared_hours: int | None = None
    approved_hours: int | None = None
    participation_status: ParticipationStatus
    approval_status: ApprovalStatus
    approved_by: UUID | None = None
    approved_at: datetime | None = None
    approval_notes: str | None = None
    registration_date: datetime | None = None
    attendance_date: datetime | None = None
    notes: str | None = None
    feedback: str | None = None
    recorded_by_volunteer_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


class ParticipantItem(ParticipationPublic):
    volunteer: VolunteerMin


class EventRegistrationRequest(CustomBaseModel):
    declared_hours: HoursAttended | None = Field(None)
    notes: str | None = Field(None, max_length=1000)


class MarkAttendanceRequest(CustomBaseModel):
    volunteer_ids: list[UUID] = Field(..., min_length=1, max_length=500)
    participation_status: ParticipationStatus = Field(ParticipationStatus.present)
    hours_attended: HoursAttended | None = Field(None)
    notes: str | None = Field(None, max_length=1000)


class ParticipationUpdate(CustomBaseModel):
    participation_status: ParticipationStatus | None = Field(None)
    hours_attended: HoursAttended | None = Field(None)
    notes: str | None = Field(None, max_length=1000)
    feedback: str | None = Field(None, max_length=2000)


class CountResponse(CustomBaseModel):
    count: int


class SyncAttendanceRequest(CustomBaseModel):
    volunteer_ids: list[UUID] = Field(..., max_length=500)


class SyncAttendanceResponse(CustomBaseModel):
    added: int
    removed: int
    kept_reviewed: int
    total_selected: int


class RegistrationCheck(CustomBaseModel):
    can_register: bool
    reason: str | None = None
