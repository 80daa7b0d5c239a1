from datetime import date, datetime
from uuid import UUID

from pydantic import EmailStr, Field

from app.api.categories.schemas import CategoryMin
from app.api.events.models import ApprovalStatus, EventStatus, ParticipationStatus
from app.api.volunteers.models import Branches, Genders, StudyYears
from app.core.response.base_model import CustomBaseModel

PHONE_PATTERN = r"^[0-9]{10}$"


class VolunteerMin(CustomBaseModel):
    id: UUID
    first_name: str
    last_name: str
    roll_number: str
    email: str
    branch: Branches
    year: StudyYears


class VolunteerBase(CustomBaseModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    roll_number: str = Field(..., min_length=1, max_length=20)
    email: EmailStr = Field(...)
    branch: Branches = Field(...)
    year: StudyYears = Field(...)
    phone_no: str | None = Field(None, pattern=PHONE_PATTERN)
    birth_date: date | None = Field(None)
    gender: Genders | None = Field(None)
    nss_join_year: int | None = Field(None, ge=2000, le=2100)
    address: str | None = Field(None, max_length=500)
    profile_pic: str | None = Field(None)


class VolunteerCreate(VolunteerBase):
    pass


class VolunteerSelfUpdate(CustomBaseModel):
    first_name: str | None = Field(None, min_length=1, max_length=100)
    last_name: str | None = Field(None, min_length=1, max_length=100)
    phone_no: str | None = Field(None, pattern=PHONE_PATTERN)
    address: str | None = Field(None, max_length=500)
    gender: Genders | None = Field(None)
    profile_pic: str | None = Field(None)


class VolunteerAdminUpdate(VolunteerSelfUpdate):
    roll_number: str | None = Field(None, min_length=1, max_length=20)
    email: EmailStr | None = Field(None)
    branch: Branches | None = Field(None)
    year: StudyYears | None = Field(None)
    birth_date: date | None = Field(None)
    nss_join_year: int | None = Field(None, ge=2000, le=2100)


class VolunteerPublic(VolunteerBase):
    id: UUID
    email: str
    auth_user_id: UUID | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime


class VolunteerListItem(VolunteerPublic):
    events_participated: int = 0
    total_hours: int = 0
    approved_hours: int = 0


class ParticipationHistoryItem(CustomBaseModel):
    participation_id: UUID
    event_id: UUID
    event_name: str
    start_date: date
    category_name: str | None = None
    participation_status: ParticipationStatus
    hours_attended: int
    approved_hours: int | None = None
    approval_status: ApprovalStatus
    approval_notes: str | None = None
    registration_date: datetime | None = None
    attendance_date: datetime | None = None


class VolunteerProfile(VolunteerPublic):
    role_names: list[str] = []
    events_participated: int = 0
    total_hours: int = 0
    approved_hours: int = 0
    history: list[ParticipationHistoryItem] = []


class AvailableEvent(CustomBaseModel):
    id: UUID
    event_name: str
    description: str | None = None
    start_date: date
    end_date: date
    declared_hours: int
    event_status: EventStatus
    location: str | None = None
    registration_deadline: datetime | None = None
    max_participants: int | None = None
    participant_count: int = 0
    category: CategoryMin | None = None


class VolunteerDashboardStats(CustomBaseModel):
    events_participated: int = 0
    total_hours: int = 0
    approved_hours: int = 0
    pending_reviews: int = 0


class VolunteerDashboard(CustomBaseModel):
    volunteer: VolunteerPublic
    stats: VolunteerDashboardStats
    participation: list[ParticipationHistoryItem] = []
    available_events: list[AvailableEvent] = []
