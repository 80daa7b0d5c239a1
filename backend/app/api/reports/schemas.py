from datetime import date, datetime
from uuid import UUID

from app.api.events.models import EventStatus
from app.core.response.base_model import CustomBaseModel


class TopEvent(CustomBaseModel):
    event_id: UUID
    event_name: str
    start_date: date
    category_name: str | None = None
    event_status: EventStatus
    participant_count: int = 0
    total_hours: int = 0
    impact_score: int = 0


class CategoryDistribution(CustomBaseModel):
    category_id: int
    category_name: str
    color_hex: str | None = None
    event_count: int = 0
    participant_count: int = 0
    total_hours: int = 0


class VolunteerHoursSummary(CustomBaseModel):
    volunteer_id: UUID
    volunteer_name: str
    roll_number: str
    total_hours: int = 0
    approved_hours: int = 0
    events_count: int = 0
    last_activity: datetime | None = None


class AttendanceSummary(CustomBaseModel):
    event_id: UUID
    event_name: str
    start_date: date
    category_name: str | None = None
    total_registered: int = 0
    total_present: int = 0
    total_absent: int = 0
    attendance_rate: float = 0.0
    total_hours: int = 0
