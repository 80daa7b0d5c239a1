from datetime import date, datetime
from uuid import UUID

from app.core.response.base_model import CustomBaseModel


class DashboardStats(CustomBaseModel):
    total_volunteers: int = 0
    total_events: int = 0
    total_hours: int = 0
    pending_reviews: int = 0
    active_events: int = 0


class MonthlyStats(CustomBaseModel):
    hours_logged: int = 0
    events_created: int = 0
    new_volunteers: int = 0


class DashboardAlerts(CustomBaseModel):
    pending_reviews: int = 0
    events_ending_soon: int = 0
    new_registrations: int = 0


class AdminDashboardStats(CustomBaseModel):
    stats: DashboardStats
    monthly_stats: MonthlyStats
    alerts: DashboardAlerts


class MonthlyTrend(CustomBaseModel):
    month: str
    month_number: int
    year: int
    events_count: int = 0
    volunteers_count: int = 0
    hours_sum: int = 0


class RecentEvent(CustomBaseModel):
    id: UUID
    event_name: str
    description: str | None = None
    start_date: date
    end_date: date
    declared_hours: int
    is_active: bool
    created_at: datetime
    category_name: str | None = None
    color_hex: str | None = None
    creator_name: str | None = None
    participant_count: int = 0


class HeadEvent(CustomBaseModel):
    id: UUID
    event_name: str
    description: str | None = None
    start_date: date
    end_date: date
    declared_hours: int
    is_active: bool
    created_at: datetime
    category_name: str | None = None
    participant_count: int = 0
    total_hours: int = 0


class HeadsStats(CustomBaseModel):
    my_events: int = 0
    total_participants: int = 0
    hours_managed: int = 0
    active_events: int = 0


class HeadsDashboard(CustomBaseModel):
    stats: HeadsStats
    events: list[HeadEvent]


class UserStats(CustomBaseModel):
    total_users: int = 0
    active_users: int = 0
    inactive_users: int = 0
    admin_count: int = 0
