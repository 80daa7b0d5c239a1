import calendar
import logging
from datetime import date
from uuid import UUID

from sqlalchemy import case, distinct, extract, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.categories.models import EventCategories
from app.api.events.models import ApprovalStatus, EventParticipation, Events
from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.volunteers.models import Volunteers
from app.config import settings
from app.core.utils.db_fields import utcnow
from app.core.utils.reporting import (
    ending_soon_window,
    last_months,
    report_query,
    shift_month,
    start_of_month,
    utc_today,
)

logger = logging.getLogger(__name__)


def approved_hours_sum():
    """SUM of approved hours counting only rows whose review ended in approval."""
    return func.coalesce(
        func.sum(
            case(
                (
                    EventParticipation.approval_status == ApprovalStatus.approved,
                    EventParticipation.approved_hours,
                ),
                else_=0,
            )
        ),
        0,
    )


def participant_count():
    return func.count(distinct(EventParticipation.volunteer_id))


def _count(column, *criteria):
    return select(func.count(column)).where(*criteria).scalar_subquery()


def _pending_reviews():
    return _count(
        EventParticipation.id,
        EventParticipation.approval_status == ApprovalStatus.pending,
        EventParticipation.hours_attended > 0,
    )


def _hours_sum(*criteria):
    return (
        select(func.coalesce(func.sum(EventParticipation.approved_hours), 0))
        .where(EventParticipation.approval_status == ApprovalStatus.approved, *criteria)
        .scalar_subquery()
    )


def _stats_columns(today: date):
    return [
        _count(Volunteers.id, Volunteers.is_active == True).label("total_volunteers"),
        _count(Events.id, Events.is_active == True).label("total_events"),
        _hours_sum().label("total_hours"),
        _pending_reviews().label("pending_reviews"),
        _count(
            Events.id, Events.is_active == True, Events.start_date >= today
        ).label("active_events"),
    ]


@report_query
async def get_dashboard_stats(session: AsyncSession):
    result = await session.execute(select(*_stats_columns(utc_today())))
    row = result.one()
    return {key: int(value or 0) for key, value in row._asdict().items()}


@report_query
async def get_admin_dashboard_stats(session: AsyncSession):
    today = utc_today()
    month_start = start_of_month(today)
    soon_start, soon_end = ending_soon_window(settings.EVENTS_ENDING_SOON_DAYS, today)

    result = await session.execute(
        select(
            *_stats_columns(today),
            _hours_sum(EventParticipation.created_at >= month_start).label(
                "hours_logged"
            ),
            _count(Events.id, Events.created_at >= month_start).label(
                "events_created"
            ),
            _count(Volunteers.id, Volunteers.created_at >= month_start).label(
                "new_volunteers"
            ),
            _count(
                Events.id,
                Events.is_active == True,
                Events.end_date >= soon_start,
                Events.end_date <= soon_end,
            ).label("events_ending_soon"),
        )
    )
    row = {key: int(value or 0) for key, value in result.one()._asdict().items()}

    return {
        "stats": {
            "total_volunteers": row["total_volunteers"],
            "total_events": row["total_events"],
            "total_hours": row["total_hours"],
            "pending_reviews": row["pending_reviews"],
            "active_events": row["active_events"],
        },
        "monthly_stats": {
            "hours_logged": row["hours_logged"],
            "events_created": row["events_created"],
            "new_volunteers": row["new_volunteers"],
        },
        "alerts": {
            "pending_reviews": row["pending_reviews"],
            "events_ending_soon": row["events_ending_soon"],
            "new_registrations": row["new_volunteers"],
        },
    }


@report_query
async def get_monthly_trends(session: AsyncSession, months: int | None = None):
    """Activity per calendar month, oldest first, ending with the current month.

    Months without events are present with zero counts.
    """
    today = utc_today()
    buckets = last_months(months or settings.TRENDS_MONTHS, today)
    window_start = date(buckets[0][0], buckets[0][1], 1)
    next_year, next_month = shift_month(today.year, today.month, 1)
    window_end = date(next_year, next_month, 1)

    year_expr = extract("year", Events.start_date)
    month_expr = extract("month", Events.start_date)
    query = (
        select(
            year_expr.label("year"),
            month_expr.label("month_number"),
            func.count(distinct(Events.id)).label("events_count"),
            participant_count().label("volunteers_count"),
            approved_hours_sum().label("hours_sum"),
        )
        .select_from(Events)
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .where(
            Events.is_active == True,
            Events.start_date >= window_start,
            Events.start_date < window_end,
        )
        .group_by(year_expr, month_expr)
    )
    result = await session.execute(query)
    found = {(int(row.year), int(row.month_number)): row for row in result.all()}

    trends = []
    for year, month in buckets:
        row = found.get((year, month))
        trends.append(
            {
                "month": calendar.month_abbr[month],
                "month_number": month,
                "year": year,
                "events_count": int(row.events_count) if row else 0,
                "volunteers_count": int(row.volunteers_count) if row else 0,
                "hours_sum": int(row.hours_sum or 0) if row else 0,
            }
        )
    return trends


@report_query
async def get_recent_events(session: AsyncSession, limit: int = 6):
    query = (
        select(
            Events.id,
            Events.event_name,
            Events.description,
            Events.start_date,
            Events.end_date,
            Events.declared_hours,
            Events.is_active,
            Events.created_at,
            EventCategories.category_name,
            EventCategories.color_hex,
            Volunteers.first_name,
            Volunteers.last_name,
            participant_count().label("participant_count"),
        )
        .select_from(Events)
        .outerjoin(EventCategories, EventCategories.id == Events.category_id)
        .outerjoin(Volunteers, Volunteers.id == Events.created_by_volunteer_id)
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .group_by(
            Events.id,
            EventCategories.category_name,
            EventCategories.color_hex,
            Volunteers.first_name,
            Volunteers.last_name,
        )
        .order_by(Events.created_at.desc())
        .limit(limit)
    )
    result = await session.execute(query)
    events = []
    for row in result.all():
        data = row._asdict()
        first_name, last_name = data.pop("first_name"), data.pop("last_name")
        data["creator_name"] = f"{first_name} {last_name}" if first_name else None
        events.append(data)
    return events


@report_query
async def get_heads_dashboard_stats(session: AsyncSession, volunteer_id: UUID):
    query = (
        select(
            Events.id,
            Events.event_name,
            Events.description,
            Events.start_date,
            Events.end_date,
            Events.declared_hours,
            Events.is_active,
            Events.created_at,
            EventCategories.category_name,
            participant_count().label("participant_count"),
            approved_hours_sum().label("total_hours"),
        )
        .select_from(Events)
        .outerjoin(EventCategories, EventCategories.id == Events.category_id)
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .where(Events.created_by_volunteer_id == volunteer_id)
        .group_by(Events.id, EventCategories.category_name)
        .order_by(Events.created_at.desc())
    )
    result = await session.execute(query)
    events = [row._asdict() for row in result.all()]

    today = utc_today()
    return {
        "stats": {
            "my_events": len(events),
            "total_participants": sum(e["participant_count"] for e in events),
            "hours_managed": sum(int(e["total_hours"] or 0) for e in events),
            "active_events": sum(
                1 for e in events if e["is_active"] and e["start_date"] >= today
            ),
        },
        "events": events,
    }


@report_query
async def get_user_stats(session: AsyncSession):
    admins = (
        select(func.count(distinct(UserRoles.volunteer_id)))
        .join(RoleDefinitions, RoleDefinitions.id == UserRoles.role_definition_id)
        .where(
            RoleDefinitions.role_name == "admin",
            RoleDefinitions.is_active == True,
            UserRoles.is_active == True,
            or_(UserRoles.expires_at == None, UserRoles.expires_at > utcnow()),
        )
        .scalar_subquery()
    )
    result = await session.execute(
        select(
            _count(Volunteers.id).label("total_users"),
            _count(Volunteers.id, Volunteers.is_active == True).label("active_users"),
            _count(Volunteers.id, Volunteers.is_active == False).label(
                "inactive_users"
            ),
            admins.label("admin_count"),
        )
    )
    return {key: int(value or 0) for key, value in result.one()._asdict().items()}
