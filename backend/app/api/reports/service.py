from io import BytesIO
import logging
from uuid import UUID

import pandas as pd
from sqlalchemy import case, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.categories.models import EventCategories
from app.api.dashboard.service import approved_hours_sum, participant_count
from app.api.events.models import EventParticipation, Events, ParticipationStatus
from app.api.volunteers.models import Volunteers
from app.core.utils.reporting import report_query
from app.response import NotFoundError

logger = logging.getLogger(__name__)

HOURS_EXPORT_COLUMNS = {
    "volunteer_name": "Volunteer",
    "roll_number": "Roll Number",
    "total_hours": "Hours Attended",
    "approved_hours": "Approved Hours",
    "events_count": "Events",
    "last_activity": "Last Activity",
}


@report_query
async def get_top_events_by_impact(session: AsyncSession, limit: int = 10):
    """Active events ranked by participant count times approved hours."""
    participants = participant_count()
    hours = approved_hours_sum()
    impact = participants * hours
    query = (
        select(
            Events.id.label("event_id"),
            Events.event_name,
            Events.start_date,
            Events.event_status,
            EventCategories.category_name,
            participants.label("participant_count"),
            hours.label("total_hours"),
            impact.label("impact_score"),
        )
        .select_from(Events)
        .outerjoin(EventCategories, EventCategories.id == Events.category_id)
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .where(Events.is_active == True)
        .group_by(
            Events.id,
            Events.event_name,
            Events.start_date,
            Events.event_status,
            EventCategories.category_name,
        )
        .order_by(impact.desc(), Events.start_date.desc())
        .limit(limit)
    )
    result = await session.execute(query)
    return [row._asdict() for row in result.all()]


@report_query
async def get_category_distribution(session: AsyncSession):
    query = (
        select(
            EventCategories.id.label("category_id"),
            EventCategories.category_name,
            EventCategories.color_hex,
            func.count(distinct(Events.id)).label("event_count"),
            participant_count().label("participant_count"),
            approved_hours_sum().label("total_hours"),
        )
        .select_from(EventCategories)
        .outerjoin(
            Events,
            (Events.category_id == EventCategories.id) & (Events.is_active == True),
        )
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .where(EventCategories.is_active == True)
        .group_by(
            EventCategories.id,
            EventCategories.category_name,
            EventCategories.color_hex,
        )
        .order_by(func.count(distinct(Events.id)).desc(), EventCategories.category_name)
    )
    result = await session.execute(query)
    return [row._asdict() for row in result.all()]


@report_query
async def get_volunteer_hours_summary(session: AsyncSession, limit: int | None = None):
    total_hours = func.coalesce(func.sum(EventParticipation.hours_attended), 0)
    query = (
        select(
            Volunteers.id.label("volunteer_id"),
            Volunteers.first_name,
            Volunteers.last_name,
            Volunteers.roll_number,
            total_hours.label("total_hours"),
            approved_hours_sum().label("approved_hours"),
            func.count(distinct(EventParticipation.event_id)).label("events_count"),
            func.max(EventParticipation.attendance_date).label("last_activity"),
        )
        .select_from(Volunteers)
        .outerjoin(EventParticipation, EventParticipation.volunteer_id == Volunteers.id)
        .where(Volunteers.is_active == True)
        .group_by(
            Volunteers.id,
            Volunteers.first_name,
            Volunteers.last_name,
            Volunteers.roll_number,
        )
        .order_by(total_hours.desc(), Volunteers.first_name)
    )
    if limit:
        query = query.limit(limit)
    result = await session.execute(query)

    summary = []
    for row in result.all():
        data = row._asdict()
        data["volunteer_name"] = f"{data.pop('first_name')} {data.pop('last_name')}"
        summary.append(data)
    return summary


@report_query
async def get_attendance_summary(session: AsyncSession):
    present = func.count(
        case(
            (
                EventParticipation.participation_status.in_(
                    [ParticipationStatus.present, ParticipationStatus.partially_present]
                ),
                1,
            )
        )
    )
    absent = func.count(
        case((EventParticipation.participation_status == ParticipationStatus.absent, 1))
    )
    query = (
        select(
            Events.id.label("event_id"),
            Events.event_name,
            Events.start_date,
            EventCategories.category_name,
            func.count(EventParticipation.id).label("total_registered"),
            present.label("total_present"),
            absent.label("total_absent"),
            func.coalesce(func.sum(EventParticipation.hours_attended), 0).label(
                "total_hours"
            ),
        )
        .select_from(Events)
        .outerjoin(EventCategories, EventCategories.id == Events.category_id)
        .outerjoin(EventParticipation, EventParticipation.event_id == Events.id)
        .where(Events.is_active == True)
        .group_by(
            Events.id, Events.event_name, Events.start_date, EventCategories.category_name
        )
        .order_by(Events.start_date.desc())
    )
    result = await session.execute(query)

    summary = []
    for row in result.all():
        data = row._asdict()
        registered = data["total_registered"]
        data["attendance_rate"] = (
            round(data["total_present"] / registered * 100, 2) if registered else 0.0
        )
        summary.append(data)
    return summary


@report_query
async def get_volunteer_participation_history(
    session: AsyncSession, volunteer_id: UUID
):
    volunteer_exists = await session.scalar(
        select(Volunteers.id).where(Volunteers.id == volunteer_id)
    )
    if volunteer_exists is None:
        raise NotFoundError("Volunteer not found")

    query = (
        select(
            EventParticipation.id.label("participation_id"),
            Events.id.label("event_id"),
            Events.event_name,
            Events.start_date,
            EventCategories.category_name,
            EventParticipation.participation_status,
            EventParticipation.hours_attended,
            EventParticipation.approved_hours,
            EventParticipation.approval_status,
            EventParticipation.approval_notes,
            EventParticipation.registration_date,
            EventParticipation.attendance_date,
        )
        .select_from(EventParticipation)
        .join(Events, Events.id == EventParticipation.event_id)
        .outerjoin(EventCategories, EventCategories.id == Events.category_id)
        .where(EventParticipation.volunteer_id == volunteer_id)
        .order_by(Events.start_date.desc())
    )
    result = await session.execute(query)
    return [row._asdict() for row in result.all()]


async def export_volunteer_hours(session: AsyncSession, file_format: str = "csv"):
    """Render the volunteer hours summary as CSV (default) or XLSX bytes."""
    summary = await get_volunteer_hours_summary(session)
    data = [
        {
            **row,
            "last_activity": (
                row["last_activity"].strftime("%Y-%m-%d %H:%M:%S")
                if row["last_activity"]
                else ""
            ),
        }
        for row in summary
    ]
    df = pd.DataFrame(data, columns=list(HOURS_EXPORT_COLUMNS))
    df = df.rename(columns=HOURS_EXPORT_COLUMNS)

    output = BytesIO()
    if file_format == "xlsx":
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Volunteer Hours")
    else:
        df.to_csv(output, index=False)
    output.seek(0)

    logger.info("Exported hours summary for %s volunteers as %s", len(df), file_format)
    return output
