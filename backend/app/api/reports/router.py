from typing import Literal
from uuid import UUID
from fastapi import APIRouter, Query
from fastapi.responses import StreamingResponse

from app.db.core import SessionDep
from app.api.reports import service
from app.api.reports.schemas import (
    AttendanceSummary,
    CategoryDistribution,
    TopEvent,
    VolunteerHoursSummary,
)
from app.api.volunteers.schemas import ParticipationHistoryItem
from app.core.auth.dependencies import AdminAuth, CallerAuth, ManagerAuth, MANAGER_ROLES
from app.response import ForbiddenError

router = APIRouter(prefix="/reports")

EXPORT_MEDIA_TYPES = {
    "csv": "text/csv",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


@router.get("/top-events", summary="Events ranked by impact")
async def top_events(
    caller: ManagerAuth,
    session: SessionDep,
    limit: int = Query(10, ge=1, le=100),
) -> list[TopEvent]:
    return await service.get_top_events_by_impact(session, limit=limit)


@router.get("/category-distribution", summary="Events, participants and hours per category")
async def category_distribution(
    caller: ManagerAuth, session: SessionDep
) -> list[CategoryDistribution]:
    return await service.get_category_distribution(session)


@router.get("/volunteer-hours", summary="Hours summary per volunteer")
async def volunteer_hours_summary(
    caller: ManagerAuth,
    session: SessionDep,
    limit: int | None = Query(None, ge=1, le=1000),
) -> list[VolunteerHoursSummary]:
    return await service.get_volunteer_hours_summary(session, limit=limit)


@router.get("/attendance", summary="Attendance summary per event")
async def attendance_summary(
    caller: ManagerAuth, session: SessionDep
) -> list[AttendanceSummary]:
    return await service.get_attendance_summary(session)


@router.get(
    "/volunteers/{volunteer_id}/history",
    summary="Participation history of a volunteer",
)
async def participation_history(
    volunteer_id: UUID, caller: CallerAuth, session: SessionDep
) -> list[ParticipationHistoryItem]:
    if volunteer_id != caller.volunteer_id and not caller.has_any_role(*MANAGER_ROLES):
        raise ForbiddenError("Not authorized to view this volunteer's history")
    return await service.get_volunteer_participation_history(session, volunteer_id)


@router.get("/volunteer-hours/export", summary="Download the hours summary")
async def export_volunteer_hours(
    caller: AdminAuth,
    session: SessionDep,
    file_format: Literal["csv", "xlsx"] = Query("csv", alias="format"),
):
    output = await service.export_volunteer_hours(session, file_format=file_format)
    return StreamingResponse(
        output,
        media_type=EXPORT_MEDIA_TYPES[file_format],
        headers={
            "Content-Disposition": f'attachment; filename="volunteer_hours.{file_format}"'
        },
    )
