from fastapi import APIRouter, Query

from app.db.core import SessionDep
from app.api.dashboard import service
from app.api.dashboard.schemas import (
    AdminDashboardStats,
    DashboardStats,
    HeadsDashboard,
    MonthlyTrend,
    RecentEvent,
    UserStats,
)
from app.core.auth.dependencies import AdminAuth, CallerAuth, ManagerAuth

router = APIRouter(prefix="/dashboard")


@router.get("/stats", summary="Headline counts for the dashboard")
async def dashboard_stats(caller: CallerAuth, session: SessionDep) -> DashboardStats:
    return await service.get_dashboard_stats(session)


@router.get("/admin", summary="Admin dashboard with monthly stats and alerts")
async def admin_dashboard_stats(
    caller: AdminAuth, session: SessionDep
) -> AdminDashboardStats:
    return await service.get_admin_dashboard_stats(session)


@router.get("/trends", summary="Monthly activity for the last twelve months")
async def monthly_trends(caller: CallerAuth, session: SessionDep) -> list[MonthlyTrend]:
    return await service.get_monthly_trends(session)


@router.get("/recent-events", summary="Most recently created events")
async def recent_events(
    caller: CallerAuth,
    session: SessionDep,
    limit: int = Query(6, ge=1, le=50),
) -> list[RecentEvent]:
    return await service.get_recent_events(session, limit=limit)


@router.get("/heads", summary="Stats for events created by the caller")
async def heads_dashboard(caller: ManagerAuth, session: SessionDep) -> HeadsDashboard:
    return await service.get_heads_dashboard_stats(session, caller.volunteer_id)


@router.get("/user-stats", summary="Volunteer account counts")
async def user_stats(caller: AdminAuth, session: SessionDep) -> UserStats:
    return await service.get_user_stats(session)
