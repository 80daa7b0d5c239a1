from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Query

from app.db.core import SessionDep
from app.api.volunteers import service
from app.api.volunteers.schemas import (
    VolunteerAdminUpdate,
    VolunteerCreate,
    VolunteerDashboard,
    VolunteerListItem,
    VolunteerProfile,
    VolunteerPublic,
    VolunteerSelfUpdate,
)
from app.core.auth.dependencies import AdminAuth, AuthUserDep, CallerAuth, ManagerAuth
from app.core.response.pagination import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/volunteers")


@router.post("/register", summary="Create the profile for the signed-in identity")
async def register_profile(
    auth_user: AuthUserDep, session: SessionDep, profile: VolunteerCreate
) -> VolunteerPublic:
    return await service.register_profile(session, auth_user, profile)


@router.get("/me", summary="Profile, roles and history of the signed-in volunteer")
async def my_profile(caller: CallerAuth, session: SessionDep) -> VolunteerProfile:
    return await service.get_my_profile(session, caller)


@router.get("/me/dashboard", summary="Stats, history and open events for the signed-in volunteer")
async def my_dashboard(caller: CallerAuth, session: SessionDep) -> VolunteerDashboard:
    return await service.get_my_dashboard(session, caller)


@router.put("/me", summary="Update own profile")
async def update_my_profile(
    caller: CallerAuth, session: SessionDep, profile: VolunteerSelfUpdate
) -> VolunteerPublic:
    return await service.update_my_profile(session, caller, profile)


@router.get("/list", summary="List volunteers with participation stats")
async def list_volunteers(
    caller: ManagerAuth,
    session: SessionDep,
    pagination: PaginationParams,
    include_inactive: bool = Query(False),
    search: Optional[str] = Query(None, max_length=100),
) -> PaginatedResponse[VolunteerListItem]:
    return await service.list_volunteers(
        session, pagination, include_inactive=include_inactive, search=search
    )


@router.get("/{volunteer_id}", summary="Get a volunteer with participation stats")
async def get_volunteer(
    volunteer_id: UUID, caller: ManagerAuth, session: SessionDep
) -> VolunteerListItem:
    return await service.get_volunteer_with_stats(session, volunteer_id)


@router.put("/{volunteer_id}", summary="Update a volunteer")
async def admin_update_volunteer(
    volunteer_id: UUID,
    caller: AdminAuth,
    session: SessionDep,
    profile: VolunteerAdminUpdate,
) -> VolunteerPublic:
    return await service.admin_update_volunteer(session, caller, volunteer_id, profile)


@router.post("/{volunteer_id}/deactivate", summary="Deactivate a volunteer")
async def deactivate_volunteer(
    volunteer_id: UUID, caller: AdminAuth, session: SessionDep
) -> VolunteerPublic:
    return await service.set_volunteer_active(session, caller, volunteer_id, active=False)


@router.post("/{volunteer_id}/reactivate", summary="Reactivate a volunteer")
async def reactivate_volunteer(
    volunteer_id: UUID, caller: AdminAuth, session: SessionDep
) -> VolunteerPublic:
    return await service.set_volunteer_active(session, caller, volunteer_id, active=True)
