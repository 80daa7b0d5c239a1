from uuid import UUID
from fastapi import APIRouter

from app.db.core import SessionDep
from app.api.roles import service
from app.api.roles.schemas import (
    RoleAssignRequest,
    RoleDefinitionCreate,
    RoleDefinitionPublic,
    RoleDefinitionUpdate,
    RoleRevokeRequest,
    SeedRolesResponse,
    UserRolePublic,
    UserRoleWithVolunteer,
)
from app.api.events.schemas import CountResponse
from app.core.auth.dependencies import AdminAuth, CallerAuth

router = APIRouter(prefix="/roles")


@router.get("/list", summary="List active role definitions")
async def list_roles(caller: CallerAuth, session: SessionDep) -> list[RoleDefinitionPublic]:
    return await service.list_roles(session)


@router.post("/create", summary="Create a role definition")
async def create_role(
    caller: AdminAuth, session: SessionDep, role: RoleDefinitionCreate
) -> RoleDefinitionPublic:
    return await service.create_role_definition(session, role)


@router.put("/{role_id}", summary="Update a role definition")
async def update_role(
    role_id: UUID, caller: AdminAuth, session: SessionDep, role: RoleDefinitionUpdate
) -> RoleDefinitionPublic:
    return await service.update_role_definition(session, role_id, role)


@router.post("/seed", summary="Create the default role definitions")
async def seed_roles(caller: AdminAuth, session: SessionDep) -> SeedRolesResponse:
    return await service.seed_default_roles(session)


@router.get("/me", summary="Roles held by the signed-in volunteer")
async def my_roles(caller: CallerAuth, session: SessionDep) -> list[UserRolePublic]:
    return await service.get_volunteer_roles(session, caller.volunteer_id)


@router.get("/assignments", summary="All role assignments")
async def list_assignments(
    caller: AdminAuth, session: SessionDep
) -> list[UserRoleWithVolunteer]:
    return await service.list_role_assignments(session)


@router.get("/volunteers/{volunteer_id}", summary="Active roles of a volunteer")
async def volunteer_roles(
    volunteer_id: UUID, caller: AdminAuth, session: SessionDep
) -> list[UserRolePublic]:
    return await service.get_volunteer_roles(session, volunteer_id)


@router.post("/assign", summary="Assign a role to a volunteer")
async def assign_role(
    caller: AdminAuth, session: SessionDep, payload: RoleAssignRequest
) -> UserRolePublic:
    return await service.assign_role(
        session,
        caller,
        payload.volunteer_id,
        payload.role_definition_id,
        expires_at=payload.expires_at,
    )


@router.post("/revoke", summary="Revoke a role from a volunteer")
async def revoke_role(
    caller: AdminAuth, session: SessionDep, payload: RoleRevokeRequest
) -> CountResponse:
    return await service.revoke_role(
        session, caller, payload.volunteer_id, payload.role_definition_id
    )
