from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import AwareDatetime, Field

from app.api.volunteers.schemas import VolunteerMin
from app.core.response.base_model import CustomBaseModel

ROLE_NAME_PATTERN = r"^[a-z_]+$"


class RoleDefinitionBase(CustomBaseModel):
    role_name: str = Field(..., min_length=1, max_length=50, pattern=ROLE_NAME_PATTERN)
    display_name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    permissions: dict[str, Any] = Field(default_factory=dict)
    hierarchy_level: int = Field(0, ge=0, le=100)


class RoleDefinitionCreate(RoleDefinitionBase):
    pass


class RoleDefinitionUpdate(CustomBaseModel):
    role_name: str | None = Field(None, min_length=1, max_length=50, pattern=ROLE_NAME_PATTERN)
    display_name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)
    permissions: dict[str, Any] | None = Field(None)
    hierarchy_level: int | None = Field(None, ge=0, le=100)
    is_active: bool | None = Field(None)


class RoleDefinitionPublic(CustomBaseModel):
    id: UUID
    role_name: str
    display_name: str
    description: str | None = None
    permissions: dict[str, Any] = {}
    hierarchy_level: int
    is_active: bool


class RoleAssignRequest(CustomBaseModel):
    volunteer_id: UUID
    role_definition_id: UUID
    expires_at: AwareDatetime | None = Field(None)


class RoleRevokeRequest(CustomBaseModel):
    volunteer_id: UUID
    role_definition_id: UUID


class UserRolePublic(CustomBaseModel):
    id: UUID
    volunteer_id: UUID
    role_definition_id: UUID
    assigned_by: UUID | None = None
    assigned_at: datetime
    expires_at: datetime | None = None
    is_active: bool
    role_definition: RoleDefinitionPublic


class UserRoleWithVolunteer(UserRolePublic):
    volunteer: VolunteerMin


class SeedRolesResponse(CustomBaseModel):
    created: list[str]
