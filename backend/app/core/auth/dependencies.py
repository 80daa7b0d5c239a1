from dataclasses import dataclass, field
import logging
from typing import Annotated, List, Union
import uuid

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from sqlalchemy import or_, select

from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.volunteers.models import Volunteers
from app.core.auth.jwt import decode_jwt_token
from app.core.utils.db_fields import utcnow
from app.db.core import SessionDep
from app.response import ForbiddenError, ProfileNotFoundError, UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthUser:
    id: uuid.UUID
    email: str | None = None


@dataclass(frozen=True)
class Caller:
    """The signed-in volunteer a request acts as.

    Resolved once per request and handed to services explicitly; services
    never accept an approver or assigner id from the client.
    """

    auth_user_id: uuid.UUID
    volunteer: Volunteers
    role_names: frozenset = field(default_factory=frozenset)

    @property
    def volunteer_id(self) -> uuid.UUID:
        return self.volunteer.id

    def has_any_role(self, *roles: str) -> bool:
        return any(role in self.role_names for role in roles)


async def get_auth_user(
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ],
) -> AuthUser:
    if not credentials or not credentials.credentials:
        raise UnauthorizedError()
    try:
        payload = decode_jwt_token(credentials.credentials)
        return AuthUser(id=uuid.UUID(str(payload["sub"])), email=payload.get("email"))
    except ExpiredSignatureError:
        raise UnauthorizedError("Session has expired, please sign in again")
    except (InvalidTokenError, ValueError):
        raise UnauthorizedError()


async def get_active_role_names(session, volunteer_id: uuid.UUID) -> frozenset:
    result = await session.scalars(
        select(RoleDefinitions.role_name)
        .join(UserRoles, UserRoles.role_definition_id == RoleDefinitions.id)
        .where(
            UserRoles.volunteer_id == volunteer_id,
            UserRoles.is_active == True,
            RoleDefinitions.is_active == True,
            or_(UserRoles.expires_at == None, UserRoles.expires_at > utcnow()),
        )
    )
    return frozenset(result.all())


async def get_caller(
    auth_user: Annotated[AuthUser, Depends(get_auth_user)], session: SessionDep
) -> Caller:
    volunteer = await session.scalar(
        select(Volunteers).where(
            Volunteers.auth_user_id == auth_user.id,
            Volunteers.is_active == True,
        )
    )
    if volunteer is None:
        logger.info("No active volunteer profile for auth user %s", auth_user.id)
        raise ProfileNotFoundError()
    role_names = await get_active_role_names(session, volunteer.id)
    return Caller(
        auth_user_id=auth_user.id, volunteer=volunteer, role_names=role_names
    )


def require_roles(required_roles: Union[str, List[str]]):
    """
    Creates a dependency that checks the caller holds at least one of the roles.

    Args:
        required_roles: Single role name or list of role names that are allowed

    Returns:
        Dependency function that returns the validated caller
    """
    if isinstance(required_roles, str):
        required_roles = [required_roles]

    async def role_checker(caller: Annotated[Caller, Depends(get_caller)]) -> Caller:
        if not caller.has_any_role(*required_roles):
            raise ForbiddenError(
                f"Unauthorized: Requires one of [{', '.join(required_roles)}]"
            )
        return caller

    return role_checker


MANAGER_ROLES = ["admin", "program_officer", "event_lead"]

AuthUserDep = Annotated[AuthUser, Depends(get_auth_user)]
CallerAuth = Annotated[Caller, Depends(get_caller)]
AdminAuth = Annotated[Caller, Depends(require_roles("admin"))]
ManagerAuth = Annotated[Caller, Depends(require_roles(MANAGER_ROLES))]
