import logging
from datetime import datetime
from uuid import UUID

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.roles.schemas import RoleDefinitionCreate, RoleDefinitionUpdate
from app.api.volunteers.models import Volunteers
from app.core.auth.dependencies import Caller
from app.core.utils.db_fields import utcnow
from app.core.validations.schema import validate_relations, validate_unique
from app.response import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_ROLES = [
    {
        "role_name": "admin",
        "display_name": "Administrator",
        "description": "Full access to every module",
        "hierarchy_level": 0,
    },
    {
        "role_name": "program_officer",
        "display_name": "Program Officer",
        "description": "Oversees events and approves volunteer hours",
        "hierarchy_level": 1,
    },
    {
        "role_name": "event_lead",
        "display_name": "Event Lead",
        "description": "Creates events and marks attendance",
        "hierarchy_level": 2,
    },
    {
        "role_name": "documentation_lead",
        "display_name": "Documentation Lead",
        "description": "Maintains reports and event records",
        "hierarchy_level": 3,
    },
    {
        "role_name": "volunteer",
        "display_name": "Volunteer",
        "description": "Registers for events and logs hours",
        "hierarchy_level": 4,
    },
]


def display_name_for(role_name: str) -> str:
    return " ".join(word.capitalize() for word in role_name.split("_"))


def active_assignment():
    return (
        UserRoles.is_active == True,
        or_(UserRoles.expires_at == None, UserRoles.expires_at > utcnow()),
    )


async def list_roles(session: AsyncSession):
    result = await session.scalars(
        select(RoleDefinitions)
        .where(RoleDefinitions.is_active == True)
        .order_by(RoleDefinitions.hierarchy_level, RoleDefinitions.role_name)
    )
    return result.all()


async def get_role_definition(session: AsyncSession, role_id: UUID):
    role = await session.get(RoleDefinitions, role_id)
    if role is None:
        raise NotFoundError("Role not found")
    return role


async def create_role_definition(session: AsyncSession, role: RoleDefinitionCreate):
    await validate_unique(
        session, unique={"role_name": (RoleDefinitions, role.role_name)}
    )
    db_role = RoleDefinitions(
        role_name=role.role_name,
        display_name=role.display_name or display_name_for(role.role_name),
        description=role.description,
        permissions=role.permissions,
        hierarchy_level=role.hierarchy_level,
    )
    session.add(db_role)
    await session.commit()
    await session.refresh(db_role)
    logger.info("Role definition %s created", db_role.role_name)
    return db_role


async def update_role_definition(
    session: AsyncSession, role_id: UUID, role: RoleDefinitionUpdate
):
    db_role = await get_role_definition(session, role_id)
    data = role.model_dump(exclude_unset=True)
    await validate_unique(
        session,
        unique={"role_name": (RoleDefinitions, data.get("role_name"))},
        exclude_id=role_id,
    )
    for key, value in data.items():
        if value is None and key != "description":
            continue
        setattr(db_role, key, value)
    await session.commit()
    await session.refresh(db_role)
    return db_role


async def get_volunteer_roles(session: AsyncSession, volunteer_id: UUID):
    result = await session.scalars(
        select(UserRoles)
        .join(RoleDefinitions, RoleDefinitions.id == UserRoles.role_definition_id)
        .where(
            UserRoles.volunteer_id == volunteer_id,
            RoleDefinitions.is_active == True,
            *active_assignment(),
        )
        .options(joinedload(UserRoles.role_definition))
        .order_by(RoleDefinitions.hierarchy_level)
    )
    return result.all()


async def list_role_assignments(session: AsyncSession):
    result = await session.scalars(
        select(UserRoles)
        .options(
            joinedload(UserRoles.role_definition),
            joinedload(UserRoles.volunteer),
        )
        .order_by(UserRoles.assigned_at.desc())
    )
    return result.all()


async def _get_assignment(session: AsyncSession, assignment_id: UUID):
    return await session.scalar(
        select(UserRoles)
        .where(UserRoles.id == assignment_id)
        .options(joinedload(UserRoles.role_definition))
        .execution_options(populate_existing=True)
    )


async def assign_role(
    session: AsyncSession,
    caller: Caller,
    volunteer_id: UUID,
    role_definition_id: UUID,
    expires_at: datetime | None = None,
):
    """Give a volunteer a role, reviving a previously revoked assignment if one exists."""
    await validate_relations(
        session,
        {
            "volunteer_id": (Volunteers, volunteer_id),
            "role_definition_id": (RoleDefinitions, role_definition_id),
        },
    )
    existing = await session.scalar(
        select(UserRoles).where(
            UserRoles.volunteer_id == volunteer_id,
            UserRoles.role_definition_id == role_definition_id,
        )
    )
    if (
        existing
        and existing.is_active
        and (existing.expires_at is None or existing.expires_at > utcnow())
    ):
        raise ConflictError("Role already assigned to this volunteer")

    if existing:
        existing.reactivate()
        existing.assigned_by = caller.volunteer_id
        existing.assigned_at = utcnow()
        existing.expires_at = expires_at
        assignment = existing
    else:
        assignment = UserRoles(
            volunteer_id=volunteer_id,
            role_definition_id=role_definition_id,
            assigned_by=caller.volunteer_id,
            expires_at=expires_at,
        )
        session.add(assignment)
    await session.commit()

    logger.info(
        "Role %s assigned to volunteer %s by %s",
        role_definition_id,
        volunteer_id,
        caller.volunteer_id,
    )
    return await _get_assignment(session, assignment.id)


async def revoke_role(
    session: AsyncSession,
    caller: Caller,
    volunteer_id: UUID,
    role_definition_id: UUID,
):
    result = await session.execute(
        update(UserRoles)
        .where(
            UserRoles.volunteer_id == volunteer_id,
            UserRoles.role_definition_id == role_definition_id,
            UserRoles.is_active == True,
        )
        .values(is_active=False)
        .execution_options(synchronize_session=False)
    )
    await session.commit()

    count = result.rowcount or 0
    logger.info(
        "Role %s revoked from volunteer %s by %s (%s rows)",
        role_definition_id,
        volunteer_id,
        caller.volunteer_id,
        count,
    )
    return {"count": count}


async def seed_default_roles(session: AsyncSession):
    """Create any missing default role definitions. Safe to run repeatedly."""
    existing = set(
        (await session.scalars(select(RoleDefinitions.role_name))).all()
    )
    created = []
    for role in DEFAULT_ROLES:
        if role["role_name"] in existing:
            continue
        session.add(RoleDefinitions(**role, permissions={}))
        created.append(role["role_name"])
    if created:
        await session.commit()
        logger.info("Seeded default roles: %s", ", ".join(created))
    return {"created": created}
