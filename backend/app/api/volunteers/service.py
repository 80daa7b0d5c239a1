import logging
from uuid import UUID

from sqlalchemy import distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.events.models import ApprovalStatus, EventParticipation
from app.api.events.service import get_available_events
from app.api.reports.service import get_volunteer_participation_history
from app.api.roles.models import RoleDefinitions, UserRoles
from app.api.volunteers.models import Volunteers
from app.api.volunteers.schemas import (
    VolunteerAdminUpdate,
    VolunteerCreate,
    VolunteerListItem,
    VolunteerPublic,
    VolunteerSelfUpdate,
)
from app.core.auth.dependencies import AuthUser, Caller
from app.core.response.pagination import _PaginationParams, paginate
from app.core.validations.schema import validate_unique
from app.response import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

DEFAULT_VOLUNTEER_ROLE = "volunteer"


def _stats_columns():
    events_participated = (
        select(func.count(distinct(EventParticipation.event_id)))
        .where(EventParticipation.volunteer_id == Volunteers.id)
        .correlate(Volunteers)
        .scalar_subquery()
    )
    total_hours = (
        select(func.coalesce(func.sum(EventParticipation.hours_attended), 0))
        .where(EventParticipation.volunteer_id == Volunteers.id)
        .correlate(Volunteers)
        .scalar_subquery()
    )
    approved_hours = (
        select(func.coalesce(func.sum(EventParticipation.approved_hours), 0))
        .where(
            EventParticipation.volunteer_id == Volunteers.id,
            EventParticipation.approval_status == ApprovalStatus.approved,
        )
        .correlate(Volunteers)
        .scalar_subquery()
    )
    return [
        events_participated.label("events_participated"),
        total_hours.label("total_hours"),
        approved_hours.label("approved_hours"),
    ]


def _with_stats(row):
    volunteer, events_participated, total_hours, approved_hours = row
    return {
        **VolunteerPublic.model_validate(volunteer).model_dump(),
        "events_participated": events_participated or 0,
        "total_hours": total_hours or 0,
        "approved_hours": approved_hours or 0,
    }


async def list_volunteers(
    session: AsyncSession,
    pagination: _PaginationParams,
    include_inactive: bool = False,
    search: str | None = None,
):
    query = select(Volunteers, *_stats_columns()).order_by(
        Volunteers.first_name, Volunteers.last_name
    )
    if not include_inactive:
        query = query.where(Volunteers.is_active == True)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Volunteers.first_name).like(pattern),
                func.lower(Volunteers.last_name).like(pattern),
                func.lower(Volunteers.roll_number).like(pattern),
                func.lower(Volunteers.email).like(pattern),
            )
        )
    return await paginate(
        query, VolunteerListItem, pagination, session, transform=_with_stats
    )


async def get_volunteer(session: AsyncSession, volunteer_id: UUID):
    volunteer = await session.get(Volunteers, volunteer_id)
    if volunteer is None:
        raise NotFoundError("Volunteer not found")
    return volunteer


async def get_volunteer_with_stats(session: AsyncSession, volunteer_id: UUID):
    result = await session.execute(
        select(Volunteers, *_stats_columns()).where(Volunteers.id == volunteer_id)
    )
    row = result.first()
    if row is None:
        raise NotFoundError("Volunteer not found")
    return _with_stats(row)


async def get_volunteer_by_auth_id(session: AsyncSession, auth_user_id: UUID):
    return await session.scalar(
        select(Volunteers).where(Volunteers.auth_user_id == auth_user_id)
    )


async def get_my_profile(session: AsyncSession, caller: Caller):
    profile = await get_volunteer_with_stats(session, caller.volunteer_id)
    profile["role_names"] = sorted(caller.role_names)
    profile["history"] = await get_volunteer_participation_history(
        session, caller.volunteer_id
    )
    return profile


async def get_my_dashboard(session: AsyncSession, caller: Caller):
    """Own stats and history plus the upcoming events still open to the caller."""
    profile = await get_volunteer_with_stats(session, caller.volunteer_id)
    history = await get_volunteer_participation_history(session, caller.volunteer_id)
    pending_reviews = sum(
        1
        for row in history
        if row["approval_status"] == ApprovalStatus.pending and row["hours_attended"] > 0
    )
    return {
        "volunteer": profile,
        "stats": {
            "events_participated": profile["events_participated"],
            "total_hours": profile["total_hours"],
            "approved_hours": profile["approved_hours"],
            "pending_reviews": pending_reviews,
        },
        "participation": history,
        "available_events": await get_available_events(session, caller.volunteer_id),
    }


async def update_my_profile(
    session: AsyncSession, caller: Caller, update: VolunteerSelfUpdate
):
    volunteer = await get_volunteer(session, caller.volunteer_id)
    data = update.model_dump(exclude_unset=True)
    for key, value in data.items():
        if value is None and key in ("first_name", "last_name"):
            continue
        setattr(volunteer, key, value)
    await session.commit()
    await session.refresh(volunteer)
    return volunteer


async def admin_update_volunteer(
    session: AsyncSession, caller: Caller, volunteer_id: UUID, update: VolunteerAdminUpdate
):
    volunteer = await get_volunteer(session, volunteer_id)
    data = update.model_dump(exclude_unset=True)
    await validate_unique(
        session,
        unique={
            "roll_number": (Volunteers, data.get("roll_number")),
            "email": (Volunteers, data.get("email")),
        },
        exclude_id=volunteer_id,
    )
    required = ("first_name", "last_name", "roll_number", "email", "branch", "year")
    for key, value in data.items():
        if value is None and key in required:
            continue
        setattr(volunteer, key, value)
    await session.commit()
    await session.refresh(volunteer)

    logger.info("Volunteer %s updated by admin %s", volunteer_id, caller.volunteer_id)
    return volunteer


async def set_volunteer_active(
    session: AsyncSession, caller: Caller, volunteer_id: UUID, active: bool
):
    if not active and volunteer_id == caller.volunteer_id:
        raise ConflictError("You cannot deactivate your own profile")
    volunteer = await get_volunteer(session, volunteer_id)
    if active:
        volunteer.reactivate()
    else:
        volunteer.deactivate()
    await session.commit()
    await session.refresh(volunteer)

    logger.info(
        "Volunteer %s %s by %s",
        volunteer_id,
        "reactivated" if active else "deactivated",
        caller.volunteer_id,
    )
    return volunteer


async def register_profile(
    session: AsyncSession, auth_user: AuthUser, profile: VolunteerCreate
):
    """Create the volunteer profile for a freshly signed-up identity.

    The profile is linked to the identity's subject and gets the default
    volunteer role when that role has been seeded.
    """
    if await get_volunteer_by_auth_id(session, auth_user.id):
        raise ConflictError("Volunteer profile already exists")
    await validate_unique(
        session,
        unique={
            "roll_number": (Volunteers, profile.roll_number),
            "email": (Volunteers, profile.email),
        },
    )
    volunteer = Volunteers(**profile.model_dump(), auth_user_id=auth_user.id)
    session.add(volunteer)
    await session.flush()

    default_role = await session.scalar(
        select(RoleDefinitions).where(
            RoleDefinitions.role_name == DEFAULT_VOLUNTEER_ROLE,
            RoleDefinitions.is_active == True,
        )
    )
    if default_role:
        session.add(
            UserRoles(volunteer_id=volunteer.id, role_definition_id=default_role.id)
        )
    await session.commit()
    await session.refresh(volunteer)

    logger.info("Volunteer profile %s registered", volunteer.roll_number)
    return volunteer
