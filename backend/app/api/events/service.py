import logging
from uuid import UUID

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.api.categories.models import EventCategories
from app.api.events.models import (
    ApprovalStatus,
    EventParticipation,
    EventStatus,
    Events,
    ParticipationStatus,
)
from app.api.events.schemas import (
    EventCreate,
    EventListItem,
    EventUpdate,
    ParticipationUpdate,
)
from app.api.volunteers.models import Volunteers
from app.core.auth.dependencies import Caller
from app.core.response.pagination import _PaginationParams, paginate
from app.core.utils.db_fields import utcnow
from app.core.utils.reporting import utc_today
from app.core.validations.exceptions import RequestValidationError
from app.core.validations.schema import validate_relations
from app.response import ConflictError, ForbiddenError, NotFoundError

logger = logging.getLogger(__name__)

ALREADY_REGISTERED = "Already registered for this event"
CLOSED_STATUSES = (EventStatus.cancelled, EventStatus.completed)
ATTENDED_STATUSES = (ParticipationStatus.present, ParticipationStatus.partially_present)
MAX_PARTICIPATION_HOURS = 24


def _event_query():
    return select(Events).options(
        joinedload(Events.category), joinedload(Events.created_by)
    )


def _ensure_can_manage(caller: Caller, event: Events):
    if event.created_by_volunteer_id != caller.volunteer_id and not caller.has_any_role(
        "admin"
    ):
        raise ForbiddenError("Not authorized to modify this event")


async def get_event(session: AsyncSession, event_id: UUID, active_only: bool = False):
    query = _event_query().where(Events.id == event_id)
    if active_only:
        query = query.where(Events.is_active == True)
    event = await session.scalar(query.execution_options(populate_existing=True))
    if event is None:
        raise NotFoundError("Event not found")
    return event


async def list_events(
    session: AsyncSession,
    pagination: _PaginationParams,
    include_inactive: bool = False,
    category_id: int | None = None,
    event_status: EventStatus | None = None,
    search: str | None = None,
):
    query = _event_query().order_by(Events.start_date.desc(), Events.created_at.desc())
    if not include_inactive:
        query = query.where(Events.is_active == True)
    if category_id is not None:
        query = query.where(Events.category_id == category_id)
    if event_status is not None:
        query = query.where(Events.event_status == event_status)
    if search:
        pattern = f"%{search.lower()}%"
        query = query.where(
            or_(
                func.lower(Events.event_name).like(pattern),
                func.lower(Events.location).like(pattern),
            )
        )

    return await paginate(query, EventListItem, pagination, session)


async def get_upcoming_events(session: AsyncSession, limit: int = 5):
    result = await session.scalars(
        _event_query()
        .where(Events.is_active == True, Events.start_date >= utc_today())
        .order_by(Events.start_date.asc())
        .limit(limit)
    )
    return result.all()


def _check_participant_bounds(min_participants, max_participants):
    if (
        min_participants is not None
        and max_participants is not None
        and min_participants > max_participants
    ):
        raise RequestValidationError(
            min_participants="cannot exceed max_participants"
        )


async def create_event(session: AsyncSession, caller: Caller, event: EventCreate):
    await validate_relations(
        session, {"category_id": (EventCategories, event.category_id)}
    )
    db_event = Events(
        **event.model_dump(),
        created_by_volunteer_id=caller.volunteer_id,
    )
    session.add(db_event)
    await session.commit()

    logger.info("Event %s created by volunteer %s", db_event.id, caller.volunteer_id)
    return await get_event(session, db_event.id)


async def update_event(
    session: AsyncSession, caller: Caller, event_id: UUID, event: EventUpdate
):
    db_event = await get_event(session, event_id)
    _ensure_can_manage(caller, db_event)

    data = {
        key: value
        for key, value in event.model_dump(exclude_unset=True).items()
        if value is not None
        or key in ("description", "location", "registration_deadline")
    }
    if "category_id" in data and data["category_id"] != db_event.category_id:
        await validate_relations(
            session, {"category_id": (EventCategories, data["category_id"])}
        )

    start_date = data.get("start_date", db_event.start_date)
    end_date = data.get("end_date", db_event.end_date)
    if end_date < start_date:
        raise RequestValidationError(end_date="must be on or after start_date")
    _check_participant_bounds(
        data.get("min_participants", db_event.min_participants),
        data.get("max_participants", db_event.max_participants),
    )

    for key, value in data.items():
        setattr(db_event, key, value)
    await session.commit()

    logger.info("Event %s updated by volunteer %s", event_id, caller.volunteer_id)
    return await get_event(session, event_id)


async def delete_event(session: AsyncSession, caller: Caller, event_id: UUID):
    db_event = await get_event(session, event_id, active_only=True)
    _ensure_can_manage(caller, db_event)
    db_event.deactivate()
    await session.commit()

    logger.info("Event %s deactivated by volunteer %s", event_id, caller.volunteer_id)
    return {"message": "Event deleted"}


async def get_event_participants(session: AsyncSession, event_id: UUID):
    await get_event(session, event_id)
    result = await session.scalars(
        select(EventParticipation)
        .join(Volunteers, Volunteers.id == EventParticipation.volunteer_id)
        .where(EventParticipation.event_id == event_id)
        .options(joinedload(EventParticipation.volunteer))
        .order_by(Volunteers.first_name, Volunteers.last_name)
    )
    return result.all()


async def get_participation(session: AsyncSession, participation_id: UUID):
    participation = await session.scalar(
        select(EventParticipation)
        .where(EventParticipation.id == participation_id)
        .options(joinedload(EventParticipation.volunteer))
        .execution_options(populate_existing=True)
    )
    if participation is None:
        raise NotFoundError("Participation not found")
    return participation


async def _registration_blocker(
    session: AsyncSession, event: Events, volunteer_id: UUID
):
    """Return why ``volunteer_id`` cannot register for ``event``, or ``None``."""
    already_registered = await session.scalar(
        select(EventParticipation.id).where(
            EventParticipation.event_id == event.id,
            EventParticipation.volunteer_id == volunteer_id,
        )
    )
    if already_registered:
        return ALREADY_REGISTERED

    if event.event_status in CLOSED_STATUSES:
        return "Event is not open for registration"
    if event.registration_deadline and event.registration_deadline < utcnow():
        return "Registration deadline has passed"
    if event.max_participants:
        current = await session.scalar(
            select(func.count(EventParticipation.id)).where(
                EventParticipation.event_id == event.id
            )
        )
        if current >= event.max_participants:
            return "Event is at full capacity"
    return None


async def _get_open_event(session: AsyncSession, event_id: UUID):
    return await session.scalar(
        select(Events).where(Events.id == event_id, Events.is_active == True)
    )


async def can_register(session: AsyncSession, caller: Caller, event_id: UUID):
    event = await _get_open_event(session, event_id)
    if event is None:
        return {"can_register": False, "reason": "Event not found or is inactive"}
    reason = await _registration_blocker(session, event, caller.volunteer_id)
    return {"can_register": reason is None, "reason": reason}


async def register_for_event(
    session: AsyncSession,
    caller: Caller,
    event_id: UUID,
    declared_hours: int | None = None,
    notes: str | None = None,
):
    event = await _get_open_event(session, event_id)
    if event is None:
        raise NotFoundError("Event not found or is inactive")

    reason = await _registration_blocker(session, event, caller.volunteer_id)
    if reason is not None:
        raise ConflictError(reason)

    participation = EventParticipation(
        event_id=event_id,
        volunteer_id=caller.volunteer_id,
        declared_hours=declared_hours,
        notes=notes,
        participation_status=ParticipationStatus.registered,
    )
    session.add(participation)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ConflictError(ALREADY_REGISTERED)

    logger.info("Volunteer %s registered for event %s", caller.volunteer_id, event_id)
    return await get_participation(session, participation.id)


async def _check_volunteers(session: AsyncSession, ids: list[UUID]):
    known = set(
        (
            await session.scalars(
                select(Volunteers.id).where(
                    Volunteers.id.in_(ids), Volunteers.is_active == True
                )
            )
        ).all()
    )
    unknown = [str(volunteer_id) for volunteer_id in ids if volunteer_id not in known]
    if unknown:
        raise RequestValidationError(volunteer_ids=f"invalid volunteers: {', '.join(unknown)}")


def _default_hours(event: Events, participation_status: ParticipationStatus):
    if participation_status in ATTENDED_STATUSES:
        return min(event.declared_hours, MAX_PARTICIPATION_HOURS)
    return 0


def _ensure_unreviewed(participations):
    reviewed = [
        str(row.volunteer_id)
        for row in participations
        if row.approval_status != ApprovalStatus.pending
    ]
    if reviewed:
        raise ConflictError(
            "Hours already reviewed; reset the approval first",
            errors={"volunteer_ids": ", ".join(reviewed)},
        )


async def mark_attendance(
    session: AsyncSession,
    caller: Caller,
    event_id: UUID,
    volunteer_ids: list[UUID],
    participation_status: ParticipationStatus = ParticipationStatus.present,
    hours_attended: int | None = None,
    notes: str | None = None,
):
    """Create or update one participation row per volunteer with the given status.

    Without an explicit ``hours_attended`` attended volunteers are credited the
    event's declared hours (capped at a day) and everyone else zero. Rows whose
    hours were already approved or rejected are refused as a whole.
    """
    if not volunteer_ids:
        return {"count": 0}
    event = await get_event(session, event_id, active_only=True)

    ids = list(dict.fromkeys(volunteer_ids))
    await _check_volunteers(session, ids)
    if hours_attended is None:
        hours_attended = _default_hours(event, participation_status)

    existing = {
        row.volunteer_id: row
        for row in (
            await session.scalars(
                select(EventParticipation).where(
                    EventParticipation.event_id == event_id,
                    EventParticipation.volunteer_id.in_(ids),
                )
            )
        ).all()
    }
    _ensure_unreviewed(existing.values())

    now = utcnow()
    for volunteer_id in ids:
        participation = existing.get(volunteer_id)
        if participation is None:
            participation = EventParticipation(event_id=event_id, volunteer_id=volunteer_id)
            session.add(participation)
        participation.participation_status = participation_status
        participation.hours_attended = hours_attended
        participation.attendance_date = now
        participation.recorded_by_volunteer_id = caller.volunteer_id
        if notes is not None:
            participation.notes = notes
    await session.commit()

    logger.info(
        "Attendance for %s volunteers at event %s recorded by %s",
        len(ids),
        event_id,
        caller.volunteer_id,
    )
    return {"count": len(ids)}


async def sync_attendance(
    session: AsyncSession,
    caller: Caller,
    event_id: UUID,
    volunteer_ids: list[UUID],
):
    """Make the event's participant list match ``volunteer_ids``.

    Selected volunteers without a row are added as present with the event's
    default hours. Unselected participants are removed unless their hours were
    already reviewed; those rows stay and are counted in ``kept_reviewed``.
    """
    event = await get_event(session, event_id, active_only=True)
    ids = list(dict.fromkeys(volunteer_ids))
    if ids:
        await _check_volunteers(session, ids)

    current = (
        await session.scalars(
            select(EventParticipation).where(EventParticipation.event_id == event_id)
        )
    ).all()
    current_ids = {row.volunteer_id for row in current}
    selected = set(ids)

    stale = [row for row in current if row.volunteer_id not in selected]
    removable = [row.id for row in stale if row.approval_status == ApprovalStatus.pending]
    removed = 0
    if removable:
        result = await session.execute(
            delete(EventParticipation)
            .where(
                EventParticipation.id.in_(removable),
                EventParticipation.approval_status == ApprovalStatus.pending,
            )
            .execution_options(synchronize_session=False)
        )
        removed = result.rowcount or 0

    now = utcnow()
    hours_attended = _default_hours(event, ParticipationStatus.present)
    to_add = [volunteer_id for volunteer_id in ids if volunteer_id not in current_ids]
    for volunteer_id in to_add:
        session.add(
            EventParticipation(
                event_id=event_id,
                volunteer_id=volunteer_id,
                participation_status=ParticipationStatus.present,
                hours_attended=hours_attended,
                attendance_date=now,
                recorded_by_volunteer_id=caller.volunteer_id,
            )
        )
    await session.commit()

    logger.info(
        "Attendance for event %s synced by %s: %s added, %s removed",
        event_id,
        caller.volunteer_id,
        len(to_add),
        removed,
    )
    return {
        "added": len(to_add),
        "removed": removed,
        "kept_reviewed": len(stale) - removed,
        "total_selected": len(ids),
    }


async def get_events_for_attendance(session: AsyncSession, limit: int = 50):
    result = await session.scalars(
        _event_query()
        .where(Events.is_active == True)
        .order_by(Events.start_date.desc(), Events.created_at.desc())
        .limit(limit)
    )
    return result.all()


async def get_available_events(
    session: AsyncSession, volunteer_id: UUID, limit: int = 10
):
    """Upcoming open events the volunteer has no participation row for."""
    registered = select(EventParticipation.event_id).where(
        EventParticipation.volunteer_id == volunteer_id
    )
    result = await session.scalars(
        _event_query()
        .where(
            Events.is_active == True,
            Events.start_date >= utc_today(),
            Events.event_status.not_in(CLOSED_STATUSES),
            Events.id.not_in(registered),
        )
        .order_by(Events.start_date.asc())
        .limit(limit)
    )
    return result.all()


async def update_participation(
    session: AsyncSession,
    caller: Caller,
    participation_id: UUID,
    update: ParticipationUpdate,
):
    participation = await get_participation(session, participation_id)
    data = {
        key: value
        for key, value in update.model_dump(exclude_unset=True).items()
        if value is not None or key in ("notes", "feedback")
    }
    attendance_changed = any(
        key in data and data[key] != getattr(participation, key)
        for key in ("participation_status", "hours_attended")
    )
    if attendance_changed:
        _ensure_unreviewed([participation])

    for key, value in data.items():
        setattr(participation, key, value)
    if attendance_changed:
        participation.attendance_date = utcnow()
        participation.recorded_by_volunteer_id = caller.volunteer_id
    await session.commit()
    return await get_participation(session, participation_id)
