"""Hour-approval workflow for event participation rows.

Every transition is a single UPDATE guarded by the row's current
``approval_status``; rows outside the source state are never overwritten.

    pending  -> approved   approve_hours / bulk_approve_hours
    pending  -> rejected   reject_hours
    approved -> pending    reset_approval
    rejected -> pending    reset_approval
"""

import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from app.api.events.models import ApprovalStatus, EventParticipation, Events
from app.core.auth.dependencies import Caller
from app.core.utils.db_fields import utcnow
from app.core.validations.exceptions import RequestValidationError
from app.response import InvalidTransitionError, NotFoundError

logger = logging.getLogger(__name__)

MIN_APPROVED_HOURS = 0
MAX_APPROVED_HOURS = 24
MAX_NOTES_LENGTH = 500
BULK_APPROVAL_NOTE = "Bulk approved"


def _validate_approved_hours(approved_hours: int | None):
    if approved_hours is None:
        return
    if (
        isinstance(approved_hours, bool)
        or not isinstance(approved_hours, int)
        or not MIN_APPROVED_HOURS <= approved_hours <= MAX_APPROVED_HOURS
    ):
        raise RequestValidationError(
            approved_hours=f"must be an integer between {MIN_APPROVED_HOURS} and {MAX_APPROVED_HOURS}"
        )


def _validate_notes(notes: str | None, required: bool = False):
    if notes is None or not notes.strip():
        if required:
            raise RequestValidationError(notes="Rejection notes are required")
        return
    if len(notes) > MAX_NOTES_LENGTH:
        raise RequestValidationError(
            notes=f"must be at most {MAX_NOTES_LENGTH} characters"
        )


async def get_participation(session: AsyncSession, participation_id: UUID):
    query = (
        select(EventParticipation)
        .where(EventParticipation.id == participation_id)
        .options(
            joinedload(EventParticipation.volunteer),
            joinedload(EventParticipation.event).joinedload(Events.category),
        )
        .execution_options(populate_existing=True)
    )
    participation = await session.scalar(query)
    if participation is None:
        raise NotFoundError("Participation not found")
    return participation


async def _raise_for_rejected_transition(
    session: AsyncSession, participation_id: UUID, action: str
):
    """Called after a guarded UPDATE matched nothing: tell missing rows apart from wrong states."""
    current = await session.scalar(
        select(EventParticipation.approval_status).where(
            EventParticipation.id == participation_id
        )
    )
    if current is None:
        raise NotFoundError("Participation not found")
    raise InvalidTransitionError(
        f"Cannot {action} hours that are already {current.value}"
    )


async def get_pending_approvals(
    session: AsyncSession, include_zero_hours: bool = False
):
    """Pending participations, newest first.

    Rows with zero attended hours have nothing to review and are left out
    unless ``include_zero_hours`` asks for the raw listing.
    """
    query = (
        select(EventParticipation)
        .where(EventParticipation.approval_status == ApprovalStatus.pending)
        .options(
            joinedload(EventParticipation.volunteer),
            joinedload(EventParticipation.event).joinedload(Events.category),
        )
        .order_by(EventParticipation.created_at.desc())
    )
    if not include_zero_hours:
        query = query.where(EventParticipation.hours_attended > 0)
    result = await session.scalars(query)
    return result.unique().all()


async def get_pending_count(session: AsyncSession) -> int:
    count = await session.scalar(
        select(func.count(EventParticipation.id)).where(
            EventParticipation.approval_status == ApprovalStatus.pending,
            EventParticipation.hours_attended > 0,
        )
    )
    return count or 0


async def approve_hours(
    session: AsyncSession,
    caller: Caller,
    participation_id: UUID,
    approved_hours: int | None = None,
    notes: str | None = None,
):
    _validate_approved_hours(approved_hours)
    _validate_notes(notes)

    result = await session.execute(
        update(EventParticipation)
        .where(
            EventParticipation.id == participation_id,
            EventParticipation.approval_status == ApprovalStatus.pending,
        )
        .values(
            approval_status=ApprovalStatus.approved,
            approved_hours=(
                approved_hours
                if approved_hours is not None
                else EventParticipation.hours_attended
            ),
            approved_by=caller.volunteer_id,
            approved_at=utcnow(),
            approval_notes=notes,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await _raise_for_rejected_transition(session, participation_id, "approve")
    await session.commit()

    logger.info(
        "Participation %s approved by volunteer %s", participation_id, caller.volunteer_id
    )
    return await get_participation(session, participation_id)


async def reject_hours(
    session: AsyncSession,
    caller: Caller,
    participation_id: UUID,
    notes: str,
):
    _validate_notes(notes, required=True)

    result = await session.execute(
        update(EventParticipation)
        .where(
            EventParticipation.id == participation_id,
            EventParticipation.approval_status == ApprovalStatus.pending,
        )
        .values(
            approval_status=ApprovalStatus.rejected,
            approved_hours=0,
            approved_by=caller.volunteer_id,
            approved_at=utcnow(),
            approval_notes=notes,
        )
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await _raise_for_rejected_transition(session, participation_id, "reject")
    await session.commit()

    logger.info(
        "Participation %s rejected by volunteer %s", participation_id, caller.volunteer_id
    )
    return await get_participation(session, participation_id)


async def reset_approval(session: AsyncSession, caller: Caller, participation_id: UUID):
    """Move an approved or rejected row back to pending and clear the review.

    Resetting a row that is already pending changes nothing.
    """
    result = await session.execute(
        update(EventParticipation)
        .where(
            EventParticipation.id == participation_id,
            EventParticipation.approval_status.in_(
                [ApprovalStatus.approved, ApprovalStatus.rejected]
            ),
        )
        .values(
            approval_status=ApprovalStatus.pending,
            approved_hours=None,
            approved_by=None,
            approved_at=None,
            approval_notes=None,
        )
        .execution_options(synchronize_session=False)
    )
    await session.commit()

    participation = await get_participation(session, participation_id)
    if result.rowcount:
        logger.info(
            "Participation %s reset to pending by volunteer %s",
            participation_id,
            caller.volunteer_id,
        )
    return participation


async def bulk_approve_hours(
    session: AsyncSession,
    caller: Caller,
    participation_ids: list[UUID],
    notes: str | None = None,
):
    """Approve every pending row in ``participation_ids`` in one statement.

    Missing or non-pending ids are left untouched; ``count`` is the number of
    rows that actually changed.
    """
    _validate_notes(notes)
    if not participation_ids:
        return {"count": 0}

    ids = list(dict.fromkeys(participation_ids))
    result = await session.execute(
        update(EventParticipation)
        .where(
            EventParticipation.id.in_(ids),
            EventParticipation.approval_status == ApprovalStatus.pending,
        )
        .values(
            approval_status=ApprovalStatus.approved,
            approved_hours=EventParticipation.hours_attended,
            approved_by=caller.volunteer_id,
            approved_at=utcnow(),
            approval_notes=notes if notes and notes.strip() else BULK_APPROVAL_NOTE,
        )
        .execution_options(synchronize_session=False)
    )
    await session.commit()

    count = result.rowcount or 0
    logger.info(
        "Bulk approval by volunteer %s: %s of %s participations approved",
        caller.volunteer_id,
        count,
        len(ids),
    )
    return {"count": count}
