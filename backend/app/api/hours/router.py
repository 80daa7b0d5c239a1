from uuid import UUID
from fastapi import APIRouter, Query

from app.db.core import SessionDep
from app.api.hours import service
from app.api.hours.schemas import (
    ApproveHoursRequest,
    BulkApproveRequest,
    BulkApproveResponse,
    PendingApproval,
    PendingCountResponse,
    RejectHoursRequest,
)
from app.api.events.schemas import ParticipationPublic
from app.core.auth.dependencies import CallerAuth

router = APIRouter(prefix="/hours")


@router.get("/pending", summary="List participations awaiting hour approval")
async def list_pending_approvals(
    caller: CallerAuth,
    session: SessionDep,
    include_zero_hours: bool = Query(False),
) -> list[PendingApproval]:
    return await service.get_pending_approvals(
        session, include_zero_hours=include_zero_hours
    )


@router.get("/pending/count", summary="Count reviewable pending approvals")
async def pending_count(caller: CallerAuth, session: SessionDep) -> PendingCountResponse:
    return {"count": await service.get_pending_count(session)}


@router.post("/bulk-approve", summary="Approve many pending participations at once")
async def bulk_approve_hours(
    caller: CallerAuth, session: SessionDep, payload: BulkApproveRequest
) -> BulkApproveResponse:
    return await service.bulk_approve_hours(
        session, caller, payload.participation_ids, notes=payload.notes
    )


@router.post("/{participation_id}/approve", summary="Approve hours")
async def approve_hours(
    participation_id: UUID,
    caller: CallerAuth,
    session: SessionDep,
    payload: ApproveHoursRequest,
) -> ParticipationPublic:
    return await service.approve_hours(
        session,
        caller,
        participation_id,
        approved_hours=payload.approved_hours,
        notes=payload.notes,
    )


@router.post("/{participation_id}/reject", summary="Reject hours")
async def reject_hours(
    participation_id: UUID,
    caller: CallerAuth,
    session: SessionDep,
    payload: RejectHoursRequest,
) -> ParticipationPublic:
    return await service.reject_hours(
        session, caller, participation_id, notes=payload.notes
    )


@router.post("/{participation_id}/reset", summary="Reset an approval back to pending")
async def reset_approval(
    participation_id: UUID, caller: CallerAuth, session: SessionDep
) -> ParticipationPublic:
    return await service.reset_approval(session, caller, participation_id)
