from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Query

from app.db.core import SessionDep
from app.api.events import service
from app.api.events.models import EventStatus
from app.api.events.schemas import (
    CountResponse,
    EventCreate,
    EventListItem,
    EventRegistrationRequest,
    EventUpdate,
    MarkAttendanceRequest,
    ParticipantItem,
    ParticipationPublic,
    ParticipationUpdate,
    RegistrationCheck,
    SyncAttendanceRequest,
    SyncAttendanceResponse,
)
from app.core.auth.dependencies import CallerAuth, ManagerAuth
from app.core.response.pagination import PaginatedResponse, PaginationParams

router = APIRouter(prefix="/events")


@router.get("/list", summary="List events")
async def list_events(
    caller: CallerAuth,
    session: SessionDep,
    pagination: PaginationParams,
    include_inactive: bool = Query(False),
    category_id: Optional[int] = Query(None),
    event_status: Optional[EventStatus] = Query(None),
    search: Optional[str] = Query(None, max_length=100),
) -> PaginatedResponse[EventListItem]:
    """List events with optional filters."""
    return await service.list_events(
        session,
        pagination,
        include_inactive=include_inactive,
        category_id=category_id,
        event_status=event_status,
        search=search,
    )


@router.get("/upcoming", summary="Upcoming active events")
async def upcoming_events(
    caller: CallerAuth,
    session: SessionDep,
    limit: int = Query(5, ge=1, le=50),
) -> list[EventListItem]:
    return await service.get_upcoming_events(session, limit=limit)


@router.get("/for-attendance", summary="Recent events for the attendance manager")
async def events_for_attendance(
    caller: ManagerAuth,
    session: SessionDep,
    limit: int = Query(50, ge=1, le=200),
) -> list[EventListItem]:
    return await service.get_events_for_attendance(session, limit=limit)


@router.post("/create", summary="Create a new event")
async def create_event(
    caller: ManagerAuth, session: SessionDep, event: EventCreate
) -> EventListItem:
    return await service.create_event(session, caller, event)


@router.get("/participations/{participation_id}", summary="Get a participation")
async def get_participation(
    participation_id: UUID, caller: ManagerAuth, session: SessionDep
) -> ParticipantItem:
    return await service.get_participation(session, participation_id)


@router.put("/participations/{participation_id}", summary="Update a participation")
async def update_participation(
    participation_id: UUID,
    caller: ManagerAuth,
    session: SessionDep,
    payload: ParticipationUpdate,
) -> ParticipantItem:
    return await service.update_participation(
        session, caller, participation_id, payload
    )


@router.get("/{event_id}", summary="Get event info")
async def get_event(event_id: UUID, caller: CallerAuth, session: SessionDep) -> EventListItem:
    return await service.get_event(session, event_id)


@router.put("/{event_id}", summary="Update an event")
async def update_event(
    event_id: UUID, caller: ManagerAuth, session: SessionDep, event: EventUpdate
) -> EventListItem:
    return await service.update_event(session, caller, event_id, event)


@router.delete("/{event_id}", summary="Delete an event")
async def delete_event(event_id: UUID, caller: ManagerAuth, session: SessionDep):
    return await service.delete_event(session, caller, event_id)


@router.get("/{event_id}/participants", summary="List event participants")
async def event_participants(
    event_id: UUID, caller: CallerAuth, session: SessionDep
) -> list[ParticipantItem]:
    return await service.get_event_participants(session, event_id)


@router.post("/{event_id}/register", summary="Register the signed-in volunteer")
async def register_for_event(
    event_id: UUID,
    caller: CallerAuth,
    session: SessionDep,
    payload: EventRegistrationRequest | None = None,
) -> ParticipationPublic:
    payload = payload or EventRegistrationRequest()
    return await service.register_for_event(
        session,
        caller,
        event_id,
        declared_hours=payload.declared_hours,
        notes=payload.notes,
    )


@router.post("/{event_id}/attendance", summary="Mark attendance for volunteers")
async def mark_attendance(
    event_id: UUID,
    caller: ManagerAuth,
    session: SessionDep,
    payload: MarkAttendanceRequest,
) -> CountResponse:
    return await service.mark_attendance(
        session,
        caller,
        event_id,
        payload.volunteer_ids,
        participation_status=payload.participation_status,
        hours_attended=payload.hours_attended,
        notes=payload.notes,
    )


@router.put("/{event_id}/attendance", summary="Replace the participant list of an event")
async def sync_attendance(
    event_id: UUID,
    caller: ManagerAuth,
    session: SessionDep,
    payload: SyncAttendanceRequest,
) -> SyncAttendanceResponse:
    return await service.sync_attendance(session, caller, event_id, payload.volunteer_ids)


@router.get("/{event_id}/can-register", summary="Check whether the signed-in volunteer can register")
async def can_register(
    event_id: UUID, caller: CallerAuth, session: SessionDep
) -> RegistrationCheck:
    return await service.can_register(session, caller, event_id)
