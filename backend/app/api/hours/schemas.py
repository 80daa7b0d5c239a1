from uuid import UUID

from pydantic import Field, field_validator

from app.api.events.schemas import EventMin, ParticipationPublic
from app.api.volunteers.schemas import VolunteerMin
from app.core.response.base_model import CustomBaseModel

MAX_BULK_IDS = 500


class ApproveHoursRequest(CustomBaseModel):
    approved_hours: int | None = Field(None, ge=0, le=24)
    notes: str | None = Field(None, max_length=500)


class RejectHoursRequest(CustomBaseModel):
    notes: str = Field(..., min_length=1, max_length=500)

    @field_validator("notes")
    @classmethod
    def notes_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Rejection notes are required")
        return value


class BulkApproveRequest(CustomBaseModel):
    participation_ids: list[UUID] = Field(..., min_length=1, max_length=MAX_BULK_IDS)
    notes: str | None = Field(None, max_length=500)


class BulkApproveResponse(CustomBaseModel):
    count: int


class PendingCountResponse(CustomBaseModel):
    count: int


class PendingApproval(ParticipationPublic):
    volunteer: VolunteerMin
    event: EventMin
