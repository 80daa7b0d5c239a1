from datetime import datetime, timezone
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    FieldSerializationInfo,
    field_serializer,
    field_validator,
)


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    if value.tzinfo != timezone.utc:
        return value.astimezone(timezone.utc)
    return value


class CustomBaseModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    @field_validator("*", mode="before")
    @classmethod
    def ensure_utc_timezone(cls, value: Any) -> Any:
        """
        Validate and convert input datetime to UTC.

        Handles:
        - Naive datetimes (assume UTC)
        - Datetimes in other timezones (convert to UTC)
        """
        if isinstance(value, datetime):
            return as_utc(value)
        return value

    @field_serializer("*")
    def serialize_datetime(
        self, value: Any, info: FieldSerializationInfo
    ) -> Union[str, Any]:
        """
        Datetimes leave in UTC; as ISO strings in JSON, as aware objects otherwise.
        """
        if isinstance(value, datetime):
            value = as_utc(value)
            return value.isoformat() if info.mode_is_json() else value
        return value
