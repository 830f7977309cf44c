"""Remote object model."""

from __future__ import annotations

import re
from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, JsonValue, StrictStr, field_validator

_CLASS_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

# Keys the server manages itself; they never end up in ``RemoteObject.data``.
_RESERVED_KEYS = frozenset({"objectId", "createdAt", "updatedAt", "className", "ACL"})

NonEmptyString = Annotated[StrictStr, Field(min_length=1)]


def is_valid_class_name(class_name: str) -> bool:
    return bool(_CLASS_NAME_PATTERN.match(class_name))


class RemoteObject(BaseModel):
    """An object fetched from the remote store."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    class_name: NonEmptyString
    object_id: NonEmptyString
    created_at: datetime | None = None
    updated_at: datetime | None = None
    data: dict[str, JsonValue] = Field(default_factory=dict)

    @field_validator("class_name")
    @classmethod
    def _validate_class_name(cls, value: str) -> str:
        if not is_valid_class_name(value):
            raise ValueError(f"Invalid class name '{value}'")
        return value

    @field_validator("data")
    @classmethod
    def _reject_reserved_keys(cls, value: dict[str, JsonValue]) -> dict[str, JsonValue]:
        if reserved := sorted(_RESERVED_KEYS.intersection(value)):
            raise ValueError(f"Reserved keys are not allowed in data: {', '.join(reserved)}")
        return value

    def __getitem__(self, key: str) -> JsonValue:
        return self.data[key]

    def get(self, key: str, default: JsonValue = None) -> JsonValue:
        return self.data.get(key, default)

    @classmethod
    def from_json(cls, class_name: str, payload: dict[str, Any]) -> RemoteObject:
        """Build an object from a REST payload (``objectId``, ``createdAt``, ...).

        Raises pydantic's ValidationError when the payload is not an object.
        """
        return cls.model_validate(
            {
                "class_name": class_name,
                "object_id": payload.get("objectId"),
                "created_at": payload.get("createdAt"),
                "updated_at": payload.get("updatedAt"),
                "data": {k: v for k, v in payload.items() if k not in _RESERVED_KEYS},
            }
        )

    def to_json(self) -> dict[str, JsonValue]:
        payload: dict[str, JsonValue] = {**self.data, "className": self.class_name, "objectId": self.object_id}
        if self.created_at is not None:
            payload["createdAt"] = _format_timestamp(self.created_at)
        if self.updated_at is not None:
            payload["updatedAt"] = _format_timestamp(self.updated_at)
        return payload


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"
