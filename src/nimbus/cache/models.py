"""Errors reported by local stores."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class StoreError(BaseModel):
    """Base store error."""

    model_config = ConfigDict(extra="forbid")

    namespace: str
    key: str | None = None
    message: str


class StoreReadError(StoreError):
    """The backing file could not be read or decoded."""


class StoreWriteError(StoreError):
    """The backing file could not be written."""


class StoreKeyNotFoundError(StoreError):
    """No entry is stored under the key."""

    key: str
