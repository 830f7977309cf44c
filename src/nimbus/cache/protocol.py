"""DataStore protocol."""

from __future__ import annotations

from typing import Protocol

from result import Result

from nimbus.common import JsonValue

from .models import StoreError


class DataStore(Protocol):
    """Protocol for key/value storage of JSON documents."""

    def save(self, key: str, data: JsonValue) -> Result[None, StoreError]: ...

    def load(self, key: str) -> Result[JsonValue, StoreError]: ...

    def delete(self, key: str) -> Result[None, StoreError]: ...
