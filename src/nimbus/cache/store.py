from __future__ import annotations

from pydantic import ValidationError
from result import Err, Ok, Result

from nimbus.common import create_logger
from nimbus.objects import CacheMissError, FetchError, RemoteObject

from .models import StoreError, StoreKeyNotFoundError
from .protocol import DataStore

logger = create_logger("cache")


def cache_key(class_name: str, object_id: str) -> str:
    return f"{class_name}/{object_id}"


class ObjectCache:
    """Fetched objects kept locally, keyed by class name and object id."""

    def __init__(self, store: DataStore) -> None:
        self._store = store

    def put(self, obj: RemoteObject) -> Result[None, StoreError]:
        key = cache_key(obj.class_name, obj.object_id)
        return self._store.save(key, obj.to_json()).inspect_err(
            lambda error: logger.warning("Failed to cache object", key=key, error=error.message)
        )

    def get(self, class_name: str, object_id: str) -> Result[RemoteObject, FetchError]:
        key = cache_key(class_name, object_id)
        match self._store.load(key):
            case Ok(payload) if isinstance(payload, dict):
                try:
                    return Ok(RemoteObject.from_json(class_name, payload))
                except ValidationError as exc:
                    logger.warning("Discarding unreadable cache entry", key=key, error=str(exc))
                    return Err(self._miss(class_name, object_id, "Cached entry is not a valid object"))
            case Ok(_):
                return Err(self._miss(class_name, object_id, "Cached entry is not a valid object"))
            case Err(StoreKeyNotFoundError()):
                return Err(self._miss(class_name, object_id, "Object is not cached"))
            case Err(error):
                return Err(self._miss(class_name, object_id, f"Cache unavailable: {error.message}"))

    def evict(self, class_name: str, object_id: str) -> Result[None, StoreError]:
        return self._store.delete(cache_key(class_name, object_id))

    @staticmethod
    def _miss(class_name: str, object_id: str, message: str) -> CacheMissError:
        return CacheMissError(message=message, class_name=class_name, object_id=object_id)
