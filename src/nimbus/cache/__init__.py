"""Local object cache."""

from .file import FileDataStore
from .models import StoreError, StoreKeyNotFoundError, StoreReadError, StoreWriteError
from .protocol import DataStore
from .store import ObjectCache, cache_key

__all__ = [
    "DataStore",
    "FileDataStore",
    "ObjectCache",
    "StoreError",
    "StoreKeyNotFoundError",
    "StoreReadError",
    "StoreWriteError",
    "cache_key",
]
