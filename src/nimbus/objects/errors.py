"""Error values reported by fetch operations.

These are plain pydantic models, not exceptions. They travel inside
``Err(...)`` to the callback that asked for the object.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel, ConfigDict


class ErrorCode(IntEnum):
    """Error codes shared with the server's REST API."""

    OTHER_CAUSE = -1
    INTERNAL_SERVER_ERROR = 1
    CONNECTION_FAILED = 100
    OBJECT_NOT_FOUND = 101
    INVALID_QUERY = 102
    INVALID_CLASS_NAME = 103
    MISSING_OBJECT_ID = 104
    INVALID_JSON = 107
    OPERATION_FORBIDDEN = 119
    CACHE_MISS = 120
    TIMEOUT = 124
    INVALID_SESSION_TOKEN = 209


class FetchError(BaseModel):
    """Base fetch error."""

    model_config = ConfigDict(extra="forbid")

    code: ErrorCode = ErrorCode.OTHER_CAUSE
    message: str
    class_name: str | None = None
    object_id: str | None = None


class ObjectNotFoundError(FetchError):
    """No object with the requested id exists, or the caller may not read it."""

    code: ErrorCode = ErrorCode.OBJECT_NOT_FOUND


class ConnectionFailedError(FetchError):
    """The server could not be reached."""

    code: ErrorCode = ErrorCode.CONNECTION_FAILED


class FetchTimeoutError(FetchError):
    """The request did not complete within the configured timeout."""

    code: ErrorCode = ErrorCode.TIMEOUT


class ServerError(FetchError):
    """The server answered with a 5xx status."""

    code: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    status_code: int


class InvalidRequestError(FetchError):
    """The request was rejected before or by the server (bad class name, missing id, 4xx)."""

    code: ErrorCode = ErrorCode.INVALID_QUERY
    status_code: int | None = None


class InvalidResponseError(FetchError):
    """The server answered with a body that does not describe an object."""

    code: ErrorCode = ErrorCode.INVALID_JSON


class CacheMissError(FetchError):
    """The object is not in the local cache."""

    code: ErrorCode = ErrorCode.CACHE_MISS


class FetchCancelledError(FetchError):
    """The fetch was cancelled before its outcome was delivered."""

    message: str = "cancelled"


def is_connectivity_error(error: FetchError) -> bool:
    return isinstance(error, ConnectionFailedError | FetchTimeoutError)
