"""Remote objects and the errors fetching them can produce."""

from .errors import (
    CacheMissError,
    ConnectionFailedError,
    ErrorCode,
    FetchCancelledError,
    FetchError,
    FetchTimeoutError,
    InvalidRequestError,
    InvalidResponseError,
    ObjectNotFoundError,
    ServerError,
    is_connectivity_error,
)
from .models import RemoteObject, is_valid_class_name

__all__ = [
    "CacheMissError",
    "ConnectionFailedError",
    "ErrorCode",
    "FetchCancelledError",
    "FetchError",
    "FetchTimeoutError",
    "InvalidRequestError",
    "InvalidResponseError",
    "ObjectNotFoundError",
    "RemoteObject",
    "ServerError",
    "is_connectivity_error",
    "is_valid_class_name",
]
