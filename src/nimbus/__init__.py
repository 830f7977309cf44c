"""nimbus - a client for fetching objects from a Parse-style object store.

Fetches run on worker threads and report back through callbacks that are
invoked exactly once on a callback context the host controls.

By default, nimbus' internal logging is disabled when used as a library.
Library users can enable logging by calling nimbus.enable_logging().
"""

from nimbus.common import disable_library_logging, enable_library_logging

from .callbacks import (
    Callback2,
    CallbackContractError,
    DoneCallback,
    GetCallback,
    ResultCallback,
    as_get_callback,
    as_result_callback,
)
from .client import Client
from .dispatch import AsyncioLoopContext, CallbackContext, MainThreadContext, SerialQueueContext
from .objects import ErrorCode, FetchError, RemoteObject
from .query import CachePolicy, FetchTask, Query
from .transport import ServerConfig

disable_library_logging()

enable_logging = enable_library_logging

__all__ = [
    "AsyncioLoopContext",
    "CachePolicy",
    "Callback2",
    "CallbackContext",
    "CallbackContractError",
    "Client",
    "DoneCallback",
    "ErrorCode",
    "FetchError",
    "FetchTask",
    "GetCallback",
    "MainThreadContext",
    "Query",
    "RemoteObject",
    "ResultCallback",
    "SerialQueueContext",
    "ServerConfig",
    "enable_logging",
]
