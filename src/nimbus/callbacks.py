"""Callbacks that receive the outcome of a single-object fetch.

A background fetch reports its outcome exactly once: either the object that
was fetched, or the error that prevented it. Internally the outcome is a
``Result[T, FetchError]``; the two-slot ``done(obj, error)`` form exists for
callers who prefer it.

Example:
```python
class ShowObject:
    def done(self, obj: RemoteObject | None, error: FetchError | None) -> None:
        if error is None:
            render(obj)
        else:
            show_alert(error.message)

client.query("MyClass").get_in_background(object_id, ShowObject())
```

Plain functions work too, with either shape:
```python
query.get_in_background(object_id, lambda obj, error: ...)
query.get_result_in_background(object_id, lambda result: ...)
```
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from result import Err, Ok, Result

from nimbus.common import create_logger
from nimbus.objects import FetchError

logger = create_logger("callbacks")


class CallbackContractError(Exception):
    """A completion carried both slots, neither slot, or was delivered twice."""


@runtime_checkable
class Callback2[T1, T2](Protocol):
    """A callback invoked once with two values."""

    def done(self, first: T1, second: T2, /) -> None: ...


@runtime_checkable
class GetCallback[T](Callback2[T | None, FetchError | None], Protocol):
    """Runs code after an object has been fetched in the background.

    ``done`` runs on the callback context of the client (or the one passed
    to the fetch), never on the worker that performed the fetch.
    """

    def done(self, obj: T | None, error: FetchError | None, /) -> None:
        """Called once when the fetch completes.

        Args:
            obj: The object that was retrieved, or ``None`` if the fetch failed.
            error: Why the fetch failed, or ``None`` if it succeeded.
        """
        ...


type Completion[T] = Result[T, FetchError]
type ResultCallback[T] = Callable[[Result[T, FetchError]], None]
type DoneCallback[T] = Callable[[T | None, FetchError | None], None]


def completion_from_args[T](obj: T | None, error: FetchError | None) -> Result[T, FetchError]:
    """Turn a ``(obj, error)`` pair into a Result.

    Raises:
        CallbackContractError: both slots are set, or neither is.
    """
    if obj is not None and error is not None:
        raise CallbackContractError(f"Completion has both an object and an error: {error.message}")
    if error is not None:
        return Err(error)
    if obj is None:
        raise CallbackContractError("Completion has neither an object nor an error")
    return Ok(obj)


def completion_to_args[T](result: Result[T, FetchError]) -> tuple[T | None, FetchError | None]:
    match result:
        case Ok(value):
            if value is None:
                raise CallbackContractError("Successful completion carries no object")
            return value, None
        case Err(error):
            if error is None:
                raise CallbackContractError("Failed completion carries no error")
            return None, error


def as_result_callback[T](callback: GetCallback[T] | DoneCallback[T]) -> ResultCallback[T]:
    """Adapt a ``GetCallback`` object or a two-argument function to a ``ResultCallback``."""
    done: DoneCallback[T] = callback.done if isinstance(callback, Callback2) else callback

    def deliver(result: Result[T, FetchError]) -> None:
        obj, error = completion_to_args(result)
        done(obj, error)

    return deliver


class _ResultCallbackAdapter[T]:
    def __init__(self, handler: ResultCallback[T]) -> None:
        self._handler = handler

    def done(self, obj: T | None, error: FetchError | None, /) -> None:
        self._handler(completion_from_args(obj, error))


def as_get_callback[T](handler: ResultCallback[T]) -> GetCallback[T]:
    """Adapt a ``ResultCallback`` to the two-slot ``GetCallback`` shape."""
    return _ResultCallbackAdapter(handler)


class OnceCallback[T]:
    """Passes at most one completion through to ``handler``.

    A second completion raises ``CallbackContractError`` instead of reaching
    the handler. Safe to call from several threads.
    """

    def __init__(self, handler: ResultCallback[T], *, label: str = "fetch") -> None:
        self._handler = handler
        self._label = label
        self._lock = threading.Lock()
        self._delivered = False

    @property
    def delivered(self) -> bool:
        return self._delivered

    def __call__(self, result: Result[T, FetchError]) -> None:
        with self._lock:
            if self._delivered:
                logger.error("Completion delivered more than once", label=self._label)
                raise CallbackContractError(f"Completion for {self._label} was already delivered")
            self._delivered = True
        self._handler(result)
