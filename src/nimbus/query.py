"""Queries that fetch a single object by id."""

from __future__ import annotations

import threading
from concurrent.futures import Future
from enum import Enum
from functools import partial
from typing import TYPE_CHECKING

from result import Err, Result

from nimbus.callbacks import DoneCallback, GetCallback, OnceCallback, ResultCallback, as_result_callback
from nimbus.common import create_logger
from nimbus.dispatch import CallbackContext
from nimbus.objects import FetchCancelledError, FetchError, RemoteObject, is_connectivity_error

if TYPE_CHECKING:
    from nimbus.client import Client

logger = create_logger("query")

type ObjectResult = Result[RemoteObject, FetchError]


class CachePolicy(str, Enum):
    """How a query combines the local cache with the network."""

    IGNORE_CACHE = "ignore_cache"
    CACHE_ONLY = "cache_only"
    NETWORK_ONLY = "network_only"
    CACHE_ELSE_NETWORK = "cache_else_network"
    NETWORK_ELSE_CACHE = "network_else_cache"


class _TaskState(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class FetchTask:
    """Handle on one background fetch.

    The task leaves the pending state exactly once, either because the
    fetch produced an outcome or because it was cancelled first.
    """

    def __init__(self, class_name: str, object_id: str) -> None:
        self.class_name = class_name
        self.object_id = object_id
        self._lock = threading.Lock()
        self._state = _TaskState.PENDING
        self._finished = threading.Event()
        self._result: ObjectResult | None = None
        self._future: Future[None] | None = None
        self._cancel_listeners: list[partial[None]] = []

    def __repr__(self) -> str:
        return f"FetchTask({self.class_name!r}, {self.object_id!r}, state={self._state.value})"

    @property
    def done(self) -> bool:
        return self._state is not _TaskState.PENDING

    @property
    def cancelled(self) -> bool:
        return self._state is _TaskState.CANCELLED

    def cancel(self) -> bool:
        """Cancel the fetch if its outcome is not known yet.

        Returns False when the fetch had already completed or been cancelled.
        """
        with self._lock:
            if self._state is not _TaskState.PENDING:
                return False
            self._state = _TaskState.CANCELLED
        self._finished.set()
        if self._future is not None:
            self._future.cancel()
        for listener in self._cancel_listeners:
            listener()
        logger.debug("Fetch cancelled", class_name=self.class_name, object_id=self.object_id)
        return True

    def wait(self, timeout: float | None = None) -> ObjectResult | None:
        """Block until the outcome is known; ``None`` if cancelled or timed out.

        The outcome being known does not mean the callback has run yet.
        """
        self._finished.wait(timeout)
        return self._result

    def _attach(self, future: Future[None]) -> None:
        self._future = future
        if self.cancelled:
            future.cancel()

    def _on_cancel(self, listener: partial[None]) -> None:
        self._cancel_listeners.append(listener)

    def _resolve(self, result: ObjectResult) -> bool:
        with self._lock:
            if self._state is not _TaskState.PENDING:
                return False
            self._state = _TaskState.COMPLETED
            self._result = result
        self._finished.set()
        return True


class Query:
    """Retrieves objects of one class by id.

    ```python
    query = client.query("MyClass")
    query.get_in_background(object_id, callback)
    ```
    """

    def __init__(self, class_name: str, client: Client, *, cache_policy: CachePolicy = CachePolicy.IGNORE_CACHE):
        self.class_name = class_name
        self.cache_policy = cache_policy
        self._client = client
        self._tasks: set[FetchTask] = set()
        self._tasks_lock = threading.Lock()

    def get(self, object_id: str) -> ObjectResult:
        """Fetch an object on the calling thread, honouring the cache policy."""
        match self.cache_policy:
            case CachePolicy.IGNORE_CACHE:
                return self._fetch_remote(object_id)
            case CachePolicy.NETWORK_ONLY:
                return self._fetch_remote(object_id).inspect(self._client.cache.put)
            case CachePolicy.CACHE_ONLY:
                return self._client.cache.get(self.class_name, object_id)
            case CachePolicy.CACHE_ELSE_NETWORK:
                return self._client.cache.get(self.class_name, object_id).or_else(
                    lambda _: self._fetch_remote(object_id).inspect(self._client.cache.put)
                )
            case CachePolicy.NETWORK_ELSE_CACHE:
                return (
                    self._fetch_remote(object_id)
                    .inspect(self._client.cache.put)
                    .or_else(partial(self._fall_back_to_cache, object_id))
                )

    def get_in_background(
        self,
        object_id: str,
        callback: GetCallback[RemoteObject] | DoneCallback[RemoteObject],
        *,
        context: CallbackContext | None = None,
    ) -> FetchTask:
        """Fetch an object on a worker and call ``callback.done(obj, error)`` when finished."""
        return self.get_result_in_background(object_id, as_result_callback(callback), context=context)

    def get_result_in_background(
        self,
        object_id: str,
        handler: ResultCallback[RemoteObject],
        *,
        context: CallbackContext | None = None,
    ) -> FetchTask:
        """Fetch an object on a worker and call ``handler(result)`` when finished.

        Returns immediately. ``handler`` runs once on ``context`` (the
        client's callback context by default). A cancelled fetch only reaches
        the handler when the client reports cancellation.
        """
        task = FetchTask(self.class_name, object_id)
        target = context or self._client.callback_context
        notify = OnceCallback(handler, label=f"{self.class_name}/{object_id}")

        with self._tasks_lock:
            self._tasks.add(task)
        task._on_cancel(partial(self._forget, task))

        if self._client.report_cancellation:
            cancelled = Err(
                FetchCancelledError(message="Fetch was cancelled", class_name=self.class_name, object_id=object_id)
            )
            task._on_cancel(partial(self._deliver, target, notify, cancelled))

        logger.debug("Starting background fetch", class_name=self.class_name, object_id=object_id)
        future = self._client.submit(partial(self._run_task, task, target, notify))
        task._attach(future)
        return task

    def cancel(self) -> int:
        """Cancel every fetch started by this query that is still pending."""
        with self._tasks_lock:
            tasks = list(self._tasks)
        return sum(1 for task in tasks if task.cancel())

    def _run_task(self, task: FetchTask, target: CallbackContext, notify: OnceCallback[RemoteObject]) -> None:
        try:
            if task.cancelled:
                return
            result = self._get_reporting_failures(task.object_id)
            if task._resolve(result):
                self._deliver(target, notify, result)
            else:
                logger.debug("Dropping cancelled outcome", class_name=self.class_name, object_id=task.object_id)
        finally:
            self._forget(task)

    def _forget(self, task: FetchTask) -> None:
        with self._tasks_lock:
            self._tasks.discard(task)

    def _get_reporting_failures(self, object_id: str) -> ObjectResult:
        try:
            return self.get(object_id)
        except Exception as exc:
            logger.opt(exception=exc).error(
                "Fetch failed unexpectedly", class_name=self.class_name, object_id=object_id
            )
            return Err(
                FetchError(message=f"Unexpected error: {exc}", class_name=self.class_name, object_id=object_id)
            )

    def _deliver(self, target: CallbackContext, notify: OnceCallback[RemoteObject], result: ObjectResult) -> None:
        try:
            target.post(partial(notify, result))
        except RuntimeError as exc:
            logger.error("Callback context rejected completion", class_name=self.class_name, error=str(exc))

    def _fetch_remote(self, object_id: str) -> ObjectResult:
        return self._client.fetcher.fetch(self.class_name, object_id)

    def _fall_back_to_cache(self, object_id: str, error: FetchError) -> ObjectResult:
        if not is_connectivity_error(error):
            return Err(error)
        logger.info("Network unavailable, falling back to cache", class_name=self.class_name, object_id=object_id)
        return self._client.cache.get(self.class_name, object_id).map_err(lambda _: error)
