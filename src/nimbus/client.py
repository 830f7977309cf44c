"""Public client for the nimbus object store."""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
from typing import TYPE_CHECKING, Self

from nimbus.cache import FileDataStore, ObjectCache
from nimbus.callbacks import DoneCallback, GetCallback
from nimbus.common import AppDirectories, create_logger
from nimbus.dispatch import CallbackContext, SerialQueueContext
from nimbus.objects import RemoteObject
from nimbus.query import CachePolicy, FetchTask, Query
from nimbus.transport import HttpObjectFetcher, ObjectFetcher, ServerConfig

if TYPE_CHECKING:
    from nimbus.settings import Settings

logger = create_logger("client")


class Client:
    """Entry point for fetching objects.

    Fetches run on a pool of worker threads. Their callbacks run on
    ``callback_context``; without one, the client creates a
    ``SerialQueueContext`` and closes it together with the client.
    """

    def __init__(
        self,
        server: ServerConfig | None = None,
        *,
        fetcher: ObjectFetcher | None = None,
        cache: ObjectCache | None = None,
        callback_context: CallbackContext | None = None,
        directories: AppDirectories | None = None,
        cache_namespace: str = "objects",
        max_workers: int = 4,
        report_cancellation: bool = False,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        self.server = server or ServerConfig()
        self.report_cancellation = report_cancellation

        self._owned_fetcher = HttpObjectFetcher(self.server) if fetcher is None else None
        self.fetcher: ObjectFetcher = fetcher or self._owned_fetcher

        if cache is None:
            store = FileDataStore(namespace=cache_namespace, directories=directories or AppDirectories())
            cache = ObjectCache(store)
        self.cache = cache

        self._owned_context = SerialQueueContext() if callback_context is None else None
        self.callback_context: CallbackContext = callback_context or self._owned_context

        self._workers = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="nimbus-fetch")
        logger.debug("Client created", server=self.server.url, workers=max_workers)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: object) -> Client:
        return cls(
            settings.server,
            directories=settings.to_app_directories(),
            cache_namespace=settings.paths.cache_namespace,
            max_workers=settings.workers,
            report_cancellation=settings.report_cancellation,
            **kwargs,
        )

    def query(self, class_name: str, *, cache_policy: CachePolicy = CachePolicy.IGNORE_CACHE) -> Query:
        return Query(class_name, self, cache_policy=cache_policy)

    def fetch_in_background(
        self,
        obj: RemoteObject,
        callback: GetCallback[RemoteObject] | DoneCallback[RemoteObject],
        *,
        context: CallbackContext | None = None,
    ) -> FetchTask:
        """Refresh ``obj`` from the server; ``callback`` receives the new copy or the error."""
        return self.query(obj.class_name).get_in_background(obj.object_id, callback, context=context)

    def submit(self, fn: Callable[[], None]) -> Future[None]:
        return self._workers.submit(fn)

    def close(self, wait: bool = True) -> None:
        """Stop the workers, then the callback context and HTTP client the client created itself.

        No new fetches are accepted afterwards. Fetches already running still
        deliver their callbacks; with ``wait=False`` the owned resources are
        released on a background thread once those fetches are done.
        """
        self._workers.shutdown(wait=wait)
        if wait:
            self._release_owned()
        else:
            threading.Thread(target=self._release_after_workers, name="nimbus-close", daemon=True).start()

    def _release_after_workers(self) -> None:
        self._workers.shutdown(wait=True)
        self._release_owned()

    def _release_owned(self) -> None:
        if self._owned_context is not None:
            self._owned_context.close()
        if self._owned_fetcher is not None:
            self._owned_fetcher.close()
        logger.debug("Client closed", server=self.server.url)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()
