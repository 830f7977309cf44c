"""Callback contexts: where fetch completions are delivered.

Fetches run on worker threads. Their completions are posted to a context
that belongs to the host: the main thread of a GUI-style loop, a fixed
serial queue in a headless process, or an asyncio event loop. ``post``
only schedules; it never runs the callback before returning.
"""

from __future__ import annotations

import asyncio
import queue
import threading
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol, Self

from nimbus.common import create_logger

logger = create_logger("dispatch")

type Job = Callable[[], None]


class CallbackContext(Protocol):
    """Protocol for an execution context that runs callbacks."""

    def post(self, fn: Job) -> None:
        """Schedule ``fn`` to run later on this context."""
        ...


def run_callback(fn: Job) -> None:
    """Run a callback, logging anything it raises instead of propagating it."""
    try:
        fn()
    except Exception as exc:
        logger.opt(exception=exc).error("Callback raised an exception", error=str(exc))


class MainThreadContext:
    """A FIFO queue drained by the host's main loop.

    Whichever thread calls ``run_pending``/``run_until``/``run_forever``
    is the thread the callbacks run on.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[Job | None] = queue.SimpleQueue()

    def post(self, fn: Job) -> None:
        self._queue.put(fn)

    def pending(self) -> int:
        return self._queue.qsize()

    def run_pending(self) -> int:
        """Run the callbacks queued right now; return how many ran."""
        ran = 0
        for _ in range(self._queue.qsize()):
            try:
                fn = self._queue.get_nowait()
            except queue.Empty:
                break
            if fn is None:
                self._queue.put(None)
                break
            run_callback(fn)
            ran += 1
        return ran

    def run_until(self, predicate: Callable[[], bool], timeout: float | None = None) -> bool:
        """Run callbacks as they arrive until ``predicate()`` holds.

        Returns the final value of ``predicate()``, which is False when the
        timeout ran out first.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while not predicate():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                break
            try:
                fn = self._queue.get(timeout=remaining)
            except queue.Empty:
                break
            if fn is None:
                self._queue.put(None)
                break
            run_callback(fn)
        return predicate()

    def run_forever(self) -> None:
        """Run callbacks until ``stop()`` is called.

        Callbacks posted before ``stop()`` still run.
        """
        while (fn := self._queue.get()) is not None:
            run_callback(fn)

    def stop(self) -> None:
        """Ask the draining loop to return.

        The request stays queued until ``run_forever`` consumes it, so
        ``run_pending`` and ``run_until`` also return early while it is pending.
        """
        self._queue.put(None)


class SerialQueueContext:
    """A single dedicated thread that runs callbacks one at a time, in order."""

    def __init__(self, name: str = "nimbus-callbacks") -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix=name)
        self._thread_id: int | None = None

    def post(self, fn: Job) -> None:
        self._executor.submit(self._run, fn)

    def close(self, wait: bool = True) -> None:
        """Stop accepting callbacks; with ``wait``, let the queued ones finish first.

        Called from one of its own callbacks, ``close`` never waits: the
        thread cannot join itself.
        """
        self._executor.shutdown(wait=wait and not self.is_current_thread())

    def is_current_thread(self) -> bool:
        return threading.get_ident() == self._thread_id

    def _run(self, fn: Job) -> None:
        self._thread_id = threading.get_ident()
        run_callback(fn)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *_: object) -> None:
        self.close()


class AsyncioLoopContext:
    """Runs callbacks on an asyncio event loop, posted from any thread."""

    def __init__(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def post(self, fn: Job) -> None:
        self._loop.call_soon_threadsafe(run_callback, fn)
