from __future__ import annotations

import asyncio
import threading

from nimbus.dispatch import AsyncioLoopContext, MainThreadContext, SerialQueueContext, run_callback


def test_main_thread_context_does_not_run_on_post() -> None:
    context = MainThreadContext()
    calls: list[str] = []

    context.post(lambda: calls.append("first"))

    assert calls == []
    assert context.pending() == 1


def test_run_pending_runs_in_order_on_draining_thread() -> None:
    context = MainThreadContext()
    calls: list[tuple[str, int]] = []

    context.post(lambda: calls.append(("first", threading.get_ident())))
    context.post(lambda: calls.append(("second", threading.get_ident())))

    assert context.run_pending() == 2
    assert calls == [("first", threading.get_ident()), ("second", threading.get_ident())]
    assert context.pending() == 0


def test_run_pending_leaves_callbacks_posted_while_draining() -> None:
    context = MainThreadContext()
    calls: list[str] = []

    context.post(lambda: context.post(lambda: calls.append("later")))

    assert context.run_pending() == 1
    assert calls == []
    assert context.run_pending() == 1
    assert calls == ["later"]


def test_run_until_waits_for_callback_posted_from_worker() -> None:
    context = MainThreadContext()
    calls: list[int] = []

    worker = threading.Thread(target=lambda: context.post(lambda: calls.append(threading.get_ident())))
    worker.start()

    assert context.run_until(lambda: bool(calls), timeout=5)
    worker.join()
    assert calls == [threading.get_ident()]


def test_run_until_returns_false_on_timeout() -> None:
    context = MainThreadContext()

    assert context.run_until(lambda: False, timeout=0.05) is False


def test_run_forever_stops_when_asked() -> None:
    context = MainThreadContext()
    calls: list[str] = []

    def post_then_stop() -> None:
        context.post(lambda: calls.append("ran"))
        context.stop()

    worker = threading.Thread(target=post_then_stop)
    worker.start()
    context.run_forever()
    worker.join()

    assert calls == ["ran"]


def test_stop_seen_by_run_until_still_ends_run_forever() -> None:
    context = MainThreadContext()
    calls: list[str] = []

    context.post(lambda: calls.append("before"))
    context.stop()

    assert context.run_until(lambda: False, timeout=5) is False
    assert calls == ["before"]

    loop = threading.Thread(target=context.run_forever)
    loop.start()
    loop.join(5)
    assert not loop.is_alive()


def test_run_pending_stops_at_stop_request() -> None:
    context = MainThreadContext()

    context.post(lambda: None)
    context.stop()

    assert context.run_pending() == 1
    assert context.pending() == 1
    context.run_forever()
    assert context.pending() == 0


def test_failing_callback_is_logged_and_next_one_runs(log_messages: list[str]) -> None:
    context = MainThreadContext()
    calls: list[str] = []

    def fail() -> None:
        raise RuntimeError("boom")

    context.post(fail)
    context.post(lambda: calls.append("after"))
    context.run_pending()

    assert calls == ["after"]
    assert "Callback raised an exception" in log_messages


def test_run_callback_does_not_propagate(log_messages: list[str]) -> None:
    def fail() -> None:
        raise ValueError("bad")

    run_callback(fail)

    assert "Callback raised an exception" in log_messages


def test_serial_queue_runs_callbacks_in_order_on_one_thread() -> None:
    calls: list[tuple[int, int]] = []
    finished = threading.Event()

    with SerialQueueContext() as context:
        for index in range(5):
            context.post(lambda index=index: calls.append((index, threading.get_ident())))
        context.post(finished.set)
        assert finished.wait(5)

    assert [index for index, _ in calls] == [0, 1, 2, 3, 4]
    thread_ids = {thread_id for _, thread_id in calls}
    assert len(thread_ids) == 1
    assert threading.get_ident() not in thread_ids


def test_asyncio_context_runs_on_event_loop_thread() -> None:
    async def scenario() -> tuple[int, int]:
        loop = asyncio.get_running_loop()
        context = AsyncioLoopContext(loop)
        delivered: asyncio.Future[int] = loop.create_future()

        worker = threading.Thread(target=lambda: context.post(lambda: delivered.set_result(threading.get_ident())))
        worker.start()
        callback_thread = await asyncio.wait_for(delivered, timeout=5)
        worker.join()
        return callback_thread, threading.get_ident()

    callback_thread, loop_thread = asyncio.run(scenario())

    assert callback_thread == loop_thread
