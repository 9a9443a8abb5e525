import threading
import time

from shipyard.adapters.waiter_noop import NoopWaiter
from shipyard.adapters.waiter_timed import TimedWaiter
from shipyard.core.cancellation import CancelToken


def test_noop_waiter_records_without_blocking() -> None:
    waiter = NoopWaiter()

    waiter.await_propagation(10)
    waiter.await_propagation(10)

    assert waiter.calls == [10, 10]


def test_timed_waiter_blocks_for_duration() -> None:
    start = time.monotonic()

    TimedWaiter().await_propagation(0.05)

    assert time.monotonic() - start >= 0.04


def test_timed_waiter_returns_early_when_cancelled() -> None:
    cancel = CancelToken()
    timer = threading.Timer(0.05, cancel.cancel)
    timer.start()
    start = time.monotonic()

    TimedWaiter(cancel=cancel).await_propagation(5)

    assert time.monotonic() - start < 2
    assert cancel.cancelled
    timer.join()
