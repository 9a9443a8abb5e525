from __future__ import annotations

import signal
import threading

import structlog


logger = structlog.get_logger(__name__)


class CancelToken:
    """Between-units cancellation flag.

    An in-flight publish is never interrupted; the orchestrator checks the flag
    before starting each unit and waiters may block on it.
    """
    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float) -> bool:
        """Block up to ``timeout`` seconds; True when cancelled meanwhile."""
        return self._event.wait(timeout)


def install_signal_handlers(token: CancelToken) -> None:
    """Route SIGINT/SIGTERM to the cancel token instead of raising."""

    def _handler(signum: int, _frame: object) -> None:
        name = signal.Signals(signum).name
        logger.warning("cancel_requested", signal=name)
        token.cancel(f"interrupted by {name}")

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
