from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from shipyard.core.cancellation import CancelToken


logger = structlog.get_logger(__name__)


@dataclass
class TimedWaiter:
    """Real propagation wait, cut short when the run is cancelled.

    An interrupted wait simply returns; the orchestrator sees the cancel flag
    before the next unit and aborts cleanly.
    """
    cancel: CancelToken = field(default_factory=CancelToken)

    def await_propagation(self, duration: float) -> None:
        if duration <= 0:
            return
        if self.cancel.wait(duration):
            logger.warning("propagation_wait_interrupted", seconds=duration)
