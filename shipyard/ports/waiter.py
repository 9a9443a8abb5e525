from __future__ import annotations

from typing import Protocol


class PropagationWaiter(Protocol):
    """Waiting strategy for registry eventual consistency."""
    def await_propagation(self, duration: float) -> None:
        """Block until a freshly published unit should be resolvable.

        Args:
            duration (float): Seconds to wait.
        """
        ...
