from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class NoopWaiter:
    calls: list[float] = field(default_factory=list)

    def await_propagation(self, duration: float) -> None:
        """Record the requested wait without blocking; used for dry runs and tests."""
        self.calls.append(duration)
