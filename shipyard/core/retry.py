from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ExponentialBackoff:
    """Bounded exponential backoff for transient registry faults.

    Delay = min(base_delay * multiplier ** retry, max_delay). ``max_attempts``
    counts the first try as well.
    """
    max_attempts: int = 3
    base_delay: float = 2.0
    max_delay: float = 30.0
    multiplier: float = 2.0

    def next_delay(self, retry: int) -> float:
        return min(self.base_delay * (self.multiplier ** retry), self.max_delay)

    def should_retry(self, attempt: int) -> bool:
        """Return True when another attempt fits in the budget.

        Args:
            attempt (int): Number of attempts already made (1-based).
        """
        return attempt < self.max_attempts
