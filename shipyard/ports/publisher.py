from __future__ import annotations

from typing import Protocol

from shipyard.core.credentials import Credential
from shipyard.core.models import PublishableUnit, PublishOutcome


class Publisher(Protocol):
    """Registry boundary for publishing a single unit."""
    def publish(self, unit: PublishableUnit, token: Credential) -> PublishOutcome:
        """Publish one unit and report how the registry responded.

        Args:
            unit (PublishableUnit): Unit to publish; ``unit.verify`` controls
                registry-side validation.
            token (Credential): Read-only registry credential.

        Returns:
            PublishOutcome: Published, already published, or failed. Transient
                faults are retried before a failure is returned.
        """
        ...
