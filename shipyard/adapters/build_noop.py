from __future__ import annotations

from dataclasses import dataclass

from shipyard.core.models import PublishableUnit


@dataclass
class NoopBuildStep:
    def build(self, unit: PublishableUnit) -> None:
        """Packaging is owned by cargo itself; nothing to prepare locally."""
        return None
