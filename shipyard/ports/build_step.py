from __future__ import annotations

from typing import Protocol

from shipyard.core.models import PublishableUnit


class BuildStep(Protocol):
    """External packaging collaborator invoked before each publish."""
    def build(self, unit: PublishableUnit) -> None:
        """Prepare ``unit`` for publishing; raise BuildError on failure."""
        ...
