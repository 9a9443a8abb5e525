from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from shipyard.core.credentials import Credential
from shipyard.core.models import PublishableUnit, PublishOutcome


logger = structlog.get_logger(__name__)


@dataclass
class DryRunPublisher:
    published: list[str] = field(default_factory=list)

    def publish(self, unit: PublishableUnit, token: Credential) -> PublishOutcome:
        """Log the publish that would happen and report success."""
        logger.info("dry_run_publish", unit=unit.name, location=unit.location, verify=unit.verify)
        self.published.append(unit.name)
        return PublishOutcome.published()
