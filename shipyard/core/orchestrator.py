from __future__ import annotations

import structlog

from shipyard.core.cancellation import CancelToken
from shipyard.core.credentials import Credential
from shipyard.core.errors import AuthError, BuildError
from shipyard.core.models import (
    PipelineRun,
    PublishableUnit,
    PublishOutcome,
    PublishStatus,
    ReleasePlan,
    RunState,
)
from shipyard.ports.build_step import BuildStep
from shipyard.ports.publisher import Publisher
from shipyard.ports.waiter import PropagationWaiter


logger = structlog.get_logger(__name__)

DEFAULT_PROPAGATION_DELAY_S = 10.0


class Orchestrator:
    def __init__(
        self,
        publisher: Publisher,
        waiter: PropagationWaiter,
        build_step: BuildStep | None = None,
        propagation_delay: float = DEFAULT_PROPAGATION_DELAY_S,
        cancel: CancelToken | None = None,
    ) -> None:
        self.publisher = publisher
        self.waiter = waiter
        self.build_step = build_step
        self.propagation_delay = propagation_delay
        self.cancel = cancel or CancelToken()

    def run(self, plan: ReleasePlan, token: Credential) -> PipelineRun:
        """Publish every unit of ``plan`` in order, stopping at the first failure.

        Args:
            plan (ReleasePlan): Validated publish order.
            token (Credential): Registry credential handed to each publish.

        Returns:
            PipelineRun: Final run record, either COMPLETED or ABORTED.

        Raises:
            AuthError: When the credential is empty; raised before any unit
                is attempted.

        Notes:
            Cancellation is only honoured between units. A publish already in
            flight is allowed to finish so the registry never ends up in an
            ambiguous state.
        """
        if token is None or not token.value:
            raise AuthError("Registry credential is empty")

        run = PipelineRun(plan=plan)
        run.state = RunState.RUNNING
        logger.info("release_started", units=plan.names())

        for index, unit in enumerate(plan):
            run.current_index = index
            if self.cancel.cancelled:
                return self._abort(run, unit.name, self.cancel.reason or "cancelled", attempted=False)

            outcome = self._publish(unit, token)
            run.record(unit, outcome)
            if not outcome.ok:
                return self._abort(run, unit.name, outcome.reason or "publish failed", attempted=True)

            if outcome.status == PublishStatus.ALREADY_PUBLISHED:
                logger.info("unit_already_published", unit=unit.name)
            else:
                logger.info("unit_published", unit=unit.name, attempts=outcome.attempts)

            if not plan.is_last(index):
                logger.info("propagation_wait", unit=unit.name, seconds=self.propagation_delay)
                self.waiter.await_propagation(self.propagation_delay)

        run.current_index = len(plan)
        run.state = RunState.COMPLETED
        logger.info("release_completed", published=run.published_units())
        return run

    def _publish(self, unit: PublishableUnit, token: Credential) -> PublishOutcome:
        logger.info("unit_publishing", unit=unit.name, location=unit.location, verify=unit.verify)
        if self.build_step is not None:
            try:
                self.build_step.build(unit)
            except BuildError as exc:
                return PublishOutcome.failed(f"build failed: {exc}", attempts=0)
        return self.publisher.publish(unit, token)

    @staticmethod
    def _abort(run: PipelineRun, unit_name: str, reason: str, attempted: bool) -> PipelineRun:
        run.state = RunState.ABORTED
        run.abort_reason = reason
        if attempted:
            run.failed_unit = unit_name
        logger.error(
            "release_aborted",
            unit=unit_name,
            reason=reason,
            published=run.published_units(),
        )
        return run
