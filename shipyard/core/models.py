from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator


def _parse_flag(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in {"1", "true", "yes"}:
        return True
    if isinstance(value, str) and value.strip().lower() in {"0", "false", "no"}:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


class PublishStatus(str, Enum):
    PUBLISHED = "published"
    ALREADY_PUBLISHED = "already_published"
    FAILED = "failed"


class UnitStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    ALREADY_PUBLISHED = "already_published"
    FAILED = "failed"


class RunState(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    COMPLETED = "completed"
    ABORTED = "aborted"


@dataclass(frozen=True)
class PublishableUnit:
    """One independently versioned package in the release set."""
    name: str
    location: str
    dependencies: tuple[str, ...] = ()
    verify: bool = True

    @staticmethod
    def from_dict(data: dict) -> "PublishableUnit":
        dependencies = data.get("dependencies") or []
        if isinstance(dependencies, str):
            dependencies = [dependencies]
        return PublishableUnit(
            name=str(data["name"]),
            location=str(data.get("location") or f"{data['name']}/Cargo.toml"),
            dependencies=tuple(str(dep) for dep in dependencies),
            verify=_parse_flag(data.get("verify", True), "verify"),
        )


@dataclass(frozen=True)
class ReleasePlan:
    """Publish order where every dependency precedes its dependents."""
    units: tuple[PublishableUnit, ...]

    def names(self) -> list[str]:
        return [unit.name for unit in self.units]

    def is_last(self, index: int) -> bool:
        return index == len(self.units) - 1

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self) -> Iterator[PublishableUnit]:
        return iter(self.units)

    def __getitem__(self, index: int) -> PublishableUnit:
        return self.units[index]


@dataclass
class PublishOutcome:
    """Normalized registry response for a single publish call."""
    status: PublishStatus
    reason: str | None = None
    attempts: int = 1

    @property
    def ok(self) -> bool:
        return self.status in {PublishStatus.PUBLISHED, PublishStatus.ALREADY_PUBLISHED}

    @staticmethod
    def published(attempts: int = 1) -> "PublishOutcome":
        return PublishOutcome(status=PublishStatus.PUBLISHED, attempts=attempts)

    @staticmethod
    def already_published(attempts: int = 1) -> "PublishOutcome":
        return PublishOutcome(status=PublishStatus.ALREADY_PUBLISHED, attempts=attempts)

    @staticmethod
    def failed(reason: str, attempts: int = 1) -> "PublishOutcome":
        return PublishOutcome(status=PublishStatus.FAILED, reason=reason, attempts=attempts)


@dataclass
class UnitResult:
    status: UnitStatus = UnitStatus.PENDING
    reason: str | None = None
    attempts: int = 0


@dataclass
class PipelineRun:
    """Execution record for one pass over a ReleasePlan.

    Only the orchestrator mutates this, strictly left to right. Nothing is
    persisted between runs.
    """
    plan: ReleasePlan
    state: RunState = RunState.NOT_STARTED
    results: dict[str, UnitResult] = field(default_factory=dict)
    current_index: int = 0
    failed_unit: str | None = None
    abort_reason: str | None = None

    def __post_init__(self) -> None:
        if not self.results:
            self.results = {unit.name: UnitResult() for unit in self.plan}

    @property
    def is_success(self) -> bool:
        return self.state == RunState.COMPLETED

    def published_units(self) -> list[str]:
        return [
            name
            for name, result in self.results.items()
            if result.status in {UnitStatus.PUBLISHED, UnitStatus.ALREADY_PUBLISHED}
        ]

    def record(self, unit: PublishableUnit, outcome: PublishOutcome) -> None:
        self.results[unit.name] = UnitResult(
            status=UnitStatus(outcome.status.value),
            reason=outcome.reason,
            attempts=outcome.attempts,
        )
