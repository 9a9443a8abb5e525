from __future__ import annotations

import heapq
from typing import Sequence

from shipyard.core.errors import CycleError, DuplicateUnitError, UnknownDependencyError
from shipyard.core.models import PublishableUnit, ReleasePlan


class PackageGraph:
    """Declared dependencies between publishable units.

    The graph is validated on construction: duplicate names and dependencies
    on undeclared units are rejected before any ordering is attempted.
    """
    def __init__(self, units: Sequence[PublishableUnit]) -> None:
        self.units = tuple(units)
        self._index: dict[str, int] = {}
        for position, unit in enumerate(self.units):
            if unit.name in self._index:
                raise DuplicateUnitError(unit.name)
            self._index[unit.name] = position
        for unit in self.units:
            for dependency in unit.dependencies:
                if dependency not in self._index:
                    raise UnknownDependencyError(unit.name, dependency)

    def dependencies_of(self, name: str) -> list[str]:
        unit = self.units[self._index[name]]
        return list(dict.fromkeys(unit.dependencies))

    def dependents_of(self, name: str) -> list[str]:
        return [unit.name for unit in self.units if name in unit.dependencies]

    def plan(self) -> ReleasePlan:
        """Return a topological order, breaking ties by declaration order.

        Raises:
            CycleError: When the dependency relation is not acyclic. The
                named unit is guaranteed to lie on a cycle.
        """
        remaining = {unit.name: len(self.dependencies_of(unit.name)) for unit in self.units}
        ready = [self._index[name] for name, count in remaining.items() if count == 0]
        heapq.heapify(ready)
        ordered: list[PublishableUnit] = []

        while ready:
            unit = self.units[heapq.heappop(ready)]
            ordered.append(unit)
            del remaining[unit.name]
            for dependent in self.dependents_of(unit.name):
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    heapq.heappush(ready, self._index[dependent])

        if remaining:
            raise CycleError(self._find_cycle_member(set(remaining)))
        return ReleasePlan(units=tuple(ordered))

    def _find_cycle_member(self, blocked: set[str]) -> str:
        # Every blocked unit has at least one blocked dependency, so walking
        # dependencies must eventually revisit a unit that sits on a cycle.
        current = min(blocked, key=self._index.__getitem__)
        seen: set[str] = set()
        while current not in seen:
            seen.add(current)
            current = next(dep for dep in self.dependencies_of(current) if dep in blocked)
        return current


def build_plan(units: Sequence[PublishableUnit]) -> ReleasePlan:
    """Order units so each one follows everything it depends on.

    Args:
        units (Sequence[PublishableUnit]): Units in declaration order.

    Returns:
        ReleasePlan: Deterministic publish order for the unit set.
    """
    return PackageGraph(units).plan()
