import itertools

import pytest

from shipyard.core.errors import CycleError, DuplicateUnitError, UnknownDependencyError
from shipyard.core.graph import PackageGraph, build_plan
from shipyard.core.models import PublishableUnit


def _unit(name: str, *deps: str) -> PublishableUnit:
    return PublishableUnit(name=name, location=f"{name}/Cargo.toml", dependencies=tuple(deps))


def _assert_dependencies_first(plan) -> None:
    position = {name: index for index, name in enumerate(plan.names())}
    for unit in plan:
        for dep in unit.dependencies:
            assert position[dep] < position[unit.name]


def test_release_units_publish_in_dependency_order(release_units) -> None:
    plan = build_plan(release_units)

    assert plan.names() == ["manifest", "convert", "runtime"]
    assert plan[2].verify is False
    assert plan.is_last(2)
    assert not plan.is_last(1)


def test_order_is_independent_of_declaration_order_for_chains(release_units) -> None:
    for permutation in itertools.permutations(release_units):
        plan = build_plan(list(permutation))
        assert plan.names() == ["manifest", "convert", "runtime"]


def test_ties_follow_declaration_order() -> None:
    units = [_unit("zeta"), _unit("alpha"), _unit("mid", "zeta"), _unit("beta")]

    plan = build_plan(units)

    assert plan.names() == ["zeta", "alpha", "mid", "beta"]


def test_ready_dependent_does_not_jump_earlier_declared_unit() -> None:
    units = [_unit("a"), _unit("b", "c"), _unit("c"), _unit("d")]

    plan = build_plan(units)

    assert plan.names() == ["a", "c", "b", "d"]


def test_plan_is_deterministic() -> None:
    units = [_unit("core"), _unit("x", "core"), _unit("y", "core"), _unit("z", "x", "y"), _unit("w")]

    plans = {tuple(build_plan(units).names()) for _ in range(20)}

    assert len(plans) == 1
    _assert_dependencies_first(build_plan(units))


def test_diamond_keeps_dependencies_first() -> None:
    units = [_unit("top", "left", "right"), _unit("left", "base"), _unit("right", "base"), _unit("base")]

    plan = build_plan(units)

    assert plan.names() == ["base", "left", "right", "top"]
    _assert_dependencies_first(plan)


def test_cycle_raises_and_names_member() -> None:
    units = [_unit("a", "b"), _unit("b", "c"), _unit("c", "a")]

    with pytest.raises(CycleError) as exc:
        build_plan(units)

    assert exc.value.unit in {"a", "b", "c"}


def test_cycle_member_excludes_units_downstream_of_cycle() -> None:
    units = [_unit("tail", "b"), _unit("a", "b"), _unit("b", "a")]

    with pytest.raises(CycleError) as exc:
        build_plan(units)

    assert exc.value.unit in {"a", "b"}


def test_self_dependency_is_a_cycle() -> None:
    with pytest.raises(CycleError) as exc:
        build_plan([_unit("solo", "solo")])

    assert exc.value.unit == "solo"


def test_unknown_dependency_rejected() -> None:
    with pytest.raises(UnknownDependencyError) as exc:
        build_plan([_unit("convert", "manifest")])

    assert exc.value.unit == "convert"
    assert exc.value.dependency == "manifest"


def test_duplicate_unit_rejected() -> None:
    with pytest.raises(DuplicateUnitError):
        build_plan([_unit("manifest"), _unit("manifest")])


def test_dependents_lookup(release_units) -> None:
    graph = PackageGraph(release_units)

    assert graph.dependents_of("manifest") == ["convert", "runtime"]
    assert graph.dependents_of("runtime") == []
