# tests/conftest.py
import pytest

from circuitry_core import (
    Component,
    ComponentNode,
    ComponentRole,
    MetricKey,
    ParallelNode,
    Problem,
    SeriesNode,
    TargetMetric,
)
from circuitry_core.catalog import load_builtin_catalog

V, I, R, P = MetricKey.VOLTAGE, MetricKey.CURRENT, MetricKey.RESISTANCE, MetricKey.POWER


def leaf(component_id: str) -> ComponentNode:
    return ComponentNode(component_id=component_id)


def make_problem(
    network,
    resistances: dict,
    source_givens: dict = None,
    source_values: dict = None,
    totals_givens: dict = None,
    load_values: dict = None,
    load_givens: dict = None,
    target=("totals", "current"),
    problem_id: str = "test-problem",
    source_id: str = "battery",
) -> Problem:
    """
    Builds a problem programmatically.
    resistances: e.g. {"R1": 10, "R2": 20}; every load is given its resistance.
    load_values / load_givens: extra authored metrics per load id, merged on top.
    """
    load_values = load_values or {}
    load_givens = load_givens or {}
    components = []
    for component_id, resistance in resistances.items():
        givens = {R: resistance} if resistance is not None else {}
        givens.update(load_givens.get(component_id, {}))
        values = dict(givens)
        values.update(load_values.get(component_id, {}))
        components.append(Component(id=component_id, label=component_id, givens=givens, values=values))

    source_givens = {V: 24.0} if source_givens is None else source_givens
    source = Component(
        id=source_id, label="Battery", role=ComponentRole.SOURCE,
        givens=source_givens, values=source_values,
    )
    row_id, key = target
    return Problem(
        id=problem_id,
        title="Test Problem",
        source=source,
        components=components,
        network=network,
        target_metric=TargetMetric(row_id=row_id, key=MetricKey(key)),
        totals_givens=totals_givens or {},
    )


@pytest.fixture
def problem_factory():
    return make_problem


@pytest.fixture
def series_problem():
    """10 + 20 + 30 ohm in series across 12 V."""
    return make_problem(
        SeriesNode("main", [leaf("R1"), leaf("R2"), leaf("R3")]),
        {"R1": 10.0, "R2": 20.0, "R3": 30.0},
        source_givens={V: 12.0},
    )


@pytest.fixture
def parallel_problem():
    """Two 100 ohm branches across 10 V."""
    return make_problem(
        ParallelNode("bank", [leaf("R1"), leaf("R2")]),
        {"R1": 100.0, "R2": 100.0},
        source_givens={V: 10.0},
    )


@pytest.fixture
def ladder_problem():
    """30 V across R1=100 in series with (R2=150 || R3=300) and R4=75."""
    return make_problem(
        SeriesNode("ladder", [
            leaf("R1"),
            ParallelNode("bank", [leaf("R2"), leaf("R3")]),
            leaf("R4"),
        ]),
        {"R1": 100.0, "R2": 150.0, "R3": 300.0, "R4": 75.0},
        source_givens={V: 30.0},
        target=("R2", "current"),
    )


@pytest.fixture(scope="session")
def builtin_catalog():
    return load_builtin_catalog()
