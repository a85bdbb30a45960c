# tests/test_resistance.py
import pytest

from circuitry_core import ParallelNode, SeriesNode
from circuitry_core.data_structures import CircuitNetwork, NodeKind
from circuitry_core.solver import DomainError, MissingDataError, ResistanceResolver

from conftest import R, leaf, make_problem


def resolver_for(problem):
    return ResistanceResolver(problem.arena, problem.component_map())


class TestCircuitNetwork:

    def test_indices_are_assigned_in_pre_order(self, ladder_problem):
        arena = ladder_problem.arena
        assert len(arena) == 6
        assert arena.root.kind is NodeKind.SERIES
        assert arena.root.children == (1, 2, 5)
        assert arena[2].kind is NodeKind.PARALLEL
        assert arena[2].children == (3, 4)
        assert [node.component_id for node in arena.leaves()] == ["R1", "R2", "R3", "R4"]

    def test_unknown_node_type_is_rejected(self):
        with pytest.raises(TypeError):
            CircuitNetwork.from_tree("R1")

    def test_describe_names_nodes(self, ladder_problem):
        arena = ladder_problem.arena
        assert arena[1].describe() == "component 'R1'"
        assert arena[2].describe() == "parallel 'bank'"


class TestResistanceResolver:

    def test_series_resistances_add(self, series_problem):
        assert resolver_for(series_problem).resolve() == pytest.approx(60.0)

    def test_two_equal_parallel_branches_halve(self, parallel_problem):
        assert resolver_for(parallel_problem).resolve() == pytest.approx(50.0)

    def test_nested_ladder(self, ladder_problem):
        resolver = resolver_for(ladder_problem)
        assert resolver.resolve() == pytest.approx(275.0)
        assert resolver.resolve(2) == pytest.approx(100.0)

    def test_every_visited_node_is_cached(self, ladder_problem):
        resolver = resolver_for(ladder_problem)
        resolver.resolve()
        assert resolver.cached_indices() == frozenset(range(len(ladder_problem.arena)))

    def test_structurally_equal_subtrees_are_cached_separately(self):
        # Both groups are ParallelNode('g', [R?, R?]) in shape, but hold different values.
        problem = make_problem(
            SeriesNode("main", [
                ParallelNode("g", [leaf("R1"), leaf("R2")]),
                ParallelNode("g", [leaf("R3"), leaf("R4")]),
            ]),
            {"R1": 100.0, "R2": 100.0, "R3": 30.0, "R4": 60.0},
        )
        resolver = resolver_for(problem)
        assert resolver.resolve() == pytest.approx(50.0 + 20.0)
        assert resolver.resolve(1) == pytest.approx(50.0)
        assert resolver.resolve(4) == pytest.approx(20.0)

    def test_authored_values_win_over_givens(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1")]),
            {"R1": 10.0},
            load_values={"R1": {R: 40.0}},
        )
        assert resolver_for(problem).resolve() == pytest.approx(40.0)

    def test_leaf_without_resistance_raises_missing_data(self, problem_factory):
        problem = problem_factory(SeriesNode("main", [leaf("R1"), leaf("R2")]), {"R1": 10.0, "R2": None})
        with pytest.raises(MissingDataError) as excinfo:
            resolver_for(problem).resolve()
        assert "R2" in excinfo.value.element

    def test_zero_resistance_leaf_raises_missing_data(self, problem_factory):
        problem = problem_factory(SeriesNode("main", [leaf("R1")]), {"R1": 0.0})
        with pytest.raises(MissingDataError):
            resolver_for(problem).resolve()

    def test_unknown_leaf_raises_missing_data(self, problem_factory):
        problem = problem_factory(SeriesNode("main", [leaf("R1"), leaf("R7")]), {"R1": 10.0})
        with pytest.raises(MissingDataError) as excinfo:
            resolver_for(problem).resolve()
        assert "R7" in str(excinfo.value)

    def test_empty_parallel_group_raises_domain_error(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), ParallelNode("void", [])]),
            {"R1": 10.0},
        )
        with pytest.raises(DomainError) as excinfo:
            resolver_for(problem).resolve()
        assert excinfo.value.node == "parallel 'void'"

    def test_shorted_parallel_branch_raises_domain_error(self, problem_factory):
        # An empty series group has zero resistance and shorts the parallel group.
        problem = problem_factory(
            ParallelNode("bank", [leaf("R1"), SeriesNode("short", [])]),
            {"R1": 10.0},
        )
        with pytest.raises(DomainError) as excinfo:
            resolver_for(problem).resolve()
        assert "series 'short'" in excinfo.value.details
        assert "Invalid Parallel Branch" in excinfo.value.get_diagnostic_report()
