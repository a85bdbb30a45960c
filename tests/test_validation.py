# tests/test_validation.py
import pytest

from circuitry_core import ParallelNode, SeriesNode
from circuitry_core.validation import (
    ProblemIssueCode,
    ProblemValidationError,
    ProblemValidator,
    ValidationIssueLevel,
)

from conftest import I, R, V, leaf, make_problem


def codes(issues, level=ValidationIssueLevel.ERROR):
    return {issue.code for issue in issues if issue.level == level}


class TestProblemValidator:

    def test_builtin_problems_are_clean(self, builtin_catalog):
        for problem in builtin_catalog:
            issues = ProblemValidator(problem).validate()
            assert not codes(issues), [str(issue) for issue in issues]

    def test_requires_a_problem(self):
        with pytest.raises(TypeError):
            ProblemValidator("series-square-01")

    def test_consistent_authored_values_pass(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2")]),
            {"R1": 10.0, "R2": 20.0},
            source_givens={V: 12.0},
            load_givens={"R1": {I: 0.4}},
            totals_givens={R: 30.0},
        )
        assert not codes(ProblemValidator(problem).validate())

    def test_given_mismatch_on_a_load(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2")]),
            {"R1": 10.0, "R2": 20.0},
            source_givens={V: 12.0},
            load_givens={"R1": {V: 6.0}},
        )
        issues = ProblemValidator(problem).validate()
        assert codes(issues) == {ProblemIssueCode.GIVEN_MISMATCH.code}
        mismatch = next(issue for issue in issues if issue.code == ProblemIssueCode.GIVEN_MISMATCH.code)
        assert mismatch.element == "R1"
        assert mismatch.details["metric"] == "voltage"

    def test_given_mismatch_on_totals_resistance(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2")]),
            {"R1": 10.0, "R2": 20.0},
            totals_givens={R: 45.0},
        )
        assert ProblemIssueCode.GIVEN_MISMATCH.code in codes(ProblemValidator(problem).validate())

    def test_structural_errors(self):
        problem = make_problem(
            SeriesNode("main", [
                leaf("R1"),
                leaf("R1"),
                leaf("R9"),
                ParallelNode("void", []),
            ]),
            {"R1": 10.0, "R2": 20.0, "totals": 5.0},
            target=("R42", "current"),
        )
        found = codes(ProblemValidator(problem).validate())
        assert {
            ProblemIssueCode.NET_DUPLICATE_LEAF.code,
            ProblemIssueCode.NET_UNKNOWN_LEAF.code,
            ProblemIssueCode.NET_EMPTY_NODE.code,
            ProblemIssueCode.COMP_NOT_IN_NETWORK.code,
            ProblemIssueCode.COMP_RESERVED_ID.code,
            ProblemIssueCode.TARGET_UNKNOWN_ROW.code,
        } <= found
        # Structural errors stop the validator before it tries to solve.
        assert ProblemIssueCode.SOLVE_FAILED.code not in found

    def test_duplicate_component_id(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1")]),
            {"R1": 10.0},
            source_id="R1",
        )
        assert ProblemIssueCode.COMP_DUPLICATE_ID.code in codes(ProblemValidator(problem).validate())

    def test_missing_resistance_and_underdetermined_totals(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2")]),
            {"R1": 10.0, "R2": None},
            source_givens={},
        )
        found = codes(ProblemValidator(problem).validate())
        assert ProblemIssueCode.COMP_NO_RESISTANCE.code in found
        assert ProblemIssueCode.TOTALS_UNDERDETERMINED.code in found

    def test_totals_givens_do_not_determine_the_circuit(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2")]),
            {"R1": 10.0, "R2": 20.0},
            source_givens={},
            totals_givens={I: 0.4},
        )
        assert ProblemIssueCode.TOTALS_UNDERDETERMINED.code in codes(ProblemValidator(problem).validate())

    def test_rounded_totals_resistance_is_accepted(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), leaf("R2"), leaf("R3")]),
            {"R1": 10.0, "R2": 20.0, "R3": 30.0},
            source_givens={V: 12.0},
            totals_givens={R: 60.5},
        )
        assert not codes(ProblemValidator(problem).validate())

    def test_repeated_group_id_is_an_error(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [
                ParallelNode("bank", [leaf("R1"), leaf("R2")]),
                ParallelNode("bank", [leaf("R3"), leaf("R4")]),
            ]),
            {"R1": 100.0, "R2": 100.0, "R3": 10.0, "R4": 10.0},
        )
        issues = ProblemValidator(problem).validate()
        assert codes(issues) == {ProblemIssueCode.NET_DUPLICATE_NODE_ID.code}
        duplicate = next(issue for issue in issues if issue.code == ProblemIssueCode.NET_DUPLICATE_NODE_ID.code)
        assert duplicate.element == "bank"
        assert duplicate.details["count"] == 2

    def test_single_child_group_is_informational(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), ParallelNode("lonely", [leaf("R2")])]),
            {"R1": 10.0, "R2": 20.0},
        )
        issues = ProblemValidator(problem).validate()
        assert not codes(issues)
        assert ProblemIssueCode.NET_SINGLE_CHILD.code in codes(issues, ValidationIssueLevel.INFO)

    def test_validation_error_collects_only_errors(self, problem_factory):
        problem = problem_factory(
            SeriesNode("main", [leaf("R1"), ParallelNode("lonely", [leaf("R2")])]),
            {"R1": 10.0, "R2": 20.0},
            target=("nowhere", "current"),
        )
        issues = ProblemValidator(problem).validate()
        error = ProblemValidationError(issues)
        assert len(error.issues) == 1
        assert error.issues[0].code == ProblemIssueCode.TARGET_UNKNOWN_ROW.code
        report = error.get_diagnostic_report()
        assert "Problem Content Validation Error" in report
        assert "test-problem" in report
