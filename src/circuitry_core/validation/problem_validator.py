# src/circuitry_core/validation/problem_validator.py
import logging
from collections import Counter
from typing import List, Optional

import numpy as np

from ..config import CoreConfig
from ..data_structures import (
    SOURCE_ROW_ALIAS,
    TOTALS_ROW_ID,
    MetricKey,
    NodeKind,
    PartialMetrics,
    Problem,
)
from ..solver.execution import solve
from ..solver.metrics import find_disagreements, merge_metrics
from ..solver.results import SolveResult
from .issue_codes import ProblemIssueCode
from .issues import ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)

_DRIVING_METRICS = (MetricKey.VOLTAGE, MetricKey.CURRENT, MetricKey.POWER)


class ProblemValidator:
    """
    Checks the content of one practice problem before it reaches a learner.

    Structural checks run first (ids, network shape, resistances, target row). Only
    when none of them reports an ERROR is the problem solved, and the authored
    values are then compared against the solved circuit. Authored values that
    would not themselves be graded correct are reported as GIVEN_MISMATCH.
    """

    def __init__(self, problem: Problem, config: Optional[CoreConfig] = None):
        if not isinstance(problem, Problem):
            raise TypeError("ProblemValidator requires a Problem instance.")
        self.problem = problem
        self.config = config or CoreConfig()
        self.issues: List[ValidationIssue] = []

    def validate(self) -> List[ValidationIssue]:
        """
        Runs every check and returns all issues found (errors, warnings and info).
        The caller decides whether ERROR-level issues halt loading.
        """
        self.issues = []
        logger.debug(f"Validating problem '{self.problem.id}'...")

        self._check_component_ids()
        self._check_network()
        self._check_resistances()
        self._check_target_row()
        self._check_totals_determined()

        if not self.has_errors:
            self._check_against_solution()

        if self.issues:
            errors = sum(1 for i in self.issues if i.level == ValidationIssueLevel.ERROR)
            logger.debug(f"Validation of '{self.problem.id}' found {len(self.issues)} issue(s), {errors} error(s).")
        return self.issues

    @property
    def has_errors(self) -> bool:
        return any(issue.level == ValidationIssueLevel.ERROR for issue in self.issues)

    def _add_issue(self, level: ValidationIssueLevel, code_enum: ProblemIssueCode, element: Optional[str] = None, **kwargs):
        self.issues.append(ValidationIssue(
            level=level,
            code=code_enum.code,
            message=code_enum.format_message(**kwargs),
            problem_id=self.problem.id,
            element=element,
            details=kwargs,
        ))

    # --- Structural Checks ---

    def _check_component_ids(self):
        ids = [self.problem.source.id] + [c.id for c in self.problem.components]
        for component_id, count in Counter(ids).items():
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.COMP_DUPLICATE_ID,
                                element=component_id, component_id=component_id)

        for component_id in ids:
            if component_id == TOTALS_ROW_ID:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.COMP_RESERVED_ID,
                                element=component_id, component_id=component_id, row="totals")
        for component in self.problem.components:
            if component.id == SOURCE_ROW_ALIAS and self.problem.source.id != SOURCE_ROW_ALIAS:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.COMP_RESERVED_ID,
                                element=component.id, component_id=component.id, row="source")

    def _check_network(self):
        network = self.problem.arena
        load_ids = {c.id for c in self.problem.components}

        for node in network.internal_nodes():
            if not node.children:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.NET_EMPTY_NODE,
                                element=node.describe(), node=node.describe().capitalize())
            elif len(node.children) == 1:
                self._add_issue(ValidationIssueLevel.INFO, ProblemIssueCode.NET_SINGLE_CHILD,
                                element=node.describe(), node=node.describe().capitalize())

        node_id_counts = Counter(node.node_id for node in network.internal_nodes() if node.node_id)
        for node_id, count in node_id_counts.items():
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.NET_DUPLICATE_NODE_ID,
                                element=node_id, node_id=node_id, count=count)

        leaf_counts = Counter(leaf.component_id for leaf in network.leaves())
        for component_id, count in leaf_counts.items():
            if component_id not in load_ids:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.NET_UNKNOWN_LEAF,
                                element=component_id, component_id=component_id)
            if count > 1:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.NET_DUPLICATE_LEAF,
                                element=component_id, component_id=component_id, count=count)

        for component in self.problem.components:
            if component.id not in leaf_counts:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.COMP_NOT_IN_NETWORK,
                                element=component.id, component_id=component.id)

    def _check_resistances(self):
        for component in self.problem.components:
            resistance = component.values.get(MetricKey.RESISTANCE, component.givens.get(MetricKey.RESISTANCE))
            if resistance is None or not np.isfinite(resistance) or resistance <= 0:
                self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.COMP_NO_RESISTANCE,
                                element=component.id, component_id=component.id, resistance=resistance)

    def _check_target_row(self):
        row_id = self.problem.target_metric.row_id
        valid_rows = set(self.problem.row_ids()) | {SOURCE_ROW_ALIAS}
        if row_id not in valid_rows:
            self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.TARGET_UNKNOWN_ROW,
                            element=row_id, row_id=row_id)

    def _check_totals_determined(self):
        known = self.problem.source.values
        if not any(key in known for key in _DRIVING_METRICS):
            self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.TOTALS_UNDERDETERMINED,
                            element=self.problem.source.id)

    # --- Checks Against the Solved Circuit ---

    def _check_against_solution(self):
        outcome = solve(self.problem, self.config.solver)
        if not outcome.ok:
            self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.SOLVE_FAILED,
                            element=self.problem.id, message=outcome.message)
            return

        result = outcome.result
        authored_totals = merge_metrics(self.problem.totals_givens, self.problem.source.values)
        self._compare(
            "the circuit totals", {MetricKey.RESISTANCE: result.equivalent_resistance},
            authored_totals, element=TOTALS_ROW_ID,
        )
        self._compare("the circuit totals", result.totals.as_dict(), self.problem.totals_givens, element=TOTALS_ROW_ID)

        for component in self.problem.components:
            solved = result.components.get(component.id)
            if solved is None:
                continue
            authored = merge_metrics(component.givens, component.values)
            self._compare(f"component '{component.id}'", solved.as_dict(), authored, element=component.id)

        self._check_target_value(result)

    def _compare(self, row: str, reference: PartialMetrics, authored: PartialMetrics, element: str):
        rtol = self.config.grading.relative_tolerance
        for key, value in find_disagreements(reference, authored, rtol).items():
            self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.GIVEN_MISMATCH, element=element,
                            metric=key.value, row=row, authored=f"{value:.6g}", solved=f"{reference[key]:.6g}")

    def _check_target_value(self, result: SolveResult):
        target = self.problem.target_metric
        value = result.value_for(target.row_id, target.key)
        if value is None or not np.isfinite(value):
            self._add_issue(ValidationIssueLevel.ERROR, ProblemIssueCode.SOLVE_FAILED, element=target.row_id,
                            message=f"the target {target.key.value} of '{target.row_id}' has no finite value")
