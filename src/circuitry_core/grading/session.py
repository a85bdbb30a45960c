# src/circuitry_core/grading/session.py
import logging
from typing import List, Optional, Union

from ..config import CoreConfig
from ..data_structures import MetricKey, Problem
from ..formatting import format_metric_value
from ..solver.execution import solve, target_value
from ..solver.results import SolveOutcome, SolveResult
from ..walkthrough import SolutionStep, build_solution_steps
from .exceptions import ProblemUnavailableError
from .worksheet import Worksheet, build_baseline, on_cell_edit

logger = logging.getLogger(__name__)


class PracticeSession:
    """
    The stateful wrapper a UI drives: one active problem, its solve outcome and the
    current worksheet snapshot.

    Selecting a problem solves it once and builds a fresh baseline; the previous
    worksheet is discarded. When the solve fails the session is unavailable and
    carries the failure message instead of a worksheet.
    """

    def __init__(self, problem: Problem, config: Optional[CoreConfig] = None):
        self.config = config or CoreConfig()
        self.problem: Problem = problem
        self.outcome: Optional[SolveOutcome] = None
        self.worksheet: Optional[Worksheet] = None
        self.select_problem(problem)

    def select_problem(self, problem: Problem):
        self.problem = problem
        self.outcome = solve(problem, self.config.solver)
        if self.outcome.ok:
            self.worksheet = build_baseline(problem, self.outcome.result, self.config.grading)
            logger.info(f"Selected practice problem '{problem.id}'.")
        else:
            self.worksheet = None
            logger.warning(f"Practice problem '{problem.id}' is unavailable: {self.outcome.message}")

    def reset(self):
        """Discards the learner's entries and restores the baseline worksheet."""
        if self.is_available:
            self.worksheet = build_baseline(self.problem, self.outcome.result, self.config.grading)

    @property
    def is_available(self) -> bool:
        return self.outcome is not None and self.outcome.ok

    @property
    def failure_message(self) -> Optional[str]:
        if self.outcome is None or self.outcome.ok:
            return None
        return self.outcome.message

    @property
    def result(self) -> Optional[SolveResult]:
        return self.outcome.result if self.is_available else None

    @property
    def is_complete(self) -> bool:
        return self.worksheet is not None and self.worksheet.complete

    def edit(self, row_id: str, key: Union[MetricKey, str], raw: str) -> Worksheet:
        """
        Grades one learner entry and stores the new snapshot.

        Raises:
            ProblemUnavailableError: If the active problem failed to solve.
        """
        if not self.is_available:
            raise ProblemUnavailableError(problem_id=self.problem.id, message=self.failure_message or "")
        self.worksheet = on_cell_edit(self.worksheet, row_id, key, raw)
        if self.worksheet.complete:
            logger.info(f"Worksheet for '{self.problem.id}' is complete.")
        return self.worksheet

    def revealed_answer(self) -> Optional[str]:
        """The formatted final answer, revealed only once the worksheet is complete."""
        if not self.is_complete:
            return None
        value = target_value(self.problem, self.outcome.result)
        return format_metric_value(value, self.problem.target_metric.key)

    def steps(self) -> List[SolutionStep]:
        if not self.is_available:
            return []
        return build_solution_steps(self.problem, self.outcome.result)
