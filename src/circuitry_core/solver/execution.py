# src/circuitry_core/solver/execution.py
"""
Provides the public API functions for solving practice problems.

`solve` is a Facade over the `SolveContext` / `SolveEngine` pair. It is the single
boundary at which every solver error is caught: callers receive a `SolveSuccess`
or a `SolveFailure`, never an exception, so they can call it on every UI refresh
and render an explicit "problem unavailable" state on failure.
"""
import logging
from typing import Optional

from ..config import SolverConfig
from ..data_structures import Problem
from ..errors import DiagnosableError, SolveError, format_diagnostic_report
from .context import SolveContext
from .engine import SolveEngine
from .results import SolveFailure, SolveOutcome, SolveResult, SolveSuccess

logger = logging.getLogger(__name__)


def solve(problem: Problem, config: Optional[SolverConfig] = None) -> SolveOutcome:
    """
    Solves a practice problem.

    The call is pure: it reads the problem, builds fresh scratch state, and returns
    a new result. Identical input always yields identical output.

    Args:
        problem: The problem to solve. It is never mutated.
        config: Optional solver numerics; defaults to `SolverConfig()`.

    Returns:
        `SolveSuccess` wrapping a `SolveResult`, or `SolveFailure` carrying a
        one-line message and the full diagnostic report.
    """
    effective_config = config if config is not None else SolverConfig()
    try:
        context = SolveContext(problem=problem, config=effective_config)
        result = SolveEngine(context).execute()
        logger.debug(f"Solved problem '{problem.id}': Req={result.equivalent_resistance:.6g} ohm")
        return SolveSuccess(result=result)

    except DiagnosableError as e:
        logger.warning(f"Failed to solve '{problem.id}': {e}")
        return SolveFailure(
            problem_id=problem.id,
            message=str(e),
            report=e.get_diagnostic_report(),
            error_type=type(e).__name__,
        )

    except Exception as e:
        logger.critical(f"An unexpected internal error occurred while solving '{problem.id}': {e}", exc_info=True)
        report = format_diagnostic_report(
            error_type=f"An Unexpected Solver Error Occurred ({type(e).__name__})",
            details=f"The solver encountered an unexpected internal error: {e}",
            suggestion="This may be a bug. Review the traceback and consider filing a bug report.",
            context={'problem': problem.id}
        )
        return SolveFailure(
            problem_id=problem.id,
            message=f"Unexpected solver error: {e}",
            report=report,
            error_type=type(e).__name__,
        )


def solve_or_raise(problem: Problem, config: Optional[SolverConfig] = None) -> SolveResult:
    """
    A convenience wrapper around `solve` for scripts and tests that prefer exceptions.

    Raises:
        SolveError: Carrying the failure's diagnostic report.
    """
    outcome = solve(problem, config)
    if not outcome.ok:
        raise SolveError(outcome.report)
    return outcome.result


def target_value(problem: Problem, result: SolveResult) -> Optional[float]:
    """Reads the problem's target metric (the "final answer") from a solve result."""
    target = problem.target_metric
    return result.value_for(target.row_id, target.key)
