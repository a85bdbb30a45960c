# src/circuitry_core/grading/exceptions.py
"""
Diagnosable exceptions of the worksheet grading engine.

`InputParseError` never escapes a cell edit: the engine catches it and marks the
cell `invalid`. `ProblemUnavailableError` is raised by the stateful session when
a learner edits the worksheet of a problem that could not be solved.
"""
from dataclasses import dataclass

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class InputParseError(DiagnosableError):
    """Raised when free-text learner input contains no usable number."""
    raw: str
    details: str

    def __str__(self):
        return f"Could not read a number from '{self.raw}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Unreadable Answer",
            details=self.details,
            suggestion="Type a number such as 12, 0.25 or 1.5e-3. Units after the number are ignored.",
            context={'user_input': self.raw}
        )


@dataclass()
class ProblemUnavailableError(DiagnosableError):
    """Raised when the active problem has no solution to grade against."""
    problem_id: str
    message: str

    def __str__(self):
        return f"Problem '{self.problem_id}' is unavailable: {self.message}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Problem Unavailable",
            details=f"The worksheet cannot be graded because the problem failed to solve.\n{self.message}",
            suggestion="Select another problem, or fix the problem content and reload the catalog.",
            context={'problem': self.problem_id}
        )
