# src/circuitry_core/validation/exceptions.py
"""
Defines `ProblemValidationError`, raised when a problem's content has one or more
ERROR-level issues.
"""
from typing import List

from ..errors import DiagnosableError, format_diagnostic_report
from .issues import ValidationIssue, ValidationIssueLevel


class ProblemValidationError(DiagnosableError):
    """
    Container for every ERROR-level `ValidationIssue` found in a problem (or a whole
    catalog). Warnings and info messages passed in are dropped.
    """
    def __init__(self, issues: List[ValidationIssue]):
        self.issues: List[ValidationIssue] = [
            issue for issue in issues if issue.level == ValidationIssueLevel.ERROR
        ]
        if not self.issues:
            summary_message = "ProblemValidationError was raised with no error-level issues."
        else:
            summary_message = (
                f"Problem validation failed with {len(self.issues)} error(s):\n"
                + "\n".join(f"  - {issue}" for issue in self.issues)
            )
        super().__init__(summary_message)

    def get_diagnostic_report(self) -> str:
        details = (
            "One or more practice problems contain inconsistent or incomplete content.\n"
            f"Found {len(self.issues)} error(s). See details below:\n\n"
            + "\n".join(f"  - {issue}" for issue in self.issues)
        )
        first_issue = self.issues[0] if self.issues else None
        return format_diagnostic_report(
            error_type="Problem Content Validation Error",
            details=details,
            suggestion="Fix the listed problems in the catalog. Authored values must agree with the solved circuit.",
            context={
                'problem': first_issue.problem_id if first_issue else None,
                'component': first_issue.element if first_issue else None,
            }
        )
