# src/circuitry_core/validation/__init__.py
import logging
logger = logging.getLogger(__name__)

from .issues import ValidationIssue, ValidationIssueLevel
from .issue_codes import ProblemIssueCode
from .problem_validator import ProblemValidator
from .exceptions import ProblemValidationError

__all__ = [
    "ValidationIssue",
    "ValidationIssueLevel",
    "ProblemIssueCode",
    "ProblemValidator",
    "ProblemValidationError",
]
