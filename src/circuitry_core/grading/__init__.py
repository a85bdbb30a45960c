# src/circuitry_core/grading/__init__.py
from .exceptions import InputParseError, ProblemUnavailableError
from .parsing import parse_metric_input
from .tolerance import within_tolerance
from .worksheet import (
    CellStatus,
    Worksheet,
    WorksheetCell,
    build_baseline,
    grade_input,
    is_complete,
    on_cell_edit,
)
from .session import PracticeSession

__all__ = [
    # Exceptions
    "InputParseError",
    "ProblemUnavailableError",
    # Parsing & Tolerance
    "parse_metric_input",
    "within_tolerance",
    # Worksheet
    "CellStatus",
    "Worksheet",
    "WorksheetCell",
    "build_baseline",
    "grade_input",
    "on_cell_edit",
    "is_complete",
    # Session
    "PracticeSession",
]
