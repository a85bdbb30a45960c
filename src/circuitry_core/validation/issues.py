# src/circuitry_core/validation/issues.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ValidationIssueLevel(Enum):
    """Severity level of a validation issue."""
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"

    def __str__(self):
        return self.value


@dataclass
class ValidationIssue:
    """One problem found while checking the content of a practice problem."""
    level: ValidationIssueLevel
    code: str
    message: str
    problem_id: Optional[str] = None
    element: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        parts = [f"[{self.level.name} - {self.code}]"]
        if self.problem_id:
            parts.append(f"Problem: {self.problem_id}")
        if self.element:
            parts.append(f"Element: {self.element}")
        parts.append(f"Message: {self.message}")
        return " ".join(parts)
