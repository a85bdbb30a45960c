# src/circuitry_core/parser/exceptions.py
"""
Diagnosable exceptions of the problem catalog loader.

`ParsingError` covers file-level problems (missing file, broken YAML, content that
cannot be turned into a problem). `SchemaValidationError` covers YAML that loads
but does not match the catalog schema.
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from ..errors import DiagnosableError, format_diagnostic_report


class BaseParsingError(DiagnosableError):
    """Common base of every catalog loading error."""
    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Generic Catalog Parsing Error",
            details=str(self),
            suggestion="Check the format and content of the problem catalog file.",
            context={}
        )


@dataclass()
class ParsingError(BaseParsingError):
    details: str
    file_path: Path

    def __str__(self):
        return f"Parsing error in file '{self.file_path}': {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="YAML Parsing or File Error",
            details=self.details,
            suggestion="Ensure the file exists, is readable, and contains valid YAML syntax.",
            context={'source_file': self.file_path}
        )


def _flatten_errors(errors: Any, prefix: str = "") -> List[str]:
    """Turns Cerberus' nested error tree into 'path: message' lines."""
    lines: List[str] = []
    if isinstance(errors, dict):
        for key in sorted(errors, key=str):
            path = f"{prefix}.{key}" if prefix else str(key)
            lines.extend(_flatten_errors(errors[key], path))
    elif isinstance(errors, list):
        for entry in errors:
            lines.extend(_flatten_errors(entry, prefix))
    else:
        lines.append(f"{prefix}: {errors}")
    return lines


@dataclass()
class SchemaValidationError(BaseParsingError):
    """
    Raised when the YAML is syntactically valid but does not follow the problem
    catalog schema (missing keys, unknown metrics, malformed network nodes,
    duplicate ids, quantities with the wrong unit).
    """
    errors: Dict[str, Any]
    file_path: Path

    @property
    def error_lines(self) -> List[str]:
        return _flatten_errors(self.errors)

    def __str__(self):
        return (
            f"YAML schema validation failed for file '{self.file_path}':\n"
            + "\n".join(f"  - {line}" for line in self.error_lines)
        )

    def get_diagnostic_report(self) -> str:
        lines = self.error_lines
        details = (
            "The structure of the catalog file does not conform to the required schema.\n"
            f"See details for {len(lines)} issue(s) below:\n\n"
            + "\n".join(f"  - {line}" for line in lines)
        )
        return format_diagnostic_report(
            error_type="YAML Schema Validation Error",
            details=details,
            suggestion=(
                "Correct the listed fields. Each problem needs an id, a title, a source, at least one "
                "component, a network and a target metric; metric values must be numbers or quantities "
                "with a matching unit (e.g. '2.2 kohm')."
            ),
            context={'source_file': self.file_path}
        )
