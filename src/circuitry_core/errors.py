# src/circuitry_core/errors.py
import logging
from abc import abstractmethod
from typing import Any, Dict, Protocol
from typing import runtime_checkable

logger = logging.getLogger(__name__)

# --- User-Facing Exception Hierarchy ---

class CircuitryError(Exception):
    """Base class for all custom, user-facing errors in Circuitry Core."""
    pass

class SolveError(CircuitryError):
    """
    Raised by `solve_or_raise` when a practice problem cannot be solved. The message
    is a pre-formatted, user-friendly diagnostic report.
    """
    pass

class CatalogLoadError(CircuitryError):
    """
    Raised when a problem catalog cannot be loaded, from YAML parsing through to
    content validation. The message is a pre-formatted diagnostic report.
    """
    pass


class FrameworkLogicError(Exception):
    """
    Raised when the core reaches a state that well-formed code can never produce,
    such as an unhandled circuit node kind. Always indicates a bug, never bad content.
    """
    pass


# --- Diagnostic Protocol & Base Exception ---

@runtime_checkable
class Diagnosable(Protocol):
    """
    A protocol for exceptions that can generate their own rich diagnostic report.
    """
    def get_diagnostic_report(self) -> str:
        """Generates a complete, user-friendly, multi-line report string."""
        ...

class DiagnosableError(Exception, Diagnosable):
    """
    A common, concrete base class for all internal exceptions that are diagnosable.

    It inherits from `Exception`, so it can be named in `except` clauses, and it
    declares `get_diagnostic_report` abstract so that every subclass must be able
    to describe itself to a learner or content author.
    """
    @abstractmethod
    def get_diagnostic_report(self) -> str:
        """
        Abstract method to generate the diagnostic report.
        Subclasses MUST implement this.
        """
        raise NotImplementedError


# --- Stateless Formatting Utility ---

def format_diagnostic_report(
    error_type: str,
    details: str,
    suggestion: str,
    context: Dict[str, Any]
) -> str:
    """
    A stateless helper to format the final multi-line report string, ensuring a
    consistent look and feel for all user-facing diagnostics.

    Args:
        error_type: The high-level category of the error (e.g., "Missing Circuit Data").
        details: A detailed, potentially multi-line description of the problem.
        suggestion: Actionable advice for resolving the issue.
        context: A dictionary of contextual information (problem id, node, component,
                 metric, source file, user input).

    Returns:
        A formatted diagnostic report string ready for display.
    """
    lines = [
        "\n",
        "============== Circuitry Core: Actionable Diagnostic Report ==============",
        f"Error Type:     {error_type}",
    ]
    if problem := context.get('problem'):
        lines.append(f"Problem:        {problem}")
    if node := context.get('node'):
        lines.append(f"Network Node:   {node}")
    if component := context.get('component'):
        lines.append(f"Component:      {component}")
    if metric := context.get('metric'):
        lines.append(f"Metric:         {metric}")
    if source_file := context.get('source_file'):
        lines.append(f"Source File:    {source_file}")
    if user_input := context.get('user_input'):
        lines.append(f"User Input:     '{user_input}'")

    lines.append("\nDetails:")
    for line in details.splitlines():
        lines.append(f"  {line}")

    if suggestion:
        lines.append("\nSuggestion:")
        for line in suggestion.splitlines():
            lines.append(f"  {line}")

    lines.append("==========================================================================")
    return "\n".join(lines)
