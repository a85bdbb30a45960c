# src/circuitry_core/solver/exceptions.py
"""
Defines the diagnosable exceptions raised while solving a practice problem.

All three derive from `DiagnosableError`, so the solve orchestrator can catch a
single type at its public boundary and turn any of them into a tagged failure
carrying a readable report.
"""
from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..errors import DiagnosableError, format_diagnostic_report


@dataclass()
class MissingDataError(DiagnosableError):
    """
    Raised when an element cannot be fully described: a leaf lacks a usable
    resistance, or fewer than two independent quantities are known.
    """
    element: str
    details: str
    missing: Tuple[str, ...] = field(default_factory=tuple)

    def __str__(self):
        return f"Missing data for {self.element}: {self.details}"

    def get_diagnostic_report(self) -> str:
        details = self.details
        if self.missing:
            details += f"\nUnresolved quantities: {', '.join(self.missing)}"
        return format_diagnostic_report(
            error_type="Missing Circuit Data",
            details=details,
            suggestion="Give every load a positive resistance, and give the source its voltage or current.",
            context={'component': self.element}
        )


@dataclass()
class DomainError(DiagnosableError):
    """
    Raised when a parallel branch has a non-positive equivalent resistance. A short
    or degenerate branch is rejected rather than divided against.
    """
    node: str
    details: str
    resistance: Optional[float] = None

    def __str__(self):
        return f"Invalid parallel branch in {self.node}: {self.details}"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Invalid Parallel Branch",
            details=self.details,
            suggestion="Every branch of a parallel group must have a positive resistance. Remove shorted or empty branches.",
            context={'node': self.node}
        )


@dataclass()
class PropagationError(DiagnosableError):
    """Raised when a non-finite current or voltage appears while walking the network."""
    node: str
    current: float
    voltage: float

    def __str__(self):
        return f"Non-finite electrical state at {self.node} (current={self.current}, voltage={self.voltage})"

    def get_diagnostic_report(self) -> str:
        return format_diagnostic_report(
            error_type="Propagation Failure",
            details=(
                f"The solver reached {self.node} with current={self.current!r} A "
                f"and voltage={self.voltage!r} V."
            ),
            suggestion="Check the resistances feeding this part of the network for zero or extreme values.",
            context={'node': self.node}
        )
