# src/circuitry_core/solver/__init__.py
from .exceptions import DomainError, MissingDataError, PropagationError
from .metrics import DERIVATION_RULES, DerivationRule, calculate_metrics, merge_metrics
from .resistance import ResistanceResolver
from .propagation import MetricPropagator
from .results import SolveFailure, SolveOutcome, SolveResult, SolveSuccess
from .execution import solve, solve_or_raise, target_value

__all__ = [
    # Exceptions
    "MissingDataError",
    "DomainError",
    "PropagationError",
    # Core Services
    "DerivationRule",
    "DERIVATION_RULES",
    "calculate_metrics",
    "merge_metrics",
    "ResistanceResolver",
    "MetricPropagator",
    # Results
    "SolveResult",
    "SolveSuccess",
    "SolveFailure",
    "SolveOutcome",
    # Public API
    "solve",
    "solve_or_raise",
    "target_value",
]
