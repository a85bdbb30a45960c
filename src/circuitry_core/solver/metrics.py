# src/circuitry_core/solver/metrics.py
"""
The electrical metrics calculator.

A tiny constraint solver over four variables (V, I, R, P) and two independent laws
(Ohm's law and the power law). Given any two independent quantities it derives the
other two; values supplied by the caller are never overwritten.
"""
import logging
import math
from typing import Callable, Mapping, NamedTuple, Optional, Tuple

import numpy as np

from ..constants import DIVISION_TOLERANCE, MAX_DERIVATION_PASSES
from ..data_structures import MetricKey, PartialMetrics, WireMetrics
from .exceptions import MissingDataError

logger = logging.getLogger(__name__)

V, I, R, P = MetricKey.VOLTAGE, MetricKey.CURRENT, MetricKey.RESISTANCE, MetricKey.POWER


class DerivationRule(NamedTuple):
    """One rearrangement of Ohm's law or the power law."""
    target: MetricKey
    inputs: Tuple[MetricKey, ...]
    formula: str
    compute: Callable[[PartialMetrics, float], Optional[float]]


def _divide(numerator: float, divisor: float, tolerance: float) -> Optional[float]:
    if abs(divisor) <= tolerance:
        return None
    return numerator / divisor


def _root(value: float) -> Optional[float]:
    if value < 0:
        return None
    return math.sqrt(value)


# Order matters only for which rule wins when several could fire in one pass;
# for consistent inputs every rule yields the same value.
DERIVATION_RULES: Tuple[DerivationRule, ...] = (
    DerivationRule(V, (I, R), "E = I × R", lambda m, tol: m[I] * m[R]),
    DerivationRule(I, (V, R), "I = E / R", lambda m, tol: _divide(m[V], m[R], tol)),
    DerivationRule(R, (V, I), "R = E / I", lambda m, tol: _divide(m[V], m[I], tol)),
    DerivationRule(P, (V, I), "P = E × I", lambda m, tol: m[V] * m[I]),
    DerivationRule(P, (I, R), "P = I² × R", lambda m, tol: m[I] * m[I] * m[R]),
    DerivationRule(P, (V, R), "P = E² / R", lambda m, tol: _divide(m[V] * m[V], m[R], tol)),
    DerivationRule(V, (P, I), "E = P / I", lambda m, tol: _divide(m[P], m[I], tol)),
    DerivationRule(V, (P, R), "E = √(P × R)", lambda m, tol: _root(m[P] * m[R]) if m[R] >= 0 else None),
    DerivationRule(I, (P, V), "I = P / E", lambda m, tol: _divide(m[P], m[V], tol)),
    DerivationRule(I, (P, R), "I = √(P / R)", lambda m, tol: _root(m[P] / m[R]) if m[R] >= tol else None),
    DerivationRule(R, (P, I), "R = P / I²", lambda m, tol: _divide(m[P], m[I] * m[I], tol)),
    DerivationRule(R, (V, P), "R = E² / P", lambda m, tol: _divide(m[V] * m[V], m[P], tol)),
)


def sanitise_metrics(metrics: Optional[Mapping[MetricKey, float]]) -> PartialMetrics:
    """Drops None and non-finite entries from a partial metric set."""
    if not metrics:
        return {}
    return {
        key: float(value) for key, value in metrics.items()
        if value is not None and np.isfinite(value)
    }


def merge_metrics(
    base: Optional[Mapping[MetricKey, float]],
    overrides: Optional[Mapping[MetricKey, float]],
) -> PartialMetrics:
    """Merges two partial metric sets; finite values in `overrides` win."""
    merged = sanitise_metrics(base)
    merged.update(sanitise_metrics(overrides))
    return merged


def calculate_metrics(
    known: Mapping[MetricKey, float],
    element: str = "element",
    tolerance: float = DIVISION_TOLERANCE,
    max_passes: int = MAX_DERIVATION_PASSES,
) -> WireMetrics:
    """
    Derives the full (V, I, R, P) tuple of one element from whatever is known.

    Args:
        known: Any subset of the four quantities. Non-finite values are ignored.
        element: Name of the element, used only in the error raised on failure.
        tolerance: Divisors at or below this magnitude are not divided by.
        max_passes: Upper bound on derivation passes.

    Returns:
        A fully populated `WireMetrics`. Supplied values are returned unchanged.

    Raises:
        MissingDataError: If fewer than two independent quantities are available.
    """
    values = sanitise_metrics(known)

    for _ in range(max_passes):
        changed = False
        for rule in DERIVATION_RULES:
            if rule.target in values or not all(key in values for key in rule.inputs):
                continue
            candidate = rule.compute(values, tolerance)
            if candidate is None or not np.isfinite(candidate):
                continue
            values[rule.target] = float(candidate)
            changed = True
        if not changed:
            break

    missing = tuple(key.value for key in MetricKey if key not in values)
    if missing:
        known_names = ", ".join(key.value for key in MetricKey if key in values) or "nothing"
        raise MissingDataError(
            element=element,
            details=f"Two independent quantities are needed to resolve the rest; only {known_names} could be used.",
            missing=missing,
        )

    return WireMetrics(voltage=values[V], current=values[I], resistance=values[R], power=values[P])


def find_disagreements(
    reference: Mapping[MetricKey, float],
    authored: Mapping[MetricKey, float],
    rtol: float,
) -> PartialMetrics:
    """
    Returns the authored quantities that differ from the reference values by more
    than `rtol` (relative). Keys absent from the reference are not compared.
    """
    reference = sanitise_metrics(reference)
    disagreements = {}
    for key, value in sanitise_metrics(authored).items():
        if key in reference and not np.isclose(value, reference[key], rtol=rtol, atol=0.0):
            disagreements[key] = value
    return disagreements
