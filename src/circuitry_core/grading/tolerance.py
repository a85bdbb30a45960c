# src/circuitry_core/grading/tolerance.py
from typing import Optional

from ..config import GradingConfig


def within_tolerance(expected: float, actual: float, config: Optional[GradingConfig] = None) -> bool:
    """
    Decides whether a learner's value matches the solved one.

    Near-zero expected values (below `near_zero_threshold`) are compared with an
    absolute tolerance, since a relative error is meaningless there. Everything
    else must fall within `relative_tolerance` of the expected magnitude.
    """
    config = config or GradingConfig()
    difference = abs(actual - expected)
    if abs(expected) < config.near_zero_threshold:
        return difference <= config.absolute_tolerance
    return difference / abs(expected) <= config.relative_tolerance
