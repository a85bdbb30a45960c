# src/circuitry_core/formatting.py
"""
The numeric display contract shared by seeded worksheet values, learner echo and
solution walkthroughs.
"""
import logging
from typing import Optional

import numpy as np

from .constants import METRIC_PRECISION, MISSING_VALUE_PLACEHOLDER
from .data_structures import MetricKey
from .units import unit_symbol

logger = logging.getLogger(__name__)


def format_number(value: Optional[float], digits: int = 2) -> str:
    """
    Formats a number with fewer decimals as its magnitude grows.

    >= 1000 keeps one decimal, >= 100 at most one, >= 10 at most two, anything
    smaller keeps `digits`. Missing or non-finite values render as the placeholder.
    """
    if value is None or not np.isfinite(value):
        return MISSING_VALUE_PLACEHOLDER
    magnitude = abs(value)
    if magnitude >= 1000:
        places = 1
    elif magnitude >= 100:
        places = min(digits, 1)
    elif magnitude >= 10:
        places = min(digits, 2)
    else:
        places = digits
    return f"{value:.{places}f}"


def format_seed_value(value: Optional[float], key: MetricKey) -> str:
    """The text pre-filled into a given worksheet cell."""
    return format_number(value, METRIC_PRECISION[key])


def format_metric_value(value: Optional[float], key: MetricKey) -> str:
    """Formats a value with the metric's precision and unit symbol, e.g. '0.048 A'."""
    text = format_seed_value(value, key)
    if text == MISSING_VALUE_PLACEHOLDER:
        return text
    return f"{text} {unit_symbol(key)}"
