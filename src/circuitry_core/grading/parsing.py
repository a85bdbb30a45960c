# src/circuitry_core/grading/parsing.py
import logging
import re
from typing import Optional

import numpy as np

from .exceptions import InputParseError

logger = logging.getLogger(__name__)

# First signed decimal or scientific numeral anywhere in the text; "12 V" and
# "I = 0.25" both read as numbers.
NUMERAL_REGEX = re.compile(r"[-+]?\d*\.?\d+(?:[eE][-+]?\d+)?")


def parse_metric_input(raw: Optional[str]) -> Optional[float]:
    """
    Reads a learner's answer.

    Returns:
        None for empty or whitespace-only input, otherwise the first numeral found.

    Raises:
        InputParseError: If the text holds no numeral, or the numeral is not finite.
    """
    if raw is None or not raw.strip():
        return None

    match = NUMERAL_REGEX.search(raw)
    if match is None:
        raise InputParseError(raw=raw, details="The answer does not contain a number.")

    value = float(match.group(0))
    if not np.isfinite(value):
        raise InputParseError(raw=raw, details=f"The number '{match.group(0)}' is out of range.")
    return value
