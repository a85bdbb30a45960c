# --- src/circuitry_core/constants.py ---
import logging
from typing import Dict

from .data_structures import MetricKey

logger = logging.getLogger(__name__)

# --- Numerical Constants for Solving ---

#: Magnitude at or below which a quantity is not used as a divisor when deriving
#: the remaining metrics of an element (e.g. I = V / R is skipped for R ~ 0).
DIVISION_TOLERANCE: float = 1.0e-9

#: Upper bound on fixed-point passes of the metrics calculator. Two passes always
#: suffice for two independent quantities; the bound guards against bad input.
MAX_DERIVATION_PASSES: int = 16

#: Relative tolerance used to decide that an authored value disagrees with the
#: value implied by the solved circuit.
CONSISTENCY_RTOL: float = 1.0e-6

# --- Grading Constants ---

#: Accept a learner answer within 1% of the expected value.
GRADING_RELATIVE_TOLERANCE: float = 0.01

#: Below this expected magnitude the relative check is replaced by an absolute one.
GRADING_NEAR_ZERO_THRESHOLD: float = 1.0e-4

#: Absolute tolerance applied to near-zero expected values.
GRADING_ABSOLUTE_TOLERANCE: float = 1.0e-3

# --- Display Constants ---

#: Decimal places shown for each metric, shared by seeded and learner-echoed values.
METRIC_PRECISION: Dict[MetricKey, int] = {
    MetricKey.POWER: 2,
    MetricKey.CURRENT: 3,
    MetricKey.RESISTANCE: 2,
    MetricKey.VOLTAGE: 2,
}

#: Placeholder rendered for values that cannot be displayed.
MISSING_VALUE_PLACEHOLDER = "—"

logger.debug("Defined core constants: DIVISION_TOLERANCE, grading tolerances, METRIC_PRECISION")
