# --- src/circuitry_core/units.py ---
import logging
from typing import Dict, Union

import pint

from .data_structures import MetricKey

logger = logging.getLogger(__name__)
ureg = pint.UnitRegistry()
Quantity = ureg.Quantity
logger.debug("Pint Unit Registry initialized.")

# --- Canonical unit of each worksheet metric ---
METRIC_UNITS: Dict[MetricKey, pint.Unit] = {
    MetricKey.VOLTAGE: ureg.volt,
    MetricKey.CURRENT: ureg.ampere,
    MetricKey.RESISTANCE: ureg.ohm,
    MetricKey.POWER: ureg.watt,
}


def unit_symbol(key: MetricKey) -> str:
    """Short display symbol for a metric's unit (V, A, Ω, W)."""
    return format(METRIC_UNITS[key], "~P")


def to_metric_magnitude(raw: Union[int, float, str], key: MetricKey) -> float:
    """
    Converts an authored value into a plain float in the metric's base unit.

    Plain numbers are taken as already being in the base unit. Strings are parsed by
    pint, so "2.2 kohm" becomes 2200.0 and "250 mA" becomes 0.25; a bare numeric
    string is dimensionless and likewise taken as the base unit.

    Raises:
        pint.DimensionalityError: If the string's unit is not compatible with the metric.
        pint.UndefinedUnitError: If the string names an unknown unit.
    """
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return float(raw)
    quantity = ureg.Quantity(raw)
    if quantity.dimensionless:
        return float(quantity.magnitude)
    return float(quantity.to(METRIC_UNITS[key]).magnitude)
