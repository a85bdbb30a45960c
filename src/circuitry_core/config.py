# src/circuitry_core/config.py
"""
Tunable numerics for the solver and the grading engine.

Defaults mirror `constants.py`. A deployment can override them from a small YAML
file:

    solver:
      division_tolerance: 1.0e-9
    grading:
      relative_tolerance: 0.02
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Union

import cerberus
import yaml

from .constants import (
    CONSISTENCY_RTOL,
    DIVISION_TOLERANCE,
    GRADING_ABSOLUTE_TOLERANCE,
    GRADING_NEAR_ZERO_THRESHOLD,
    GRADING_RELATIVE_TOLERANCE,
    MAX_DERIVATION_PASSES,
)

logger = logging.getLogger(__name__)


class ConfigParsingError(ValueError):
    """Custom exception for errors during configuration parsing."""
    pass


@dataclass(frozen=True)
class SolverConfig:
    division_tolerance: float = DIVISION_TOLERANCE
    max_derivation_passes: int = MAX_DERIVATION_PASSES
    consistency_rtol: float = CONSISTENCY_RTOL


@dataclass(frozen=True)
class GradingConfig:
    """Tolerances used to accept a learner's numeric answer."""
    relative_tolerance: float = GRADING_RELATIVE_TOLERANCE
    near_zero_threshold: float = GRADING_NEAR_ZERO_THRESHOLD
    absolute_tolerance: float = GRADING_ABSOLUTE_TOLERANCE


@dataclass(frozen=True)
class CoreConfig:
    solver: SolverConfig = field(default_factory=SolverConfig)
    grading: GradingConfig = field(default_factory=GradingConfig)


_positive_float = {"type": "number", "min": 0.0}

_schema = {
    "solver": {
        "type": "dict", "required": False, "schema": {
            "division_tolerance": _positive_float,
            "max_derivation_passes": {"type": "integer", "min": 1},
            "consistency_rtol": _positive_float,
        },
    },
    "grading": {
        "type": "dict", "required": False, "schema": {
            "relative_tolerance": _positive_float,
            "near_zero_threshold": _positive_float,
            "absolute_tolerance": _positive_float,
        },
    },
}


def parse_config(raw_config: Dict[str, Any]) -> CoreConfig:
    """
    Validates a raw configuration dictionary and builds a `CoreConfig`.
    Missing sections and keys fall back to the defaults.
    """
    if raw_config is None:
        return CoreConfig()
    if not isinstance(raw_config, dict):
        raise ConfigParsingError("The root of the configuration must be a mapping.")

    validator = cerberus.Validator(_schema)
    validator.allow_unknown = False
    if not validator.validate(raw_config):
        raise ConfigParsingError(f"Failed to parse configuration: {validator.errors}")

    document = validator.document
    return CoreConfig(
        solver=SolverConfig(**document.get("solver", {})),
        grading=GradingConfig(**document.get("grading", {})),
    )


def load_config(path: Union[str, Path]) -> CoreConfig:
    """Reads and validates a YAML configuration file."""
    source = Path(path)
    if not source.is_file():
        raise ConfigParsingError(f"Configuration file not found at path: {source}")
    try:
        with source.open("r", encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigParsingError(f"Invalid YAML syntax in '{source}': {e}") from e

    config = parse_config(content)
    logger.info(f"Loaded configuration from '{source}'.")
    return config
