# src/circuitry_core/__init__.py
import logging
from .log_config import setup_logging

setup_logging()
logger = logging.getLogger(__name__)
logger.info("Circuitry Core package initialized.")

from .units import ureg, pint, Quantity
from .data_structures import (
    Component,
    ComponentNode,
    ComponentRole,
    MetricKey,
    ParallelNode,
    Problem,
    SeriesNode,
    TargetMetric,
    WireMetrics,
)
from .config import CoreConfig, GradingConfig, SolverConfig, load_config
from .solver import solve, solve_or_raise, target_value, SolveResult, SolveSuccess, SolveFailure
from .formatting import format_number, format_metric_value
from .grading import PracticeSession, build_baseline, on_cell_edit, is_complete
from .walkthrough import SolutionStep, build_solution_steps
from .parser import ProblemParser
from .catalog import ProblemCatalog, load_builtin_catalog
from .errors import CircuitryError, SolveError, CatalogLoadError

__all__ = [
    # Units
    "ureg", "pint", "Quantity",
    # Data Structures
    "Component", "ComponentNode", "ComponentRole", "MetricKey", "ParallelNode",
    "Problem", "SeriesNode", "TargetMetric", "WireMetrics",
    # Configuration
    "CoreConfig", "GradingConfig", "SolverConfig", "load_config",
    # Solver
    "solve", "solve_or_raise", "target_value", "SolveResult", "SolveSuccess", "SolveFailure",
    # Display
    "format_number", "format_metric_value",
    # Grading
    "PracticeSession", "build_baseline", "on_cell_edit", "is_complete",
    "SolutionStep", "build_solution_steps",
    # Content
    "ProblemParser", "ProblemCatalog", "load_builtin_catalog",
    # Top-Level Errors (Actionable Diagnostics)
    "CircuitryError", "SolveError", "CatalogLoadError",
]
