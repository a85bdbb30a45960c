# src/circuitry_core/solver/results.py
"""
Formal result contracts of the solve orchestrator.

`solve` returns exactly one of `SolveSuccess` or `SolveFailure`; both expose `ok`
so callers can branch without isinstance checks.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Union

from ..data_structures import SOURCE_ROW_ALIAS, TOTALS_ROW_ID, MetricKey, WireMetrics


@dataclass(frozen=True)
class SolveResult:
    """
    The solved electrical state of one practice problem.

    Attributes:
        components: Per-load metrics keyed by component id.
        branches: Per internal node metrics keyed by branch key (the node id,
            made unique with the arena index when ids repeat).
        source: Metrics of the source row.
        totals: Metrics of the circuit totals row.
        equivalent_resistance: Equivalent resistance of the whole network.
        source_id: Id of the source component, used to resolve the source row.
    """
    components: Dict[str, WireMetrics]
    source: WireMetrics
    totals: WireMetrics
    equivalent_resistance: float
    source_id: str
    branches: Dict[str, WireMetrics] = field(default_factory=dict)

    def metrics_for_row(self, row_id: str) -> Optional[WireMetrics]:
        if row_id == TOTALS_ROW_ID:
            return self.totals
        if row_id in (self.source_id, SOURCE_ROW_ALIAS):
            return self.source
        return self.components.get(row_id)

    def value_for(self, row_id: str, key: MetricKey) -> Optional[float]:
        metrics = self.metrics_for_row(row_id)
        return metrics.get(key) if metrics is not None else None


@dataclass(frozen=True)
class SolveSuccess:
    result: SolveResult

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class SolveFailure:
    """
    A solve that could not complete.

    Attributes:
        problem_id: Id of the problem that failed.
        message: One-line, human-readable reason.
        report: Full diagnostic report for logs or an expandable UI panel.
        error_type: Class name of the underlying exception.
    """
    problem_id: str
    message: str
    report: str
    error_type: str

    @property
    def ok(self) -> bool:
        return False


SolveOutcome = Union[SolveSuccess, SolveFailure]
