# src/circuitry_core/solver/engine.py
"""
Defines the `SolveEngine`, the stateless service that solves one practice problem.

The engine holds the imperative "how" (resolve, solve totals, propagate); the
`SolveContext` it is handed holds the "what". The public facade in `execution.py`
is responsible for turning any failure into a tagged result.
"""
import logging

import numpy as np

from ..data_structures import CircuitNetwork, MetricKey
from .context import SolveContext
from .exceptions import DomainError
from .metrics import calculate_metrics, merge_metrics
from .propagation import MetricPropagator
from .results import SolveResult

logger = logging.getLogger(__name__)


class SolveEngine:
    """Solves the problem held by a `SolveContext`. Owns no state of its own."""

    def __init__(self, context: SolveContext):
        self.context = context
        self.problem = context.problem
        self.config = context.config
        self.resolver = context.resolver

    def execute(self) -> SolveResult:
        """
        Runs the full solve pipeline.

        1. Reduce the network to its equivalent resistance.
        2. Solve the totals row from that resistance plus the authored source values.
           Totals-row givens only seed the worksheet and never override the network.
        3. Solve the source row, seeded with the totals.
        4. Propagate total current and voltage to every leaf.
        """
        network_root = self.problem.arena[CircuitNetwork.ROOT_INDEX]
        equivalent_resistance = self.resolver.resolve(CircuitNetwork.ROOT_INDEX)
        if not np.isfinite(equivalent_resistance):
            raise DomainError(
                node=network_root.describe(),
                details=f"The equivalent resistance of the network is not finite ({equivalent_resistance!r}).",
                resistance=equivalent_resistance,
            )
        logger.debug(f"Equivalent resistance of '{self.problem.id}': {equivalent_resistance:.6g} ohm")

        source_values = {
            key: value for key, value in self.problem.source.values.items() if key is not MetricKey.RESISTANCE
        }
        totals_known = merge_metrics({MetricKey.RESISTANCE: equivalent_resistance}, source_values)
        totals = calculate_metrics(
            totals_known,
            element="circuit totals",
            tolerance=self.config.division_tolerance,
            max_passes=self.config.max_derivation_passes,
        )

        source = calculate_metrics(
            merge_metrics(totals.as_dict(), self.problem.source.values),
            element=f"source '{self.problem.source.id}'",
            tolerance=self.config.division_tolerance,
            max_passes=self.config.max_derivation_passes,
        )

        propagator = MetricPropagator(
            network=self.problem.arena,
            components=self.context.components,
            resolver=self.resolver,
            config=self.config,
        )
        components, branches = propagator.propagate(totals.current, totals.voltage)

        return SolveResult(
            components=components,
            branches=branches,
            source=source,
            totals=totals,
            equivalent_resistance=equivalent_resistance,
            source_id=self.problem.source.id,
        )
