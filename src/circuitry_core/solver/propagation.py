# src/circuitry_core/solver/propagation.py
import logging
from typing import Dict, Mapping, Tuple

import numpy as np

from ..config import SolverConfig
from ..data_structures import ArenaNode, CircuitNetwork, Component, MetricKey, NodeKind, WireMetrics
from ..errors import FrameworkLogicError
from .exceptions import MissingDataError, PropagationError
from .metrics import calculate_metrics, find_disagreements, merge_metrics
from .resistance import ResistanceResolver

logger = logging.getLogger(__name__)


class MetricPropagator:
    """
    Walks a circuit network top-down, splitting current across parallel branches and
    voltage across series stages, until every leaf has a fully resolved WireMetrics.

    Series children share the parent's current and each drops current x R_child.
    Parallel children share the parent's voltage and each draws voltage / R_child.
    Internal nodes are recorded too, keyed by their unique branch key, so that
    per-branch currents are available to consumers that animate current flow.
    """

    def __init__(
        self,
        network: CircuitNetwork,
        components: Mapping[str, Component],
        resolver: ResistanceResolver,
        config: SolverConfig,
    ):
        self.network = network
        self.components = components
        self.resolver = resolver
        self.config = config
        self._leaf_metrics: Dict[str, WireMetrics] = {}
        self._branch_metrics: Dict[str, WireMetrics] = {}

    def propagate(
        self, total_current: float, total_voltage: float
    ) -> Tuple[Dict[str, WireMetrics], Dict[str, WireMetrics]]:
        """
        Propagates the solved source totals through the whole network.

        Returns:
            A tuple of (leaf metrics keyed by component id, branch metrics keyed by
            the branch key of each internal node).

        Raises:
            PropagationError: If a non-finite current or voltage reaches any node.
            MissingDataError: If a leaf cannot be resolved.
        """
        self._leaf_metrics = {}
        self._branch_metrics = {}
        self._propagate_node(CircuitNetwork.ROOT_INDEX, total_current, total_voltage)
        return dict(self._leaf_metrics), dict(self._branch_metrics)

    def _propagate_node(self, index: int, current: float, voltage: float):
        node = self.network[index]
        if not (np.isfinite(current) and np.isfinite(voltage)):
            raise PropagationError(node=node.describe(), current=current, voltage=voltage)

        if node.kind is NodeKind.COMPONENT:
            self._resolve_leaf(node, current, voltage)
            return

        self._record_branch(node, current, voltage)

        if node.kind is NodeKind.SERIES:
            for child in node.children:
                child_voltage = current * self.resolver.resolve(child)
                logger.debug(f"{node.describe()}: {self.network[child].describe()} drops {child_voltage:.6g} V at {current:.6g} A")
                self._propagate_node(child, current, child_voltage)
        elif node.kind is NodeKind.PARALLEL:
            for child in node.children:
                # The resolver has already rejected non-positive branches of this node.
                child_current = voltage / self.resolver.resolve(child)
                logger.debug(f"{node.describe()}: {self.network[child].describe()} draws {child_current:.6g} A at {voltage:.6g} V")
                self._propagate_node(child, child_current, voltage)
        else:
            raise FrameworkLogicError(f"Unhandled circuit node kind: {node.kind!r}")

    def _resolve_leaf(self, node: ArenaNode, current: float, voltage: float):
        component = self.components.get(node.component_id)
        if component is None:
            raise MissingDataError(
                element=f"component '{node.component_id}'",
                details="The component was not found while propagating the solved totals.",
            )
        if component.id in self._leaf_metrics:
            raise FrameworkLogicError(f"Component '{component.id}' was reached twice during propagation.")

        incoming = {MetricKey.CURRENT: current, MetricKey.VOLTAGE: voltage}
        self._warn_on_disagreement(component, current, voltage)

        resolved = calculate_metrics(
            merge_metrics(component.values, incoming),
            element=f"component '{component.id}'",
            tolerance=self.config.division_tolerance,
            max_passes=self.config.max_derivation_passes,
        )
        self._leaf_metrics[component.id] = resolved

    def _record_branch(self, node: ArenaNode, current: float, voltage: float):
        resistance = self.resolver.resolve(node.index)
        metrics = WireMetrics(voltage=voltage, current=current, resistance=resistance, power=voltage * current)
        self._branch_metrics[node.branch_key] = metrics

    def _warn_on_disagreement(self, component: Component, current: float, voltage: float):
        reference = {
            MetricKey.CURRENT: current,
            MetricKey.VOLTAGE: voltage,
            MetricKey.POWER: current * voltage,
        }
        if abs(current) > self.config.division_tolerance:
            reference[MetricKey.RESISTANCE] = voltage / current

        disagreements = find_disagreements(reference, component.values, self.config.consistency_rtol)
        for key, authored in disagreements.items():
            # Propagated current and voltage replace authored ones; R and P are kept as authored.
            outcome = "the solved value is used" if key in (MetricKey.CURRENT, MetricKey.VOLTAGE) else "the authored value is kept"
            logger.warning(
                f"Authored {key.value} {authored!r} of component '{component.id}' disagrees with "
                f"the solved circuit value {reference[key]!r}; {outcome}."
            )
