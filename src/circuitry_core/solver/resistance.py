# src/circuitry_core/solver/resistance.py
import logging
from typing import Dict, Mapping

import numpy as np

from ..data_structures import ArenaNode, CircuitNetwork, Component, MetricKey, NodeKind
from ..errors import FrameworkLogicError
from .exceptions import DomainError, MissingDataError

logger = logging.getLogger(__name__)


class ResistanceResolver:
    """
    Reduces a circuit network, or any sub-network of it, to one equivalent resistance.

    The cache lives on the instance and is keyed by arena index. A resolver is
    created for a single solve call and discarded with it, so results never leak
    between problems.
    """

    def __init__(self, network: CircuitNetwork, components: Mapping[str, Component]):
        self.network = network
        self.components = components
        self._cache: Dict[int, float] = {}

    def resolve(self, index: int = CircuitNetwork.ROOT_INDEX) -> float:
        """Equivalent resistance of the sub-network rooted at arena `index`."""
        if index in self._cache:
            logger.debug(f"Resistance cache hit for node #{index}.")
            return self._cache[index]

        node = self.network[index]
        if node.kind is NodeKind.COMPONENT:
            result = self._leaf_resistance(node)
        elif node.kind is NodeKind.SERIES:
            result = float(sum(self.resolve(child) for child in node.children))
        elif node.kind is NodeKind.PARALLEL:
            result = self._parallel_resistance(node)
        else:
            raise FrameworkLogicError(f"Unhandled circuit node kind: {node.kind!r}")

        self._cache[index] = result
        return result

    def cached_indices(self):
        return frozenset(self._cache)

    def _leaf_resistance(self, node: ArenaNode) -> float:
        component = self.components.get(node.component_id)
        if component is None:
            raise MissingDataError(
                element=f"component '{node.component_id}'",
                details="The network references a component that is not defined in the problem.",
            )

        resistance = component.values.get(MetricKey.RESISTANCE)
        if resistance is None or not np.isfinite(resistance):
            resistance = component.givens.get(MetricKey.RESISTANCE)

        if resistance is None or not np.isfinite(resistance) or resistance <= 0:
            raise MissingDataError(
                element=f"component '{component.id}'",
                details=f"No positive resistance is available (found {resistance!r}).",
                missing=(MetricKey.RESISTANCE.value,),
            )
        return float(resistance)

    def _parallel_resistance(self, node: ArenaNode) -> float:
        reciprocal = 0.0
        for child in node.children:
            child_resistance = self.resolve(child)
            if child_resistance <= 0:
                raise DomainError(
                    node=node.describe(),
                    details=f"Branch {self.network[child].describe()} has non-positive resistance {child_resistance!r}.",
                    resistance=child_resistance,
                )
            reciprocal += 1.0 / child_resistance

        if reciprocal <= 0:
            raise DomainError(
                node=node.describe(),
                details="The parallel group has no branches to share the voltage.",
            )
        return 1.0 / reciprocal
