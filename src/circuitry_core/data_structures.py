# src/circuitry_core/data_structures.py
"""
The static content model of a practice problem.

Everything in this module is immutable once constructed. Problems are authored
(or loaded from the YAML catalog) once per selection and are never mutated by the
solver or the grading engine; they are the sole input to the core.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Set, Tuple, Union

logger = logging.getLogger(__name__)

#: Row id reserved for the circuit totals row of a worksheet.
TOTALS_ROW_ID = "totals"
#: Alias accepted in target metrics for "the source row, whatever its id is".
SOURCE_ROW_ALIAS = "source"


class MetricKey(Enum):
    """The four electrical quantities tracked for every element."""
    VOLTAGE = "voltage"
    CURRENT = "current"
    RESISTANCE = "resistance"
    POWER = "power"

    def __str__(self):
        return self.value


#: Column order of the worksheet (W.I.R.E.).
METRIC_ORDER: Tuple[MetricKey, ...] = (
    MetricKey.POWER,
    MetricKey.CURRENT,
    MetricKey.RESISTANCE,
    MetricKey.VOLTAGE,
)

PartialMetrics = Dict[MetricKey, float]


class ComponentRole(Enum):
    SOURCE = "source"
    LOAD = "load"


class NodeKind(Enum):
    """The three cases of the circuit node variant."""
    COMPONENT = "component"
    SERIES = "series"
    PARALLEL = "parallel"


@dataclass(frozen=True)
class WireMetrics:
    """
    The fully resolved (voltage, current, resistance, power) description of one element.
    Produced fresh by every solve; never mutated in place.
    """
    voltage: float
    current: float
    resistance: float
    power: float

    def get(self, key: MetricKey) -> float:
        return getattr(self, key.value)

    def as_dict(self) -> PartialMetrics:
        return {key: self.get(key) for key in MetricKey}


# --- Circuit node variant (authoring form) ---

@dataclass(frozen=True)
class ComponentNode:
    """Leaf of the network: references exactly one load component by id."""
    component_id: str

    @property
    def kind(self) -> NodeKind:
        return NodeKind.COMPONENT


@dataclass(frozen=True)
class SeriesNode:
    """Sub-network whose children all carry the same current."""
    node_id: str
    children: Tuple[CircuitNode, ...]
    label: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def kind(self) -> NodeKind:
        return NodeKind.SERIES


@dataclass(frozen=True)
class ParallelNode:
    """Sub-network whose children all see the same voltage."""
    node_id: str
    children: Tuple[CircuitNode, ...]
    label: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))

    @property
    def kind(self) -> NodeKind:
        return NodeKind.PARALLEL


CircuitNode = Union[ComponentNode, SeriesNode, ParallelNode]


# --- Index arena ---

@dataclass(frozen=True)
class ArenaNode:
    """
    One node of a `CircuitNetwork`. Children are referenced by arena index, never by
    object, so that two structurally equal sub-trees remain distinct entries.
    """
    index: int
    kind: NodeKind
    node_id: Optional[str] = None
    component_id: Optional[str] = None
    label: Optional[str] = None
    children: Tuple[int, ...] = ()
    branch_key: Optional[str] = None

    def describe(self) -> str:
        """Human-readable name used in logs and diagnostics."""
        if self.kind is NodeKind.COMPONENT:
            return f"component '{self.component_id}'"
        name = self.node_id or self.label
        if name:
            return f"{self.kind.value} '{name}'"
        return f"{self.kind.value} node #{self.index}"


@dataclass(frozen=True)
class CircuitNetwork:
    """
    A flattened, index-addressed view of a circuit node tree.

    Indices are assigned in pre-order when the network is built (index 0 is the
    root) and are stable for the lifetime of the owning Problem. Solver caches key
    on these indices.

    Every internal node also gets a `branch_key` that is unique within the network:
    its node id, `"<id>#<index>"` when that id is already taken, or `"#<index>"`
    when it has none. Branch metrics are keyed on it.
    """
    nodes: Tuple[ArenaNode, ...]

    ROOT_INDEX = 0

    @classmethod
    def from_tree(cls, root: CircuitNode) -> CircuitNetwork:
        nodes: List[Optional[ArenaNode]] = []
        taken_keys: Set[str] = set()

        def visit(node: CircuitNode) -> int:
            index = len(nodes)
            nodes.append(None)  # reserve the pre-order slot
            if isinstance(node, ComponentNode):
                nodes[index] = ArenaNode(index=index, kind=NodeKind.COMPONENT, component_id=node.component_id)
            elif isinstance(node, (SeriesNode, ParallelNode)):
                branch_key = node.node_id or f"#{index}"
                if branch_key in taken_keys:
                    branch_key = f"{node.node_id}#{index}"
                taken_keys.add(branch_key)
                child_indices = tuple(visit(child) for child in node.children)
                nodes[index] = ArenaNode(
                    index=index, kind=node.kind, node_id=node.node_id,
                    label=node.label, children=child_indices, branch_key=branch_key,
                )
            else:
                raise TypeError(f"Unsupported circuit node type: {type(node).__name__}")
            return index

        visit(root)
        logger.debug(f"Built circuit network arena with {len(nodes)} node(s).")
        return cls(nodes=tuple(nodes))

    @property
    def root(self) -> ArenaNode:
        return self.nodes[self.ROOT_INDEX]

    def __getitem__(self, index: int) -> ArenaNode:
        return self.nodes[index]

    def __len__(self) -> int:
        return len(self.nodes)

    def leaves(self) -> List[ArenaNode]:
        return [node for node in self.nodes if node.kind is NodeKind.COMPONENT]

    def internal_nodes(self) -> List[ArenaNode]:
        return [node for node in self.nodes if node.kind is not NodeKind.COMPONENT]


# --- Components and problems ---

def _freeze_metrics(raw: Optional[Mapping]) -> PartialMetrics:
    if not raw:
        return {}
    return {MetricKey(key) if not isinstance(key, MetricKey) else key: float(value) for key, value in raw.items()}


@dataclass(frozen=True)
class Component:
    """
    A source or load of a practice problem.

    `givens` are the values shown to the learner. `values` are the authored values
    the solver may use; when omitted they default to the givens.
    """
    id: str
    label: str
    role: ComponentRole = ComponentRole.LOAD
    givens: PartialMetrics = field(default_factory=dict)
    values: Optional[PartialMetrics] = None

    def __post_init__(self):
        givens = _freeze_metrics(self.givens)
        object.__setattr__(self, "givens", givens)
        values = _freeze_metrics(self.values) if self.values is not None else dict(givens)
        object.__setattr__(self, "values", values)


@dataclass(frozen=True)
class TargetMetric:
    """The one (row, metric) cell a learner ultimately has to find."""
    row_id: str
    key: MetricKey


@dataclass(frozen=True)
class Problem:
    """A complete practice problem: the sole input of the solver and the grading engine."""
    id: str
    title: str
    source: Component
    components: Tuple[Component, ...]
    network: CircuitNode
    target_metric: TargetMetric
    topology: str = "combination"
    difficulty: str = "standard"
    prompt: str = ""
    target_question: str = ""
    concept_tags: Tuple[str, ...] = ()
    totals_givens: PartialMetrics = field(default_factory=dict)
    preset_hint: Optional[str] = None
    arena: CircuitNetwork = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "components", tuple(self.components))
        object.__setattr__(self, "concept_tags", tuple(self.concept_tags))
        object.__setattr__(self, "totals_givens", _freeze_metrics(self.totals_givens))
        object.__setattr__(self, "arena", CircuitNetwork.from_tree(self.network))

    def component_map(self) -> Dict[str, Component]:
        return {component.id: component for component in self.components}

    def row_ids(self) -> List[str]:
        """Worksheet rows in display order: source, loads, totals."""
        return [self.source.id] + [c.id for c in self.components] + [TOTALS_ROW_ID]

    def givens_for_row(self, row_id: str) -> PartialMetrics:
        if row_id == TOTALS_ROW_ID:
            return self.totals_givens
        if row_id in (self.source.id, SOURCE_ROW_ALIAS):
            return self.source.givens
        component = self.component_map().get(row_id)
        return component.givens if component else {}
