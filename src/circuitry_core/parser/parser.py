# src/circuitry_core/parser/parser.py
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import cerberus
import numpy as np
import pint
import yaml

from ..data_structures import (
    CircuitNode,
    Component,
    ComponentNode,
    ComponentRole,
    MetricKey,
    ParallelNode,
    PartialMetrics,
    Problem,
    SeriesNode,
    TargetMetric,
)
from ..units import to_metric_magnitude
from .exceptions import ParsingError, SchemaValidationError

logger = logging.getLogger(__name__)

# Identifiers of problems, components and network nodes. Hyphens are allowed so that
# catalog ids such as 'series-square-01' read naturally.
ID_REGEX = r"^[A-Za-z_][A-Za-z0-9_\-]*$"

METRIC_NAMES = [key.value for key in MetricKey]
NETWORK_NODE_KINDS = ("component", "series", "parallel")
_NETWORK_NODE_KEYS = {"kind", "id", "label", "children", "component"}


def _network_node_problems(node: Any, path: str) -> List[str]:
    """
    Structural problems of one authored network node and its descendants.

    A node is either a bare component id string, or a mapping with `kind` set to
    'component' (plus `component`), or 'series' / 'parallel' (plus `children`).
    """
    if isinstance(node, str):
        if not re.match(ID_REGEX, node):
            return [f"{path}: '{node}' is not a valid component id."]
        return []
    if not isinstance(node, dict):
        return [f"{path}: a network node must be a component id or a mapping, got {type(node).__name__}."]

    problems: List[str] = []
    unknown = sorted(set(node) - _NETWORK_NODE_KEYS, key=str)
    if unknown:
        problems.append(f"{path}: unknown key(s) {unknown}.")

    kind = node.get("kind")
    if kind not in NETWORK_NODE_KINDS:
        problems.append(f"{path}: 'kind' must be one of {list(NETWORK_NODE_KINDS)}, got {kind!r}.")
        return problems

    if kind == "component":
        component_id = node.get("component")
        if not isinstance(component_id, str) or not re.match(ID_REGEX, component_id):
            problems.append(f"{path}: a component node needs a valid 'component' id, got {component_id!r}.")
        if "children" in node:
            problems.append(f"{path}: a component node cannot have children.")
        return problems

    for key in ("id", "label"):
        if key in node and not isinstance(node[key], str):
            problems.append(f"{path}: '{key}' must be a string.")
    children = node.get("children")
    if not isinstance(children, list):
        problems.append(f"{path}: a {kind} node needs a 'children' list.")
        return problems
    for position, child in enumerate(children):
        problems.extend(_network_node_problems(child, f"{path}.children[{position}]"))
    return problems


class EnhancedValidator(cerberus.Validator):
    """Custom Cerberus validator carrying the catalog's domain rules."""
    def __init__(self, *args, **kwargs):
        super(EnhancedValidator, self).__init__(*args, **kwargs)
        self.rules['id_regex'] = {'schema': {'type': 'boolean'}}
        self.rules['unique_elements_by_key'] = {'schema': {'type': 'string'}}
        self.rules['network_node'] = {'schema': {'type': 'boolean'}}
        self.rules['metric_values'] = {'schema': {'type': 'boolean'}}

    def _validate_id_regex(self, constraint: bool, field: str, value: Any):
        """
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint:
            return
        if not isinstance(value, str):
            self._error(field, "must be a string to be validated by id_regex.")
            return
        if not re.match(ID_REGEX, value):
            self._error(
                field,
                f"Identifier '{value}' is invalid. Identifiers must start with a letter or underscore "
                "and may only contain letters, numbers, underscores and hyphens.",
            )

    def _validate_unique_elements_by_key(self, key_for_uniqueness: str, field: str, value: List[Dict]):
        """
        Validates that all dictionaries in a list have a unique value for a given key.
        The rule's arguments are validated against this schema:
        {'type': 'string'}
        """
        if not isinstance(value, list):
            return

        seen_keys = set()
        duplicates = set()
        for item in value:
            if not isinstance(item, dict):
                continue
            item_key = item.get(key_for_uniqueness)
            if item_key is None:
                continue
            if item_key in seen_keys:
                duplicates.add(item_key)
            seen_keys.add(item_key)

        if duplicates:
            self._error(field, f"Duplicate values found for key '{key_for_uniqueness}': {sorted(duplicates, key=str)}")

    def _validate_network_node(self, constraint: bool, field: str, value: Any):
        """
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint:
            return
        for problem in _network_node_problems(value, field):
            self._error(field, problem)

    def _validate_metric_values(self, constraint: bool, field: str, value: Any):
        """
        The rule's arguments are validated against this schema:
        {'type': 'boolean'}
        """
        if not constraint or not isinstance(value, dict):
            return
        for name, raw in value.items():
            if name not in METRIC_NAMES:
                self._error(field, f"Unknown metric '{name}'. Expected one of {METRIC_NAMES}.")
                continue
            if isinstance(raw, bool) or not isinstance(raw, (int, float, str)):
                self._error(field, f"Value of '{name}' must be a number or a quantity string, got {raw!r}.")
                continue
            try:
                magnitude = to_metric_magnitude(raw, MetricKey(name))
            except (pint.errors.PintError, ValueError, TypeError, AttributeError) as e:
                self._error(field, f"Value '{raw}' of '{name}' is not a valid {name} quantity: {e}")
                continue
            if not np.isfinite(magnitude):
                self._error(field, f"Value '{raw}' of '{name}' is not finite.")


class ProblemParser:
    """
    Loads practice problems from YAML catalog files.

    Its sole responsibility is structural: it validates the document against the
    catalog schema, converts quantities to base units and builds immutable
    `Problem` objects. Electrical consistency is checked later by the
    `ProblemValidator`.
    """
    _id_rule = {"type": "string", "required": True, "empty": False, "id_regex": True}
    _metric_values_rule = {"type": "dict", "required": False, "metric_values": True}

    _component_schema = {
        "id": _id_rule,
        "label": {"type": "string", "required": False},
        "givens": _metric_values_rule,
        "values": _metric_values_rule,
    }

    _problem_schema = {
        "id": _id_rule,
        "title": {"type": "string", "required": True, "empty": False},
        "topology": {"type": "string", "required": False, "allowed": ["series", "parallel", "combination"]},
        "difficulty": {"type": "string", "required": False},
        "prompt": {"type": "string", "required": False},
        "target_question": {"type": "string", "required": False},
        "concept_tags": {"type": "list", "required": False, "schema": {"type": "string"}},
        "preset": {"type": "string", "required": False, "nullable": True},
        "target_metric": {
            "type": "dict", "required": True, "schema": {
                "row": {"type": "string", "required": True, "empty": False},
                "metric": {"type": "string", "required": True, "allowed": METRIC_NAMES},
            },
        },
        "source": {"type": "dict", "required": True, "schema": _component_schema},
        "components": {
            "type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": _component_schema},
        },
        "totals_givens": _metric_values_rule,
        "network": {"required": True, "network_node": True},
    }

    _schema = {
        "problems": {
            "type": "list", "required": True, "minlength": 1, "unique_elements_by_key": "id",
            "schema": {"type": "dict", "schema": _problem_schema},
        },
    }

    def __init__(self):
        self._validator = EnhancedValidator(self._schema)
        self._validator.allow_unknown = False
        logger.debug("ProblemParser initialized with catalog schema rules.")

    def parse_file(self, yaml_path: Union[str, Path]) -> List[Problem]:
        """Parses one YAML catalog file into a list of problems, in file order."""
        resolved_path = Path(yaml_path).resolve()
        logger.info(f"Parsing problem catalog file: {resolved_path}")
        return self.parse_document(self._load_yaml(resolved_path), resolved_path)

    def parse_document(self, document: Any, file_path: Optional[Path] = None) -> List[Problem]:
        """Validates an already-loaded catalog document and builds its problems."""
        source = file_path or Path("<memory>")
        if not isinstance(document, dict):
            raise ParsingError("The root of a problem catalog must be a mapping with a 'problems' list.", file_path=source)
        if not self._validator.validate(document):
            raise SchemaValidationError(self._validator.errors, source)

        problems = []
        for raw_problem in self._validator.document["problems"]:
            try:
                problems.append(self._build_problem(raw_problem))
            except (TypeError, ValueError) as e:
                raise ParsingError(f"Problem '{raw_problem.get('id')}' could not be built: {e}", file_path=source) from e
        logger.debug(f"Parsed {len(problems)} problem(s) from '{source}'.")
        return problems

    def _load_yaml(self, path: Path) -> Any:
        if not path.is_file():
            raise ParsingError("Catalog file not found.", file_path=path)
        try:
            with path.open("r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ParsingError(f"Invalid YAML syntax: {e}", file_path=path) from e
        except OSError as e:
            raise ParsingError(f"Could not read file: {e}", file_path=path) from e

    def _build_problem(self, raw: Mapping[str, Any]) -> Problem:
        target = raw["target_metric"]
        return Problem(
            id=raw["id"],
            title=raw["title"],
            topology=raw.get("topology", "combination"),
            difficulty=raw.get("difficulty", "standard"),
            prompt=raw.get("prompt", ""),
            target_question=raw.get("target_question", ""),
            target_metric=TargetMetric(row_id=target["row"], key=MetricKey(target["metric"])),
            concept_tags=tuple(raw.get("concept_tags", ())),
            source=self._build_component(raw["source"], ComponentRole.SOURCE),
            components=tuple(self._build_component(c, ComponentRole.LOAD) for c in raw["components"]),
            network=self._build_node(raw["network"]),
            totals_givens=self._convert_metrics(raw.get("totals_givens")),
            preset_hint=raw.get("preset"),
        )

    def _build_component(self, raw: Mapping[str, Any], role: ComponentRole) -> Component:
        givens = self._convert_metrics(raw.get("givens"))
        values = self._convert_metrics(raw["values"]) if "values" in raw else None
        return Component(
            id=raw["id"],
            label=raw.get("label", raw["id"]),
            role=role,
            givens=givens,
            values=values,
        )

    def _build_node(self, raw: Any) -> CircuitNode:
        if isinstance(raw, str):
            return ComponentNode(component_id=raw)
        kind = raw["kind"]
        if kind == "component":
            return ComponentNode(component_id=raw["component"])
        children = tuple(self._build_node(child) for child in raw["children"])
        node_cls = SeriesNode if kind == "series" else ParallelNode
        return node_cls(node_id=raw.get("id", ""), children=children, label=raw.get("label"))

    @staticmethod
    def _convert_metrics(raw: Optional[Mapping[str, Any]]) -> PartialMetrics:
        if not raw:
            return {}
        return {MetricKey(name): to_metric_magnitude(value, MetricKey(name)) for name, value in raw.items()}
