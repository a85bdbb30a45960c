# tests/test_parser.py
from pathlib import Path

import pytest

from circuitry_core import MetricKey
from circuitry_core.data_structures import ComponentRole, NodeKind
from circuitry_core.parser import ParsingError, ProblemParser, SchemaValidationError

VALID_CATALOG = """
problems:
  - id: lab-divider-01
    title: Voltage Divider
    topology: series
    difficulty: intro
    target_question: What is the drop across R2?
    target_metric: {row: R2, metric: voltage}
    concept_tags: [series]
    preset: lab_divider
    source:
      id: psu
      label: Bench Supply
      givens: {voltage: "9 V"}
    components:
      - {id: R1, label: Top, givens: {resistance: "2.2 kohm"}}
      - {id: R2, givens: {resistance: 1000}, values: {resistance: "1 kohm", current: "2.8125 mA"}}
    totals_givens: {current: "2.8125 mA"}
    network:
      kind: series
      id: divider
      label: Divider
      children:
        - R1
        - {kind: component, component: R2}
"""


def write_catalog(tmp_path: Path, text: str, name: str = "catalog.yaml") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def catalog_with_problem_body(body: str) -> str:
    return "problems:\n  - " + body.strip().replace("\n", "\n    ") + "\n"


MINIMAL_PROBLEM = """
id: p1
title: Minimal
target_metric: {row: totals, metric: current}
source: {id: src, givens: {voltage: 5}}
components:
  - {id: R1, givens: {resistance: 10}}
network: {kind: series, children: [R1]}
"""


@pytest.fixture
def parser():
    return ProblemParser()


class TestProblemParser:

    def test_parses_valid_catalog(self, parser, tmp_path):
        problems = parser.parse_file(write_catalog(tmp_path, VALID_CATALOG))
        assert len(problems) == 1
        problem = problems[0]
        assert problem.id == "lab-divider-01"
        assert problem.topology == "series"
        assert problem.preset_hint == "lab_divider"
        assert problem.concept_tags == ("series",)
        assert problem.target_metric.row_id == "R2"
        assert problem.target_metric.key is MetricKey.VOLTAGE

    def test_quantities_are_converted_to_base_units(self, parser, tmp_path):
        problem = parser.parse_file(write_catalog(tmp_path, VALID_CATALOG))[0]
        components = problem.component_map()
        assert components["R1"].givens[MetricKey.RESISTANCE] == pytest.approx(2200.0)
        assert components["R2"].values[MetricKey.CURRENT] == pytest.approx(0.0028125)
        assert problem.totals_givens[MetricKey.CURRENT] == pytest.approx(0.0028125)
        assert problem.source.givens[MetricKey.VOLTAGE] == pytest.approx(9.0)

    def test_components_roles_and_labels(self, parser, tmp_path):
        problem = parser.parse_file(write_catalog(tmp_path, VALID_CATALOG))[0]
        assert problem.source.role is ComponentRole.SOURCE
        assert problem.source.label == "Bench Supply"
        components = problem.component_map()
        assert components["R1"].label == "Top"
        assert components["R2"].label == "R2"
        assert components["R1"].role is ComponentRole.LOAD
        # Values default to the givens when omitted.
        assert components["R1"].values == components["R1"].givens

    def test_network_shorthand_and_explicit_leaves(self, parser, tmp_path):
        problem = parser.parse_file(write_catalog(tmp_path, VALID_CATALOG))[0]
        arena = problem.arena
        assert arena.root.kind is NodeKind.SERIES
        assert arena.root.node_id == "divider"
        assert arena.root.label == "Divider"
        assert [node.component_id for node in arena.leaves()] == ["R1", "R2"]

    def test_defaults_for_optional_fields(self, parser, tmp_path):
        problem = parser.parse_file(write_catalog(tmp_path, catalog_with_problem_body(MINIMAL_PROBLEM)))[0]
        assert problem.topology == "combination"
        assert problem.difficulty == "standard"
        assert problem.preset_hint is None
        assert problem.totals_givens == {}
        assert problem.arena.root.node_id == ""

    def test_missing_file_raises_parsing_error(self, parser, tmp_path):
        with pytest.raises(ParsingError) as excinfo:
            parser.parse_file(tmp_path / "missing.yaml")
        assert "not found" in excinfo.value.details

    def test_invalid_yaml_raises_parsing_error(self, parser, tmp_path):
        path = write_catalog(tmp_path, "problems: [unclosed")
        with pytest.raises(ParsingError) as excinfo:
            parser.parse_file(path)
        assert "YAML Parsing or File Error" in excinfo.value.get_diagnostic_report()

    def test_non_mapping_root_raises_parsing_error(self, parser):
        with pytest.raises(ParsingError):
            parser.parse_document(["not", "a", "mapping"])

    @pytest.mark.parametrize("replacement, fragment", [
        ("givens: {resistance: 10}", "givens: {resistance: \"5 A\"}"),
        ("givens: {resistance: 10}", "givens: {charge: 10}"),
        ("givens: {resistance: 10}", "givens: {resistance: \"10 blorbs\"}"),
        ("network: {kind: series, children: [R1]}", "network: {kind: loop, children: [R1]}"),
        ("network: {kind: series, children: [R1]}", "network: {kind: series}"),
        ("network: {kind: series, children: [R1]}", "network: {kind: series, children: [{kind: component}]}"),
        ("network: {kind: series, children: [R1]}", "network: {kind: series, children: [R1], extra: 1}"),
        ("id: p1", "id: \"bad id\""),
        ("target_metric: {row: totals, metric: current}", "target_metric: {row: totals, metric: charge}"),
    ])
    def test_schema_violations(self, parser, tmp_path, replacement, fragment):
        body = MINIMAL_PROBLEM.replace(replacement, fragment)
        path = write_catalog(tmp_path, catalog_with_problem_body(body))
        with pytest.raises(SchemaValidationError) as excinfo:
            parser.parse_file(path)
        assert excinfo.value.error_lines
        assert "YAML Schema Validation Error" in excinfo.value.get_diagnostic_report()

    def test_duplicate_problem_ids_are_rejected(self, parser, tmp_path):
        body = catalog_with_problem_body(MINIMAL_PROBLEM)
        text = body + body[len("problems:\n"):]
        with pytest.raises(SchemaValidationError) as excinfo:
            parser.parse_file(write_catalog(tmp_path, text))
        assert "Duplicate" in str(excinfo.value)

    def test_duplicate_component_ids_are_rejected(self, parser, tmp_path):
        body = MINIMAL_PROBLEM.replace(
            "  - {id: R1, givens: {resistance: 10}}",
            "  - {id: R1, givens: {resistance: 10}}\n  - {id: R1, givens: {resistance: 20}}",
        )
        with pytest.raises(SchemaValidationError):
            parser.parse_file(write_catalog(tmp_path, catalog_with_problem_body(body)))
