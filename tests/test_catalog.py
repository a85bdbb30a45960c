# tests/test_catalog.py
import random

import pytest

from circuitry_core import CatalogLoadError, solve
from circuitry_core.catalog import BUILTIN_CATALOG_PATH, ProblemCatalog

INCONSISTENT_CATALOG = """
problems:
  - id: wrong-answer-key
    title: Wrong Answer Key
    target_metric: {row: totals, metric: current}
    source: {id: src, givens: {voltage: 10}}
    components:
      - {id: R1, givens: {resistance: 10, current: 3}}
    network: {kind: series, id: main, children: [R1]}
"""


class TestBuiltinCatalog:

    def test_ships_the_practice_set(self, builtin_catalog):
        assert BUILTIN_CATALOG_PATH.is_file()
        assert len(builtin_catalog) == 9
        assert {p.topology for p in builtin_catalog} == {"series", "parallel", "combination"}

    def test_every_problem_solves(self, builtin_catalog):
        for problem in builtin_catalog:
            assert solve(problem).ok, problem.id

    def test_default_and_lookup_fallback(self, builtin_catalog):
        assert builtin_catalog.default.id == "series-square-01"
        assert builtin_catalog.get(None) is builtin_catalog.default
        assert builtin_catalog.get("does-not-exist") is builtin_catalog.default
        assert builtin_catalog.get("combo-complex-03").id == "combo-complex-03"
        assert "parallel-power-03" in builtin_catalog

    def test_find_by_preset(self, builtin_catalog):
        assert builtin_catalog.find_by_preset("combo_sp").id == "combo-series-parallel-02"
        assert builtin_catalog.find_by_preset("unknown_preset") is None
        assert builtin_catalog.find_by_preset(None) is None

    def test_random_problem_respects_topology(self, builtin_catalog):
        rng = random.Random(7)
        for _ in range(10):
            assert builtin_catalog.random_problem("parallel", rng=rng).topology == "parallel"

    def test_random_problem_with_empty_pool_falls_back(self, builtin_catalog):
        assert builtin_catalog.random_problem("bridge") is builtin_catalog.default


class TestCatalogLoading:

    def test_empty_catalog(self):
        catalog = ProblemCatalog([])
        assert catalog.default is None
        assert catalog.get("anything") is None
        assert catalog.random_problem() is None

    def test_inconsistent_content_is_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(INCONSISTENT_CATALOG, encoding="utf-8")
        with pytest.raises(CatalogLoadError) as excinfo:
            ProblemCatalog.from_yaml(path)
        assert "GIVEN_MISMATCH" in str(excinfo.value)

    def test_validation_can_be_skipped(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text(INCONSISTENT_CATALOG, encoding="utf-8")
        catalog = ProblemCatalog.from_yaml(path, validate=False)
        assert len(catalog) == 1

    def test_parse_errors_are_wrapped(self, tmp_path):
        with pytest.raises(CatalogLoadError) as excinfo:
            ProblemCatalog.from_yaml(tmp_path / "missing.yaml")
        assert "YAML Parsing or File Error" in str(excinfo.value)
