# src/circuitry_core/catalog/catalog.py
import logging
import random
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence, Union

from ..config import CoreConfig
from ..data_structures import Problem
from ..errors import CatalogLoadError, DiagnosableError
from ..parser import ProblemParser
from ..validation import ProblemValidationError, ProblemValidator, ValidationIssue, ValidationIssueLevel

logger = logging.getLogger(__name__)

BUILTIN_CATALOG_PATH = Path(__file__).resolve().parent / "problems" / "practice_problems.yaml"


class ProblemCatalog:
    """
    An ordered, read-only collection of practice problems.

    The first problem is the default: lookups of a missing or unknown id fall back
    to it, so a stale link always lands on a usable problem.
    """

    def __init__(self, problems: Sequence[Problem]):
        self._problems: List[Problem] = list(problems)
        self._by_id: Dict[str, Problem] = {}
        self._by_preset: Dict[str, Problem] = {}
        for problem in self._problems:
            if problem.id in self._by_id:
                raise ValueError(f"Duplicate problem id '{problem.id}' in catalog.")
            self._by_id[problem.id] = problem
            if problem.preset_hint:
                self._by_preset[problem.preset_hint] = problem

    @classmethod
    def from_yaml(
        cls,
        path: Union[str, Path],
        validate: bool = True,
        config: Optional[CoreConfig] = None,
    ) -> "ProblemCatalog":
        """
        Loads, and by default validates, a catalog file.

        Raises:
            CatalogLoadError: Carrying the diagnostic report of whatever went wrong,
                from YAML syntax through to inconsistent problem content.
        """
        try:
            problems = ProblemParser().parse_file(path)
            if validate:
                issues: List[ValidationIssue] = []
                for problem in problems:
                    issues.extend(ProblemValidator(problem, config).validate())
                for issue in issues:
                    if issue.level == ValidationIssueLevel.WARNING:
                        logger.warning(str(issue))
                    elif issue.level == ValidationIssueLevel.INFO:
                        logger.info(str(issue))
                if any(issue.level == ValidationIssueLevel.ERROR for issue in issues):
                    raise ProblemValidationError(issues)
            catalog = cls(problems)
        except DiagnosableError as e:
            diagnostic_report = e.get_diagnostic_report()
            logger.error(f"Failed to load problem catalog '{path}'.\n{diagnostic_report}")
            raise CatalogLoadError(diagnostic_report) from e

        logger.info(f"Loaded problem catalog '{path}' with {len(catalog)} problem(s).")
        return catalog

    def __len__(self) -> int:
        return len(self._problems)

    def __iter__(self) -> Iterator[Problem]:
        return iter(self._problems)

    def __contains__(self, problem_id: str) -> bool:
        return problem_id in self._by_id

    @property
    def problems(self) -> List[Problem]:
        return list(self._problems)

    @property
    def default(self) -> Optional[Problem]:
        return self._problems[0] if self._problems else None

    def get(self, problem_id: Optional[str]) -> Optional[Problem]:
        """Problem with the given id, or the default problem when it is missing or unknown."""
        if not problem_id:
            return self.default
        return self._by_id.get(problem_id, self.default)

    def find_by_preset(self, preset: Optional[str]) -> Optional[Problem]:
        """Problem matching a circuit builder preset, or None. Never falls back."""
        if not preset:
            return None
        return self._by_preset.get(preset)

    def by_topology(self, topology: str) -> List[Problem]:
        return [problem for problem in self._problems if problem.topology == topology]

    def random_problem(self, topology: Optional[str] = None, rng: Optional[random.Random] = None) -> Optional[Problem]:
        """
        Picks a random problem, optionally restricted to one topology. An empty
        topology pool falls back to the default problem.
        """
        if not self._problems:
            return None
        pool = self.by_topology(topology) if topology else self._problems
        if not pool:
            return self.default
        return (rng or random).choice(pool)


def load_builtin_catalog(validate: bool = True, config: Optional[CoreConfig] = None) -> ProblemCatalog:
    """Loads the practice set shipped with the package."""
    return ProblemCatalog.from_yaml(BUILTIN_CATALOG_PATH, validate=validate, config=config)
