# src/circuitry_core/grading/worksheet.py
"""
The W.I.R.E. worksheet: one row per source, load and the circuit totals, one column
per metric.

A `Worksheet` is an immutable snapshot. `build_baseline` creates the first one for
a solved problem and `on_cell_edit` returns the next one after a keystroke. Given
cells are locked: they are seeded from the solved values and no edit touches them.
"""
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

import numpy as np

from ..config import GradingConfig
from ..data_structures import METRIC_ORDER, MetricKey, Problem
from ..formatting import format_seed_value
from ..solver.results import SolveResult
from .exceptions import InputParseError
from .parsing import parse_metric_input
from .tolerance import within_tolerance

logger = logging.getLogger(__name__)

CellKey = Tuple[str, MetricKey]


class CellStatus(Enum):
    GIVEN = "given"
    BLANK = "blank"
    INVALID = "invalid"
    CORRECT = "correct"
    INCORRECT = "incorrect"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class WorksheetCell:
    raw: str = ""
    value: Optional[float] = None
    status: CellStatus = CellStatus.BLANK
    given: bool = False

    @property
    def resolved(self) -> bool:
        """A cell counts toward completion once it is given or answered correctly."""
        return self.status in (CellStatus.GIVEN, CellStatus.CORRECT)


@dataclass(frozen=True)
class Worksheet:
    """
    One immutable snapshot of a learner's worksheet.

    Attributes:
        problem_id: Id of the problem the sheet belongs to.
        row_ids: Rows in display order (source, loads, totals).
        cells: Every (row, metric) cell of the sheet.
        expected: Solved value of every cell, used for grading.
        grading: Tolerances applied by `on_cell_edit`.
        complete: True when every cell is given or correct.
    """
    problem_id: str
    row_ids: Tuple[str, ...]
    cells: Mapping[CellKey, WorksheetCell]
    expected: Mapping[CellKey, Optional[float]]
    grading: GradingConfig = field(default_factory=GradingConfig)
    complete: bool = False

    def cell(self, row_id: str, key: MetricKey) -> WorksheetCell:
        return self.cells[(row_id, key)]

    def row(self, row_id: str) -> Dict[MetricKey, WorksheetCell]:
        return {key: self.cells[(row_id, key)] for key in METRIC_ORDER}

    def cells_with_status(self, status: CellStatus) -> List[CellKey]:
        return [cell_key for cell_key, cell in self.cells.items() if cell.status is status]


def build_baseline(problem: Problem, result: SolveResult, config: Optional[GradingConfig] = None) -> Worksheet:
    """
    Builds the starting worksheet for a solved problem.

    Cells whose metric is given on their row (source givens, component givens or
    totals givens) are seeded with the solved value at the metric's display
    precision and locked. Every other cell starts blank.
    """
    row_ids = tuple(problem.row_ids())
    cells: Dict[CellKey, WorksheetCell] = {}
    expected: Dict[CellKey, Optional[float]] = {}

    for row_id in row_ids:
        givens = problem.givens_for_row(row_id)
        for key in METRIC_ORDER:
            value = result.value_for(row_id, key)
            expected[(row_id, key)] = value
            if key in givens:
                cells[(row_id, key)] = WorksheetCell(
                    raw=format_seed_value(value, key), value=value, status=CellStatus.GIVEN, given=True,
                )
            else:
                cells[(row_id, key)] = WorksheetCell()

    given_count = sum(1 for cell in cells.values() if cell.given)
    logger.debug(f"Built baseline worksheet for '{problem.id}': {len(cells)} cells, {given_count} given.")
    return Worksheet(
        problem_id=problem.id,
        row_ids=row_ids,
        cells=cells,
        expected=expected,
        grading=config or GradingConfig(),
        complete=_all_resolved(cells),
    )


def grade_input(raw: str, expected: Optional[float], config: Optional[GradingConfig] = None) -> WorksheetCell:
    """Parses and grades one learner entry against its expected value."""
    try:
        value = parse_metric_input(raw)
    except InputParseError as e:
        logger.debug(f"Marking input invalid: {e}")
        return WorksheetCell(raw=raw, value=None, status=CellStatus.INVALID)

    if value is None:
        return WorksheetCell(raw=raw, value=None, status=CellStatus.BLANK)

    if expected is None or not np.isfinite(expected):
        return WorksheetCell(raw=raw, value=value, status=CellStatus.INCORRECT)

    status = CellStatus.CORRECT if within_tolerance(expected, value, config) else CellStatus.INCORRECT
    return WorksheetCell(raw=raw, value=value, status=status)


def on_cell_edit(worksheet: Worksheet, row_id: str, key: Union[MetricKey, str], raw: str) -> Worksheet:
    """
    Applies one keystroke to a worksheet.

    Returns:
        The same snapshot for a given (locked) or unknown cell, otherwise a new
        snapshot with the edited cell graded and completion recomputed.
    """
    try:
        metric = MetricKey(key)
    except ValueError:
        logger.warning(f"Ignoring edit of unknown metric '{key}' on row '{row_id}'.")
        return worksheet

    cell_key = (row_id, metric)
    current = worksheet.cells.get(cell_key)
    if current is None:
        logger.warning(f"Ignoring edit of unknown cell ({row_id}, {metric}) on worksheet '{worksheet.problem_id}'.")
        return worksheet
    if current.given:
        return worksheet

    graded = grade_input(raw, worksheet.expected.get(cell_key), worksheet.grading)
    cells = dict(worksheet.cells)
    cells[cell_key] = graded
    return replace(worksheet, cells=cells, complete=_all_resolved(cells))


def is_complete(worksheet: Worksheet) -> bool:
    return _all_resolved(worksheet.cells)


def _all_resolved(cells: Mapping[CellKey, WorksheetCell]) -> bool:
    return all(cell.resolved for cell in cells.values())
