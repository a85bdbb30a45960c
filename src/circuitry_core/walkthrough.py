# src/circuitry_core/walkthrough.py
"""
Builds the step-by-step solution shown to a learner after (or instead of) the
worksheet: reduce the network, find the total current, split it across the loads,
then read off the target answer.
"""
import logging
from dataclasses import dataclass
from typing import List

from .data_structures import ArenaNode, CircuitNetwork, MetricKey, NodeKind, Problem
from .formatting import format_metric_value
from .solver.results import SolveResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolutionStep:
    title: str
    detail: str
    formula: str = ""


def _node_name(node: ArenaNode) -> str:
    if node.kind is NodeKind.COMPONENT:
        return node.component_id
    return node.label or node.node_id or f"{node.kind.value} #{node.index}"


def _node_resistance(node: ArenaNode, result: SolveResult) -> float:
    if node.kind is NodeKind.COMPONENT:
        return result.components[node.component_id].resistance
    return result.branches[node.branch_key].resistance


def _reduction_steps(problem: Problem, result: SolveResult) -> List[SolutionStep]:
    """One step per internal node, innermost groups first."""
    network = problem.arena
    steps: List[SolutionStep] = []

    def visit(index: int):
        node = network[index]
        if node.kind is NodeKind.COMPONENT:
            return
        for child in node.children:
            visit(child)

        children = [network[child] for child in node.children]
        names = [_node_name(child) for child in children]
        ohms = ", ".join(
            f"{name} = {format_metric_value(_node_resistance(child, result), MetricKey.RESISTANCE)}"
            for name, child in zip(names, children)
        )
        equivalent = format_metric_value(_node_resistance(node, result), MetricKey.RESISTANCE)
        if node.kind is NodeKind.SERIES:
            formula = "R = " + " + ".join(f"R({name})" for name in names)
            detail = f"Series resistances add: {ohms}. Together they act as {equivalent}."
        else:
            formula = "1/R = " + " + ".join(f"1/R({name})" for name in names)
            detail = f"Parallel branches share the voltage: {ohms}. Together they act as {equivalent}."
        steps.append(SolutionStep(title=f"Reduce {_node_name(node)}", detail=detail, formula=formula))

    visit(CircuitNetwork.ROOT_INDEX)
    return steps


def build_solution_steps(problem: Problem, result: SolveResult) -> List[SolutionStep]:
    """
    Builds the worked solution of a solved problem.

    The steps are generated from the solve result, so they always agree with the
    values the worksheet grades against.
    """
    totals = result.totals
    steps = _reduction_steps(problem, result)

    steps.append(SolutionStep(
        title="Total current",
        detail=(
            f"The source supplies {format_metric_value(totals.voltage, MetricKey.VOLTAGE)} across "
            f"{format_metric_value(totals.resistance, MetricKey.RESISTANCE)}, so it delivers "
            f"{format_metric_value(totals.current, MetricKey.CURRENT)}."
        ),
        formula="I(T) = E(T) / R(T)",
    ))

    for component in problem.components:
        metrics = result.components.get(component.id)
        if metrics is None:
            continue
        steps.append(SolutionStep(
            title=f"{component.label}: current and voltage",
            detail=(
                f"{component.label} carries {format_metric_value(metrics.current, MetricKey.CURRENT)} "
                f"and drops {format_metric_value(metrics.voltage, MetricKey.VOLTAGE)}."
            ),
            formula="E = I × R",
        ))
        steps.append(SolutionStep(
            title=f"{component.label}: power",
            detail=f"{component.label} dissipates {format_metric_value(metrics.power, MetricKey.POWER)}.",
            formula="P = E × I",
        ))

    target = problem.target_metric
    answer = format_metric_value(result.value_for(target.row_id, target.key), target.key)
    steps.append(SolutionStep(
        title="Answer",
        detail=f"{problem.target_question or f'{target.key.value.capitalize()} of {target.row_id}'}: {answer}",
    ))

    logger.debug(f"Built {len(steps)} solution step(s) for '{problem.id}'.")
    return steps
