# src/circuitry_core/solver/context.py
"""
Defines the `SolveContext`: everything one solve call needs, and nothing more.
"""
from dataclasses import dataclass, field
from typing import Dict

from ..config import SolverConfig
from ..data_structures import Component, Problem
from .resistance import ResistanceResolver


@dataclass(frozen=True)
class SolveContext:
    """
    An immutable container for the inputs and scratch state of a single solve call.

    The resolver (and its memo cache) is created with the context and dies with it;
    two problems solved back-to-back never share a cache.
    """
    problem: Problem
    config: SolverConfig
    components: Dict[str, Component] = field(init=False)
    resolver: ResistanceResolver = field(init=False)

    def __post_init__(self):
        components = self.problem.component_map()
        object.__setattr__(self, "components", components)
        object.__setattr__(self, "resolver", ResistanceResolver(self.problem.arena, components))
