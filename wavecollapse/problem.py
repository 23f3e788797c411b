"""Base classes describing a problem the solver can work on."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .bitset import BitSet
from .state import SolverState


class AC4BinaryConstraint:
    """A constraint between a cell and the one it depends on, for AC4.

    Subclasses override the three methods. The defaults describe a
    constraint that links nothing.
    """

    def dependent(self, cell_id: int) -> int:
        """Return the cell that depends on ``cell_id``, or -1 if there is none."""
        return -1

    def dependency(self, cell_id: int) -> int:
        """Return the cell that ``cell_id`` depends on, or -1 if there is none."""
        return -1

    def allowed(self, dependency_variant: int) -> List[int]:
        """Return the dependent tiles that ``dependency_variant`` supports."""
        return []


@dataclass
class SubProblem:
    """A part of a problem together with the parts it depends on."""

    problem: Problem
    dependencies: List[int] = field(default_factory=list)


class Problem:
    """A constraint problem over numbered cells, each with a bit-set domain.

    The base class describes an empty problem; concrete problems override
    the methods that describe their cells and constraints.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.initial_state: Optional[SolverState] = None

    def cell_count(self) -> int:
        return -1

    def default_domain(self) -> BitSet:
        return BitSet(0)

    def populate_initial_state(self, state: SolverState) -> None:
        """Record the state solving starts from.

        The base problem leaves the state's domains as they are; subclasses
        override this to seed cells before solving begins.
        """
        self.initial_state = state

    def compute_cell_domain(self, state: SolverState, cell_id: int) -> BitSet:
        return BitSet(0)

    def mark_related_cells(self, changed_cell_id: int, mark_cell: Callable[[int], object]) -> None:
        """Call ``mark_cell`` for every cell related to the changed one."""
        for cell_id in self.related_cells(changed_cell_id):
            mark_cell(cell_id)

    def related_cells(self, changed_cell_id: int) -> List[int]:
        """Return the cells whose domains depend on the changed cell."""
        return []

    def split(self, concurrency_limit: int) -> List[SubProblem]:
        """Split into independent parts; the base problem is a single part."""
        return [SubProblem(self, [])]

    def pick_divergence_option(self, options: List[int]) -> int:
        """Remove a random option from ``options`` and return it, or -1 if empty."""
        if not options:
            return -1
        index = self.rng.randint(0, len(options) - 1)
        return options.pop(index)

    def supports_ac4(self) -> bool:
        return False

    def ac4_binary_constraints(self) -> List[AC4BinaryConstraint]:
        return []

    def debug_array_contents(self, arr: Sequence[int]) -> str:
        """Describe an integer sequence as ``size=N [a, b, ...]``."""
        items = ", ".join(str(int(v)) for v in arr)
        return f"size={len(arr)} [{items}]"