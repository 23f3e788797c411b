"""Search state of the solver: cell domains, solutions and history."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .bitset import MAX_INT_VAL, ONLY_BIT_MORE_BITS_SET, ONLY_BIT_NO_BITS_SET, BitSet

CELL_SOLUTION_FAILED = MAX_INT_VAL


@dataclass(eq=False)
class SolverState:
    """One point of the search.

    ``cell_solution_or_entropy`` holds, for each cell, the chosen tile when
    the cell is solved (a value >= 0), ``CELL_SOLUTION_FAILED`` when its
    domain became empty, or the negated entropy (number of options minus
    one) while it is still open.
    """

    CELL_SOLUTION_FAILED = CELL_SOLUTION_FAILED

    cell_domains: List[BitSet] = field(default_factory=list)
    cell_solution_or_entropy: List[int] = field(default_factory=list)
    unsolved_cells: int = 0
    observations_count: int = 0
    previous: Optional[SolverState] = None
    changed_cells: List[int] = field(default_factory=list)
    divergence_cell: int = -1
    divergence_options: List[int] = field(default_factory=list)
    divergence_candidates: Dict[int, bool] = field(default_factory=dict)
    ac4_counters: List[int] = field(default_factory=list)
    ac4_counter_index_coefficients: Tuple[int, int, int] = (0, 0, 0)
    ac4_acknowledged_domains: List[BitSet] = field(default_factory=list)
    rng: random.Random = field(default_factory=random.Random)

    def is_cell_solved(self, cell_id: int) -> bool:
        return self.cell_solution_or_entropy[cell_id] >= 0

    def get_cell_solution(self, cell_id: int) -> int:
        return self.cell_solution_or_entropy[cell_id]

    def is_all_solved(self) -> bool:
        return self.unsolved_cells == 0

    def store_solution(self, cell_id: int, solution: int) -> None:
        self.cell_solution_or_entropy[cell_id] = solution
        self.unsolved_cells -= 1
        self.divergence_candidates.pop(cell_id, None)

    def set_solution(self, cell_id: int, solution: int) -> None:
        """Collapse a cell to a single tile."""
        domain = BitSet(self.cell_domains[0].size)
        domain.set_bit(solution, True)
        self.set_domain(cell_id, domain, 0)

    def set_domain(self, cell_id: int, domain: BitSet, entropy: int = -1) -> bool:
        """Replace a cell's domain; return True if it became empty."""
        if self.cell_domains[cell_id] == domain:
            return False

        self.changed_cells.append(cell_id)
        should_backtrack = False
        only_bit = domain.get_only_set_bit()

        if only_bit == ONLY_BIT_NO_BITS_SET:
            self.store_solution(cell_id, CELL_SOLUTION_FAILED)
            should_backtrack = True
        elif only_bit != ONLY_BIT_MORE_BITS_SET:
            self.store_solution(cell_id, only_bit)
        else:
            if entropy < 0:
                entropy = domain.count_set_bits() - 1
            self.cell_solution_or_entropy[cell_id] = -entropy
            self.divergence_candidates[cell_id] = True

        self.cell_domains[cell_id] = domain
        return should_backtrack

    def extract_changed_cells(self) -> List[int]:
        """Return the cells changed since the last call and forget them."""
        res = self.changed_cells
        self.changed_cells = []
        return res

    def backtrack(self, problem) -> Optional[SolverState]:
        """Find the nearest earlier state that still has an untried option."""
        state = self
        while state.previous is not None:
            next_state = state.previous.diverge(problem)
            if next_state is not None:
                return next_state
            state = state.previous
        return None

    def make_next(self) -> SolverState:
        """Return a successor linked to this state; AC4 data moves over."""
        new_state = SolverState(
            cell_domains=list(self.cell_domains),
            cell_solution_or_entropy=list(self.cell_solution_or_entropy),
            unsolved_cells=self.unsolved_cells,
            observations_count=self.observations_count,
            previous=self,
            divergence_candidates=dict(self.divergence_candidates),
            ac4_counters=self.ac4_counters,
            ac4_counter_index_coefficients=self.ac4_counter_index_coefficients,
            ac4_acknowledged_domains=self.ac4_acknowledged_domains,
            rng=self.rng,
        )
        self.ac4_counters = []
        self.ac4_acknowledged_domains = []
        return new_state

    def make_snapshot(self) -> SolverState:
        """Return an unlinked copy of the domains and solutions."""
        return SolverState(
            cell_domains=list(self.cell_domains),
            cell_solution_or_entropy=list(self.cell_solution_or_entropy),
            unsolved_cells=self.unsolved_cells,
            rng=self.rng,
        )

    def unlink_from_previous(self) -> None:
        self.previous = None

    def pick_divergence_cell(self) -> int:
        """Pick at random one of the open cells with the lowest entropy."""
        candidates: Sequence[int] = list(self.divergence_candidates)
        if not candidates:
            candidates = range(len(self.cell_solution_or_entropy))

        options: List[int] = []
        target_entropy = MAX_INT_VAL
        for cell_id in candidates:
            entropy = -self.cell_solution_or_entropy[cell_id]
            if entropy <= 0:
                continue
            if entropy == target_entropy:
                options.append(cell_id)
            elif entropy < target_entropy:
                options = [cell_id]
                target_entropy = entropy

        if not options:
            raise LookupError("no unsolved cell to diverge on")
        return options[self.rng.randint(0, len(options) - 1)]

    def prepare_divergence(self) -> None:
        self.divergence_cell = self.pick_divergence_cell()
        self.divergence_candidates.pop(self.divergence_cell, None)
        self.divergence_options = list(self.cell_domains[self.divergence_cell])

    def diverge(self, problem) -> Optional[SolverState]:
        """Try the next option on a successor state, or None if none is left."""
        if not self.divergence_options:
            return None
        next_state = self.make_next()
        solution = problem.pick_divergence_option(self.divergence_options)
        next_state.set_solution(self.divergence_cell, solution)
        next_state.observations_count += 1
        return next_state

    def diverge_in_place(self, problem) -> None:
        """Pick an option and apply it to this state, keeping no history."""
        solution = problem.pick_divergence_option(self.divergence_options)
        self.set_solution(self.divergence_cell, solution)
        self.divergence_options = []
        self.divergence_cell = -1
        self.observations_count += 1

    def ac4_counter_offset(self, cell_id: int, constraint_id: int, tile_id: int) -> int:
        a, b, c = self.ac4_counter_index_coefficients
        return a * cell_id + b * constraint_id + c * tile_id

    def decrement_ac4_counter(self, cell_id: int, constraint_id: int, tile_id: int) -> bool:
        """Decrement a support counter; return True when it reaches zero."""
        index = self.ac4_counter_offset(cell_id, constraint_id, tile_id)
        self.ac4_counters[index] -= 1
        return self.ac4_counters[index] == 0

    def ensure_ac4_state(self, problem, binary_constraints) -> None:
        """Build the AC4 support counters unless they already exist."""
        if self.ac4_counters:
            return

        total_cells = problem.cell_count()
        default_domain = problem.default_domain()
        domain_size = default_domain.size
        total_constraints = len(binary_constraints)

        self.ac4_acknowledged_domains = [default_domain] * total_cells
        self.ac4_counters = [0] * (total_cells * total_constraints * domain_size)
        self.ac4_counter_index_coefficients = (total_constraints * domain_size, domain_size, 1)

        for constraint_id, constraint in enumerate(binary_constraints):
            initial = [0] * domain_size
            for tile in default_domain:
                for allowed_tile in constraint.allowed(tile):
                    initial[allowed_tile] += 1
            for cell_id in range(total_cells):
                start = self.ac4_counter_offset(cell_id, constraint_id, 0)
                self.ac4_counters[start:start + domain_size] = initial

        self.changed_cells = []
        for cell_id, cell_domain in enumerate(self.cell_domains):
            if default_domain == cell_domain:
                continue
            for constraint in binary_constraints:
                dependent = constraint.dependent(cell_id)
                if dependent >= 0 and not self.is_cell_solved(dependent):
                    self.changed_cells.append(cell_id)
                    break

    def __repr__(self) -> str:
        return (
            f"SolverState(cells={len(self.cell_domains)}, "
            f"unsolved={self.unsolved_cells}, observations={self.observations_count})"
        )


def make_initial_state(
    num_cells: int, initial_domain: BitSet, rng: Optional[random.Random] = None
) -> SolverState:
    """Return a state where every cell has ``initial_domain`` and is open."""
    entropy = -(initial_domain.count_set_bits() - 1)
    return SolverState(
        cell_domains=[initial_domain] * num_cells,
        cell_solution_or_entropy=[entropy] * num_cells,
        unsolved_cells=num_cells,
        observations_count=0,
        rng=rng if rng is not None else random.Random(),
    )