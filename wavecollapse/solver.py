"""Wave function collapse solver with backtracking and AC3/AC4 propagation."""

from __future__ import annotations

from typing import List, Optional

from .bitset import BitSet
from .problem import AC4BinaryConstraint, Problem
from .settings import SolverSettings
from .state import SolverState, make_initial_state


class SolverError(RuntimeError):
    """Raised when the solver gives up without a result."""


class Solver:
    """Solves a ``Problem`` by observing cells and propagating constraints.

    Each step propagates pending domain changes, then collapses the open
    cell with the lowest entropy. When a domain becomes empty the solver
    returns to an earlier state and tries another option, as long as the
    settings allow it.
    """

    def __init__(self, problem: Problem, settings: Optional[SolverSettings] = None) -> None:
        self.settings = settings if settings is not None else SolverSettings()
        self.problem = problem
        self.backtracking_enabled = self.settings.allow_backtracking
        self.backtracking_count = 0
        self.ac4_enabled = (not self.settings.force_ac3) and problem.supports_ac4()
        self.ac4_constraints: List[AC4BinaryConstraint] = []

        self.current_state: Optional[SolverState] = make_initial_state(
            problem.cell_count(), problem.default_domain(), problem.rng
        )
        self.best_state: SolverState = self.current_state

        if self.ac4_enabled:
            self.ac4_constraints = problem.ac4_binary_constraints()

        problem.populate_initial_state(self.current_state)

    def _propagate_ac3(self) -> bool:
        state = self.current_state
        while True:
            changed = state.extract_changed_cells()
            if not changed:
                return False

            related = {}
            for cell_id in changed:
                for related_id in self.problem.related_cells(cell_id):
                    if not state.is_cell_solved(related_id):
                        related[related_id] = True

            for related_id in related:
                new_domain = self.problem.compute_cell_domain(state, related_id)
                if state.set_domain(related_id, new_domain) and self.backtracking_enabled:
                    return True

    def _propagate_ac4(self) -> bool:
        state = self.current_state
        state.ensure_ac4_state(self.problem, self.ac4_constraints)

        while True:
            changed = state.extract_changed_cells()
            if not changed:
                return False

            acknowledged = state.ac4_acknowledged_domains
            for cell_id in changed:
                new_domain = state.cell_domains[cell_id]
                previous_domain = acknowledged[cell_id]
                if new_domain == previous_domain:
                    continue

                acknowledged[cell_id] = new_domain
                delta = new_domain.xor(previous_domain).to_list()

                for constraint_id, constraint in enumerate(self.ac4_constraints):
                    dependent_cell = constraint.dependent(cell_id)
                    if dependent_cell < 0:
                        continue

                    dependent_domain: BitSet = state.cell_domains[dependent_cell]
                    domain_changed = False

                    for removed in delta:
                        for dependent_removed in constraint.allowed(removed):
                            if not state.decrement_ac4_counter(
                                dependent_cell, constraint_id, dependent_removed
                            ):
                                continue
                            if dependent_domain.get_bit(dependent_removed):
                                if not domain_changed:
                                    dependent_domain = dependent_domain.copy()
                                    domain_changed = True
                                dependent_domain.set_bit(dependent_removed, False)

                    if domain_changed:
                        if dependent_domain.is_empty() and self.backtracking_enabled:
                            return True
                        state.set_domain(dependent_cell, dependent_domain)

    def _propagate(self) -> bool:
        return self._propagate_ac4() if self.ac4_enabled else self._propagate_ac3()

    def _continue_without_backtracking(self) -> None:
        self.current_state = self.best_state
        self.backtracking_enabled = False
        self.current_state.unlink_from_previous()

    def _try_backtrack(self) -> bool:
        """Return to an earlier state; return True if solving must stop."""
        limit = self.settings.backtracking_limit
        if limit > 0 and self.backtracking_count > limit:
            self._continue_without_backtracking()
            return False

        self.current_state = self.current_state.backtrack(self.problem)
        if self.current_state is None:
            if self.settings.require_backtracking:
                return True
            self._continue_without_backtracking()

        self.backtracking_count += 1
        return False

    def _should_keep_previous_state(self, state: SolverState) -> bool:
        if not self.backtracking_enabled:
            return False
        if not self.settings.is_sparse_history_enabled():
            return True
        start = self.settings.sparse_history_start
        if state.observations_count < start:
            return True
        return (state.observations_count - start) % self.settings.sparse_history_interval == 0

    def solve_step(self) -> bool:
        """Run one propagation and observation; return True when finished."""
        if self.current_state is None or self.current_state.is_all_solved():
            return True

        if self._propagate():
            return self._try_backtrack()

        if self.current_state.is_all_solved():
            return True
        if self.current_state.unsolved_cells < self.best_state.unsolved_cells:
            self.best_state = self.current_state

        self.current_state.prepare_divergence()

        if self._should_keep_previous_state(self.current_state):
            next_state = self.current_state.diverge(self.problem)
            if next_state is None:
                return self._try_backtrack()
            self.current_state = next_state
        else:
            self.current_state.diverge_in_place(self.problem)

        return False

    def solve(self) -> SolverState:
        """Step until finished and return the final state.

        Raises ``SolverError`` when backtracking is required but every
        option has been exhausted.
        """
        while not self.solve_step():
            pass
        if self.current_state is None:
            raise SolverError("backtracking is required but no options are left")
        return self.current_state