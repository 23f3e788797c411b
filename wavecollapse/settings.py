"""Tuning options for the solver."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class SolverSettings:
    """Options controlling backtracking and constraint propagation."""

    allow_backtracking: bool = True
    require_backtracking: bool = False
    backtracking_limit: int = -1
    sparse_history_start: int = 10
    sparse_history_interval: int = 10
    force_ac3: bool = True

    def is_sparse_history_enabled(self) -> bool:
        return self.sparse_history_start > 0