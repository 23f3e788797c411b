"""Tile adjacency rules for two-dimensional grids."""

from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from .bitmatrix import BitMatrix
from .bitset import BitSet

MAX_INT_32 = 2147483647

Vector2 = Tuple[int, int]

DEFAULT_AXES: Tuple[Vector2, ...] = ((0, 1), (1, 0))


class Rules2D:
    """Which tiles may sit next to which along each grid axis.

    For axis ``i``, ``axis_matrices[i]`` has a bit at ``(tile1, tile2)``
    when ``tile1`` is allowed at the offset ``axes[i]`` from ``tile2``.
    """

    MAX_INT_32 = MAX_INT_32

    def __init__(self, tile_count: int = 0, axes: Optional[Iterable[Vector2]] = None) -> None:
        self.tile_count = tile_count
        self.axes: List[Vector2] = [tuple(a) for a in (DEFAULT_AXES if axes is None else axes)]
        self.axis_matrices: List[BitMatrix] = [
            BitMatrix(tile_count, tile_count) for _ in self.axes
        ]
        self.complete_matrices = True
        self.probabilities: List[float] = []
        self.edge_domain: Optional[BitSet] = None
        self.probabilities_enabled = False

    def set_rule(self, axis_index: int, tile1: int, tile2: int, allowed: bool = True) -> None:
        """Allow or forbid a pair; an unknown axis index is ignored."""
        if 0 <= axis_index < len(self.axis_matrices):
            self.axis_matrices[axis_index].set_bit(tile1, tile2, allowed)

    def get_rule(self, axis_index: int, tile1: int, tile2: int) -> bool:
        if 0 <= axis_index < len(self.axis_matrices):
            return self.axis_matrices[axis_index].get_bit(tile1, tile2)
        return False

    def complete_all_matrices(self) -> None:
        for matrix in self.axis_matrices:
            matrix.complete()

    def is_ready(self) -> bool:
        return (
            self.tile_count > 0
            and len(self.axis_matrices) == len(self.axes)
            and (not self.probabilities_enabled or len(self.probabilities) == self.tile_count)
        )

    def influence_range(self) -> Vector2:
        """Return how far, per coordinate, a placed tile can constrain others.

        An axis whose matrix never spreads to every tile makes the range
        along its non-zero components unbounded (``MAX_INT_32``).
        """
        res_x, res_y = 0, 0
        for (ax, ay), matrix in zip(self.axes, self.axis_matrices):
            forward = matrix.longest_path()
            backward = matrix.transpose().longest_path() if forward > 0 else 0
            if forward <= 0 or backward <= 0:
                if ax != 0:
                    res_x = MAX_INT_32
                if ay != 0:
                    res_y = MAX_INT_32
                continue
            longest = max(forward, backward)
            res_x = max(res_x, abs(ax) * longest)
            res_y = max(res_y, abs(ay) * longest)
        return res_x, res_y

    def format(self) -> str:
        return "".join(
            f"Axis {i} ({ax},{ay}):\n{matrix.format_bits()}\n"
            for i, ((ax, ay), matrix) in enumerate(zip(self.axes, self.axis_matrices))
        )

    def __repr__(self) -> str:
        return f"Rules2D(tile_count={self.tile_count}, axes={self.axes})"