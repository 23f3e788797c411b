"""Wave function collapse on a rectangular grid of tiles."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .bitmatrix import BitMatrix
from .bitset import BitSet
from .problem import AC4BinaryConstraint, Problem
from .rules import Rules2D
from .state import CELL_SOLUTION_FAILED, SolverState

Vector2 = Tuple[int, int]


@dataclass(frozen=True)
class Rect:
    """An integer rectangle given by its corner position and its size."""

    position: Vector2 = (0, 0)
    size: Vector2 = (0, 0)

    def has_point(self, point: Vector2) -> bool:
        px, py = point
        x, y = self.position
        w, h = self.size
        return x <= px < x + w and y <= py < y + h

    def area(self) -> int:
        return self.size[0] * self.size[1]


class Grid2DConstraint(AC4BinaryConstraint):
    """AC4 constraint between grid cells one axis step apart."""

    def __init__(self, axis: Vector2, size: Vector2, axis_matrix: BitMatrix) -> None:
        self.axis: Vector2 = tuple(axis)
        self.problem_size = Rect((0, 0), tuple(size))
        self.allowed_tiles: List[List[int]] = [row.to_list() for row in axis_matrix.rows]

    def cell_id(self, pos: Vector2) -> int:
        """Return the id of the cell at ``pos``, or -1 outside the grid."""
        if self.problem_size.has_point(pos):
            return pos[0] + pos[1] * self.problem_size.size[0]
        return -1

    def cell_pos(self, cell_id: int) -> Vector2:
        width = self.problem_size.size[0]
        return cell_id % width, cell_id // width

    def dependent(self, cell_id: int) -> int:
        x, y = self.cell_pos(cell_id)
        return self.cell_id((x - self.axis[0], y - self.axis[1]))

    def dependency(self, cell_id: int) -> int:
        x, y = self.cell_pos(cell_id)
        return self.cell_id((x + self.axis[0], y + self.axis[1]))

    def allowed(self, dependency_variant: int) -> List[int]:
        if 0 <= dependency_variant < len(self.allowed_tiles):
            return self.allowed_tiles[dependency_variant]
        return []


class Problem2D(Problem):
    """A grid of cells whose neighbours are constrained by ``Rules2D``.

    Every rule axis is used in both directions: the reverse direction uses
    the transposed matrix.
    """

    def __init__(self, rules: Rules2D, rect: Rect, rng: Optional[random.Random] = None) -> None:
        super().__init__(rng)
        self.rules: Optional[Rules2D] = rules
        self.rect = rect
        self.renderable_rect = rect
        self.edges_rect = rect
        self.tile_count = rules.tile_count
        self.axes: List[Vector2] = []
        self.axis_matrices: List[BitMatrix] = []
        for (ax, ay), matrix in zip(rules.axes, rules.axis_matrices):
            self.axes.append((ax, ay))
            self.axis_matrices.append(matrix)
            self.axes.append((-ax, -ay))
            self.axis_matrices.append(matrix.transpose())

    def coord_to_id(self, coord: Vector2) -> int:
        return self.rect.size[0] * coord[1] + coord[0]

    def id_to_coord(self, cell_id: int) -> Vector2:
        width = self.rect.size[0]
        return cell_id % width, cell_id // width

    def _neighbours(self, cell_id: int):
        """Yield ``(axis index, neighbour id)`` for neighbours inside the grid."""
        x, y = self.id_to_coord(cell_id)
        ox, oy = self.rect.position
        for i, (ax, ay) in enumerate(self.axes):
            nx, ny = x + ax, y + ay
            if self.rect.has_point((nx + ox, ny + oy)):
                yield i, self.coord_to_id((nx, ny))

    def cell_count(self) -> int:
        return self.rect.area()

    def default_domain(self) -> BitSet:
        return BitSet(self.tile_count, True)

    def compute_cell_domain(self, state: SolverState, cell_id: int) -> BitSet:
        """Narrow a cell's domain by what each neighbour still allows."""
        res = state.cell_domains[cell_id].copy()
        for i, other_id in self._neighbours(cell_id):
            if state.cell_solution_or_entropy[other_id] == CELL_SOLUTION_FAILED:
                continue
            res.intersect_in_place(self.axis_matrices[i].transform(state.cell_domains[other_id]))
        return res

    def mark_related_cells(self, changed_cell_id: int, mark_cell: Callable[[int], object]) -> None:
        for _, other_id in self._neighbours(changed_cell_id):
            mark_cell(other_id)

    def related_cells(self, changed_cell_id: int) -> List[int]:
        return [other_id for _, other_id in self._neighbours(changed_cell_id)]

    def pick_divergence_option(self, options: List[int]) -> int:
        """Remove and return an option, weighted by tile probability if enabled."""
        if self.rules is None or not self.rules.probabilities_enabled:
            return super().pick_divergence_option(options)
        if not options:
            return -1
        if len(options) == 1:
            return options.pop(0)

        probabilities = self.rules.probabilities

        def weight(option: int) -> float:
            return probabilities[option] if 0 <= option < len(probabilities) else 0.0

        total = sum(weight(option) for option in options)
        value = self.rng.uniform(0.0, total)
        running = 0.0
        chosen = 0
        for index, option in enumerate(options):
            running += weight(option)
            if running > value:
                chosen = index
                break
        return options.pop(chosen)

    def supports_ac4(self) -> bool:
        return True

    def ac4_binary_constraints(self) -> List[Grid2DConstraint]:
        return [
            Grid2DConstraint(axis, self.rect.size, matrix)
            for axis, matrix in zip(self.axes, self.axis_matrices)
        ]