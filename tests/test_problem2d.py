import random

import pytest

from wavecollapse.bitset import BitSet
from wavecollapse.problem import Problem
from wavecollapse.problem2d import Grid2DConstraint, Problem2D, Rect
from wavecollapse.rules import Rules2D
from wavecollapse.state import CELL_SOLUTION_FAILED, make_initial_state


def identity_rules(tiles=2):
    rules = Rules2D(tiles, [(0, 1), (1, 0)])
    for axis in range(2):
        for t in range(tiles):
            rules.set_rule(axis, t, t)
    return rules


def asymmetric_rules():
    rules = Rules2D(3, [(0, 1), (1, 0)])
    rules.set_rule(0, 0, 1)
    rules.set_rule(0, 2, 1)
    rules.set_rule(1, 1, 0)
    rules.set_rule(1, 2, 2)
    return rules


@pytest.fixture
def grid():
    return Problem2D(identity_rules(), Rect((0, 0), (3, 3)), random.Random(0))


def test_rect_has_point():
    rect = Rect((2, 3), (4, 5))
    assert rect.has_point((2, 3))
    assert rect.has_point((5, 7))
    assert not rect.has_point((6, 3))
    assert not rect.has_point((2, 8))
    assert not rect.has_point((1, 4))


def test_rect_area():
    assert Rect((1, 1), (4, 5)).area() == 20


def test_axes_include_reverse_directions(grid):
    assert grid.axes == [(0, 1), (0, -1), (1, 0), (-1, 0)]


def test_reverse_matrices_are_transposes():
    rules = asymmetric_rules()
    problem = Problem2D(rules, Rect((0, 0), (2, 2)))
    assert problem.axis_matrices[0] is rules.axis_matrices[0]
    assert problem.axis_matrices[1] == rules.axis_matrices[0].transpose()
    assert problem.axis_matrices[3] == rules.axis_matrices[1].transpose()


def test_rects_default_to_initial_rect(grid):
    assert grid.renderable_rect == grid.rect
    assert grid.edges_rect == grid.rect


def test_coord_id_round_trip():
    problem = Problem2D(identity_rules(), Rect((0, 0), (4, 3)))
    ids = [problem.coord_to_id((x, y)) for y in range(3) for x in range(4)]
    assert ids == list(range(problem.cell_count()))
    for cell_id in ids:
        assert problem.coord_to_id(problem.id_to_coord(cell_id)) == cell_id


def test_cell_count_and_default_domain(grid):
    assert grid.cell_count() == 9
    domain = grid.default_domain()
    assert domain == BitSet(2, True)


def test_related_cells_are_grid_neighbours(grid):
    for cell_id in range(grid.cell_count()):
        x, y = grid.id_to_coord(cell_id)
        expected = {
            grid.coord_to_id((nx, ny))
            for nx, ny in ((x, y + 1), (x, y - 1), (x + 1, y), (x - 1, y))
            if 0 <= nx < 3 and 0 <= ny < 3
        }
        assert set(grid.related_cells(cell_id)) == expected
    assert sorted(grid.related_cells(4)) == [1, 3, 5, 7]


def test_mark_related_cells_matches_related_cells(grid):
    for cell_id in range(grid.cell_count()):
        marked = []
        grid.mark_related_cells(cell_id, marked.append)
        assert marked == grid.related_cells(cell_id)


def test_compute_cell_domain_follows_solved_neighbour(grid):
    state = make_initial_state(9, grid.default_domain())
    state.set_solution(1, 0)
    domain = grid.compute_cell_domain(state, 0)
    assert domain.to_list() == [0]
    assert state.cell_domains[0] == BitSet(2, True)


def test_compute_cell_domain_ignores_failed_neighbour(grid):
    state = make_initial_state(9, grid.default_domain())
    state.set_domain(1, BitSet(2))
    assert state.get_cell_solution(1) == CELL_SOLUTION_FAILED
    assert grid.compute_cell_domain(state, 0) == BitSet(2, True)


def test_grid_constraint_cell_ids():
    rules = identity_rules()
    constraint = Grid2DConstraint((1, 0), (3, 2), rules.axis_matrices[1])
    assert constraint.cell_id((3, 0)) == -1
    assert constraint.cell_id((-1, 0)) == -1
    for cell_id in range(6):
        assert constraint.cell_id(constraint.cell_pos(cell_id)) == cell_id


def test_grid_constraint_dependent_and_dependency_are_inverse():
    rules = identity_rules()
    constraint = Grid2DConstraint((1, 0), (3, 2), rules.axis_matrices[1])
    for cell_id in range(6):
        dep = constraint.dependency(cell_id)
        if dep >= 0:
            assert constraint.dependent(dep) == cell_id
        dependent = constraint.dependent(cell_id)
        if dependent >= 0:
            assert constraint.dependency(dependent) == cell_id
    assert constraint.dependency(2) == -1
    assert constraint.dependent(0) == -1


def test_grid_constraint_allowed_matches_rows():
    rules = asymmetric_rules()
    matrix = rules.axis_matrices[0]
    constraint = Grid2DConstraint((0, 1), (2, 2), matrix)
    for tile in range(3):
        assert constraint.allowed(tile) == matrix.rows[tile].to_list()
    assert constraint.allowed(3) == []
    assert constraint.allowed(-1) == []


def test_ac4_constraints_cover_every_axis(grid):
    assert grid.supports_ac4() is True
    constraints = grid.ac4_binary_constraints()
    assert [c.axis for c in constraints] == grid.axes
    for constraint, matrix in zip(constraints, grid.axis_matrices):
        assert constraint.allowed_tiles == [row.to_list() for row in matrix.rows]


def test_ensure_ac4_state_with_grid(grid):
    state = make_initial_state(9, grid.default_domain())
    constraints = grid.ac4_binary_constraints()
    state.ensure_ac4_state(grid, constraints)
    assert len(state.ac4_counters) == 9 * len(constraints) * 2
    assert all(count == 1 for count in state.ac4_counters)


def test_pick_without_probabilities_uses_base_behaviour(grid):
    options = [0, 1]
    picked = grid.pick_divergence_option(options)
    assert picked in (0, 1)
    assert len(options) == 1
    assert isinstance(grid, Problem)


def test_pick_with_probabilities_prefers_weighted_tile():
    rules = identity_rules()
    rules.probabilities_enabled = True
    rules.probabilities = [0.0, 1.0]
    problem = Problem2D(rules, Rect((0, 0), (2, 2)), random.Random(3))
    for _ in range(20):
        options = [1, 0]
        assert problem.pick_divergence_option(options) == 1
        assert options == [0]


def test_pick_with_probabilities_single_and_empty():
    rules = identity_rules()
    rules.probabilities_enabled = True
    rules.probabilities = [1.0, 1.0]
    problem = Problem2D(rules, Rect((0, 0), (2, 2)))
    options = [1]
    assert problem.pick_divergence_option(options) == 1
    assert options == []
    assert problem.pick_divergence_option([]) == -1