# wavecollapse

A wave function collapse solver for tile grids. You say which tiles may sit
next to each other along each axis. The solver then fills a rectangle with tile
indices that satisfy those rules. It narrows cell domains by arc-consistency
propagation, which is AC-3 by default and AC-4 when you enable it. When a cell
runs out of options, it backtracks to an earlier choice.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install .[test]
```

## Modules

- `wavecollapse.bitset.BitSet` is a fixed-size set of tile indices. It supports
  `union`, `intersect` and `xor`, plus in-place versions of each. It also has
  `invert`, `is_superset_of` and `intersects_with`. `get_only_set_bit` returns
  the single set bit. If no bit is set it returns `ONLY_BIT_NO_BITS_SET`, and if
  more than one is set it returns `ONLY_BIT_MORE_BITS_SET`. You can iterate over
  a `BitSet` to get its set bits in ascending order.
- `wavecollapse.bitmatrix.BitMatrix` is a matrix of bits stored as rows of
  `BitSet`. Its methods are:
  - `transpose()`
  - `transform(input_set)`, which returns the union of the rows selected by the
    input
  - `complete()`, which merges overlapping rows
  - `longest_path()`
  - `format_bits()`
- `wavecollapse.rules.Rules2D` holds a tile count, a list of axes and one
  `BitMatrix` per axis. The default axes are `(0, 1)` and `(1, 0)`. Declare
  adjacency with `set_rule(axis_index, tile1, tile2, allowed)` and read it back
  with `get_rule`. `influence_range()` tells how far a placed tile can constrain
  other cells along x and y. It returns `Rules2D.MAX_INT_32` when that range is
  unbounded.
- `wavecollapse.problem.Problem` is the base class for problems the solver
  accepts. `AC4BinaryConstraint` is the base class for constraints used by AC-4
  propagation. `SubProblem` pairs a problem with its dependencies.
- `wavecollapse.problem2d.Problem2D` is a rectangular grid problem. You build it
  from a `Rules2D`, a `Rect(position, size)` and an optional `random.Random`.
  Each rule axis is applied in both directions. `coord_to_id` and `id_to_coord`
  convert between grid coordinates and cell ids.
- `wavecollapse.settings.SolverSettings` is a dataclass with these fields:
  - `allow_backtracking` (default `True`)
  - `require_backtracking` (default `False`)
  - `backtracking_limit` (default `-1`, meaning no limit)
  - `sparse_history_start` (default `10`)
  - `sparse_history_interval` (default `10`)
  - `force_ac3` (default `True`)

  Set `force_ac3=False` to use AC-4 on problems that support it, such as
  `Problem2D`.
- `wavecollapse.solver.Solver` runs the search. Call `solve_step()` to run one
  propagation and observation at a time, or `solve()` to run to the end and get
  the final state.
- `wavecollapse.state.SolverState` holds every cell's domain and its solution or
  entropy, plus the history used for backtracking.

## Example

```python
import random

from wavecollapse.problem2d import Problem2D, Rect
from wavecollapse.rules import Rules2D
from wavecollapse.settings import SolverSettings
from wavecollapse.solver import Solver

# Two tiles, checkerboard: neighbours along both axes must differ.
rules = Rules2D(2, [(0, 1), (1, 0)])
for axis in range(2):
    rules.set_rule(axis, 0, 1, True)
    rules.set_rule(axis, 1, 0, True)

problem = Problem2D(rules, Rect((0, 0), (4, 4)), random.Random(1))
solver = Solver(problem, SolverSettings())
state = solver.solve()

for y in range(4):
    print([state.get_cell_solution(problem.coord_to_id((x, y))) for x in range(4)])
```

Passing a seeded `random.Random` makes runs reproducible. Both the choice of
cell and the choice of tile draw from that generator.

## Results and failure

A solved cell holds its tile index. A cell whose domain became empty holds
`SolverState.CELL_SOLUTION_FAILED`.

The solver can give up on backtracking in two cases: when it exceeds
`backtracking_limit`, or when no earlier choice is left to try. In either case
it falls back to the state with the fewest unsolved cells and carries on without
backtracking. The result may then contain failed cells. If
`require_backtracking` is set and no earlier choice is left, `solve()` raises
`wavecollapse.solver.SolverError` instead.

## Tile probabilities

Set `rules.probabilities` to one weight per tile and set
`rules.probabilities_enabled = True`. `Problem2D` then picks among a cell's
remaining options in proportion to their weights. With probabilities enabled,
`Rules2D.is_ready()` requires one weight per tile.

## What this package does not do

This is a library only. It has no command-line tool. It does not load tile sets
or learn rules from sample images, and it does not render or save the resulting
grid. You supply the rules as `Rules2D`, and you read the output as tile indices
from the final `SolverState`.

## Running the tests

```
pytest
```