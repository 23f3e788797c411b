"""Wave function collapse solver for tile grids, with AC-3/AC-4 propagation and backtracking."""

__version__ = "0.1.0"

__all__ = [
    "bitset",
    "bitmatrix",
    "problem",
    "problem2d",
    "rules",
    "settings",
    "solver",
    "state",
]