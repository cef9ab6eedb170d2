"""
analogical/grid.py - Belief grids over a product of two concept spaces

A grid is an N x N array of non-negative mass. Row i stands for the i-th
concept in the first space, column j for the j-th concept in the second.
Cells are addressed 1-indexed throughout the public API, matching how the
concepts are numbered; the numpy array underneath is 0-indexed.

Every fresh grid starts at 1 in each cell: a flat prior that also acts as
inductive inertia, so no cell ever reaches zero probability.
"""

from typing import Tuple

import numpy as np

from .errors import DegenerateStateError, InvalidArgumentError


Cell = Tuple[int, int]


def check_grid_size(grid_size: int) -> int:
    if int(grid_size) != grid_size or grid_size <= 0:
        raise InvalidArgumentError(f"grid size must be a positive integer, got {grid_size}")
    return int(grid_size)


def flat_prior(grid_size: int) -> np.ndarray:
    """Unnormalized flat prior: every cell holds mass 1."""
    n = check_grid_size(grid_size)
    return np.ones((n, n), dtype=float)


def empty_grid(grid_size: int) -> np.ndarray:
    n = check_grid_size(grid_size)
    return np.zeros((n, n), dtype=float)


def normalize(grid: np.ndarray) -> np.ndarray:
    """
    Return a new array holding grid / total mass.

    Idempotent: normalizing an already normalized grid leaves it unchanged
    (up to floating point). Raises DegenerateStateError on zero total mass.
    """
    total = float(np.sum(grid))
    if total <= 0.0:
        raise DegenerateStateError(f"cannot normalize a grid with total mass {total}")
    return np.asarray(grid, dtype=float) / total


def in_bounds(grid_size: int, cell: Cell) -> bool:
    x, y = cell
    return 1 <= x <= grid_size and 1 <= y <= grid_size


def check_cell(grid: np.ndarray, cell: Cell) -> Cell:
    if len(cell) != 2:
        raise InvalidArgumentError(f"cell must be a (row, column) pair, got {cell!r}")
    x, y = int(cell[0]), int(cell[1])
    if not in_bounds(grid.shape[0], (x, y)):
        raise InvalidArgumentError(
            f"cell {cell} outside a {grid.shape[0]}x{grid.shape[1]} grid")
    return x, y


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def display(grid: np.ndarray, digits: int = 3) -> str:
    """Fixed-width text rendering, one row per line."""
    width = digits + 3
    lines = []
    for row in grid:
        lines.append(" ".join(f"{v:>{width}.{digits}f}" for v in row))
    return "\n".join(lines)
