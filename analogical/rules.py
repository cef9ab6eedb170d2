"""
analogical/rules.py - Similarity-sensitive update rule

The rule adds mass to the cell the evidence falls in, and a bonus to
nearby cells that shrinks with distance:

    observed cell                          += a0
    4 axis neighbours at distance 1        += a1 / b1
    4 axis cells two steps along one axis  += a2 / b2
    4 diagonal neighbours                  += a2 / b2

Cells that would fall outside the grid are skipped. With a1 = a2 = 0 and
a0 = 1 the rule reduces to the Straight Rule: plain tallying.
"""

from dataclasses import dataclass, astuple
from typing import List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError
from .grid import Cell, check_cell


PARAM_NAMES = ("a0", "a1", "a2", "b1", "b2")

# (dx, dy, ring) for every cell that receives a bonus; ring 1 uses a1/b1,
# ring 2 uses a2/b2
NEIGHBOURHOOD: Tuple[Tuple[int, int, int], ...] = (
    (-1, 0, 1), (1, 0, 1), (0, -1, 1), (0, 1, 1),
    (-2, 0, 2), (2, 0, 2), (0, -2, 2), (0, 2, 2),
    (-1, -1, 2), (-1, 1, 2), (1, -1, 2), (1, 1, 2),
)


@dataclass(frozen=True)
class RuleParameters:
    """
    One setting of the update rule (and one genome in the evolution).

    a0, a1, a2 are the mass bonuses at distance 0, 1 and 2;
    b1, b2 divide the distance-1 and distance-2 bonuses.
    """
    a0: float = 1.0
    a1: float = 0.0
    a2: float = 0.0
    b1: float = 1.0
    b2: float = 1.0

    def __post_init__(self):
        for name in ("a0", "a1", "a2"):
            value = getattr(self, name)
            if not np.isfinite(value) or value < 0:
                raise InvalidArgumentError(f"{name} must be >= 0, got {value}")
        for name in ("b1", "b2"):
            value = getattr(self, name)
            if not np.isfinite(value) or value <= 0:
                raise InvalidArgumentError(f"{name} must be > 0, got {value}")

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> 'RuleParameters':
        if len(values) != len(PARAM_NAMES):
            raise InvalidArgumentError(
                f"expected {len(PARAM_NAMES)} parameters, got {len(values)}")
        return cls(*(float(v) for v in values))

    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return astuple(self)

    def as_array(self) -> np.ndarray:
        return np.array(self.as_tuple(), dtype=float)

    @property
    def near_bonus(self) -> float:
        return self.a1 / self.b1

    @property
    def far_bonus(self) -> float:
        return self.a2 / self.b2

    @property
    def is_straight(self) -> bool:
        return self.a1 == 0 and self.a2 == 0

    def __str__(self) -> str:
        return ", ".join(f"{n}={v:.3f}" for n, v in zip(PARAM_NAMES, self.as_tuple()))


STRAIGHT_RULE = RuleParameters(1.0, 0.0, 0.0, 1.0, 1.0)
ANALOGICAL_RULE = RuleParameters(1.0, 1.0, 1.0, 2.0, 3.0)


def update(grid: np.ndarray, cell: Cell, params: RuleParameters) -> np.ndarray:
    """
    Apply one piece of evidence at the 1-indexed cell, in place.

    Returns the same grid for convenience.
    """
    x, y = check_cell(grid, cell)
    n = grid.shape[0]
    bonus = {1: params.near_bonus, 2: params.far_bonus}

    grid[x - 1, y - 1] += params.a0
    for dx, dy, ring in NEIGHBOURHOOD:
        i, j = x + dx, y + dy
        if 1 <= i <= n and 1 <= j <= n:
            grid[i - 1, j - 1] += bonus[ring]
    return grid


def bonus_at(offset: Tuple[int, int], params: RuleParameters) -> float:
    """Mass the rule adds at a given (dx, dy) from the observed cell."""
    if offset == (0, 0):
        return params.a0
    for dx, dy, ring in NEIGHBOURHOOD:
        if (dx, dy) == offset:
            return params.near_bonus if ring == 1 else params.far_bonus
    return 0.0


def mean_parameters(genomes: List[RuleParameters]) -> RuleParameters:
    if not genomes:
        raise InvalidArgumentError("cannot average an empty population")
    return RuleParameters.from_sequence(np.mean([g.as_tuple() for g in genomes], axis=0))
