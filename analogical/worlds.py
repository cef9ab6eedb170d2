"""
analogical/worlds.py - Synthetic worlds to learn about

A world is a finite population of objects, each sitting in one cell of the
product space, plus the ground-truth distribution those objects induce
(relative frequency per cell). Evidence is drawn from the objects without
replacement, so each object can be observed at most once.

Policies:
- ORDERLY: row ~ Binomial(N, p1), column ~ Binomial(N, p2), clipped into
  [1, N] so a draw of 0 lands on 1
- RANDOM_ORDERLY: same, but p1 and p2 are drawn uniformly per world
- DISORDERLY: row and column uniform on [1, N]
- POINTED: the first K objects of a disorderly world fix a support of K
  cells; every object is then reassigned uniformly to one of them
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError
from .grid import Cell, check_grid_size, empty_grid, normalize


DEFAULT_GRID_SIZE = 10
DEFAULT_NUM_OBJECTS = 1000
DEFAULT_SUPPORT_SIZE = 10


class WorldPolicy(Enum):
    ORDERLY = "orderly"
    RANDOM_ORDERLY = "random_orderly"
    DISORDERLY = "disorderly"
    POINTED = "pointed"


@dataclass(frozen=True)
class World:
    """Ground truth plus the ordered objects it was tallied from."""
    truth: np.ndarray
    objects: Tuple[Cell, ...]
    policy: WorldPolicy
    info: dict = field(default_factory=dict)

    @property
    def grid_size(self) -> int:
        return self.truth.shape[0]

    @property
    def num_objects(self) -> int:
        return len(self.objects)

    def support(self) -> List[Cell]:
        """Cells holding at least one object, 1-indexed."""
        rows, cols = np.nonzero(self.truth)
        return [(int(r) + 1, int(c) + 1) for r, c in zip(rows, cols)]

    def summary(self) -> str:
        lines = [
            f"World: {self.policy.value}",
            f"  Grid: {self.grid_size}x{self.grid_size}",
            f"  Objects: {self.num_objects:,}",
            f"  Occupied cells: {len(self.support())}",
        ]
        for key, value in self.info.items():
            lines.append(f"  {key}: {value:.3f}" if isinstance(value, float)
                         else f"  {key}: {value}")
        return "\n".join(lines)


def _check_num_objects(num_objects: int) -> int:
    if int(num_objects) != num_objects or num_objects <= 0:
        raise InvalidArgumentError(f"number of objects must be positive, got {num_objects}")
    return int(num_objects)


def _check_probability(name: str, p: float) -> float:
    if not 0.0 <= p <= 1.0:
        raise InvalidArgumentError(f"{name} must lie in [0, 1], got {p}")
    return float(p)


def tally(objects: Sequence[Cell], grid_size: int) -> np.ndarray:
    """Count objects per cell."""
    counts = empty_grid(grid_size)
    for x, y in objects:
        counts[x - 1, y - 1] += 1
    return counts


def _build(objects: Sequence[Cell], grid_size: int, policy: WorldPolicy,
           **info) -> World:
    objects = tuple((int(x), int(y)) for x, y in objects)
    truth = normalize(tally(objects, grid_size))
    truth.setflags(write=False)
    return World(truth=truth, objects=objects, policy=policy, info=info)


# ============================================================
# POLICIES
# ============================================================

def orderly_world(grid_size: int, num_objects: int, rng: np.random.Generator,
                  p1: float = 0.7, p2: float = 0.2) -> World:
    n = check_grid_size(grid_size)
    m = _check_num_objects(num_objects)
    p1 = _check_probability("p1", p1)
    p2 = _check_probability("p2", p2)
    rows = np.clip(rng.binomial(n, p1, size=m), 1, n)
    cols = np.clip(rng.binomial(n, p2, size=m), 1, n)
    return _build(zip(rows, cols), n, WorldPolicy.ORDERLY, p1=p1, p2=p2)


def random_orderly_world(grid_size: int, num_objects: int,
                         rng: np.random.Generator) -> World:
    """Orderly world whose binomial parameters are themselves random."""
    p1, p2 = rng.uniform(0.0, 1.0, size=2)
    world = orderly_world(grid_size, num_objects, rng, p1=p1, p2=p2)
    return World(world.truth, world.objects, WorldPolicy.RANDOM_ORDERLY, world.info)


def disorderly_world(grid_size: int, num_objects: int,
                     rng: np.random.Generator) -> World:
    n = check_grid_size(grid_size)
    m = _check_num_objects(num_objects)
    rows = rng.integers(1, n + 1, size=m)
    cols = rng.integers(1, n + 1, size=m)
    return _build(zip(rows, cols), n, WorldPolicy.DISORDERLY)


def pointed_world(grid_size: int, num_objects: int, rng: np.random.Generator,
                  support_size: int = DEFAULT_SUPPORT_SIZE,
                  base: Optional[World] = None) -> World:
    """
    Concentrate every object on the locations of the first K objects of a
    disorderly world. Duplicate locations among those K count once per
    occurrence, so a cell picked twice is twice as likely.
    """
    n = check_grid_size(grid_size)
    m = _check_num_objects(num_objects)
    if base is None:
        base = disorderly_world(n, max(m, support_size), rng)
    elif base.grid_size != n:
        raise InvalidArgumentError(
            f"base world is {base.grid_size}x{base.grid_size}, expected {n}x{n}")
    if support_size <= 0 or support_size > base.num_objects:
        raise InvalidArgumentError(
            f"support size must lie in [1, {base.num_objects}], got {support_size}")

    support = base.objects[:support_size]
    picks = rng.integers(0, support_size, size=m)
    return _build((support[i] for i in picks), n, WorldPolicy.POINTED,
                  support_size=support_size)


def generate_world(policy, grid_size: int = DEFAULT_GRID_SIZE,
                   num_objects: int = DEFAULT_NUM_OBJECTS,
                   rng: Optional[np.random.Generator] = None,
                   **policy_args) -> World:
    """Dispatch on policy name (or WorldPolicy) and build a world."""
    if rng is None:
        rng = np.random.default_rng()
    try:
        policy = WorldPolicy(policy.value if isinstance(policy, WorldPolicy) else policy)
    except ValueError:
        raise InvalidArgumentError(f"Unknown world policy: {policy}") from None

    if policy is WorldPolicy.ORDERLY:
        return orderly_world(grid_size, num_objects, rng, **policy_args)
    if policy is WorldPolicy.RANDOM_ORDERLY:
        return random_orderly_world(grid_size, num_objects, rng, **policy_args)
    if policy is WorldPolicy.DISORDERLY:
        return disorderly_world(grid_size, num_objects, rng, **policy_args)
    return pointed_world(grid_size, num_objects, rng, **policy_args)


def sample_evidence(world: World, num_evidence: int,
                    rng: np.random.Generator) -> List[Cell]:
    """Draw num_evidence objects without replacement, in random order."""
    if num_evidence < 0:
        raise InvalidArgumentError(f"evidence size must be >= 0, got {num_evidence}")
    if num_evidence > world.num_objects:
        raise InvalidArgumentError(
            f"cannot draw {num_evidence} pieces of evidence from "
            f"{world.num_objects} objects without replacement")
    picks = rng.choice(world.num_objects, size=num_evidence, replace=False)
    return [world.objects[i] for i in picks]


# ============================================================
# CONFIG
# ============================================================

@dataclass
class WorldConfig:
    """How each trial's world gets built."""
    grid_size: int = DEFAULT_GRID_SIZE
    num_objects: int = DEFAULT_NUM_OBJECTS
    policy: str = WorldPolicy.RANDOM_ORDERLY.value
    p1: float = 0.7
    p2: float = 0.2
    support_size: int = DEFAULT_SUPPORT_SIZE

    def validate(self):
        check_grid_size(self.grid_size)
        _check_num_objects(self.num_objects)
        try:
            WorldPolicy(self.policy)
        except ValueError:
            raise InvalidArgumentError(f"Unknown world policy: {self.policy}") from None
        _check_probability("p1", self.p1)
        _check_probability("p2", self.p2)

    def policy_args(self) -> dict:
        policy = WorldPolicy(self.policy)
        if policy is WorldPolicy.ORDERLY:
            return {"p1": self.p1, "p2": self.p2}
        if policy is WorldPolicy.POINTED:
            return {"support_size": self.support_size}
        return {}

    def make(self, rng: np.random.Generator) -> World:
        return generate_world(self.policy, self.grid_size, self.num_objects,
                              rng, **self.policy_args())
