"""
analogical/concepts.py - Named concept spaces

Attaches labels to the two axes of a grid, so evidence can be stated as
"Orange pump" rather than (4, 3). Concepts on each axis are listed in their
similarity order: neighbours in the list are the most similar concepts.

The product space has one cell per (first, second) pair, e.g.

    colours: Yellow, Ochre, Orange, Red
    shoes:   ballet flat, moccasin, stiletto, pump

gives a 4x4 grid where "Red stiletto" and "Orange pump" are two steps apart.
"""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from .errors import InvalidArgumentError
from .grid import Cell, flat_prior, normalize
from .rules import RuleParameters, update


@dataclass(frozen=True)
class ProductSpace:
    first: Tuple[str, ...]
    second: Tuple[str, ...]

    def __post_init__(self):
        if len(self.first) != len(self.second):
            raise InvalidArgumentError(
                f"grids are square: {len(self.first)} vs {len(self.second)} concepts")
        if not self.first:
            raise InvalidArgumentError("a concept space needs at least one concept")
        for axis in (self.first, self.second):
            if len(set(axis)) != len(axis):
                raise InvalidArgumentError(f"duplicate concept in {axis}")

    @property
    def size(self) -> int:
        return len(self.first)

    def label(self, cell: Cell) -> str:
        x, y = cell
        if not (1 <= x <= self.size and 1 <= y <= self.size):
            raise InvalidArgumentError(f"cell {cell} outside the {self.size}x{self.size} space")
        return f"{self.first[x - 1]} {self.second[y - 1]}"

    def cell(self, label: str) -> Cell:
        """Parse 'Orange pump' into (3, 4): first-space concept, then second."""
        for i, a in enumerate(self.first, 1):
            prefix = a + " "
            if label.startswith(prefix):
                rest = label[len(prefix):]
                if rest in self.second:
                    return i, self.second.index(rest) + 1
        raise InvalidArgumentError(f"Unknown concept: {label!r}")

    def labels(self) -> Dict[str, Cell]:
        return {self.label((i, j)): (i, j)
                for i in range(1, self.size + 1) for j in range(1, self.size + 1)}

    def random_evidence(self, count: int, rng: np.random.Generator) -> List[str]:
        """Labels drawn uniformly with replacement."""
        names = list(self.labels())
        return [names[i] for i in rng.integers(0, len(names), size=count)]

    def update_on(self, labels: Sequence[str], params: RuleParameters) -> List[np.ndarray]:
        """Normalized belief after each labelled observation, starting at the prior."""
        counts = flat_prior(self.size)
        snapshots = [normalize(counts)]
        for label in labels:
            update(counts, self.cell(label), params)
            snapshots.append(normalize(counts))
        return snapshots


SHOE_SPACE = ProductSpace(
    first=("Yellow", "Ochre", "Orange", "Red"),
    second=("ballet flat", "moccasin", "stiletto", "pump"),
)
