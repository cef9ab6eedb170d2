"""
analogical/scoring.py - Quadratic distance between belief and truth

Lower is better. The same score tracks a single run over time and serves as
the fitness signal for the evolutionary search.
"""

from typing import Sequence

import numpy as np

from .errors import InvalidArgumentError


def score(belief: np.ndarray, truth: np.ndarray) -> float:
    """Sum of squared errors between two (normalized) grids."""
    if belief.shape != truth.shape:
        raise InvalidArgumentError(
            f"belief shape {belief.shape} does not match truth shape {truth.shape}")
    return float(np.sum((belief - truth) ** 2))


def score_trajectory(snapshots: Sequence[np.ndarray], truth: np.ndarray) -> np.ndarray:
    return np.array([score(s, truth) for s in snapshots], dtype=float)
