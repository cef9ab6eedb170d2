"""
analogical/trial.py - One learner, one world, one evidence stream

A trial:
1. builds a world (or takes one handed in)
2. draws the evidence sequence without replacement
3. starts from the flat prior and applies the rule to each piece of evidence
4. normalizes and scores after every step, step 0 being the flat prior

The mean of the E + 1 scores is the trial's contribution to fitness.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from .grid import Cell, flat_prior, normalize
from .rules import RuleParameters, update
from .scoring import score
from .worlds import DEFAULT_NUM_OBJECTS, World, generate_world, sample_evidence


@dataclass
class TrialResult:
    """Everything a renderer needs to replay one trial."""
    params: RuleParameters
    world: World
    evidence: List[Cell]
    scores: np.ndarray
    snapshots: Optional[List[np.ndarray]] = None

    @property
    def mean_score(self) -> float:
        return float(np.mean(self.scores))

    @property
    def final_belief(self) -> Optional[np.ndarray]:
        return self.snapshots[-1] if self.snapshots else None


def replay(params: RuleParameters, evidence: Sequence[Cell], truth: np.ndarray,
           keep_snapshots: bool = False):
    """
    Update a fresh flat prior on evidence in order, scoring every step.

    Returns (scores, snapshots); snapshots is None unless requested.
    """
    counts = flat_prior(truth.shape[0])
    belief = normalize(counts)
    scores = [score(belief, truth)]
    snapshots = [belief] if keep_snapshots else None

    for cell in evidence:
        update(counts, cell, params)
        belief = normalize(counts)
        scores.append(score(belief, truth))
        if keep_snapshots:
            snapshots.append(belief)

    return np.array(scores, dtype=float), snapshots


def run_single_trial(params: RuleParameters, grid_size: int = 10,
                     num_updates: int = 100,
                     rng: Optional[np.random.Generator] = None,
                     world: Optional[World] = None,
                     policy: str = "random_orderly",
                     num_objects: int = DEFAULT_NUM_OBJECTS,
                     keep_snapshots: bool = True,
                     **policy_args) -> TrialResult:
    if rng is None:
        rng = np.random.default_rng()
    if world is None:
        world = generate_world(policy, grid_size, num_objects, rng, **policy_args)

    evidence = sample_evidence(world, num_updates, rng)
    scores, snapshots = replay(params, evidence, world.truth, keep_snapshots)
    return TrialResult(params=params, world=world, evidence=evidence,
                       scores=scores, snapshots=snapshots)


def trial_score(params: RuleParameters, world: World, num_updates: int,
                rng: np.random.Generator) -> float:
    """Mean score of one trial on a given world, without keeping snapshots."""
    evidence = sample_evidence(world, num_updates, rng)
    scores, _ = replay(params, evidence, world.truth)
    return float(np.mean(scores))
