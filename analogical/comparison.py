"""
analogical/comparison.py - Several rules, same world, same evidence

Whether analogy helps depends on the world: similarity-sensitive updating
pays off when mass clusters smoothly (orderly worlds) and costs accuracy when
it is scattered or concentrated on a few isolated cells. Running the rules
on an identical evidence stream isolates that effect from sampling noise.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .errors import InvalidArgumentError
from .grid import Cell
from .rules import ANALOGICAL_RULE, STRAIGHT_RULE, RuleParameters
from .trial import replay
from .worlds import World, WorldPolicy, disorderly_world, orderly_world, pointed_world, sample_evidence


DEFAULT_RULES = {
    "straight": STRAIGHT_RULE,
    "analogical": ANALOGICAL_RULE,
}


@dataclass
class Comparison:
    world: World
    evidence: List[Cell]
    scores: Dict[str, np.ndarray]

    def mean_scores(self) -> Dict[str, float]:
        return {name: float(np.mean(s)) for name, s in self.scores.items()}

    def final_scores(self) -> Dict[str, float]:
        return {name: float(s[-1]) for name, s in self.scores.items()}

    def winner(self) -> str:
        means = self.mean_scores()
        return min(means, key=means.get)

    def summary(self) -> str:
        lines = [f"{self.world.policy.value} world, {len(self.evidence)} updates"]
        finals = self.final_scores()
        for name, mean in self.mean_scores().items():
            lines.append(f"  {name:<12} mean SSE={mean:.5f} final SSE={finals[name]:.5f}")
        lines.append(f"  best: {self.winner()}")
        return "\n".join(lines)


def compare_rules(world: World, num_updates: int, rng: np.random.Generator,
                  rules: Optional[Dict[str, RuleParameters]] = None) -> Comparison:
    rules = rules or DEFAULT_RULES
    if not rules:
        raise InvalidArgumentError("no rules to compare")
    evidence = sample_evidence(world, num_updates, rng)
    scores = {name: replay(params, evidence, world.truth)[0]
              for name, params in rules.items()}
    return Comparison(world=world, evidence=evidence, scores=scores)


def three_worlds(grid_size: int, num_objects: int, rng: np.random.Generator,
                 p1: float = 0.7, p2: float = 0.2,
                 support_size: int = 10) -> Dict[WorldPolicy, World]:
    """Orderly, disorderly, and a pointed world built on the disorderly one."""
    orderly = orderly_world(grid_size, num_objects, rng, p1=p1, p2=p2)
    disorderly = disorderly_world(grid_size, num_objects, rng)
    pointed = pointed_world(grid_size, num_objects, rng,
                            support_size=support_size, base=disorderly)
    return {
        WorldPolicy.ORDERLY: orderly,
        WorldPolicy.DISORDERLY: disorderly,
        WorldPolicy.POINTED: pointed,
    }


def compare_across_worlds(grid_size: int = 10, num_objects: int = 1000,
                          num_updates: int = 200,
                          rng: Optional[np.random.Generator] = None,
                          rules: Optional[Dict[str, RuleParameters]] = None,
                          verbose: bool = False) -> Dict[WorldPolicy, Comparison]:
    if rng is None:
        rng = np.random.default_rng()
    results = {}
    for policy, world in three_worlds(grid_size, num_objects, rng).items():
        results[policy] = compare_rules(world, num_updates, rng, rules)
        if verbose:
            print(results[policy].summary())
    return results
