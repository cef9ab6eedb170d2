"""
analogical/evolution.py - Evolving the parameters of the update rule

Each genome is a RuleParameters setting. One generation:

    EVALUATING      every genome runs K trials, each on a fresh world;
                    fitness = mean of the K trial scores (lower is better)
    SELECTING       keep every genome whose fitness is <= the median
    REPRODUCING     one child per retained parent, each from a random pair
    NEXT_GENERATION retained parents + children

Selection keeps ties at the median, so the retained set can be larger than
half the population. The population then grows for the next generation.
That drift is part of the dynamics being studied and is left in place.

Randomness: every genome evaluation gets its own stream spawned from the
engine's generator, so the same seed gives the same result whether genomes
are evaluated serially or in a process pool.
"""

from dataclasses import dataclass, field
from enum import Enum
from multiprocessing import Pool
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from .errors import DegenerateStateError, InvalidArgumentError
from .rules import PARAM_NAMES, RuleParameters, mean_parameters
from .trial import trial_score
from .worlds import WorldConfig


class EvolutionPhase(Enum):
    INITIAL = "initial"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    REPRODUCING = "reproducing"
    NEXT_GENERATION = "next_generation"
    FINAL = "final"


@dataclass
class EvolutionConfig:
    population_size: int = 100
    num_generations: int = 50
    trials_per_genome: int = 10
    num_updates: int = 100
    mutation_prob: float = 0.01
    param_low: float = 0.0
    param_high: float = 10.0
    workers: int = 1
    world: WorldConfig = field(default_factory=WorldConfig)

    def validate(self):
        if self.population_size < 3:
            raise InvalidArgumentError(
                f"population size must be at least 3, got {self.population_size}")
        if self.num_generations < 0:
            raise InvalidArgumentError(
                f"number of generations must be >= 0, got {self.num_generations}")
        if self.trials_per_genome < 1:
            raise InvalidArgumentError(
                f"trials per genome must be >= 1, got {self.trials_per_genome}")
        if not 0.0 <= self.mutation_prob <= 1.0:
            raise InvalidArgumentError(
                f"mutation probability must lie in [0, 1], got {self.mutation_prob}")
        if not 0.0 <= self.param_low < self.param_high:
            raise InvalidArgumentError(
                f"parameter range [{self.param_low}, {self.param_high}] is invalid")
        if self.workers < 1:
            raise InvalidArgumentError(f"workers must be >= 1, got {self.workers}")
        self.world.validate()
        if self.num_updates < 0 or self.num_updates > self.world.num_objects:
            raise InvalidArgumentError(
                f"cannot draw {self.num_updates} pieces of evidence from "
                f"{self.world.num_objects} objects")


@dataclass
class GenerationRecord:
    """The population that was evaluated, and how it scored."""
    generation: int
    genomes: List[RuleParameters]
    fitness: np.ndarray
    median: float
    retained: int

    @property
    def mean_fitness(self) -> float:
        return float(np.mean(self.fitness))

    @property
    def best(self) -> Tuple[RuleParameters, float]:
        i = int(np.argmin(self.fitness))
        return self.genomes[i], float(self.fitness[i])

    def summary(self) -> str:
        best, best_fitness = self.best
        return (f"Gen {self.generation:3d}: pop={len(self.genomes):4d} "
                f"mean={self.mean_fitness:.5f} median={self.median:.5f} "
                f"best={best_fitness:.5f} retained={self.retained}")


@dataclass
class EvolutionResult:
    config: EvolutionConfig
    records: List[GenerationRecord]
    final_population: List[RuleParameters]

    @property
    def fitness_history(self) -> List[np.ndarray]:
        return [r.fitness for r in self.records]

    @property
    def genome_history(self) -> List[List[RuleParameters]]:
        """Populations from the initial one through the final one."""
        return [r.genomes for r in self.records] + [self.final_population]

    def mean_fitness(self) -> np.ndarray:
        return np.array([r.mean_fitness for r in self.records], dtype=float)

    def parameter_stats(self) -> Dict[str, Tuple[np.ndarray, np.ndarray]]:
        """Per parameter: (means, standard deviations), one entry per population."""
        stacked = [np.array([g.as_tuple() for g in pop]) for pop in self.genome_history]
        means = np.array([s.mean(axis=0) for s in stacked])
        stds = np.array([s.std(axis=0) for s in stacked])
        return {name: (means[:, k], stds[:, k]) for k, name in enumerate(PARAM_NAMES)}

    def final_mean_params(self) -> RuleParameters:
        return mean_parameters(self.final_population)

    def summary(self) -> str:
        lines = [r.summary() for r in self.records]
        lines.append(f"Final population: {len(self.final_population)}")
        lines.append(f"Final mean parameters: {self.final_mean_params()}")
        return "\n".join(lines)


# ============================================================
# GENETIC OPERATORS
# ============================================================

def random_genome(rng: np.random.Generator, low: float = 0.0,
                  high: float = 10.0) -> RuleParameters:
    return RuleParameters.from_sequence(rng.uniform(low, high, size=len(PARAM_NAMES)))


def initial_population(size: int, rng: np.random.Generator, low: float = 0.0,
                       high: float = 10.0) -> List[RuleParameters]:
    return [random_genome(rng, low, high) for _ in range(size)]


def evaluate_genome(params: RuleParameters, world_config: WorldConfig,
                    trials: int, num_updates: int,
                    rng: np.random.Generator) -> float:
    """Mean trial score over `trials` independent worlds."""
    scores = [trial_score(params, world_config.make(rng), num_updates, rng)
              for _ in range(trials)]
    return float(np.mean(scores))


def _evaluate_job(job) -> float:
    return evaluate_genome(*job)


def median_select(population: Sequence[RuleParameters],
                  fitness: np.ndarray) -> Tuple[List[RuleParameters], float]:
    """Keep every genome at or below the median fitness."""
    if len(population) != len(fitness):
        raise InvalidArgumentError(
            f"{len(population)} genomes but {len(fitness)} fitness values")
    median = float(np.median(fitness))
    parents = [g for g, f in zip(population, fitness) if f <= median]
    return parents, median


def create_child(parents: Sequence[RuleParameters], rng: np.random.Generator,
                 mutation_prob: float = 0.01, low: float = 0.0,
                 high: float = 10.0) -> RuleParameters:
    """
    Pick two distinct parents; each gene is drawn uniformly between the
    parents' values, or, with probability mutation_prob, from [low, high].
    """
    if len(parents) < 2:
        raise DegenerateStateError(
            f"need at least two parents to reproduce, got {len(parents)}")
    i, j = rng.choice(len(parents), size=2, replace=False)
    p1, p2 = parents[i].as_tuple(), parents[j].as_tuple()

    genes = []
    for v1, v2 in zip(p1, p2):
        if rng.random() < mutation_prob:
            genes.append(rng.uniform(low, high))
        else:
            genes.append(rng.uniform(min(v1, v2), max(v1, v2)))
    return RuleParameters.from_sequence(genes)


def reproduce(parents: Sequence[RuleParameters], rng: np.random.Generator,
              mutation_prob: float = 0.01, low: float = 0.0,
              high: float = 10.0) -> List[RuleParameters]:
    """One child per parent."""
    return [create_child(parents, rng, mutation_prob, low, high) for _ in parents]


# ============================================================
# ENGINE
# ============================================================

class EvolutionEngine:
    """
    Generational loop over a population of rule settings.

    The engine owns the current population only; each step returns a
    GenerationRecord so callers keep whatever history they want.
    """

    def __init__(self, config: Optional[EvolutionConfig] = None,
                 rng: Optional[np.random.Generator] = None,
                 population: Optional[List[RuleParameters]] = None,
                 verbose: bool = False):
        self.config = config or EvolutionConfig()
        self.config.validate()
        self.rng = rng if rng is not None else np.random.default_rng()
        self.verbose = verbose

        if population is None:
            population = initial_population(self.config.population_size, self.rng,
                                            self.config.param_low, self.config.param_high)
        elif len(population) < 3:
            raise InvalidArgumentError(
                f"population size must be at least 3, got {len(population)}")
        self.population = list(population)
        self.generation = 0
        self.phase = EvolutionPhase.INITIAL

    def evaluate(self) -> np.ndarray:
        self.phase = EvolutionPhase.EVALUATING
        cfg = self.config
        streams = self.rng.spawn(len(self.population))
        jobs = [(g, cfg.world, cfg.trials_per_genome, cfg.num_updates, s)
                for g, s in zip(self.population, streams)]

        if cfg.workers > 1:
            with Pool(cfg.workers) as pool:
                fitness = pool.map(_evaluate_job, jobs)
        else:
            fitness = [_evaluate_job(job) for job in jobs]
        return np.array(fitness, dtype=float)

    def select(self, fitness: np.ndarray) -> Tuple[List[RuleParameters], float]:
        self.phase = EvolutionPhase.SELECTING
        return median_select(self.population, fitness)

    def reproduce(self, parents: List[RuleParameters]) -> List[RuleParameters]:
        self.phase = EvolutionPhase.REPRODUCING
        cfg = self.config
        return reproduce(parents, self.rng, cfg.mutation_prob,
                         cfg.param_low, cfg.param_high)

    def step(self) -> GenerationRecord:
        """Run one full generation and advance the population."""
        fitness = self.evaluate()
        parents, median = self.select(fitness)
        children = self.reproduce(parents)

        record = GenerationRecord(generation=self.generation,
                                  genomes=self.population, fitness=fitness,
                                  median=median, retained=len(parents))
        self.phase = EvolutionPhase.NEXT_GENERATION
        self.population = parents + children
        self.generation += 1

        if self.verbose:
            print(record.summary())
        return record

    def run(self) -> EvolutionResult:
        if self.verbose:
            cfg = self.config
            print("=" * 70)
            print(f"EVOLUTION: {len(self.population)} genomes, "
                  f"{cfg.num_generations} generations, "
                  f"{cfg.trials_per_genome} trials x {cfg.num_updates} updates")
            print("=" * 70)

        records = [self.step() for _ in range(self.config.num_generations)]
        self.phase = EvolutionPhase.FINAL
        result = EvolutionResult(config=self.config, records=records,
                                 final_population=list(self.population))
        if self.verbose:
            print(f"\nFinal mean parameters: {result.final_mean_params()}")
        return result


def run_evolution(population_size: int = 100, num_generations: int = 50,
                  trials_per_genome: int = 10, grid_size: int = 10,
                  num_updates: int = 100, rng: Optional[np.random.Generator] = None,
                  seed: Optional[int] = None, verbose: bool = False,
                  **options) -> EvolutionResult:
    """
    Convenience entry point. Extra options go to EvolutionConfig
    (mutation_prob, param_low, param_high, workers) or, for world_* keys,
    to WorldConfig (world_policy, world_num_objects, ...).
    """
    world_args = {k[len("world_"):]: options.pop(k)
                  for k in list(options) if k.startswith("world_")}
    config = EvolutionConfig(population_size=population_size,
                             num_generations=num_generations,
                             trials_per_genome=trials_per_genome,
                             num_updates=num_updates,
                             world=WorldConfig(grid_size=grid_size, **world_args),
                             **options)
    if rng is None:
        rng = np.random.default_rng(seed)
    return EvolutionEngine(config, rng=rng, verbose=verbose).run()
