"""
analogical/cli.py - Command line interface

Usage:
    python -m analogical.cli <command> [options]

Commands:
    update      Worked example: one update on a 4x4 flat prior
    world       Generate a world and print its ground truth
    trial       Run one trial and print the score trajectory
    compare     Straight vs analogical rule in orderly, disorderly, pointed worlds
    evolve      Evolve rule parameters and print per-generation statistics

Examples:
    python -m analogical.cli update --cell 4 3
    python -m analogical.cli world --policy pointed --seed 1
    python -m analogical.cli compare --updates 200
    python -m analogical.cli evolve --population 100 --generations 50
"""

import argparse

import numpy as np

from .comparison import DEFAULT_RULES, compare_across_worlds
from .concepts import SHOE_SPACE
from .evolution import EvolutionConfig, EvolutionEngine
from .grid import display, flat_prior, normalize
from .rules import ANALOGICAL_RULE, PARAM_NAMES, RuleParameters, update
from .trial import run_single_trial
from .worlds import WorldConfig, WorldPolicy, generate_world


def _params(args) -> RuleParameters:
    return RuleParameters.from_sequence(args.params)


def cmd_update(args):
    """Single update on a flat prior"""
    params = _params(args)
    grid = flat_prior(args.size)
    update(grid, tuple(args.cell), params)

    print("=" * 60)
    print(f"UPDATE at {tuple(args.cell)} with {params}")
    print("=" * 60)
    if args.size == SHOE_SPACE.size:
        print(f"Evidence: {SHOE_SPACE.label(tuple(args.cell))}")
    print(display(normalize(grid)))


def cmd_world(args):
    """Generate and show a world"""
    rng = np.random.default_rng(args.seed)
    policy_args = {}
    if args.policy == WorldPolicy.ORDERLY.value:
        policy_args = {"p1": args.p1, "p2": args.p2}
    elif args.policy == WorldPolicy.POINTED.value:
        policy_args = {"support_size": args.support}
    world = generate_world(args.policy, args.size, args.objects, rng, **policy_args)
    print(world.summary())
    print()
    print(display(world.truth))


def cmd_trial(args):
    """One trial, score per step"""
    rng = np.random.default_rng(args.seed)
    result = run_single_trial(_params(args), grid_size=args.size,
                              num_updates=args.updates, rng=rng,
                              policy=args.policy, num_objects=args.objects,
                              keep_snapshots=False)
    print(result.world.summary())
    print()
    for step, value in enumerate(result.scores):
        if step % args.every == 0 or step == len(result.scores) - 1:
            print(f"  update {step:4d}: SSE={value:.5f}")
    print(f"\nMean SSE: {result.mean_score:.5f}")


def cmd_compare(args):
    """Rules side by side"""
    rng = np.random.default_rng(args.seed)
    rules = dict(DEFAULT_RULES)
    if args.evolved:
        rules["evolved"] = RuleParameters.from_sequence(args.evolved)

    print("=" * 60)
    print("RULE COMPARISON")
    print("=" * 60)
    compare_across_worlds(grid_size=args.size, num_objects=args.objects,
                          num_updates=args.updates, rng=rng, rules=rules,
                          verbose=True)


def cmd_evolve(args):
    """Evolve rule parameters"""
    config = EvolutionConfig(
        population_size=args.population,
        num_generations=args.generations,
        trials_per_genome=args.trials,
        num_updates=args.updates,
        mutation_prob=args.mutation,
        workers=args.workers,
        world=WorldConfig(grid_size=args.size, num_objects=args.objects,
                          policy=args.policy),
    )
    engine = EvolutionEngine(config, rng=np.random.default_rng(args.seed), verbose=True)
    result = engine.run()

    print("\nParameter mean +/- std per generation:")
    stats = result.parameter_stats()
    header = "  gen " + " ".join(f"{name:>15}" for name in PARAM_NAMES)
    print(header)
    for g in range(len(result.genome_history)):
        cells = " ".join(f"{stats[n][0][g]:7.3f}+/-{stats[n][1][g]:5.2f}" for n in PARAM_NAMES)
        print(f"  {g:3d} {cells}")


def _add_common(p, updates=100):
    p.add_argument("--seed", type=int, default=None, help="Random seed")
    p.add_argument("--size", type=int, default=10, help="Grid size N")
    p.add_argument("--objects", type=int, default=1000, help="Objects per world")
    p.add_argument("--updates", type=int, default=updates, help="Evidence per trial")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Similarity-sensitive belief updating and its evolution",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    policies = [p.value for p in WorldPolicy]

    p = subparsers.add_parser("update", help="Worked example on a 4x4 grid")
    p.add_argument("--size", type=int, default=4, help="Grid size N")
    p.add_argument("--cell", type=int, nargs=2, default=[4, 3], metavar=("ROW", "COL"))
    p.add_argument("--params", type=float, nargs=5, default=list(ANALOGICAL_RULE.as_tuple()),
                   metavar=PARAM_NAMES)
    p.set_defaults(func=cmd_update)

    p = subparsers.add_parser("world", help="Generate a world")
    _add_common(p)
    p.add_argument("--policy", choices=policies, default="orderly")
    p.add_argument("--p1", type=float, default=0.7)
    p.add_argument("--p2", type=float, default=0.2)
    p.add_argument("--support", type=int, default=10, help="Cells in a pointed world")
    p.set_defaults(func=cmd_world)

    p = subparsers.add_parser("trial", help="Run one trial")
    _add_common(p)
    p.add_argument("--policy", choices=policies, default="random_orderly")
    p.add_argument("--params", type=float, nargs=5, default=list(ANALOGICAL_RULE.as_tuple()), metavar=PARAM_NAMES)
    p.add_argument("--every", type=int, default=10, help="Print every k-th step")
    p.set_defaults(func=cmd_trial)

    p = subparsers.add_parser("compare", help="Compare rules across worlds")
    _add_common(p, updates=200)
    p.add_argument("--evolved", type=float, nargs=5, default=None, metavar=PARAM_NAMES,
                   help="Also compare this parameter setting")
    p.set_defaults(func=cmd_compare)

    p = subparsers.add_parser("evolve", help="Evolve rule parameters")
    _add_common(p)
    p.add_argument("--policy", choices=policies, default="random_orderly")
    p.add_argument("--population", type=int, default=100)
    p.add_argument("--generations", type=int, default=50)
    p.add_argument("--trials", type=int, default=10, help="Trials per genome")
    p.add_argument("--mutation", type=float, default=0.01, help="Mutation probability")
    p.add_argument("--workers", type=int, default=1, help="Evaluation processes")
    p.set_defaults(func=cmd_evolve)

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1
    args.func(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
