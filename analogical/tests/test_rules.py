"""
tests/test_rules.py - Grid normalization and the update rule

Covers:
1. Normalization sums to one and is idempotent
2. Straight Rule reduction
3. Monotonicity in distance from the observed cell
4. Corners and edges never write out of bounds
5. The 4x4 worked example
"""
import numpy as np
import pytest

from analogical.errors import DegenerateStateError, InvalidArgumentError
from analogical.grid import flat_prior, manhattan, normalize
from analogical.rules import (
    ANALOGICAL_RULE, STRAIGHT_RULE, RuleParameters, bonus_at, mean_parameters, update,
)


def test_normalize():
    """Normalized grids sum to 1 and stay put when normalized again"""
    print("=" * 60)
    print("TEST: Normalize")
    print("=" * 60)

    rng = np.random.default_rng(7)
    for _ in range(20):
        g = rng.uniform(0.0, 5.0, size=(6, 6)) + 0.01
        once = normalize(g)
        twice = normalize(once)
        assert np.isclose(once.sum(), 1.0)
        assert np.allclose(once, twice)
        assert (once >= 0).all()

    g = flat_prior(5)
    normalize(g)
    assert (g == 1.0).all(), "normalize must not touch its input"

    with pytest.raises(DegenerateStateError):
        normalize(np.zeros((3, 3)))

    print("\n[PASS] Normalization")


def test_flat_prior_rejects_bad_size():
    for bad in (0, -3, 2.5):
        with pytest.raises(InvalidArgumentError):
            flat_prior(bad)


def test_parameter_validation():
    with pytest.raises(InvalidArgumentError):
        RuleParameters(-1.0, 0.0, 0.0, 1.0, 1.0)
    with pytest.raises(InvalidArgumentError):
        RuleParameters(1.0, 1.0, 1.0, 0.0, 1.0)
    with pytest.raises(InvalidArgumentError):
        RuleParameters.from_sequence([1.0, 2.0])

    p = RuleParameters.from_sequence([1, 2, 3, 4, 5])
    assert p.as_tuple() == (1.0, 2.0, 3.0, 4.0, 5.0)
    assert STRAIGHT_RULE.is_straight
    assert not ANALOGICAL_RULE.is_straight


def test_straight_rule_reduction():
    """With a1 = a2 = 0 only the observed cell changes, by exactly a0"""
    print("\n" + "=" * 60)
    print("TEST: Straight Rule Reduction")
    print("=" * 60)

    for a0, b1, b2 in [(1.0, 1.0, 1.0), (2.5, 0.3, 7.0), (0.0, 4.0, 4.0)]:
        params = RuleParameters(a0, 0.0, 0.0, b1, b2)
        for cell in [(1, 1), (3, 3), (5, 2), (5, 5)]:
            grid = flat_prior(5)
            before = grid.copy()
            update(grid, cell, params)
            diff = grid - before
            x, y = cell
            assert diff[x - 1, y - 1] == pytest.approx(a0)
            diff[x - 1, y - 1] = 0.0
            assert (diff == 0).all()

    print("\n[PASS] Straight Rule")


def test_monotonicity():
    """Nearer cells end up with strictly more belief than farther ones"""
    print("\n" + "=" * 60)
    print("TEST: Monotonicity")
    print("=" * 60)

    center = (4, 4)
    for params in [ANALOGICAL_RULE, RuleParameters(3.0, 2.0, 1.0, 1.5, 2.5)]:
        grid = flat_prior(7)
        update(grid, center, params)
        belief = normalize(grid)

        by_distance = {}
        for i in range(1, 8):
            for j in range(1, 8):
                d = min(manhattan(center, (i, j)), 3)
                by_distance.setdefault(d, []).append(belief[i - 1, j - 1])

        print(f"  {params}: " + ", ".join(
            f"d{d}=[{min(v):.4f}, {max(v):.4f}]" for d, v in sorted(by_distance.items())))
        for near, far in [(0, 1), (1, 2), (2, 3)]:
            assert min(by_distance[near]) > max(by_distance[far])

    print("\n[PASS] Monotonicity")


def test_corner_updates_stay_in_bounds():
    """Corners and edges skip missing neighbours without raising"""
    for n in (1, 2, 3, 5):
        for cell in [(1, 1), (1, n), (n, 1), (n, n)]:
            grid = flat_prior(n)
            update(grid, cell, ANALOGICAL_RULE)
            assert grid.shape == (n, n)
            assert grid[cell[0] - 1, cell[1] - 1] == pytest.approx(2.0)

    grid = flat_prior(3)
    update(grid, (1, 1), ANALOGICAL_RULE)
    added = grid - flat_prior(3)
    # (1,2) and (2,1) at distance 1; (1,3), (3,1) and (2,2) at distance 2
    assert added.sum() == pytest.approx(1.0 + 2 * 0.5 + 3 * (1.0 / 3.0))
    assert added[2, 2] == 0.0

    with pytest.raises(InvalidArgumentError):
        update(flat_prior(3), (0, 1), ANALOGICAL_RULE)
    with pytest.raises(InvalidArgumentError):
        update(flat_prior(3), (4, 2), ANALOGICAL_RULE)


def test_worked_example():
    """4x4 flat prior, SSR (1, 1, 1, 2, 3) at (4, 3)"""
    print("\n" + "=" * 60)
    print("TEST: Worked Example")
    print("=" * 60)

    grid = flat_prior(4)
    update(grid, (4, 3), RuleParameters(1, 1, 1, 2, 3))
    belief = normalize(grid)
    print(belief.round(3))

    assert np.unravel_index(np.argmax(belief), belief.shape) == (3, 2)

    two_step = [(2, 3), (4, 1), (3, 2), (3, 4)]
    far = [(i, j) for i in range(1, 5) for j in range(1, 5)
           if manhattan((4, 3), (i, j)) >= 3]
    assert far
    lowest_two_step = min(belief[i - 1, j - 1] for i, j in two_step)
    assert all(lowest_two_step > belief[i - 1, j - 1] for i, j in far)
    assert grid.sum() == pytest.approx(16 + 1 + 3 * 0.5 + 4 / 3)

    print("\n[PASS] Worked example")


def test_bonus_at():
    p = RuleParameters(2.0, 1.0, 3.0, 4.0, 6.0)
    assert bonus_at((0, 0), p) == 2.0
    assert bonus_at((0, -1), p) == pytest.approx(0.25)
    assert bonus_at((2, 0), p) == pytest.approx(0.5)
    assert bonus_at((1, 1), p) == pytest.approx(0.5)
    assert bonus_at((2, 1), p) == 0.0


def test_mean_parameters():
    m = mean_parameters([RuleParameters(1, 2, 3, 4, 5), RuleParameters(3, 4, 5, 6, 7)])
    assert m.as_tuple() == pytest.approx((2, 3, 4, 5, 6))
    with pytest.raises(InvalidArgumentError):
        mean_parameters([])


def run_all_tests():
    test_normalize()
    test_flat_prior_rejects_bad_size()
    test_parameter_validation()
    test_straight_rule_reduction()
    test_monotonicity()
    test_corner_updates_stay_in_bounds()
    test_worked_example()
    test_bonus_at()
    test_mean_parameters()
    print("\nAll rule tests passed")


if __name__ == "__main__":
    run_all_tests()
