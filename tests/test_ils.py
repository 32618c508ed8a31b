import math
import random

import numpy as np
import pytest

from ils_tsp.tsp.config import ConfigurationError
from ils_tsp.tsp.ils import Solution, TSPInstance, local_search, run, trace
from ils_tsp.tsp.moves import is_permutation, random_tour


def test_solution_cost_matches_tour(berlin52, rng):
    tour = random_tour(52, rng)
    sol = Solution.evaluate(tour, berlin52)
    assert sol.tour == tuple(tour)
    assert sol.cost == berlin52.cost(tour)


def test_local_search_never_worsens(berlin52):
    r = random.Random(1)
    for _ in range(5):
        seed = Solution.evaluate(random_tour(52, r), berlin52)
        out = local_search(seed, berlin52, 30, r)
        assert out.cost <= seed.cost
        assert is_permutation(out.tour, 52)
        assert out.cost == berlin52.cost(out.tour)


def test_local_search_keeps_a_local_optimum(circle12, rng):
    seed = Solution.evaluate(list(range(12)), circle12)
    assert local_search(seed, circle12, 100, rng) is seed


def test_run_is_deterministic(berlin52):
    a = run(berlin52, 10, 20, seed=123)
    b = run(berlin52, 10, 20, seed=123)
    assert a == b
    assert run(berlin52.points, 10, 20, seed=123) == a


def test_run_accepts_explicit_rng(berlin52):
    assert run(berlin52, 5, 10, rng=random.Random(9)) == run(berlin52, 5, 10, seed=9)
    with pytest.raises(ConfigurationError):
        run(berlin52, 5, 10, seed=9, rng=random.Random(9))


def test_more_iterations_never_cost_more(berlin52):
    costs = [run(berlin52, k, 20, seed=7).cost for k in (1, 3, 10, 25)]
    assert costs == sorted(costs, reverse=True)


def test_berlin52_end_to_end(berlin52):
    best = run(berlin52, 100, 50, seed=0)
    assert math.isfinite(best.cost)
    assert best.cost >= 7542
    # a random tour is around 25000-30000
    assert best.cost < 12000
    assert is_permutation(best.tour, 52)
    assert best.cost == berlin52.cost(best.tour)


def test_unit_square_runs_on_four_cities():
    # diagonals round to 1, so every tour costs 4; this covers the n=4 path only
    best = run([(0, 0), (1, 0), (1, 1), (0, 1)], 20, 20, seed=0, perturbation='restart')
    assert best.cost == 4.0
    assert is_permutation(best.tour, 4)


def test_square_converges_to_perimeter(square100):
    for seed in range(5):
        assert run(square100, 50, 20, seed=seed, perturbation='restart').cost == 400.0


def test_double_bridge_rejects_small_instances(square100):
    with pytest.raises(ConfigurationError):
        run(square100, 10, 10, seed=0)


@pytest.mark.parametrize('max_iterations, max_no_improv', [
    (0, 10), (-1, 10), (10, 0), (10, -5), (True, 10), (10, 2.5),
])
def test_bad_budgets_fail_fast(berlin52, max_iterations, max_no_improv):
    with pytest.raises(ConfigurationError):
        run(berlin52, max_iterations, max_no_improv, seed=0)


def test_too_few_cities_for_two_opt():
    tri = TSPInstance.from_points([(0, 0), (1, 0), (0, 1)])
    with pytest.raises(ConfigurationError):
        run(tri, 5, 5, seed=0, perturbation='restart')


def test_trace_is_restartable_and_matches_run(berlin52):
    tr = trace(berlin52, 15, 20, seed=42)
    first = list(tr)
    second = list(tr)
    assert first == second
    assert [p.iteration for p in first] == list(range(1, 16))
    costs = [p.best_cost for p in first]
    assert costs == sorted(costs, reverse=True)
    final = run(berlin52, 15, 20, seed=42)
    assert tr.result() == final
    assert costs[-1] == final.cost


def test_trace_without_seed_is_still_repeatable(berlin52):
    tr = trace(berlin52, 5, 10)
    assert list(tr) == list(tr)


def test_target_cost_stops_early(square100):
    tr = trace(square100, 50, 20, seed=1, perturbation='restart', target_cost=400.0)
    steps = list(tr)
    assert len(steps) < 50
    assert tr.result().cost == 400.0


def test_numpy_integer_budgets(berlin52):
    assert run(berlin52, np.int64(3), np.int32(10), seed=5) == run(berlin52, 3, 10, seed=5)


def test_trace_draws_seed_from_given_rng(berlin52):
    a = trace(berlin52, 4, 10, rng=random.Random(17))
    b = trace(berlin52, 4, 10, rng=random.Random(17))
    assert a.seed == b.seed
    assert list(a) == list(b)
    with pytest.raises(ConfigurationError):
        trace(berlin52, 4, 10, seed=1, rng=random.Random(17))
