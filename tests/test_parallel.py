import pytest

from ils_tsp.tsp.config import ConfigurationError
from ils_tsp.tsp.parallel import parallel_run
from ils_tsp.tsp.strategies import solve

OPTIONS = dict(max_iterations=5, max_no_improv=10)


def test_in_process_runs_keep_seed_order(berlin52):
    best, results = parallel_run(berlin52, [3, 1, 2], workers=1, **OPTIONS)
    assert [r.seed for r in results] == [3, 1, 2]
    for r in results:
        assert r.cost == solve(berlin52, seed=r.seed, **OPTIONS).cost
    assert best.cost == min(r.cost for r in results)
    assert best is next(r for r in results if r.cost == best.cost)


def test_process_pool_matches_in_process(berlin52):
    _, serial = parallel_run(berlin52, range(3), workers=1, **OPTIONS)
    best, pooled = parallel_run(berlin52, range(3), workers=2, **OPTIONS)
    assert [r.cost for r in pooled] == [r.cost for r in serial]
    assert [r.tour for r in pooled] == [r.tour for r in serial]
    assert best.cost == min(r.cost for r in serial)


def test_needs_seeds(berlin52):
    with pytest.raises(ValueError):
        parallel_run(berlin52, [], workers=1)


def test_validates_before_starting_workers(square100):
    with pytest.raises(ConfigurationError):
        parallel_run(square100, [0, 1], workers=2, **OPTIONS)
