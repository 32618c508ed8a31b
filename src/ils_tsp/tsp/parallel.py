"""Independent multi-start runs (parallel hill climbing) with a final min-reduction."""
from __future__ import annotations

import concurrent.futures
from typing import List, Optional, Sequence, Tuple, Union

from .config import config_for
from .distance import Point
from .ils import TSPInstance, as_instance
from .strategies import RunResult, solve


def _run_seed(task) -> RunResult:
    instance, method, seed, options = task
    return solve(instance, method=method, seed=seed, **options)


def parallel_run(points: Union[TSPInstance, Sequence[Point]], seeds: Sequence[int], *, method: str = 'ils',
                 workers: Optional[int] = None, **options) -> Tuple[RunResult, List[RunResult]]:
    """Run one search per seed and return (best, all results in seed order).

    ``workers=1`` runs in-process; otherwise a process pool is used. Ties on
    cost go to the earlier seed.
    """
    if not seeds:
        raise ValueError("parallel_run needs at least one seed")
    instance = as_instance(points)
    # validate once up front so a bad budget fails before any worker starts
    config_for(method, **{k: options.get(k) for k in ('max_iterations', 'max_no_improv', 'perturbation')}).validate(instance.n)
    tasks = [(instance, method, seed, options) for seed in seeds]
    if workers == 1:
        results = [_run_seed(task) for task in tasks]
    else:
        with concurrent.futures.ProcessPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(_run_seed, tasks))
    best = min(results, key=lambda r: r.cost)
    return best, results
