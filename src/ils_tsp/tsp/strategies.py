"""Registered search methods and the programmatic ``solve`` entry point.

Random search and stochastic hill climbing are the single-level special
cases of the iterated search: the first never climbs, the second never
perturbs.
"""
from __future__ import annotations

import random
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

from .config import SearchConfig, config_for
from .distance import Point
from .ils import (Engine, SearchState, SearchTrace, Solution, TSPInstance, as_instance, exhaust,
                  iterated_local_search, resolve_rng)
from .moves import random_tour, stochastic_two_opt


@dataclass
class RunResult:
    tour: List[int]            # sequence of node indices (0-based) ending w/o repeat
    cost: float
    runtime: float
    method: str
    improvements: int = 0
    seed: Optional[int] = None


def random_search(instance: TSPInstance, config: SearchConfig, rng: random.Random):
    """Independent uniform samples; keeps the strictly cheapest one."""
    state = None
    for _ in range(config.max_iterations):
        candidate = Solution.evaluate(random_tour(instance.n, rng), instance)
        if state is None:
            state = SearchState(best=candidate)
        else:
            state.accept(candidate)
        state.iteration += 1
        yield state
    return state


def stochastic_hill_climbing(instance: TSPInstance, config: SearchConfig, rng: random.Random):
    """One 2-opt neighbour per iteration, moving on ties as well as gains."""
    state = SearchState(best=Solution.evaluate(random_tour(instance.n, rng), instance))
    for _ in range(config.max_iterations):
        if state.reached(config.target_cost):
            break
        neighbor = Solution.evaluate(stochastic_two_opt(state.best.tour, rng), instance)
        state.iteration += 1
        state.accept(neighbor, allow_ties=True)
        yield state
    return state


ENGINES: Dict[str, Engine] = {
    'ils': iterated_local_search,
    'ils_restart': iterated_local_search,
    'hill_climbing': stochastic_hill_climbing,
    'random_search': random_search,
}


def trace_method(points: Union[TSPInstance, Sequence[Point]], method: str = 'ils', *, seed: int = 0,
                 **overrides) -> SearchTrace:
    config = config_for(method, **overrides)
    return SearchTrace(as_instance(points), config, seed, engine=ENGINES[method])


def solve(points: Union[TSPInstance, Sequence[Point]], *, method: str = 'ils', max_iterations: int = 100,
          max_no_improv: int = 50, perturbation: Optional[str] = None, target_cost: Optional[float] = None,
          seed: Optional[int] = None, rng: Optional[random.Random] = None) -> RunResult:
    """Programmatic API to obtain a heuristic TSP solution.

    Parameters:
      points: city coordinates or a TSPInstance
      method: one of DEFAULT_METHODS ('ils', 'ils_restart', 'hill_climbing', 'random_search')
      max_iterations: outer iteration budget
      max_no_improv: local search patience (ignored by random_search)
      perturbation: overrides the preset's perturbation ('double_bridge' | 'restart')
      target_cost: optional early exit threshold
      seed / rng: randomness source
    """
    instance = as_instance(points)
    config = config_for(method, max_iterations=max_iterations, max_no_improv=max_no_improv,
                        perturbation=perturbation, target_cost=target_cost)
    config.validate(instance.n)
    generator = resolve_rng(seed, rng)
    start_t = time.time()
    state = exhaust(ENGINES[method](instance, config, generator))
    runtime = time.time() - start_t
    return RunResult(tour=list(state.best.tour), cost=state.best.cost, runtime=runtime, method=method,
                     improvements=state.improvements, seed=seed)
