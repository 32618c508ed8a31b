"""Iterated Local Search for the symmetric Euclidean TSP.

Two nested loops:
  * local_search: stochastic 2-opt hill climbing that stops after
    ``max_no_improv`` consecutive non-improving neighbours.
  * iterated_local_search: perturb the global best (double-bridge), climb
    from the perturbed tour, keep the result only if strictly cheaper.

Engines are generators yielding the shared SearchState after every outer
iteration and returning it when the budget is spent. Callers either drain
them (run) or watch them (trace); both consume the random stream the same
way, so observing progress never changes the outcome.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable, Generator, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .config import ConfigurationError, SearchConfig
from .distance import Point, distance_matrix, matrix_tour_cost
from .moves import double_bridge_move, random_tour, stochastic_two_opt


@dataclass(frozen=True)
class TSPInstance:
    name: str
    points: Tuple[Point, ...]
    dist: np.ndarray = field(repr=False, compare=False)
    optimum: Optional[float] = None

    @classmethod
    def from_points(cls, points: Sequence[Point], name: str = 'custom',
                    optimum: Optional[float] = None) -> 'TSPInstance':
        pts = tuple((float(x), float(y)) for x, y in points)
        return cls(name=name, points=pts, dist=distance_matrix(pts), optimum=optimum)

    @property
    def n(self) -> int:
        return len(self.points)

    def cost(self, tour: Sequence[int]) -> float:
        return matrix_tour_cost(tour, self.dist)


@dataclass(frozen=True)
class Solution:
    tour: Tuple[int, ...]
    cost: float

    @classmethod
    def evaluate(cls, tour: Sequence[int], instance: TSPInstance) -> 'Solution':
        """Pair a tour with its cost; the only way search code builds solutions."""
        return cls(tour=tuple(tour), cost=instance.cost(tour))


@dataclass
class SearchState:
    best: Solution
    iteration: int = 0
    improvements: int = 0

    def accept(self, candidate: Solution, allow_ties: bool = False) -> bool:
        if candidate.cost < self.best.cost:
            self.improvements += 1
        elif not (allow_ties and candidate.cost == self.best.cost):
            return False
        self.best = candidate
        return True

    def reached(self, target_cost: Optional[float]) -> bool:
        return target_cost is not None and self.best.cost <= target_cost


class Progress(NamedTuple):
    iteration: int
    best_cost: float


Engine = Callable[[TSPInstance, SearchConfig, random.Random], Generator[SearchState, None, SearchState]]


def as_instance(points: Union[TSPInstance, Sequence[Point]]) -> TSPInstance:
    if isinstance(points, TSPInstance):
        return points
    return TSPInstance.from_points(points)


def resolve_rng(seed: Optional[int] = None, rng: Optional[random.Random] = None) -> random.Random:
    if rng is not None:
        if seed is not None:
            raise ConfigurationError("pass either seed or rng, not both")
        return rng
    return random.Random(seed)


def local_search(best: Solution, instance: TSPInstance, max_no_improv: int, rng: random.Random) -> Solution:
    """Greedy 2-opt descent from ``best``; never returns anything costlier."""
    count = 0
    while count < max_no_improv:
        candidate = Solution.evaluate(stochastic_two_opt(best.tour, rng), instance)
        if candidate.cost < best.cost:
            best = candidate
            count = 0
        else:
            count += 1
    return best


def perturbation(best: Solution, instance: TSPInstance, rng: random.Random,
                 kind: str = 'double_bridge') -> Solution:
    if kind == 'double_bridge':
        tour = double_bridge_move(best.tour, rng)
    elif kind == 'restart':
        tour = random_tour(instance.n, rng)
    else:
        raise ConfigurationError(f"unknown perturbation {kind!r}")
    return Solution.evaluate(tour, instance)


def iterated_local_search(instance: TSPInstance, config: SearchConfig,
                          rng: random.Random) -> Generator[SearchState, None, SearchState]:
    seed = Solution.evaluate(random_tour(instance.n, rng), instance)
    state = SearchState(best=local_search(seed, instance, config.max_no_improv, rng))
    for _ in range(config.max_iterations):
        if state.reached(config.target_cost):
            break
        candidate = perturbation(state.best, instance, rng, config.perturbation)
        candidate = local_search(candidate, instance, config.max_no_improv, rng)
        state.iteration += 1
        state.accept(candidate)
        yield state
    return state


def exhaust(steps: Generator[SearchState, None, SearchState]) -> SearchState:
    """Drive an engine to completion and return its final state."""
    while True:
        try:
            next(steps)
        except StopIteration as stop:
            return stop.value


class SearchTrace:
    """Restartable view of a seeded search as (iteration, best cost) pairs.

    Each iteration over the trace replays the search from the same seed, so
    the sequence is identical every time and ends after at most
    ``config.max_iterations`` items.
    """

    def __init__(self, instance: TSPInstance, config: SearchConfig, seed: int,
                 engine: Engine = iterated_local_search):
        config.validate(instance.n)
        self.instance = instance
        self.config = config
        self.seed = seed
        self._engine = engine

    def _steps(self) -> Generator[SearchState, None, SearchState]:
        return self._engine(self.instance, self.config, random.Random(self.seed))

    def __iter__(self) -> Iterator[Progress]:
        for state in self._steps():
            yield Progress(state.iteration, state.best.cost)

    def result(self) -> Solution:
        return exhaust(self._steps()).best


def run(points: Union[TSPInstance, Sequence[Point]], max_iterations: int, max_no_improv: int, *,
        seed: Optional[int] = None, rng: Optional[random.Random] = None,
        perturbation: str = 'double_bridge', target_cost: Optional[float] = None) -> Solution:
    """Run Iterated Local Search and return the best tour found.

    Parameters:
      points: city coordinates (or a prepared TSPInstance)
      max_iterations: number of perturb / climb / accept cycles
      max_no_improv: patience of each local search
      seed / rng: randomness source; a fixed seed gives identical results
      perturbation: 'double_bridge' (needs 8+ cities) or 'restart'
      target_cost: optional early exit once the best cost reaches this value
    """
    instance = as_instance(points)
    config = SearchConfig(method='ils', max_iterations=max_iterations, max_no_improv=max_no_improv,
                          perturbation=perturbation, target_cost=target_cost)
    config.validate(instance.n)
    return exhaust(iterated_local_search(instance, config, resolve_rng(seed, rng))).best


def trace(points: Union[TSPInstance, Sequence[Point]], max_iterations: int, max_no_improv: int, *,
          seed: Optional[int] = None, rng: Optional[random.Random] = None,
          perturbation: str = 'double_bridge', target_cost: Optional[float] = None) -> SearchTrace:
    """Replayable progress of ``run``; without a seed, one is drawn once from ``rng``."""
    if seed is None:
        seed = resolve_rng(rng=rng).randrange(2 ** 32)
    elif rng is not None:
        raise ConfigurationError("pass either seed or rng, not both")
    config = SearchConfig(method='ils', max_iterations=max_iterations, max_no_improv=max_no_improv,
                          perturbation=perturbation, target_cost=target_cost)
    return SearchTrace(as_instance(points), config, seed)
