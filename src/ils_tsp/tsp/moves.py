"""Tour construction and the two randomized tour moves.

Every function returns a fresh list and leaves its input untouched.
"""
from __future__ import annotations

import random
from typing import List, Sequence

from .config import ConfigurationError, MIN_CITIES_DOUBLE_BRIDGE, MIN_CITIES_TWO_OPT


def is_permutation(tour: Sequence[int], n: int) -> bool:
    return len(tour) == n and set(tour) == set(range(n))


def random_tour(n: int, rng: random.Random) -> List[int]:
    """Uniformly random permutation of ``range(n)`` (Fisher-Yates)."""
    r = list(range(n))
    rng.shuffle(r)
    return r


def stochastic_two_opt(tour: Sequence[int], rng: random.Random) -> List[int]:
    """Reverse one random segment of the tour.

    The second cut is redrawn until it is neither the first cut nor one of
    its (wrapping) neighbours, since those choices reverse nothing or
    reproduce the same cycle.
    """
    n = len(tour)
    if n < MIN_CITIES_TWO_OPT:
        raise ConfigurationError(f"2-opt needs at least {MIN_CITIES_TWO_OPT} cities, got {n}")
    new_tour = list(tour)
    c1 = rng.randrange(n)
    exclude = {c1, (c1 - 1) % n, (c1 + 1) % n}
    c2 = rng.randrange(n)
    while c2 in exclude:
        c2 = rng.randrange(n)
    if c2 < c1:
        c1, c2 = c2, c1
    new_tour[c1:c2] = reversed(new_tour[c1:c2])
    assert is_permutation(new_tour, n), "2-opt produced an invalid tour"
    return new_tour


def double_bridge_move(tour: Sequence[int], rng: random.Random) -> List[int]:
    """Split the tour into A B C D and reconnect it as A D C B."""
    n = len(tour)
    if n < MIN_CITIES_DOUBLE_BRIDGE:
        raise ConfigurationError(f"double-bridge needs at least {MIN_CITIES_DOUBLE_BRIDGE} cities, got {n}")
    quarter = n // 4
    pos1 = 1 + rng.randrange(quarter)
    pos2 = pos1 + 1 + rng.randrange(quarter)
    pos3 = pos2 + 1 + rng.randrange(quarter)
    # pos3 <= 3 * (n // 4) < n, so all four segments are non-empty
    tour = list(tour)
    new_tour = tour[:pos1] + tour[pos3:] + tour[pos2:pos3] + tour[pos1:pos2]
    assert is_permutation(new_tour, n), "double-bridge produced an invalid tour"
    return new_tour
