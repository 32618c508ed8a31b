"""Rounded Euclidean distances and closed-tour costs.

Distances follow the TSPLIB EUC_2D convention: the Euclidean distance is
rounded to the nearest integer (halves away from zero), which is what makes
the Berlin52 optimum come out at exactly 7542.
"""
from __future__ import annotations

import math
from typing import Sequence, Tuple

import numpy as np

Point = Tuple[float, float]


def euclidean_distance_2d(c1: Point, c2: Point) -> float:
    distance = math.sqrt((c1[0] - c2[0]) ** 2 + (c1[1] - c2[1]) ** 2)
    return float(int(distance + 0.5))  # Round to nearest integer


def tour_cost(tour: Sequence[int], points: Sequence[Point]) -> float:
    """Length of the round trip visiting ``points`` in ``tour`` order."""
    n = len(tour)
    assert n == len(points), f"tour has {n} cities, instance has {len(points)}"
    return float(sum(euclidean_distance_2d(points[tour[i]], points[tour[(i + 1) % n]]) for i in range(n)))


def distance_matrix(points: Sequence[Point]) -> np.ndarray:
    """Compute the full matrix of rounded Euclidean distances."""
    coords = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    diff = coords[:, None, :] - coords[None, :, :]
    dist = np.sqrt((diff ** 2).sum(axis=2))
    return np.floor(dist + 0.5)


def matrix_tour_cost(tour: Sequence[int], dist: np.ndarray) -> float:
    # vectorized wrap-around, same value as tour_cost on the source points
    idx_from = np.asarray(tour, dtype=np.intp)
    assert idx_from.shape[0] == dist.shape[0], "tour length does not match distance matrix"
    idx_to = np.roll(idx_from, -1)
    return float(dist[idx_from, idx_to].sum())
