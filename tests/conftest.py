import math
import random

import pytest

from ils_tsp.parsers.instances import load_instance
from ils_tsp.tsp.ils import TSPInstance


@pytest.fixture
def rng():
    return random.Random(42)


@pytest.fixture(scope='session')
def berlin52():
    return load_instance('berlin52')


@pytest.fixture
def square100():
    # side 100, diagonal rounds to 141: optimum is the perimeter, 400
    return TSPInstance.from_points([(0, 0), (100, 0), (100, 100), (0, 100)], name='square100', optimum=400.0)


@pytest.fixture
def circle12():
    # evenly spaced on a circle, so the identity order is optimal
    pts = [(1000 * math.cos(2 * math.pi * k / 12), 1000 * math.sin(2 * math.pi * k / 12)) for k in range(12)]
    return TSPInstance.from_points(pts, name='circle12')
