import random

import pytest

from grid import Direction, build_grid
from intersection import Intersection, create_intersections


@pytest.fixture
def make_intersection():
    def factory(north=0, south=0, east=0, west=0, node=0):
        return Intersection(node, 0, node, {
            Direction.NORTH: north,
            Direction.SOUTH: south,
            Direction.EAST: east,
            Direction.WEST: west,
        })
    return factory


@pytest.fixture
def grid_3x3():
    return build_grid(3, 3)


@pytest.fixture
def empty_3x3(grid_3x3):
    return create_intersections(grid_3x3)


@pytest.fixture
def rng():
    return random.Random(1234)
