import random
from typing import Iterable, List

import pytest

from hashingring import RingMap
from hashingring.angles import INT32_MAX, POSITIVE_HASH_WINDOW, fold_hash


class ScriptedRandom:
    """Replays fixed draws in [0, 1) for vnode placement."""

    def __init__(self, draws: Iterable[float]):
        self.draws: List[float] = list(draws)

    def random(self) -> float:
        return self.draws.pop(0)


def hash_for_angle(degrees: float) -> int:
    """Signed 32-bit hash whose folded angle lands just at or below `degrees`."""
    u = int(POSITIVE_HASH_WINDOW * degrees / 360.0)
    if u <= INT32_MAX:
        return u
    return -(u - INT32_MAX)


def degrees_hash(key) -> int:
    # integer keys are read as the angle they should land on
    return hash_for_angle(key)


def draw_onto(degrees: float) -> float:
    """Draw in [0, 1) that places a weight-1 vnode exactly on the angle of key `degrees`."""
    return fold_hash(hash_for_angle(degrees)) / POSITIVE_HASH_WINDOW


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def scripted():
    return ScriptedRandom


@pytest.fixture
def angle_hash():
    return degrees_hash


@pytest.fixture
def exact_draw():
    return draw_onto


@pytest.fixture
def small_ring(rng):
    return RingMap(initial_nodes=3, node_weight=10, rng=rng)


@pytest.fixture
def loaded_ring(rng):
    ring = RingMap(initial_nodes=4, node_weight=50, rng=rng)
    for i in range(5000):
        ring.put(f"key-{i}", i)
    return ring


def assert_nodes_and_data(ring_map: RingMap, total: int) -> None:
    """
    Every entry sits in the arc of the vnode holding it. The first vnode also
    holds whatever lies past the last vnode.
    """
    vnodes = ring_map.vnodes()
    last = vnodes[-1]
    count = 0
    for i, vnode in enumerate(vnodes):
        assert 0.0 <= vnode.angle < 360.0
        lower = vnodes[i - 1].angle
        for entry in vnode.bucket:
            assert 0.0 <= entry.angle < 360.0
            if i == 0:
                assert entry.angle < vnode.angle or entry.angle >= last.angle, (vnode, entry)
            else:
                assert lower <= entry.angle < vnode.angle, (vnode, entry)
            count += 1
    assert count == total
    assert ring_map.size() == total


@pytest.fixture
def check_ring():
    return assert_nodes_and_data
