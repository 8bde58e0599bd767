import random

import pytest

from engine.graph.store import GraphStore


class FrozenClock:
    """Clock stuck at a fixed instant, to exercise id bumping."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store(clock):
    return GraphStore(clock=clock, rng=random.Random(7))
