import random

import pytest

from skyflap.components import Actor, Customization, GameMode, Difficulty
from skyflap.profiles import resolve
from skyflap.session import Session
from skyflap.stats import StatsBridge
from skyflap.storage import MemoryStore


@pytest.fixture
def normal():
    return resolve('normal', 'classic')


@pytest.fixture
def actor():
    return Actor(y=300.0, velocity=0.0)


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def bridge(store):
    b = StatsBridge(store)
    b.load()
    return b


def make_session(bridge=None, mode=GameMode.CLASSIC, seed=7, **custom):
    customization = Customization(difficulty=Difficulty.NORMAL, game_mode=mode, **custom)
    return Session(customization, bridge, rng=random.Random(seed))


def run_until_over(session, limit=10_000):
    ticks = 0
    while session.tick():
        ticks += 1
        if ticks > limit:
            raise AssertionError('session never ended')
    return ticks
