import json

import pytest

from skyflap.components import Customization, Difficulty
from skyflap.constants import KEY_HIGH_SCORE, KEY_STATS, KEY_CUSTOMIZATION
from skyflap.stats import StatsBridge, round_half_up, format_playtime, format_clock
from skyflap.storage import MemoryStore, StorageError


class BrokenStore:
    def __init__(self):
        self.calls = 0

    def load(self, key):
        self.calls += 1
        raise StorageError('disk gone')

    def save(self, key, value):
        self.calls += 1
        raise StorageError('disk gone')

    def delete(self, key):
        self.calls += 1
        raise StorageError('disk gone')

    def flush(self):
        self.calls += 1
        raise StorageError('disk gone')


def test_two_sessions_accumulate(bridge, store):
    bridge.record_session(3, 10)
    stats = bridge.record_session(4, 20)
    assert stats.games_played == 2
    assert stats.total_score == 7
    assert stats.best_score == 4
    assert stats.average_score == round_half_up(7 / 2) == 4
    assert stats.playtime_seconds == 30
    assert json.loads(store.load(KEY_STATS))['total_score'] == 7


def test_average_rounds_to_nearest():
    bridge = StatsBridge(MemoryStore())
    for score in (1, 1, 2):
        bridge.record_session(score, 1)
    assert bridge.stats.average_score == 1


def test_load_restores_saved_values():
    store = MemoryStore()
    first = StatsBridge(store)
    first.record_session(9, 42)
    first.update_high_score(9)

    second = StatsBridge(store)
    second.load()
    assert second.high_score == 9
    assert second.stats == first.stats


@pytest.mark.parametrize('high, stats', [
    ('not-a-number', '{"games_played": "x"}'),
    ('', '[1, 2, 3]'),
    ('12abc', '{broken json'),
    ('-', '{"games_played": Infinity}'),
    ('1e999', '{"total_score": -Infinity, "games_played": NaN}'),
])
def test_malformed_values_fall_back_to_defaults(high, stats):
    bridge = StatsBridge(MemoryStore({KEY_HIGH_SCORE: high, KEY_STATS: stats}))
    bridge.load()
    assert bridge.high_score == 0
    assert bridge.stats.games_played == 0


def test_high_score_never_decreases(bridge, store):
    bridge.update_high_score(10)
    bridge.update_high_score(4)
    assert bridge.high_score == 10
    assert store.load(KEY_HIGH_SCORE) == '10'


def test_store_failure_degrades_to_memory():
    store = BrokenStore()
    bridge = StatsBridge(store)
    bridge.load()
    assert not bridge.durable
    calls = store.calls

    bridge.record_session(5, 3)
    bridge.update_high_score(5)
    bridge.reset_statistics()
    bridge.record_session(2, 1)
    assert store.calls == calls
    assert bridge.stats.games_played == 1
    assert bridge.stats.total_score == 2


def test_reset_statistics_clears_store_and_memory(bridge, store):
    bridge.record_session(5, 3)
    bridge.update_high_score(5)
    bridge.reset_statistics()
    assert bridge.stats.games_played == 0
    assert bridge.high_score == 0
    assert store.load(KEY_STATS) is None
    assert store.load(KEY_HIGH_SCORE) is None


def test_customization_round_trip(bridge):
    custom = Customization(bird_color='pink', difficulty=Difficulty.EXPERT,
                           weather_effects=True)
    bridge.save_customization(custom)
    assert bridge.load_customization() == custom


def test_bad_customization_record_uses_defaults():
    bridge = StatsBridge(MemoryStore({KEY_CUSTOMIZATION: '{"bird_color": "plaid"}'}))
    assert bridge.load_customization() == Customization()


@pytest.mark.parametrize('seconds, text', [(45, '45s'), (125, '2m 5s'), (3660, '1h 1m')])
def test_format_playtime(seconds, text):
    assert format_playtime(seconds) == text


def test_format_clock():
    assert format_clock(65) == '1:05'
    assert format_clock(0) == '0:00'


class UnflushableStore(MemoryStore):
    def flush(self):
        raise StorageError('read-only filesystem')


def test_flush_failure_degrades_to_memory():
    bridge = StatsBridge(UnflushableStore())
    bridge.load()
    assert bridge.durable
    bridge.record_session(4, 12)
    bridge.flush()
    assert not bridge.durable
    bridge.record_session(1, 3)
    assert bridge.stats.games_played == 2
