import random

import pytest

from skyflap.components import Obstacle
from skyflap.obstacles import ObstacleStream, advance_obstacles, gap_range


def test_spawn_chains_from_last_spawn_point(normal):
    stream = ObstacleStream(random.Random(3))
    pipe = stream.spawn(800, normal)
    assert pipe.x == 1100
    assert pipe.passed is False
    assert pipe.gap_bottom - pipe.gap_top == pytest.approx(normal.gap_height)


def test_gap_stays_inside_margins(normal):
    stream = ObstacleStream(random.Random(99))
    low, high = gap_range(normal.gap_height)
    assert (low, high) == (100, 320)
    for _ in range(500):
        pipe = stream.spawn(0, normal)
        assert low <= pipe.gap_top <= high


def test_ids_are_unique_and_creation_ordered(normal):
    stream = ObstacleStream(random.Random(0))
    ids = [stream.spawn(0, normal).id for _ in range(10)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 10
    stream.reset()
    assert stream.spawn(0, normal).id == 10


def test_seeded_streams_are_reproducible(normal):
    a = ObstacleStream(random.Random(42))
    b = ObstacleStream(random.Random(42))
    assert [a.spawn(0, normal).gap_top for _ in range(5)] == \
           [b.spawn(0, normal).gap_top for _ in range(5)]


def test_pipe_survives_until_past_offscreen_margin(normal):
    pipes = [ObstacleStream(random.Random(1)).spawn(800, normal)]
    for _ in range(550):
        pipes = advance_obstacles(pipes, normal)
    assert len(pipes) == 1
    assert pipes[0].x == 0

    # removed once x + width <= -100, i.e. x <= -180
    for _ in range(89):
        pipes = advance_obstacles(pipes, normal)
    assert len(pipes) == 1
    pipes = advance_obstacles(pipes, normal)
    assert pipes == []


def test_advance_preserves_order(normal):
    pipes = [Obstacle(id=i, x=100.0 * i, gap_top=100, gap_bottom=250) for i in range(4)]
    moved = advance_obstacles(pipes, normal)
    assert [p.id for p in moved] == [0, 1, 2, 3]
    assert [p.x for p in moved] == [-2.0, 98.0, 198.0, 298.0]


def test_update_spawns_on_chained_spacing(normal):
    stream = ObstacleStream(random.Random(5))
    pipes = stream.update([], normal)
    assert [p.x for p in pipes] == [1100]
    assert stream.last_spawn_x == 1100

    for _ in range(149):
        pipes = stream.update(pipes, normal)
    assert len(pipes) == 1
    assert pipes[0].x == 802

    pipes = stream.update(pipes, normal)
    assert len(pipes) == 2
    assert pipes[-1].x == 1400
    assert stream.last_spawn_x == 1400


def test_should_spawn_when_empty(normal):
    assert ObstacleStream().should_spawn([], normal)
