from skyflap.collision import judge, hits_ceiling, hits_ground, hits_pipe
from skyflap.components import Actor, Obstacle, GameMode


def pipe(x, top=200.0, bottom=350.0, **kw):
    return Obstacle(id=0, x=x, gap_top=top, gap_bottom=bottom, **kw)


def test_ground_collision():
    result = judge(Actor(y=496.0), [], GameMode.CLASSIC)
    assert result.terminal
    assert result.cause == 'ground'


def test_ceiling_collision_threshold():
    assert hits_ceiling(Actor(y=50.0))
    assert not hits_ceiling(Actor(y=50.5))
    assert judge(Actor(y=40.0), [], GameMode.CLASSIC).cause == 'ceiling'


def test_clear_air_is_not_terminal():
    result = judge(Actor(y=300.0), [], GameMode.CLASSIC)
    assert not result.terminal
    assert result.scored == []


def test_pipe_hit_above_and_below_gap():
    assert hits_pipe(Actor(y=150.0), pipe(140.0))
    assert hits_pipe(Actor(y=340.0), pipe(140.0))
    assert not hits_pipe(Actor(y=250.0), pipe(140.0))


def test_pipe_needs_horizontal_overlap():
    # actor spans 150..182
    assert not hits_pipe(Actor(y=100.0), pipe(182.0))
    assert not hits_pipe(Actor(y=100.0), pipe(70.0))
    assert hits_pipe(Actor(y=100.0), pipe(181.0))


def test_any_pipe_terminates():
    pipes = [pipe(600.0), pipe(140.0), pipe(900.0)]
    result = judge(Actor(y=100.0), pipes, GameMode.CLASSIC)
    assert result.terminal
    assert result.cause == 'pipe'


def test_scoring_marks_pipe_once():
    p = pipe(50.0)  # right edge 130, actor right edge 182
    actor = Actor(y=250.0)
    first = judge(actor, [p], GameMode.CLASSIC)
    assert first.scored == [p]
    assert p.passed
    second = judge(actor, [p], GameMode.CLASSIC)
    assert second.scored == []


def test_pipe_not_scored_before_right_edge_cleared():
    p = pipe(110.0)  # right edge 190
    assert judge(Actor(y=250.0), [p], GameMode.CLASSIC).scored == []
    assert not p.passed


def test_terminal_tick_scores_nothing():
    p = pipe(0.0)
    result = judge(Actor(y=496.0), [p], GameMode.CLASSIC)
    assert result.terminal
    assert result.scored == []
    assert not p.passed


def test_zen_never_terminal_but_scores():
    inside = pipe(140.0)
    behind = pipe(0.0)
    for y in (0.0, 40.0, 150.0, 496.0):
        result = judge(Actor(y=y), [inside, behind], GameMode.ZEN)
        assert not result.terminal
    assert behind.passed
    assert not inside.passed


def test_ground_threshold_matches_floor():
    assert hits_ground(Actor(y=496.0))
    assert not hits_ground(Actor(y=495.9))
