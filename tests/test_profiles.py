import pytest

from skyflap.components import Difficulty, GameMode
from skyflap.constants import FIELD_HEIGHT, GROUND_HEIGHT, SKY_HEIGHT
from skyflap.profiles import resolve, ProfileError


def test_normal_classic_values():
    p = resolve(Difficulty.NORMAL, GameMode.CLASSIC)
    assert p.gravity == 0.5
    assert p.jump_impulse == -8.5
    assert p.max_fall_speed == 10
    assert p.obstacle_speed == 2
    assert p.gap_height == 150
    assert p.spawn_spacing == 300
    assert p.time_limit is None
    assert not p.rules.no_collisions


def test_accepts_plain_strings():
    assert resolve('hard', 'zen') == resolve(Difficulty.HARD, GameMode.ZEN)


def test_challenge_increases_with_difficulty():
    profiles = [resolve(d, 'classic') for d in Difficulty]
    for easier, harder in zip(profiles, profiles[1:]):
        assert harder.gravity > easier.gravity
        assert abs(harder.jump_impulse) > abs(easier.jump_impulse)
        assert harder.obstacle_speed > easier.obstacle_speed
        assert harder.gap_height < easier.gap_height
        assert harder.spawn_spacing < easier.spawn_spacing


def test_mode_flags():
    assert resolve('normal', 'time_attack').time_limit == 60
    assert resolve('normal', 'zen').rules.no_collisions
    survival = resolve('normal', 'survival').rules
    assert survival.has_lives and survival.lives == 3
    assert not resolve('normal', 'classic').rules.has_lives


@pytest.mark.parametrize('difficulty', list(Difficulty))
def test_gap_fits_between_sky_and_ground(difficulty):
    p = resolve(difficulty, 'classic')
    assert p.gap_height < FIELD_HEIGHT - GROUND_HEIGHT - SKY_HEIGHT


@pytest.mark.parametrize('difficulty, mode', [('insane', 'classic'), ('normal', 'arcade')])
def test_unknown_inputs_fail_fast(difficulty, mode):
    with pytest.raises(ProfileError):
        resolve(difficulty, mode)
