"""
Difficulty and Mode Profiles
=============================
Pure lookup from a (difficulty, mode) pair to the tuning constants
that drive physics and obstacle spawning.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Union

from .components import Difficulty, GameMode
from .constants import FIELD_HEIGHT, GROUND_HEIGHT, SKY_HEIGHT, MAX_FALL_SPEED


class ProfileError(KeyError):
    """Unknown difficulty or mode. Always a programming error."""


# =============================================================================
# DIFFICULTY TABLE
# =============================================================================
# difficulty -> (gravity, jump_impulse, obstacle_speed, gap_height, spawn_spacing)
# Challenge rises monotonically down the table.

DIFFICULTY_TABLE: Dict[Difficulty, tuple] = {
    Difficulty.EASY:   (0.4, -7.5, 1.5, 180.0, 350.0),
    Difficulty.NORMAL: (0.5, -8.5, 2.0, 150.0, 300.0),
    Difficulty.HARD:   (0.6, -9.0, 2.5, 120.0, 280.0),
    Difficulty.EXPERT: (0.7, -9.5, 3.0, 100.0, 250.0),
}


# =============================================================================
# MODE TABLE
# =============================================================================

@dataclass(frozen=True)
class ModeRules:
    name: str
    description: str
    time_limit: Optional[int] = None  # seconds
    lives: Optional[int] = None
    no_collisions: bool = False

    @property
    def has_lives(self) -> bool:
        return self.lives is not None


MODE_TABLE: Dict[GameMode, ModeRules] = {
    GameMode.CLASSIC: ModeRules(
        'Classic', 'Traditional gameplay'),
    GameMode.TIME_ATTACK: ModeRules(
        'Time Attack', 'Score as much as possible in 60 seconds',
        time_limit=60),
    GameMode.SURVIVAL: ModeRules(
        'Survival', '3 lives, increasing difficulty', lives=3),
    GameMode.ZEN: ModeRules(
        'Zen Mode', 'Relaxed gameplay with no collisions',
        no_collisions=True),
}


@dataclass(frozen=True)
class Profile:
    """Resolved tuning for one difficulty/mode selection."""
    difficulty: Difficulty
    mode: GameMode
    gravity: float
    jump_impulse: float
    max_fall_speed: float
    obstacle_speed: float
    gap_height: float
    spawn_spacing: float
    time_limit: Optional[int] = None

    @property
    def rules(self) -> ModeRules:
        return MODE_TABLE[self.mode]


# =============================================================================
# QUERY FUNCTIONS
# =============================================================================

def _coerce(enum_type, value):
    try:
        return enum_type(value)
    except ValueError:
        raise ProfileError(f'unknown {enum_type.__name__.lower()}: {value!r}') from None


def resolve(difficulty: Union[Difficulty, str], mode: Union[GameMode, str]) -> Profile:
    """
    Resolve the profile for a difficulty/mode pair.

    Raises ProfileError for values outside the enumerated sets.
    """
    difficulty = _coerce(Difficulty, difficulty)
    mode = _coerce(GameMode, mode)

    gravity, impulse, speed, gap, spacing = DIFFICULTY_TABLE[difficulty]
    rules = MODE_TABLE[mode]

    # Gap must leave room between sky and ground strips
    if gap >= FIELD_HEIGHT - GROUND_HEIGHT - SKY_HEIGHT:
        raise ProfileError(f'gap {gap} does not fit the playfield')

    return Profile(
        difficulty=difficulty,
        mode=mode,
        gravity=gravity,
        jump_impulse=impulse,
        max_fall_speed=MAX_FALL_SPEED,
        obstacle_speed=speed,
        gap_height=gap,
        spawn_spacing=spacing,
        time_limit=rules.time_limit,
    )
