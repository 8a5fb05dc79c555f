"""
Component Definitions
======================
Plain dataclasses and enums shared by the simulation core and its
collaborators. No behavior lives here.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from .constants import BIRD_X, BIRD_SPAWN_Y, BIRD_WIDTH, BIRD_HEIGHT, PIPE_WIDTH


# =============================================================================
# ENUMERATIONS
# =============================================================================

class Status(str, Enum):
    MENU = 'menu'
    PLAYING = 'playing'
    PAUSED = 'paused'
    GAME_OVER = 'game_over'


class Difficulty(str, Enum):
    EASY = 'easy'
    NORMAL = 'normal'
    HARD = 'hard'
    EXPERT = 'expert'


class GameMode(str, Enum):
    CLASSIC = 'classic'
    TIME_ATTACK = 'time_attack'
    SURVIVAL = 'survival'
    ZEN = 'zen'


class EffectKind(str, Enum):
    JUMP = 'jump'
    SCORE = 'score'
    COLLISION = 'collision'


class Command(str, Enum):
    """Abstract commands delivered by the input collaborator."""
    START = 'start'
    JUMP = 'jump'
    RESET = 'reset'
    PAUSE = 'pause'
    RESUME = 'resume'


# Closed sets of cosmetic choices
BIRD_COLORS = ('yellow', 'blue', 'red', 'green', 'purple',
               'orange', 'pink', 'white', 'black')
BIRD_SHAPES = ('round', 'square', 'triangle')
BIRD_SIZES = ('small', 'medium', 'large')
BACKGROUND_THEMES = ('day', 'night', 'sunset', 'space', 'underwater', 'forest')
PIPE_STYLES = ('classic', 'metal', 'candy', 'neon', 'stone')


# =============================================================================
# SIMULATION STATE
# =============================================================================

@dataclass
class Actor:
    """The bird. Width/height are already scaled by the size multiplier."""
    x: float = BIRD_X
    y: float = BIRD_SPAWN_Y
    velocity: float = 0.0
    rotation: float = 0.0
    width: float = float(BIRD_WIDTH)
    height: float = float(BIRD_HEIGHT)
    color: str = 'yellow'
    shape: str = 'round'
    size: str = 'medium'


@dataclass
class Obstacle:
    """A pipe pair. The open gap spans gap_top..gap_bottom."""
    id: int
    x: float
    gap_top: float
    gap_bottom: float
    width: float = float(PIPE_WIDTH)
    passed: bool = False

    @property
    def gap_height(self) -> float:
        return self.gap_bottom - self.gap_top


@dataclass(frozen=True)
class EffectEvent:
    """Ephemeral cue for the particle/visual layer."""
    kind: EffectKind
    x: float
    y: float


@dataclass
class Judgement:
    """Outcome of judging one tick."""
    terminal: bool = False
    cause: Optional[str] = None  # 'ground' | 'ceiling' | 'pipe'
    scored: list = field(default_factory=list)


# =============================================================================
# CONFIGURATION RECORDS
# =============================================================================

@dataclass(frozen=True)
class Customization:
    """Validated cosmetic and rule choices (see config.validate_customization)."""
    bird_color: str = 'yellow'
    bird_shape: str = 'round'
    bird_size: str = 'medium'
    background_theme: str = 'day'
    pipe_style: str = 'classic'
    difficulty: Difficulty = Difficulty.NORMAL
    game_mode: GameMode = GameMode.CLASSIC
    particle_effects: bool = True
    weather_effects: bool = False


# =============================================================================
# RENDER SNAPSHOT
# =============================================================================

@dataclass(frozen=True)
class ActorView:
    """Frozen copy of an Actor for the renderer."""
    x: float
    y: float
    velocity: float
    rotation: float
    width: float
    height: float
    color: str
    shape: str
    size: str


@dataclass(frozen=True)
class ObstacleView:
    """Frozen copy of an Obstacle for the renderer."""
    id: int
    x: float
    gap_top: float
    gap_bottom: float
    width: float
    passed: bool

    @property
    def gap_height(self) -> float:
        return self.gap_bottom - self.gap_top


@dataclass(frozen=True)
class Snapshot:
    """Read-only view handed to the rendering collaborator once per frame."""
    status: Status
    score: int
    high_score: int
    actor: ActorView
    obstacles: Tuple[ObstacleView, ...]
    effects: Tuple[EffectEvent, ...]
    time_left: Optional[int]
    elapsed_ticks: int
    end_cause: Optional[str] = None
