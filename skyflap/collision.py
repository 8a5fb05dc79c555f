"""
Collision and Scoring
======================
Judges one tick: terminal hits against ground, ceiling and pipes, and
pipes the bird has just cleared.
"""

from typing import List, Optional, Union

from .components import Actor, Obstacle, Judgement, GameMode
from .constants import GROUND_Y, SKY_HEIGHT
from .profiles import MODE_TABLE


def hits_ground(actor: Actor) -> bool:
    return actor.y + actor.height >= GROUND_Y


def hits_ceiling(actor: Actor) -> bool:
    return actor.y <= SKY_HEIGHT


def overlaps_horizontally(actor: Actor, obstacle: Obstacle) -> bool:
    return actor.x < obstacle.x + obstacle.width and actor.x + actor.width > obstacle.x


def hits_pipe(actor: Actor, obstacle: Obstacle) -> bool:
    """AABB test against the solid parts above and below the gap."""
    if not overlaps_horizontally(actor, obstacle):
        return False
    return actor.y < obstacle.gap_top or actor.y + actor.height > obstacle.gap_bottom


def has_cleared(actor: Actor, obstacle: Obstacle) -> bool:
    """Bird's right edge is past the pipe's right edge."""
    return actor.x + actor.width > obstacle.x + obstacle.width


def find_collision(actor: Actor, obstacles: List[Obstacle]) -> Optional[str]:
    """Return the cause of the first terminal hit, or None."""
    if hits_ground(actor):
        return 'ground'
    if hits_ceiling(actor):
        return 'ceiling'
    for obstacle in obstacles:
        if hits_pipe(actor, obstacle):
            return 'pipe'
    return None


def judge(actor: Actor, obstacles: List[Obstacle],
          mode: Union[GameMode, str]) -> Judgement:
    """
    Judge the post-physics actor against the current pipes.

    A terminal tick scores nothing. Otherwise every newly cleared pipe is
    flagged passed (once, ever) and reported in Judgement.scored.
    Zen mode never reports a terminal hit but still scores.
    """
    if not MODE_TABLE[GameMode(mode)].no_collisions:
        cause = find_collision(actor, obstacles)
        if cause is not None:
            return Judgement(terminal=True, cause=cause)

    scored = []
    for obstacle in obstacles:
        if not obstacle.passed and has_cleared(actor, obstacle):
            obstacle.passed = True
            scored.append(obstacle)
    return Judgement(terminal=False, scored=scored)
