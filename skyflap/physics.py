"""
Actor Physics
==============
One-tick integration of the bird's vertical motion.
"""

from dataclasses import replace
from typing import Tuple

from .components import Actor, Customization
from .constants import (
    BIRD_X, BIRD_SPAWN_Y, BIRD_WIDTH, BIRD_HEIGHT, BIRD_SIZE_MULTIPLIERS,
    GROUND_Y, ROTATION_FACTOR, MAX_ROTATION,
)
from .profiles import Profile


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def floor_limit(actor: Actor) -> float:
    """Lowest y the actor's top edge may take (bottom resting on the ground)."""
    return GROUND_Y - actor.height


def actor_center(actor: Actor) -> Tuple[float, float]:
    return actor.x + actor.width / 2, actor.y + actor.height / 2


def spawn_actor(customization: Customization) -> Actor:
    """Fresh bird at the spawn point, box scaled by the chosen size."""
    scale = BIRD_SIZE_MULTIPLIERS[customization.bird_size]
    return Actor(
        x=BIRD_X,
        y=BIRD_SPAWN_Y,
        velocity=0.0,
        rotation=0.0,
        width=BIRD_WIDTH * scale,
        height=BIRD_HEIGHT * scale,
        color=customization.bird_color,
        shape=customization.bird_shape,
        size=customization.bird_size,
    )


def step_actor(actor: Actor, jump_requested: bool, profile: Profile) -> Actor:
    """
    Advance the actor by one tick and return the new state.

    A jump overrides velocity with the impulse instead of adding to it.
    Position is clamped to [0, floor_limit]; reaching the floor is judged
    by the collision oracle against the same limit.
    """
    if jump_requested:
        velocity = profile.jump_impulse
    else:
        velocity = actor.velocity + profile.gravity
    velocity = clamp(velocity, -profile.max_fall_speed, profile.max_fall_speed)

    y = clamp(actor.y + velocity, 0.0, floor_limit(actor))
    rotation = clamp(velocity * ROTATION_FACTOR, -MAX_ROTATION, MAX_ROTATION)

    return replace(actor, y=y, velocity=velocity, rotation=rotation)
