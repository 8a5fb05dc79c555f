"""
Obstacle Stream
================
Moves pipes leftward, retires the ones that left the field and spawns
new ones at chained spacing with a randomized gap.
"""

import random
from dataclasses import replace
from typing import List, Optional, Tuple

from .components import Obstacle
from .constants import (
    FIELD_HEIGHT, GROUND_HEIGHT, SKY_HEIGHT,
    PIPE_WIDTH, GAP_MARGIN, OFFSCREEN_SLACK, FIRST_SPAWN_X,
)
from .profiles import Profile


def gap_range(gap_height: float) -> Tuple[float, float]:
    """Allowed (min, max) for a new gap's top edge."""
    low = SKY_HEIGHT + GAP_MARGIN
    high = FIELD_HEIGHT - GROUND_HEIGHT - gap_height - GAP_MARGIN
    return low, high


def is_offscreen(obstacle: Obstacle) -> bool:
    return obstacle.x + obstacle.width <= -OFFSCREEN_SLACK


def advance_obstacles(obstacles: List[Obstacle], profile: Profile) -> List[Obstacle]:
    """Shift every pipe left by the profile speed and drop off-screen ones."""
    moved = [replace(o, x=o.x - profile.obstacle_speed) for o in obstacles]
    return [o for o in moved if not is_offscreen(o)]


class ObstacleStream:
    """
    Owns pipe id allocation, the chained spawn position and the random
    source for gap placement. Pass a seeded random.Random for
    reproducible geometry.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()
        self._next_id = 0
        self.last_spawn_x = FIRST_SPAWN_X

    def reset(self) -> None:
        """Restart spawn chaining. Ids keep counting so they stay unique."""
        self.last_spawn_x = FIRST_SPAWN_X

    def spawn(self, last_spawn_x: float, profile: Profile) -> Obstacle:
        """Create the next pipe one spacing beyond the previous spawn point."""
        low, high = gap_range(profile.gap_height)
        gap_top = self.rng.uniform(low, high)

        obstacle = Obstacle(
            id=self._next_id,
            x=last_spawn_x + profile.spawn_spacing,
            gap_top=gap_top,
            gap_bottom=gap_top + profile.gap_height,
            width=float(PIPE_WIDTH),
        )
        self._next_id += 1
        return obstacle

    def should_spawn(self, obstacles: List[Obstacle], profile: Profile) -> bool:
        """Due when empty, or when the tail pipe retreated a full spacing."""
        if not obstacles:
            return True
        return obstacles[-1].x <= self.last_spawn_x - profile.spawn_spacing

    def update(self, obstacles: List[Obstacle], profile: Profile) -> List[Obstacle]:
        """Advance, retire and (when due) spawn. Returns the new sequence."""
        updated = advance_obstacles(obstacles, profile)
        if self.should_spawn(updated, profile):
            obstacle = self.spawn(self.last_spawn_x, profile)
            updated.append(obstacle)
            self.last_spawn_x = obstacle.x
        return updated
