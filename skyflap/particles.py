"""
Particle System
================
Visual-only bursts spawned from the session's effect events.
The simulation core never reads particles back.
"""

import math
import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from .components import EffectEvent, EffectKind
from .constants import PARTICLE_BURSTS, PARTICLE_GRAVITY
from .engine import (
    NEON_YELLOW, NEON_ORANGE, NEON_RED, NEON_GREEN, NEON_LIME, WHITE
)


BURST_COLORS: Dict[EffectKind, List[int]] = {
    EffectKind.JUMP: [NEON_YELLOW, NEON_ORANGE, NEON_RED],
    EffectKind.COLLISION: [NEON_RED, NEON_ORANGE, NEON_YELLOW],
    EffectKind.SCORE: [NEON_GREEN, NEON_LIME, WHITE],
}

BURST_CHARS: Dict[EffectKind, List[str]] = {
    EffectKind.JUMP: ['.', '*', "'"],
    EffectKind.COLLISION: ['*', '#', 'x', '+', '!'],
    EffectKind.SCORE: ['+', '*', '.'],
}


@dataclass
class Particle:
    x: float
    y: float
    vx: float
    vy: float
    life: int
    max_life: int
    color: int = WHITE
    char: str = '.'


class ParticleField:
    """Particles in playfield units. Disabled fields drop every event."""

    def __init__(self, enabled: bool = True, rng: Optional[random.Random] = None):
        self.enabled = enabled
        self.rng = rng if rng is not None else random.Random()
        self.particles: List[Particle] = []

    def clear(self) -> None:
        self.particles.clear()

    def spawn_burst(self, event: EffectEvent) -> int:
        """Radial burst around the event origin. Returns particles added."""
        if not self.enabled:
            return 0

        count, life, speed = PARTICLE_BURSTS[event.kind.value]
        colors = BURST_COLORS[event.kind]
        chars = BURST_CHARS[event.kind]

        for i in range(count):
            angle = 2 * math.pi * i / count
            jitter = speed * (0.5 + self.rng.random() * 0.5)
            self.particles.append(Particle(
                x=event.x,
                y=event.y,
                vx=math.cos(angle) * jitter,
                vy=math.sin(angle) * jitter,
                life=life,
                max_life=life,
                color=self.rng.choice(colors),
                char=self.rng.choice(chars),
            ))
        return count

    def absorb(self, events: Iterable[EffectEvent]) -> None:
        for event in events:
            self.spawn_burst(event)

    def update(self) -> None:
        """Move, apply gravity, age, and drop dead particles."""
        for p in self.particles:
            p.x += p.vx
            p.y += p.vy
            p.vy += PARTICLE_GRAVITY
            p.life -= 1
        self.particles = [p for p in self.particles if p.life > 0]
