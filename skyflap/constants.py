"""
Field Constants
================
Playfield geometry, bird defaults, storage keys and effect tuning.
All distances are in playfield units; all timings are in ticks.
"""

from typing import Dict


# =============================================================================
# TIMING
# =============================================================================

TICK_RATE = 60
TICK_TIME = 1.0 / TICK_RATE


# =============================================================================
# PLAYFIELD
# =============================================================================

FIELD_WIDTH = 800
FIELD_HEIGHT = 600
GROUND_HEIGHT = 80
SKY_HEIGHT = 50

# Top edge of the ground strip (bird bottom at or below this is a crash)
GROUND_Y = FIELD_HEIGHT - GROUND_HEIGHT


# =============================================================================
# BIRD
# =============================================================================

BIRD_X = 150.0
BIRD_SPAWN_Y = FIELD_HEIGHT / 2
BIRD_WIDTH = 32
BIRD_HEIGHT = 24

MAX_FALL_SPEED = 10.0

# Rotation is velocity * ROTATION_FACTOR clamped to +/- MAX_ROTATION
ROTATION_FACTOR = 3.0
MAX_ROTATION = 30.0

BIRD_SIZE_MULTIPLIERS: Dict[str, float] = {
    'small': 0.8,
    'medium': 1.0,
    'large': 1.2,
}


# =============================================================================
# PIPES
# =============================================================================

PIPE_WIDTH = 80
GAP_MARGIN = 50          # Gaps never come closer than this to sky/ground
OFFSCREEN_SLACK = 100    # Pipes live until x + width <= -OFFSCREEN_SLACK
FIRST_SPAWN_X = float(FIELD_WIDTH)


# =============================================================================
# PERSISTENCE KEYS
# =============================================================================

KEY_HIGH_SCORE = 'skyflap_highscore'
KEY_STATS = 'skyflap_stats'
KEY_CUSTOMIZATION = 'skyflap_customization'


# =============================================================================
# PARTICLE BURSTS
# =============================================================================
# kind -> (count, lifetime, speed)

PARTICLE_BURSTS: Dict[str, tuple] = {
    'jump': (8, 30, 2.0),
    'collision': (15, 45, 4.0),
    'score': (12, 60, 1.5),
}

PARTICLE_GRAVITY = 0.1
