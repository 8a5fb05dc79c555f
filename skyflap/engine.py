"""
Rendering Engine
=================
Double-buffered terminal renderer that maps the 800x600 playfield onto
the terminal grid. Reads snapshots only; never touches session state.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import random

from blessed import Terminal

from .components import Snapshot, ObstacleView, ActorView
from .constants import FIELD_WIDTH, FIELD_HEIGHT, GROUND_Y, SKY_HEIGHT


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_LIME = 154
NEON_RED = 196
NEON_ORANGE = 208

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238

WHITE = 255

BIRD_PALETTE: Dict[str, int] = {
    'yellow': 220, 'blue': 33, 'red': 196, 'green': 77, 'purple': 141,
    'orange': 208, 'pink': 205, 'white': 255, 'black': 236,
}

BIRD_GLYPHS: Dict[str, str] = {'round': 'O', 'square': '#', 'triangle': 'A'}

# theme -> (sky bg, ground bg, accent fg)
THEME_PALETTE: Dict[str, Tuple[int, int, int]] = {
    'day': (117, 180, 28),
    'night': (17, 23, 220),
    'sunset': (209, 94, 202),
    'space': (16, 59, 141),
    'underwater': (24, 137, 37),
    'forest': (28, 94, 58),
}

# style -> (body fg, edge fg, body char)
PIPE_PALETTE: Dict[str, Tuple[int, int, str]] = {
    'classic': (77, 28, '#'),
    'metal': (250, 244, '|'),
    'candy': (205, 198, '%'),
    'neon': (51, 33, '#'),
    'stone': (242, 238, '='),
}

HUD_ROWS = 2


@dataclass
class Cell:
    """A single cell in the render buffer."""
    char: str = ' '
    fg_color: int = 7
    bg_color: int = -1  # -1 = transparent/default

    def matches(self, other: 'Cell') -> bool:
        """Check if two cells are visually identical."""
        return (
            self.char == other.char and
            self.fg_color == other.fg_color and
            self.bg_color == other.bg_color
        )

    def reset(self):
        """Reset to empty state."""
        self.char = ' '
        self.fg_color = 7
        self.bg_color = -1


class DoubleBuffer:
    """
    Writes go to the back buffer; present() emits only the cells that
    differ from what is already on screen, then swaps.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = []
        self.back: List[List[Cell]] = []
        self._init_buffers()

    def _init_buffers(self):
        """Initialize both buffers with empty cells."""
        self.front = [[Cell() for _ in range(self.width)] for _ in range(self.height)]
        self.back = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        """Handle terminal resize."""
        self.width = width
        self.height = height
        self._init_buffers()

    def clear_back(self):
        """Clear the back buffer by resetting cells in-place."""
        for row in self.back:
            for cell in row:
                cell.reset()

    def put(self, x: int, y: int, char: str, fg_color: int = 7, bg_color: int = -1):
        """Put a character in the back buffer. A negative bg keeps the cell's background."""
        if 0 <= x < self.width and 0 <= y < self.height:
            cell = self.back[y][x]
            cell.char = char
            cell.fg_color = fg_color
            if bg_color >= 0:
                cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = 7, bg_color: int = -1):
        """Put a string in the back buffer."""
        for i, char in enumerate(text):
            self.put(x + i, y, char, fg_color, bg_color)

    def present(self) -> str:
        """
        Swap buffers and generate output for changed cells only.

        Shake offsets are applied upstream when writing, so present maps
        cells 1:1 onto the screen.
        """
        parts = []
        normal = self.term.normal
        for y in range(self.height):
            for x in range(self.width):
                back_cell = self.back[y][x]
                if back_cell.matches(self.front[y][x]):
                    continue
                parts.append(self.term.move_xy(x, y))
                parts.append(normal)
                if back_cell.bg_color >= 0:
                    parts.append(self.term.on_color(back_cell.bg_color))
                parts.append(self.term.color(back_cell.fg_color))
                parts.append(back_cell.char or ' ')

        self.front, self.back = self.back, self.front
        return ''.join(parts)


@dataclass
class FieldRenderer:
    """
    Scales playfield units to terminal cells. The bottom HUD_ROWS rows
    hold the score line and hints. A crash shakes the field briefly.
    """
    term: Terminal
    theme: str = 'day'
    pipe_style: str = 'classic'
    buffer: DoubleBuffer = field(init=False)

    shake_x: int = 0
    shake_frames: int = 0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def game_height(self) -> int:
        return self.buffer.height - HUD_ROWS

    def to_cell(self, x: float, y: float) -> Tuple[int, int]:
        """Playfield units to a (column, row) cell, shake included."""
        cx = int(x * self.width / FIELD_WIDTH) + self.shake_x
        cy = int(y * self.game_height / FIELD_HEIGHT)
        return cx, cy

    def resize(self, width: int, height: int):
        """Handle terminal resize."""
        self.buffer.resize(width, height)

    def trigger_shake(self, frames: int = 12):
        self.shake_frames = max(self.shake_frames, frames)

    def begin_frame(self):
        self.buffer.clear_back()
        if self.shake_frames > 0:
            self.shake_x = random.randint(-1, 1)
            self.shake_frames -= 1
        else:
            self.shake_x = 0

    def end_frame(self) -> str:
        return self.buffer.present()

    # -------------------------------------------------------------------------
    # Field layers
    # -------------------------------------------------------------------------

    def draw_background(self, weather: bool = False):
        sky, ground, accent = THEME_PALETTE[self.theme]
        _, ground_row = self.to_cell(0, GROUND_Y)
        _, sky_row = self.to_cell(0, SKY_HEIGHT)
        for y in range(self.game_height):
            for x in range(self.width):
                if y >= ground_row:
                    self.buffer.put(x, y, '=' if y == ground_row else ' ', accent, ground)
                elif y <= sky_row:
                    self.buffer.put(x, y, '~' if y == sky_row else ' ', GRAY_MED, sky)
                else:
                    char = ' '
                    if weather and random.random() < 0.02:
                        char = random.choice(["'", ',', '.'])
                    self.buffer.put(x, y, char, GRAY_LIGHT, sky)

    def draw_obstacle(self, obstacle: ObstacleView):
        """Pipe body above and below the gap, edges in the darker shade."""
        body, edge, char = PIPE_PALETTE[self.pipe_style]
        left, top = self.to_cell(obstacle.x, obstacle.gap_top)
        right, bottom = self.to_cell(obstacle.x + obstacle.width, obstacle.gap_bottom)
        _, ground_row = self.to_cell(0, GROUND_Y)
        for x in range(left, max(left + 1, right)):
            color = edge if x in (left, right - 1) else body
            for y in range(0, top):
                self.buffer.put(x, y, char, color)
            for y in range(bottom, ground_row):
                self.buffer.put(x, y, char, color)

    def draw_actor(self, actor: ActorView):
        cx, cy = self.to_cell(actor.x + actor.width / 2, actor.y + actor.height / 2)
        color = BIRD_PALETTE.get(actor.color, NEON_YELLOW)
        self.buffer.put(cx, cy, BIRD_GLYPHS.get(actor.shape, 'O'), color)
        # Wing hints the rotation: up-flap above, dive below
        wing_y = cy - 1 if actor.rotation < 0 else cy + 1 if actor.rotation > 10 else cy
        self.buffer.put(cx - 1, wing_y, '>', color)

    def draw_particles(self, particles):
        for p in particles:
            cx, cy = self.to_cell(p.x, p.y)
            if 0 <= cy < self.game_height:
                fading = p.life < p.max_life * 0.4
                self.buffer.put(cx, cy, '.' if fading else p.char,
                                GRAY_DARK if fading else p.color)

    def draw_snapshot(self, snap: Snapshot, particles=(), weather: bool = False):
        """Draw every field layer for one frame, back to front."""
        self.draw_background(weather)
        for obstacle in snap.obstacles:
            self.draw_obstacle(obstacle)
        self.draw_actor(snap.actor)
        self.draw_particles(particles)

    # -------------------------------------------------------------------------
    # Text
    # -------------------------------------------------------------------------

    def draw_centered(self, row: int, text: str, color: int = WHITE):
        self.buffer.put_string(max(0, (self.width - len(text)) // 2), row, text, color)

    def draw_hud(self, left: str, right: str, hint: str):
        row = self.game_height
        self.buffer.put_string(0, row, '-' * self.width, GRAY_DARK)
        self.buffer.put_string(1, row, f' {left} ', NEON_YELLOW)
        self.buffer.put_string(max(0, self.width - len(right) - 2), row, f' {right} ', NEON_CYAN)
        self.buffer.put_string(1, row + 1, hint[:self.width - 2], GRAY_MED)
