#!/usr/bin/env python3
"""
SKYFLAP - Terminal Pipe Dodger
===============================
Flap through the gaps, don't touch the pipes, the ground or the sky.

Controls:
    SPACE / UP  - Flap (start a game from the menu or game over screen)
    P           - Pause / resume
    ESC         - Pause while playing, back to menu otherwise
    D / M       - Cycle difficulty / mode (menu)
    X           - Reset statistics (menu)
    Q           - Quit
"""

import argparse
import random
import sys
import time
from dataclasses import replace
from typing import Optional

from blessed import Terminal

from .components import Command, Status, Difficulty, GameMode, EffectKind
from .config import load_settings, validate_customization, Settings
from .constants import TICK_TIME
from .engine import (
    FieldRenderer, NEON_CYAN, NEON_MAGENTA, NEON_YELLOW, NEON_RED,
    NEON_GREEN, GRAY_MED, WHITE,
)
from .log import setup_logging, get_logger, notices
from .particles import ParticleField
from .session import Session
from .stats import StatsBridge, format_playtime, format_clock
from .storage import JsonFileStore

logger = get_logger("main")


# =============================================================================
# CONSTANTS
# =============================================================================

MIN_WIDTH = 60
MIN_HEIGHT = 20
MAX_TICKS_PER_FRAME = 4

TITLE_ART = [
    r"  ___ _  ____   _____ _      _   ___ ",
    r" / __| |/ /\ \ / / __| |    /_\ | _ \ ",
    r" \__ \ ' <  \ V /| _|| |__ / _ \|  _/",
    r" |___/_|\_\  |_| |_| |____/_/ \_\_|  ",
]

END_CAUSES = {
    'ground': 'You hit the ground',
    'ceiling': 'You flew into the sky',
    'pipe': 'You hit a pipe',
    'time': "Time's up",
}

_DIFFICULTIES = list(Difficulty)
_MODES = list(GameMode)


def _cycle(options: list, current):
    return options[(options.index(current) + 1) % len(options)]


# =============================================================================
# GAME
# =============================================================================

class Game:
    """Frontend: turns keys into commands and snapshots into frames."""

    def __init__(self, term: Terminal, session: Session):
        self.term = term
        self.session = session
        custom = session.customization
        self.renderer = FieldRenderer(term, theme=custom.background_theme,
                                      pipe_style=custom.pipe_style)
        self.particles = ParticleField(enabled=custom.particle_effects)
        self.running = True

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def handle_input(self):
        """Drain pending keys and submit the matching commands."""
        key = self.term.inkey(timeout=0)
        while key:
            self._handle_key(key)
            key = self.term.inkey(timeout=0)
        # Jumps must land now, not at the next tick
        self.session.process_commands()

    def _handle_key(self, key):
        status = self.session.status
        key_str = key.lower() if not key.is_sequence else ''

        if key_str == 'q':
            self.running = False
        elif key_str == ' ' or key.name == 'KEY_UP':
            if status == Status.PLAYING:
                self.session.submit(Command.JUMP)
            elif status == Status.PAUSED:
                self.session.submit(Command.RESUME)
            else:
                self.session.submit(Command.START)
        elif key_str == 'p':
            self.session.submit(Command.RESUME if status == Status.PAUSED else Command.PAUSE)
        elif key.name == 'KEY_ESCAPE':
            self.session.submit(Command.PAUSE if status == Status.PLAYING else Command.RESET)
        elif status == Status.MENU:
            self._handle_menu_key(key_str)

    def _handle_menu_key(self, key_str: str):
        custom = self.session.customization
        if key_str == 'd':
            custom = replace(custom, difficulty=_cycle(_DIFFICULTIES, custom.difficulty))
        elif key_str == 'm':
            custom = replace(custom, game_mode=_cycle(_MODES, custom.game_mode))
        elif key_str == 'x':
            self.session.reset_statistics()
            return
        else:
            return
        self.session.set_customization(custom)

    # -------------------------------------------------------------------------
    # Update / render
    # -------------------------------------------------------------------------

    def update(self):
        """One fixed-timestep tick of simulation and particles."""
        self.session.tick()
        self.particles.update()

    def _sync_size(self):
        """Rebuild the buffers when the terminal changed size."""
        size = (self.term.width, self.term.height)
        if size != (self.renderer.buffer.width, self.renderer.buffer.height):
            logger.debug('Terminal resized to %dx%d', *size)
            self.renderer.resize(*size)
            print(self.term.home + self.term.clear, end='', flush=True)

    def render(self):
        self._sync_size()
        snap = self.session.snapshot()
        self.particles.absorb(snap.effects)
        if any(e.kind == EffectKind.COLLISION for e in snap.effects):
            self.renderer.trigger_shake()

        r = self.renderer
        r.begin_frame()
        r.draw_snapshot(snap, self.particles.particles,
                        weather=self.session.customization.weather_effects)

        if snap.status == Status.MENU:
            self._render_menu(snap)
        elif snap.status == Status.GAME_OVER:
            self._render_game_over(snap)
        elif snap.status == Status.PAUSED:
            r.draw_centered(r.game_height // 2, '-- PAUSED --', NEON_YELLOW)

        left = f'SCORE {snap.score}  BEST {snap.high_score}'
        right = f'TIME {format_clock(snap.time_left)}' if snap.time_left is not None else ''
        hint = notices.latest() or 'SPACE flap  P pause  ESC menu  Q quit'
        r.draw_hud(left, right, hint)

        output = r.end_frame()
        if output:
            print(output, end='', flush=True)

    def _render_menu(self, snap):
        r = self.renderer
        top = max(1, r.game_height // 2 - 7)
        for i, line in enumerate(TITLE_ART):
            r.draw_centered(top + i, line, NEON_MAGENTA)

        profile = self.session.profile
        rules = profile.rules
        stats = self.session.bridge.stats
        mode_line = f'Mode: {rules.name}  [M]'
        if rules.has_lives:
            mode_line = f'Mode: {rules.name} ({rules.lives} lives)  [M]'
        rows = [
            (f'Difficulty: {profile.difficulty.value.upper()}  [D]', NEON_CYAN),
            (mode_line, NEON_CYAN),
            (rules.description, GRAY_MED),
            ('', WHITE),
            (f'High score {snap.high_score}   Games {stats.games_played}   '
             f'Avg {stats.average_score}   Played {format_playtime(stats.playtime_seconds)}',
             WHITE),
            ('', WHITE),
            ('Press SPACE to start   [X] reset stats', NEON_YELLOW),
        ]
        for i, (text, color) in enumerate(rows):
            r.draw_centered(top + len(TITLE_ART) + 1 + i, text, color)

    def _render_game_over(self, snap):
        r = self.renderer
        mid = r.game_height // 2
        r.draw_centered(mid - 3, 'GAME OVER', NEON_RED)
        r.draw_centered(mid - 2, END_CAUSES.get(snap.end_cause, ''), GRAY_MED)
        r.draw_centered(mid, f'Final Score: {snap.score}', WHITE)
        if snap.score == snap.high_score and snap.score > 0:
            r.draw_centered(mid + 1, 'NEW BEST!', NEON_GREEN)
        else:
            r.draw_centered(mid + 1, f'Best: {snap.high_score}', GRAY_MED)
        r.draw_centered(mid + 3, 'SPACE to play again   ESC for menu', NEON_YELLOW)


# =============================================================================
# SETUP
# =============================================================================

def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Terminal pipe dodger.")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty])
    parser.add_argument("--mode", choices=[m.value for m in GameMode])
    parser.add_argument("--data-file", help="JSON file for scores and statistics.")
    parser.add_argument("--seed", type=int, help="Seed for pipe gap placement.")
    parser.add_argument("--log-level", help="debug, info, warning or error.")
    parser.add_argument("--log-file", help="Write NDJSON logs here instead of stderr.")
    return parser.parse_args(argv)


def build_session(settings: Settings, args: argparse.Namespace) -> Session:
    """Wire store, bridge and session from settings plus CLI overrides."""
    store = JsonFileStore(args.data_file or settings.data_file, autoflush=False)
    bridge = StatsBridge(store)
    bridge.load()

    custom = bridge.load_customization()
    difficulty = args.difficulty or settings.difficulty
    mode = args.mode or settings.mode
    custom = validate_customization(**{
        **{k: getattr(custom, k) for k in custom.__dataclass_fields__},
        'difficulty': difficulty,
        'game_mode': mode,
    })

    seed: Optional[int] = args.seed if args.seed is not None else settings.seed
    return Session(custom, bridge, rng=random.Random(seed))


# =============================================================================
# MAIN LOOP
# =============================================================================

def main(argv=None):
    """Entry point. Sets up terminal and runs the 60 tick/s loop."""
    args = _parse_args(argv)
    settings = load_settings()
    setup_logging(args.log_level or settings.log_level, args.log_file or settings.log_file)

    term = Terminal()
    if term.width < MIN_WIDTH or term.height < MIN_HEIGHT:
        print(
            f'Terminal too small: {term.width}x{term.height}. '
            f'Minimum: {MIN_WIDTH}x{MIN_HEIGHT}'
        )
        sys.exit(1)

    session = build_session(settings, args)

    try:
        with term.fullscreen(), term.cbreak(), term.hidden_cursor():
            game = Game(term, session)
            last_time = time.perf_counter()
            accumulator = 0.0

            print(term.home + term.clear, end='', flush=True)

            while game.running:
                now = time.perf_counter()
                delta = min(now - last_time, TICK_TIME * 5)
                last_time = now
                accumulator += delta

                game.handle_input()

                ticks = 0
                while accumulator >= TICK_TIME and ticks < MAX_TICKS_PER_FRAME:
                    game.update()
                    accumulator -= TICK_TIME
                    ticks += 1

                game.render()

                elapsed = time.perf_counter() - now
                sleep_time = TICK_TIME - elapsed
                if sleep_time > 0.001:
                    time.sleep(sleep_time * 0.9)

            print(term.normal, end='', flush=True)
    finally:
        # Game-over writes are batched; make them durable before exit
        session.bridge.flush()
    logger.info('Exited cleanly')


if __name__ == '__main__':
    main()
