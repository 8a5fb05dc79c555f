"""
Session State Machine
======================
The single authoritative game session. Owns the bird, the pipe sequence,
score and status, and turns ticks and commands into transitions:

    menu --start--> playing --(crash | time up)--> game_over --reset--> menu
    playing --pause--> paused --resume--> playing
    game_over --start--> playing

Commands from other threads go through submit(); the owning loop calls
advance() which drains them in arrival order before ticking, so a reset
always lands before the next tick.
"""

import queue
import random
from dataclasses import asdict
from typing import Callable, Dict, Iterator, List, Optional

from .collision import judge
from .components import (
    Actor, ActorView, Obstacle, ObstacleView, Status, EffectKind,
    EffectEvent, Command, Customization, Snapshot,
)
from .constants import TICK_RATE
from .log import get_logger
from .obstacles import ObstacleStream
from .physics import step_actor, spawn_actor, actor_center
from .profiles import resolve
from .stats import StatsBridge, round_half_up
from .storage import MemoryStore

logger = get_logger("session")


class CommandQueue:
    """
    Thread-safe single-consumer queue of Commands. Any thread may
    submit; only the loop that owns the Session drains.
    """

    def __init__(self):
        self._queue: "queue.SimpleQueue[Command]" = queue.SimpleQueue()

    def __len__(self) -> int:
        return self._queue.qsize()

    def submit(self, command: Command) -> None:
        self._queue.put(Command(command))

    def drain(self) -> Iterator[Command]:
        """Yield queued commands in arrival order until the queue is empty."""
        while True:
            try:
                yield self._queue.get_nowait()
            except queue.Empty:
                return


class Session:
    """Central game state container. Mutated only by its owning loop."""

    def __init__(self, customization: Optional[Customization] = None,
                 bridge: Optional[StatsBridge] = None,
                 rng: Optional[random.Random] = None):
        self.customization = customization or Customization()
        self.profile = resolve(self.customization.difficulty, self.customization.game_mode)
        self.bridge = bridge if bridge is not None else StatsBridge(MemoryStore())
        self.stream = ObstacleStream(rng)

        self.status = Status.MENU
        self.score = 0
        self.actor: Actor = spawn_actor(self.customization)
        self.obstacles: List[Obstacle] = []
        self.elapsed_ticks = 0
        self.end_cause: Optional[str] = None

        self._effects: List[EffectEvent] = []
        self.commands = CommandQueue()
        self._handlers: Dict[Command, Callable[[], bool]] = {
            Command.START: self.start,
            Command.JUMP: self.jump,
            Command.RESET: self.reset,
            Command.PAUSE: self.pause,
            Command.RESUME: self.resume,
        }

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def high_score(self) -> int:
        return self.bridge.high_score

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ticks / TICK_RATE

    @property
    def time_left(self) -> Optional[int]:
        """Whole seconds left on the countdown, None in untimed modes."""
        if self.profile.time_limit is None:
            return None
        remaining = self.profile.time_limit * TICK_RATE - self.elapsed_ticks
        return max(0, -(-remaining // TICK_RATE))

    def _time_is_up(self) -> bool:
        limit = self.profile.time_limit
        return limit is not None and self.elapsed_ticks >= limit * TICK_RATE

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def start(self) -> bool:
        """menu/game_over -> playing with a fresh bird and empty field."""
        if self.status not in (Status.MENU, Status.GAME_OVER):
            return self._ignored(Command.START)

        self.actor = spawn_actor(self.customization)
        self.obstacles = []
        self.stream.reset()
        self.score = 0
        self.elapsed_ticks = 0
        self.end_cause = None
        self._effects.clear()
        self.status = Status.PLAYING
        logger.info('Session started (%s/%s)', self.profile.difficulty.value,
                    self.profile.mode.value)
        return True

    def jump(self) -> bool:
        """Apply a flap immediately, outside the tick cadence."""
        if self.status != Status.PLAYING:
            return self._ignored(Command.JUMP)

        self.actor = step_actor(self.actor, True, self.profile)
        self._emit(EffectKind.JUMP, *actor_center(self.actor))
        return True

    def reset(self) -> bool:
        """Back to the menu. An unfinished session is abandoned unrecorded."""
        if self.status == Status.MENU:
            return self._ignored(Command.RESET)

        self.status = Status.MENU
        self.actor = spawn_actor(self.customization)
        self.obstacles = []
        self.stream.reset()
        self.score = 0
        self.elapsed_ticks = 0
        self.end_cause = None
        self._effects.clear()
        logger.info('Session reset to menu')
        return True

    def pause(self) -> bool:
        if self.status != Status.PLAYING:
            return self._ignored(Command.PAUSE)
        self.status = Status.PAUSED
        return True

    def resume(self) -> bool:
        if self.status != Status.PAUSED:
            return self._ignored(Command.RESUME)
        self.status = Status.PLAYING
        return True

    def toggle_pause(self) -> bool:
        return self.resume() if self.status == Status.PAUSED else self.pause()

    def set_customization(self, customization: Customization) -> bool:
        """Swap cosmetic/rule choices. Only between games."""
        if self.status in (Status.PLAYING, Status.PAUSED):
            logger.debug('Customization change ignored while %s', self.status.value)
            return False
        self.customization = customization
        self.profile = resolve(customization.difficulty, customization.game_mode)
        self.actor = spawn_actor(customization)
        self.bridge.save_customization(customization)
        return True

    def reset_statistics(self) -> bool:
        if self.status in (Status.PLAYING, Status.PAUSED):
            return False
        self.bridge.reset_statistics()
        return True

    def _ignored(self, command: Command) -> bool:
        logger.debug('Ignored %s while %s', command.value, self.status.value)
        return False

    # -------------------------------------------------------------------------
    # Command queue
    # -------------------------------------------------------------------------

    def submit(self, command: Command) -> None:
        """Thread-safe: queue a command for the owning loop."""
        self.commands.submit(command)

    def process_commands(self) -> int:
        """Apply every queued command in arrival order. Returns the count."""
        count = 0
        for command in self.commands.drain():
            self._handlers[command]()
            count += 1
        return count

    def advance(self) -> bool:
        """Drain pending commands, then run one tick."""
        self.process_commands()
        return self.tick()

    # -------------------------------------------------------------------------
    # Tick
    # -------------------------------------------------------------------------

    def tick(self) -> bool:
        """
        Run one fixed-timestep tick: physics, pipes, judging, scoring and
        the countdown. Returns False when the session is not advancing.
        """
        if self.status != Status.PLAYING:
            return False

        self.elapsed_ticks += 1
        self.actor = step_actor(self.actor, False, self.profile)
        self.obstacles = self.stream.update(self.obstacles, self.profile)

        judgement = judge(self.actor, self.obstacles, self.profile.mode)
        if judgement.terminal:
            self._end_game(judgement.cause)
            return True

        for obstacle in judgement.scored:
            self.score += 1
            self._emit(EffectKind.SCORE,
                       obstacle.x + obstacle.width,
                       (obstacle.gap_top + obstacle.gap_bottom) / 2)

        if self._time_is_up():
            self._end_game('time')
        return True

    def _end_game(self, cause: str) -> None:
        """Enter game_over: freeze, emit the crash burst, record once."""
        self.status = Status.GAME_OVER
        self.end_cause = cause
        self._emit(EffectKind.COLLISION, *actor_center(self.actor))

        duration = round_half_up(self.elapsed_seconds)
        self.bridge.update_high_score(self.score)
        self.bridge.record_session(self.score, duration)
        self.bridge.flush()
        logger.info('Game over (%s): score %d in %ds', cause, self.score, duration)

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def _emit(self, kind: EffectKind, x: float, y: float) -> None:
        self._effects.append(EffectEvent(kind, x, y))

    def drain_effects(self) -> List[EffectEvent]:
        effects, self._effects = self._effects, []
        return effects

    def snapshot(self) -> Snapshot:
        """Immutable view for the renderer. Consumes pending effects."""
        return Snapshot(
            status=self.status,
            score=self.score,
            high_score=self.high_score,
            actor=ActorView(**asdict(self.actor)),
            obstacles=tuple(ObstacleView(**asdict(o)) for o in self.obstacles),
            effects=tuple(self.drain_effects()),
            time_left=self.time_left,
            elapsed_ticks=self.elapsed_ticks,
            end_cause=self.end_cause,
        )
