"""
Statistics and Persistence Bridge
==================================
Running totals across sessions, plus the high score and saved
customization, mediated through a key-value store.

Store failures never reach the caller: the bridge logs them once and
keeps working in memory only.
"""

import json
import math
from dataclasses import dataclass, asdict
from typing import Optional

from .components import Customization
from .config import validate_customization, customization_to_dict, CustomizationError
from .constants import KEY_HIGH_SCORE, KEY_STATS, KEY_CUSTOMIZATION
from .log import get_logger
from .storage import KeyValueStore

logger = get_logger("stats")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass
class GameStats:
    games_played: int = 0
    best_score: int = 0
    total_score: int = 0
    average_score: int = 0
    playtime_seconds: int = 0


def format_playtime(seconds: int) -> str:
    """45 -> '45s', 125 -> '2m 5s', 3660 -> '1h 1m'."""
    if seconds < 60:
        return f'{seconds}s'
    if seconds < 3600:
        return f'{seconds // 60}m {seconds % 60}s'
    return f'{seconds // 3600}h {(seconds % 3600) // 60}m'


def format_clock(seconds: int) -> str:
    """65 -> '1:05'."""
    return f'{seconds // 60}:{seconds % 60:02d}'


class StatsBridge:
    """Owns the in-memory aggregate and its update arithmetic."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self.stats = GameStats()
        self.high_score = 0
        self.durable = True

    # -------------------------------------------------------------------------
    # Store access
    # -------------------------------------------------------------------------

    def _load_raw(self, key: str) -> Optional[str]:
        if not self.durable:
            return None
        try:
            return self.store.load(key)
        except OSError as exc:
            self._degrade(exc)
            return None

    def _save_raw(self, key: str, value: str) -> None:
        if not self.durable:
            return
        try:
            self.store.save(key, value)
        except OSError as exc:
            self._degrade(exc)

    def flush(self) -> None:
        """Make every write so far durable. Deferred stores write here."""
        if not self.durable:
            return
        try:
            self.store.flush()
        except OSError as exc:
            self._degrade(exc)

    def _degrade(self, exc: OSError) -> None:
        logger.warning('Persistence unavailable, continuing in memory: %s', exc)
        self.durable = False

    # -------------------------------------------------------------------------
    # Load / save
    # -------------------------------------------------------------------------

    def load(self) -> None:
        """Read high score and statistics. Bad values fall back to defaults."""
        raw = self._load_raw(KEY_HIGH_SCORE)
        if raw is not None:
            try:
                self.high_score = max(0, int(raw))
            except ValueError:
                logger.warning('Ignoring malformed high score %r', raw)

        raw = self._load_raw(KEY_STATS)
        if raw is not None:
            try:
                data = json.loads(raw)
                self.stats = GameStats(**{
                    k: max(0, int(data.get(k, 0))) for k in asdict(GameStats())
                })
            except (ValueError, TypeError, AttributeError, OverflowError):
                logger.warning('Ignoring malformed statistics record')
                self.stats = GameStats()

        logger.debug('Loaded high score %d, %d games', self.high_score,
                     self.stats.games_played)

    def _save_stats(self) -> None:
        self._save_raw(KEY_STATS, json.dumps(asdict(self.stats)))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def record_session(self, score: int, duration_seconds: int) -> GameStats:
        """Fold one completed session into the totals. Call once per session."""
        s = self.stats
        s.games_played += 1
        s.best_score = max(s.best_score, score)
        s.total_score += score
        s.playtime_seconds += duration_seconds
        s.average_score = round_half_up(s.total_score / s.games_played)
        self._save_stats()
        logger.info('Recorded session', extra={'data': {
            'score': score, 'duration': duration_seconds,
            'games': s.games_played}})
        return s

    def update_high_score(self, score: int) -> int:
        """high_score = max(high_score, score), persisted."""
        self.high_score = max(self.high_score, score)
        self._save_raw(KEY_HIGH_SCORE, str(self.high_score))
        return self.high_score

    def reset_statistics(self) -> None:
        """Clear the aggregate and high score, in memory and in the store."""
        self.stats = GameStats()
        self.high_score = 0
        for key in (KEY_HIGH_SCORE, KEY_STATS):
            if not self.durable:
                break
            try:
                self.store.delete(key)
            except OSError as exc:
                self._degrade(exc)
        self.flush()
        logger.info('Statistics reset')

    # -------------------------------------------------------------------------
    # Customization
    # -------------------------------------------------------------------------

    def load_customization(self) -> Customization:
        raw = self._load_raw(KEY_CUSTOMIZATION)
        if raw is None:
            return Customization()
        try:
            data = json.loads(raw)
            return validate_customization(**data)
        except (ValueError, TypeError, CustomizationError):
            logger.warning('Ignoring malformed customization record')
            return Customization()

    def save_customization(self, customization: Customization) -> None:
        self._save_raw(KEY_CUSTOMIZATION, json.dumps(customization_to_dict(customization)))
        self.flush()
