"""Configuration loading from environment variables and customization validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .components import (
    Customization, Difficulty, GameMode,
    BIRD_COLORS, BIRD_SHAPES, BIRD_SIZES, BACKGROUND_THEMES, PIPE_STYLES,
)

DEFAULT_DATA_FILE = Path.home() / ".skyflap.json"


class CustomizationError(ValueError):
    """A customization value outside its enumerated set."""


@dataclass(frozen=True)
class Settings:
    difficulty: Difficulty
    mode: GameMode
    data_file: Path
    log_level: str
    log_file: Optional[str]
    seed: Optional[int]


def load_settings() -> Settings:
    """Load settings from .env and environment variables."""
    load_dotenv()

    seed = os.environ.get("SKYFLAP_SEED")

    return Settings(
        difficulty=Difficulty(os.environ.get("SKYFLAP_DIFFICULTY", "normal")),
        mode=GameMode(os.environ.get("SKYFLAP_MODE", "classic")),
        data_file=Path(os.environ.get("SKYFLAP_DATA_FILE", str(DEFAULT_DATA_FILE))),
        log_level=os.environ.get("SKYFLAP_LOG_LEVEL", "warning"),
        log_file=os.environ.get("SKYFLAP_LOG_FILE") or None,
        seed=int(seed) if seed else None,
    )


_CHOICES = {
    "bird_color": BIRD_COLORS,
    "bird_shape": BIRD_SHAPES,
    "bird_size": BIRD_SIZES,
    "background_theme": BACKGROUND_THEMES,
    "pipe_style": PIPE_STYLES,
}


def validate_customization(**values) -> Customization:
    """
    Build a Customization, rejecting anything outside the enumerated sets.
    Missing fields take their defaults.
    """
    unknown = set(values) - set(Customization.__dataclass_fields__)
    if unknown:
        raise CustomizationError(f"unknown customization fields: {sorted(unknown)}")

    for name, choices in _CHOICES.items():
        if name in values and values[name] not in choices:
            raise CustomizationError(f"{name} must be one of {choices}, got {values[name]!r}")

    try:
        if "difficulty" in values:
            values["difficulty"] = Difficulty(values["difficulty"])
        if "game_mode" in values:
            values["game_mode"] = GameMode(values["game_mode"])
    except ValueError as exc:
        raise CustomizationError(str(exc)) from None

    for flag in ("particle_effects", "weather_effects"):
        if flag in values and not isinstance(values[flag], bool):
            raise CustomizationError(f"{flag} must be a boolean")

    return Customization(**values)


def customization_to_dict(customization: Customization) -> dict:
    data = asdict(customization)
    data["difficulty"] = customization.difficulty.value
    data["game_mode"] = customization.game_mode.value
    return data
