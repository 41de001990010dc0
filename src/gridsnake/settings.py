"""Settings persistence and runtime configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from pathlib import Path
import logging
import math

from .utils import SETTINGS_FILE, load_json, save_json

logger = logging.getLogger(__name__)


class GameMode(str, Enum):
    """Available top-level gameplay modes."""

    UNLIMITED = "UNLIMITED"
    TIMED = "TIMED"


class Difficulty(str, Enum):
    """Difficulty presets, each mapping to an initial tick interval."""

    EASY = "EASY"
    MEDIUM = "MEDIUM"
    HARD = "HARD"


SPEEDS: dict[Difficulty, int] = {
    Difficulty.EASY: 200,
    Difficulty.MEDIUM: 140,
    Difficulty.HARD: 90,
}

# Lowest value a loaded config field may take. A 1x1 grid has no room for food.
CONFIG_MINIMUMS: dict[str, int] = {
    "grid_size": 2,
    "timed_duration": 1,
    "min_tick_interval_ms": 1,
    "speed_step_ms": 0,
    "food_points": 0,
    "bonus_points": 0,
    "bonus_ttl_ms": 0,
}


@dataclass(slots=True)
class GameConfig:
    """Tunable simulation constants."""

    grid_size: int = 20
    timed_duration: int = 60
    min_tick_interval_ms: int = 50
    speed_step_ms: int = 2
    food_points: int = 1
    bonus_points: int = 10
    bonus_chance: float = 0.2
    bonus_ttl_ms: int = 5000

    def tick_interval_for(self, difficulty: Difficulty) -> int:
        """Return the initial tick interval for a difficulty."""
        return max(self.min_tick_interval_ms, SPEEDS[difficulty])


@dataclass(slots=True)
class GameSettings:
    """Persistent player preferences."""

    difficulty: Difficulty = Difficulty.MEDIUM
    game_mode: GameMode = GameMode.UNLIMITED
    config: GameConfig = field(default_factory=GameConfig)


class SettingsManager:
    """Load, save, and mutate game settings."""

    def __init__(self, path: Path = SETTINGS_FILE) -> None:
        self.path = path
        self.settings = self.load()

    def load(self) -> GameSettings:
        """Load game settings from disk with safe defaults."""
        raw = load_json(self.path, {})
        settings = GameSettings()
        if not isinstance(raw, dict):
            logger.warning("Ignoring malformed settings file %s", self.path)
            return settings

        if raw.get("difficulty") in {e.value for e in Difficulty}:
            settings.difficulty = Difficulty(raw["difficulty"])
        if raw.get("game_mode") in {e.value for e in GameMode}:
            settings.game_mode = GameMode(raw["game_mode"])

        overrides = raw.get("config", {})
        if isinstance(overrides, dict):
            settings.config = self._load_config(overrides, settings.config)
        return settings

    @staticmethod
    def _load_config(payload: dict, defaults: GameConfig) -> GameConfig:
        config = GameConfig()
        for item in fields(GameConfig):
            default = getattr(defaults, item.name)
            value = payload.get(item.name, default)
            try:
                converted = type(default)(value)
                if isinstance(converted, float) and not math.isfinite(converted):
                    raise ValueError(value)
                setattr(config, item.name, converted)
            except (TypeError, ValueError, OverflowError):
                logger.warning("Invalid value %r for %s, using %r", value, item.name, default)
                setattr(config, item.name, default)

        for name, floor in CONFIG_MINIMUMS.items():
            if getattr(config, name) < floor:
                logger.warning("Clamping %s=%r to %r", name, getattr(config, name), floor)
                setattr(config, name, floor)
        config.bonus_chance = max(0.0, min(1.0, config.bonus_chance))
        return config

    def save(self) -> None:
        """Persist settings to disk."""
        payload = {
            "difficulty": self.settings.difficulty.value,
            "game_mode": self.settings.game_mode.value,
            "config": asdict(self.settings.config),
        }
        save_json(self.path, payload)

    def set_mode(self, mode: GameMode) -> None:
        """Update the last played mode and persist settings."""
        self.settings.game_mode = mode
        self.save()

    def set_difficulty(self, difficulty: Difficulty) -> None:
        """Update difficulty and persist settings."""
        self.settings.difficulty = difficulty
        self.save()

    def cycle_difficulty(self, step: int = 1) -> Difficulty:
        """Cycle difficulty and persist settings."""
        order = [Difficulty.EASY, Difficulty.MEDIUM, Difficulty.HARD]
        idx = order.index(self.settings.difficulty)
        self.set_difficulty(order[(idx + step) % len(order)])
        return self.settings.difficulty
