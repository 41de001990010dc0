from __future__ import annotations

import json
import tempfile
from pathlib import Path

from gridsnake.settings import Difficulty, GameConfig, GameMode, SettingsManager
from gridsnake.utils import load_json, save_json


def test_settings_load_save_round_trip() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "nested" / "settings.json"
        mgr = SettingsManager(path)
        mgr.set_mode(GameMode.TIMED)
        mgr.settings.config.bonus_ttl_ms = 3000
        mgr.set_difficulty(Difficulty.HARD)

        loaded = SettingsManager(path)
        assert loaded.settings.game_mode == GameMode.TIMED
        assert loaded.settings.difficulty == Difficulty.HARD
        assert loaded.settings.config.bonus_ttl_ms == 3000


def test_missing_or_malformed_settings_use_defaults() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        assert SettingsManager(path).settings.difficulty == Difficulty.MEDIUM

        path.write_text("{not json", encoding="utf-8")
        settings = SettingsManager(path).settings
        assert settings.difficulty == Difficulty.MEDIUM
        assert settings.config == GameConfig()

        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert SettingsManager(path).settings.game_mode == GameMode.UNLIMITED


def test_invalid_config_values_fall_back_per_field() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        payload = {
            "difficulty": "IMPOSSIBLE",
            "config": {"grid_size": "huge", "timed_duration": "30", "bonus_chance": 4},
        }
        path.write_text(json.dumps(payload), encoding="utf-8")

        settings = SettingsManager(path).settings
        assert settings.difficulty == Difficulty.MEDIUM
        assert settings.config.grid_size == 20
        assert settings.config.timed_duration == 30
        assert settings.config.bonus_chance == 1.0


def test_cycle_difficulty_wraps_and_persists() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        mgr = SettingsManager(path)
        assert mgr.cycle_difficulty() == Difficulty.HARD
        assert mgr.cycle_difficulty() == Difficulty.EASY
        assert mgr.cycle_difficulty(-1) == Difficulty.HARD
        assert load_json(path, {})["difficulty"] == "HARD"


def test_tick_interval_per_difficulty() -> None:
    config = GameConfig()
    assert config.tick_interval_for(Difficulty.EASY) == 200
    assert config.tick_interval_for(Difficulty.MEDIUM) == 140
    assert config.tick_interval_for(Difficulty.HARD) == 90


def test_json_helpers() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        p = Path(tmp) / "x.json"
        save_json(p, {"ok": True})
        assert load_json(p, {}) == {"ok": True}


def test_non_finite_config_values_fall_back_to_defaults() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        path.write_text('{"config": {"grid_size": Infinity, "bonus_ttl_ms": NaN, "bonus_chance": NaN}}', encoding="utf-8")

        config = SettingsManager(path).settings.config
        assert config.grid_size == 20
        assert config.bonus_ttl_ms == 5000
        assert config.bonus_chance == 0.2


def test_out_of_range_config_values_are_clamped() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        payload = {
            "config": {
                "grid_size": 1,
                "timed_duration": 0,
                "min_tick_interval_ms": 0,
                "speed_step_ms": -3,
                "food_points": -1,
                "bonus_points": -10,
                "bonus_ttl_ms": -500,
                "bonus_chance": -0.5,
            }
        }
        path.write_text(json.dumps(payload), encoding="utf-8")

        config = SettingsManager(path).settings.config
        assert config.grid_size == 2
        assert config.timed_duration == 1
        assert config.min_tick_interval_ms == 1
        assert config.speed_step_ms == 0
        assert config.food_points == 0
        assert config.bonus_points == 0
        assert config.bonus_ttl_ms == 0
        assert config.bonus_chance == 0.0


def test_in_range_config_values_are_kept() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "settings.json"
        payload = {"config": {"grid_size": 2, "min_tick_interval_ms": 1, "speed_step_ms": 0, "bonus_ttl_ms": 0}}
        path.write_text(json.dumps(payload), encoding="utf-8")

        config = SettingsManager(path).settings.config
        assert (config.grid_size, config.min_tick_interval_ms, config.speed_step_ms, config.bonus_ttl_ms) == (2, 1, 0, 0)
