"""Shared constants and utility helpers for gridsnake."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Tuple
import json

SCREEN_WIDTH = 640
SCREEN_HEIGHT = 720
FPS = 60
BOARD_TOP = 70

BG_COLOR = (9, 9, 11)
BOARD_COLOR = (0, 0, 0)
GRID_COLOR = (30, 30, 36)
TEXT_COLOR = (228, 228, 231)
MUTED_COLOR = (113, 113, 122)
SHADOW_COLOR = (24, 24, 27)

EMERALD = (16, 185, 129)
LIME = (132, 204, 22)
RED = (239, 68, 68)
ORANGE = (251, 146, 60)
YELLOW = (250, 204, 21)

Direction = Tuple[int, int]
Position = Tuple[int, int]

UP: Direction = (0, -1)
DOWN: Direction = (0, 1)
LEFT: Direction = (-1, 0)
RIGHT: Direction = (1, 0)
DIRECTIONS: tuple[Direction, ...] = (UP, DOWN, LEFT, RIGHT)
DIRECTION_NAMES: dict[str, Direction] = {"UP": UP, "DOWN": DOWN, "LEFT": LEFT, "RIGHT": RIGHT}

DATA_DIR = Path(".gridsnake")
SETTINGS_FILE = DATA_DIR / "settings.json"


def is_opposite(a: Direction, b: Direction) -> bool:
    """Return whether two directions are opposite vectors."""
    return a[0] == -b[0] and a[1] == -b[1]


def add_direction(position: Position, direction: Direction) -> Position:
    """Move a grid cell by one unit step in a direction."""
    return (position[0] + direction[0], position[1] + direction[1])


def parse_direction(name: str) -> Direction:
    """Map an UP/DOWN/LEFT/RIGHT intent name to its delta vector."""
    try:
        return DIRECTION_NAMES[name.strip().upper()]
    except KeyError as exc:
        raise ValueError(f"invalid direction: {name!r}") from exc


def load_json(path: Path, default: Any) -> Any:
    """Load JSON data, returning default when missing or malformed."""
    if not path.exists():
        return default
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except (json.JSONDecodeError, OSError):
        return default


def save_json(path: Path, payload: Any) -> None:
    """Save JSON data with deterministic formatting."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as handle:
        json.dump(payload, handle, indent=2, sort_keys=True)
