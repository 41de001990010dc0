"""Menu rendering and navigation helpers."""

from __future__ import annotations

from dataclasses import dataclass
import pygame

from .settings import Difficulty
from .utils import BG_COLOR, EMERALD, MUTED_COLOR, SHADOW_COLOR, TEXT_COLOR


@dataclass(slots=True)
class MenuItem:
    """Single selectable menu row."""

    label: str
    action: str
    hint: str = ""


class Menu:
    """Simple vertical keyboard-driven menu."""

    def __init__(self, title: str, items: list[MenuItem]) -> None:
        self.title = title
        self.items = items
        self.selected_index = 0

    def move(self, delta: int) -> None:
        """Move menu selection by delta."""
        self.selected_index = (self.selected_index + delta) % len(self.items)

    def select(self, action: str) -> None:
        """Highlight the item bound to ``action`` if present."""
        for idx, item in enumerate(self.items):
            if item.action == action:
                self.selected_index = idx
                return

    def current_action(self) -> str:
        """Return selected action key."""
        return self.items[self.selected_index].action

    def render(
        self,
        surface: pygame.Surface,
        title_font: pygame.font.Font,
        body_font: pygame.font.Font,
        small_font: pygame.font.Font,
        difficulty: Difficulty,
    ) -> None:
        """Draw the difficulty selector and mode choices."""
        surface.fill(BG_COLOR)
        width = surface.get_width()
        title_shadow = title_font.render(self.title, True, SHADOW_COLOR)
        title = title_font.render(self.title, True, EMERALD)
        surface.blit(title_shadow, (width // 2 - title.get_width() // 2 + 3, 85))
        surface.blit(title, (width // 2 - title.get_width() // 2, 82))

        x = width // 2 - 170
        for option in Difficulty:
            color = EMERALD if option == difficulty else MUTED_COLOR
            label = body_font.render(option.value, True, color)
            surface.blit(label, (x, 190))
            x += 120
        tip = small_font.render("Left/Right: difficulty", True, MUTED_COLOR)
        surface.blit(tip, (width // 2 - tip.get_width() // 2, 230))

        start_y = 300
        for idx, item in enumerate(self.items):
            selected = idx == self.selected_index
            color = EMERALD if selected else TEXT_COLOR
            prefix = "> " if selected else "  "
            line = body_font.render(f"{prefix}{item.label}", True, color)
            surface.blit(line, (width // 2 - line.get_width() // 2, start_y + idx * 70))
            if item.hint:
                hint = small_font.render(item.hint, True, MUTED_COLOR)
                surface.blit(hint, (width // 2 - hint.get_width() // 2, start_y + idx * 70 + 32))
