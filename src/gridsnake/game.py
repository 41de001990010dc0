"""pygame shell: keyboard input, frame loop, and plain rendering."""

from __future__ import annotations

import logging
import pygame

from .engine import GameEngine, GameSnapshot, GameState
from .menu import Menu, MenuItem
from .settings import GameMode, SettingsManager
from .utils import (
    BG_COLOR,
    BOARD_COLOR,
    BOARD_TOP,
    DOWN,
    EMERALD,
    FPS,
    GRID_COLOR,
    LEFT,
    LIME,
    MUTED_COLOR,
    ORANGE,
    RED,
    RIGHT,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TEXT_COLOR,
    UP,
    YELLOW,
    Direction,
    Position,
)

logger = logging.getLogger(__name__)

KEY_DIRECTIONS: dict[int, Direction] = {
    pygame.K_UP: UP,
    pygame.K_DOWN: DOWN,
    pygame.K_LEFT: LEFT,
    pygame.K_RIGHT: RIGHT,
    pygame.K_w: UP,
    pygame.K_s: DOWN,
    pygame.K_a: LEFT,
    pygame.K_d: RIGHT,
}
PAUSE_KEYS = (pygame.K_p, pygame.K_SPACE)
CONFIRM_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE)


def direction_for_key(key: int) -> Direction | None:
    """Map a pygame key code to a direction intent."""
    return KEY_DIRECTIONS.get(key)


class SnakeGame:
    """Drives a :class:`GameEngine` from pygame events and draws its snapshots."""

    def __init__(self, settings_manager: SettingsManager | None = None, engine: GameEngine | None = None) -> None:
        pygame.init()
        pygame.font.init()

        self.settings_manager = settings_manager or SettingsManager()
        self.settings = self.settings_manager.settings
        self.engine = engine or GameEngine(config=self.settings.config, difficulty=self.settings.difficulty)

        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Neon Snake")
        self.clock = pygame.time.Clock()

        self.title_font = pygame.font.SysFont("consolas", 48, bold=True)
        self.body_font = pygame.font.SysFont("consolas", 26, bold=True)
        self.small_font = pygame.font.SysFont("consolas", 18)

        self.menu = Menu(
            title="NEON SNAKE",
            items=[
                MenuItem("Unlimited Mode", GameMode.UNLIMITED.value, "Classic challenge"),
                MenuItem("Timed Mode", GameMode.TIMED.value, f"{self.settings.config.timed_duration}s score attack"),
            ],
        )
        self.menu.select(self.settings.game_mode.value)

        self.snapshot: GameSnapshot = self.engine.snapshot()
        self.engine.subscribe(self._on_snapshot)

    def _on_snapshot(self, snapshot: GameSnapshot) -> None:
        self.snapshot = snapshot

    def run(self) -> None:
        """Main event/update/render loop."""
        running = True
        while running:
            dt_ms = self.clock.tick(FPS)
            running = self._handle_events()
            if not running:
                break
            self.engine.update(dt_ms)
            self._render()

        logger.info("Closing window, high score this session: %d", self.engine.high_score)
        pygame.quit()

    def _handle_events(self) -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and not self.handle_key(event.key):
                return False
        return True

    def handle_key(self, key: int) -> bool:
        """Route one key press; returns False when the player quits."""
        state = self.engine.state
        if state == GameState.MENU:
            return self._handle_menu_key(key)
        if state == GameState.PLAYING:
            self._handle_playing_key(key)
        elif state == GameState.GAME_OVER:
            self._handle_game_over_key(key)
        return True

    def _handle_menu_key(self, key: int) -> bool:
        if key == pygame.K_ESCAPE:
            return False
        if key in (pygame.K_UP, pygame.K_w):
            self.menu.move(-1)
        elif key in (pygame.K_DOWN, pygame.K_s):
            self.menu.move(1)
        elif key in (pygame.K_RIGHT, pygame.K_d):
            self.engine.request_difficulty(self.settings_manager.cycle_difficulty(1))
        elif key in (pygame.K_LEFT, pygame.K_a):
            self.engine.request_difficulty(self.settings_manager.cycle_difficulty(-1))
        elif key in CONFIRM_KEYS:
            mode = GameMode(self.menu.current_action())
            self.settings_manager.set_mode(mode)
            self.engine.reset_game(mode)
        return True

    def _handle_playing_key(self, key: int) -> None:
        direction = direction_for_key(key)
        if direction is not None:
            self.engine.request_direction(direction)
        elif key in PAUSE_KEYS or key == pygame.K_ESCAPE:
            self.engine.request_pause_toggle()

    def _handle_game_over_key(self, key: int) -> None:
        if key in CONFIRM_KEYS:
            self.engine.reset_game(self.engine.mode)
        elif key in (pygame.K_m, pygame.K_ESCAPE):
            self.engine.request_mode_change()

    # --- rendering ---------------------------------------------------------

    def _board_geometry(self) -> tuple[int, int, int]:
        size = self.snapshot.grid_size
        cell = max(1, min((SCREEN_WIDTH - 40) // size, (SCREEN_HEIGHT - BOARD_TOP - 30) // size))
        left = (SCREEN_WIDTH - cell * size) // 2
        return left, BOARD_TOP, cell

    def _cell_rect(self, position: Position) -> pygame.Rect:
        left, top, cell = self._board_geometry()
        return pygame.Rect(left + position[0] * cell, top + position[1] * cell, cell, cell)

    def _render(self) -> None:
        snap = self.snapshot
        if snap.game_state == GameState.MENU:
            self.menu.render(self.screen, self.title_font, self.body_font, self.small_font, snap.difficulty)
        else:
            self._render_playfield(snap)
            if snap.is_paused:
                self._render_overlay("PAUSED", "P / Space to resume")
            elif snap.game_state == GameState.GAME_OVER:
                self._render_overlay("GAME OVER", f"Score {snap.score}  |  Enter: try again  |  M: change mode")
        pygame.display.flip()

    def _render_playfield(self, snap: GameSnapshot) -> None:
        self.screen.fill(BG_COLOR)
        left, top, cell = self._board_geometry()
        board = pygame.Rect(left, top, cell * snap.grid_size, cell * snap.grid_size)
        pygame.draw.rect(self.screen, BOARD_COLOR, board)
        pygame.draw.rect(self.screen, GRID_COLOR, board, 1)

        pygame.draw.rect(self.screen, RED, self._cell_rect(snap.food).inflate(-4, -4), border_radius=cell // 2)
        if snap.bonus_food is not None:
            pygame.draw.rect(self.screen, YELLOW, self._cell_rect(snap.bonus_food).inflate(-2, -2), border_radius=3)
        for idx, segment in enumerate(snap.snake):
            color = LIME if idx == 0 else EMERALD
            pygame.draw.rect(self.screen, color, self._cell_rect(segment).inflate(-2, -2), border_radius=3)

        self._render_hud(snap)

    def _render_hud(self, snap: GameSnapshot) -> None:
        score = self.body_font.render(f"SCORE {snap.score}", True, TEXT_COLOR)
        self.screen.blit(score, (20, 20))
        high = self.small_font.render(f"HIGH SCORE {snap.high_score}", True, MUTED_COLOR)
        self.screen.blit(high, (SCREEN_WIDTH - high.get_width() - 20, 26))
        if snap.game_mode == GameMode.TIMED:
            color = RED if snap.time_left < 10 else ORANGE
            timer = self.body_font.render(f"{snap.time_left}s", True, color)
            self.screen.blit(timer, (SCREEN_WIDTH // 2 - timer.get_width() // 2, 20))

    def _render_overlay(self, headline: str, prompt: str) -> None:
        overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        self.screen.blit(overlay, (0, 0))
        line1 = self.title_font.render(headline, True, TEXT_COLOR)
        line2 = self.small_font.render(prompt, True, MUTED_COLOR)
        self.screen.blit(line1, (SCREEN_WIDTH // 2 - line1.get_width() // 2, SCREEN_HEIGHT // 2 - 60))
        self.screen.blit(line2, (SCREEN_WIDTH // 2 - line2.get_width() // 2, SCREEN_HEIGHT // 2 + 10))
