"""Game engine: state machine, tick evaluation, and timer ownership."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Iterable, Protocol
import logging
import random

from .clock import Countdown, Scheduler, TimerHandle
from .food import BonusFood, FoodGenerator, GridFullError
from .grid import Grid
from .settings import Difficulty, GameConfig, GameMode
from .snake import Snake
from .utils import DIRECTIONS, RIGHT, Direction, Position, is_opposite, parse_direction

logger = logging.getLogger(__name__)


class GameState(Enum):
    """Finite states of a session."""

    MENU = auto()
    PLAYING = auto()
    GAME_OVER = auto()


class GameOverCause(str, Enum):
    """Why the last game ended."""

    WALL = "wall"
    SELF = "self"
    TIME_UP = "time_up"
    BOARD_FULL = "board_full"


class CellSource(Protocol):
    def generate(self, occupied: Iterable[Position]) -> Position: ...


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of the engine handed to the presentation layer."""

    game_state: GameState
    game_mode: GameMode
    difficulty: Difficulty
    snake: tuple[Position, ...]
    direction: Direction
    food: Position
    bonus_food: Position | None
    score: int
    high_score: int
    time_left: int
    is_paused: bool
    grid_size: int
    tick_interval: int
    game_over_cause: GameOverCause | None = None


Listener = Callable[[GameSnapshot], None]


class GameEngine:
    """Single-session snake simulation.

    All mutable game state lives on the instance. The engine owns three
    timers on its :class:`Scheduler`: the periodic movement tick, the
    timed-mode countdown, and the bonus food expiry.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        difficulty: Difficulty = Difficulty.MEDIUM,
        rng: random.Random | None = None,
        food_generator: CellSource | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self.grid = Grid(self.config.grid_size)
        self.rng = rng if rng is not None else random.Random()
        self.food_generator: CellSource = food_generator or FoodGenerator(self.grid, self.rng)
        self.scheduler = scheduler or Scheduler()

        self.state = GameState.MENU
        self.mode = GameMode.UNLIMITED
        self.difficulty = difficulty
        self.snake = Snake.spawn(self.grid.center)
        self.direction: Direction = RIGHT
        self.food: Position = self.food_generator.generate(self.snake.occupied())
        self.bonus_food: BonusFood | None = None
        self.score = 0
        self.high_score = 0
        self.paused = False
        self.tick_interval = self.config.tick_interval_for(difficulty)
        self.game_over_cause: GameOverCause | None = None

        self.countdown = Countdown(self.scheduler, self.config.timed_duration, on_expire=self._on_time_up)
        self._tick_handle: TimerHandle | None = None
        self._bonus_handle: TimerHandle | None = None
        self._listeners: list[Listener] = []

    # --- queries -----------------------------------------------------------

    @property
    def time_left(self) -> int:
        return self.countdown.remaining

    @property
    def ticking(self) -> bool:
        return self._tick_handle is not None and self._tick_handle.active

    def snapshot(self) -> GameSnapshot:
        """Return an immutable copy of the current state."""
        return GameSnapshot(
            game_state=self.state,
            game_mode=self.mode,
            difficulty=self.difficulty,
            snake=self.snake.segments,
            direction=self.direction,
            food=self.food,
            bonus_food=self.bonus_food.position if self.bonus_food else None,
            score=self.score,
            high_score=self.high_score,
            time_left=self.time_left,
            is_paused=self.paused,
            grid_size=self.grid.size,
            tick_interval=self.tick_interval,
            game_over_cause=self.game_over_cause,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for every tick and state change.

        Returns a function that removes the listener again.
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # --- requests from input -----------------------------------------------

    def reset_game(self, mode: GameMode) -> None:
        """Start a fresh game from MENU or GAME_OVER."""
        if self.state == GameState.PLAYING:
            logger.debug("Ignoring reset while a game is running")
            return

        self._cancel_timers()
        self.state = GameState.PLAYING
        self.mode = mode
        self.paused = False
        self.snake = Snake.spawn(self.grid.center)
        self.direction = RIGHT
        self.food = self.food_generator.generate(self.snake.occupied())
        self.bonus_food = None
        self.score = 0
        self.game_over_cause = None
        self.countdown.reset(self.config.timed_duration)
        self.tick_interval = self.config.tick_interval_for(self.difficulty)

        logger.info(
            "Game started: mode=%s difficulty=%s interval=%dms",
            mode.value,
            self.difficulty.value,
            self.tick_interval,
        )
        self._arm_timers()
        self._publish()

    request_reset = reset_game

    def request_direction(self, direction: Direction | str) -> None:
        """Apply a direction for the next tick unless it reverses the snake."""
        if isinstance(direction, str):
            direction = parse_direction(direction)
        if direction not in DIRECTIONS:
            raise ValueError(f"not a unit direction: {direction!r}")
        if self.state != GameState.PLAYING:
            logger.debug("Ignoring direction %s in state %s", direction, self.state.name)
            return
        if is_opposite(direction, self.direction):
            logger.debug("Ignoring reverse turn %s while heading %s", direction, self.direction)
            return
        self.direction = direction

    def request_mode_change(self) -> None:
        """Return to the menu after a finished game."""
        if self.state != GameState.GAME_OVER:
            logger.debug("Ignoring mode change in state %s", self.state.name)
            return
        self.state = GameState.MENU
        self._publish()

    def request_pause_toggle(self) -> None:
        """Pause or resume the running game."""
        if self.state != GameState.PLAYING:
            logger.debug("Ignoring pause toggle in state %s", self.state.name)
            return
        self.paused = not self.paused
        if self.paused:
            self._stop_play_timers()
        else:
            self._arm_timers()
        logger.debug("Paused" if self.paused else "Resumed")
        self._publish()

    def request_difficulty(self, difficulty: Difficulty) -> None:
        """Change difficulty; only honored in the menu."""
        if self.state != GameState.MENU:
            logger.debug("Ignoring difficulty change in state %s", self.state.name)
            return
        self.difficulty = difficulty
        self.tick_interval = self.config.tick_interval_for(difficulty)
        self._publish()

    # --- simulation --------------------------------------------------------

    def update(self, dt_ms: float) -> None:
        """Advance the engine clock by ``dt_ms`` milliseconds."""
        self.scheduler.advance(dt_ms)

    def step(self) -> GameSnapshot:
        """Advance the snake by one cell and resolve the outcome."""
        if self.state != GameState.PLAYING or self.paused:
            return self.snapshot()

        new_head = self.snake.advance(self.direction)
        if not self.grid.in_bounds(new_head):
            self._game_over(GameOverCause.WALL)
            return self.snapshot()
        if self.snake.would_collide_with_self(new_head):
            self._game_over(GameOverCause.SELF)
            return self.snapshot()

        ate_bonus = self.bonus_food is not None and new_head == self.bonus_food.position
        ate_food = new_head == self.food

        if ate_bonus:
            # Bonus wins a shared cell; the food there is left for later.
            self.score += self.config.bonus_points
            self._clear_bonus()
            self.snake = self.snake.grow_to(new_head)
        elif ate_food:
            self.score += self.config.food_points
            self.snake = self.snake.grow_to(new_head)
            try:
                self.food = self.food_generator.generate(self.snake.occupied())
            except GridFullError:
                self._game_over(GameOverCause.BOARD_FULL)
                return self.snapshot()
            if self.bonus_food is None and self.rng.random() < self.config.bonus_chance:
                self._spawn_bonus()
            if self.mode == GameMode.UNLIMITED:
                self._speed_up()
        else:
            self.snake = self.snake.move_to(new_head)

        self._publish()
        return self.snapshot()

    # --- internals ---------------------------------------------------------

    def _on_tick(self) -> None:
        if self.state != GameState.PLAYING or self.paused:
            return
        self.step()

    def _on_time_up(self) -> None:
        if self.state != GameState.PLAYING:
            return
        self._game_over(GameOverCause.TIME_UP)

    def _on_bonus_expired(self) -> None:
        if self.bonus_food is None or not self.bonus_food.is_expired(self.scheduler.now_ms):
            return
        logger.debug("Bonus food at %s expired", self.bonus_food.position)
        self.bonus_food = None
        self._bonus_handle = None
        self._publish()

    def _spawn_bonus(self) -> None:
        try:
            position = self.food_generator.generate(self.snake.occupied())
        except GridFullError:
            logger.debug("No room for bonus food")
            return
        self.bonus_food = BonusFood(
            position=position,
            created_at_ms=self.scheduler.now_ms,
            ttl_ms=self.config.bonus_ttl_ms,
        )
        self._bonus_handle = self.scheduler.call_later(self.config.bonus_ttl_ms, self._on_bonus_expired)
        logger.debug("Bonus food spawned at %s", position)

    def _clear_bonus(self) -> None:
        self.bonus_food = None
        if self._bonus_handle is not None:
            self._bonus_handle.cancel()
            self._bonus_handle = None

    def _speed_up(self) -> None:
        interval = max(self.config.min_tick_interval_ms, self.tick_interval - self.config.speed_step_ms)
        if interval == self.tick_interval:
            return
        self.tick_interval = interval
        self._arm_tick()

    def _arm_tick(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
        self._tick_handle = self.scheduler.call_every(self.tick_interval, self._on_tick)

    def _arm_timers(self) -> None:
        self._arm_tick()
        if self.mode == GameMode.TIMED:
            self.countdown.start()

    def _stop_play_timers(self) -> None:
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None
        self.countdown.stop()

    def _cancel_timers(self) -> None:
        self._stop_play_timers()
        if self._bonus_handle is not None:
            self._bonus_handle.cancel()
            self._bonus_handle = None

    def _game_over(self, cause: GameOverCause) -> None:
        self.state = GameState.GAME_OVER
        self.game_over_cause = cause
        self.high_score = max(self.high_score, self.score)
        self._cancel_timers()
        logger.info("Game over (%s): score=%d high_score=%d", cause.value, self.score, self.high_score)
        self._publish()

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)
