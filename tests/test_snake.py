from __future__ import annotations

import random

import pytest

from gridsnake.food import FoodGenerator, GridFullError
from gridsnake.grid import Grid
from gridsnake.snake import Snake
from gridsnake.utils import DOWN, LEFT, RIGHT, UP


def _snake() -> Snake:
    return Snake(segments=((5, 5), (5, 6), (6, 6), (6, 5)))


def test_move_preserves_length_and_grow_adds_one() -> None:
    snake = _snake()
    head = snake.advance(UP)
    assert len(snake.move_to(head)) == len(snake)
    assert len(snake.grow_to(head)) == len(snake) + 1


def test_head_after_move_is_head_plus_direction() -> None:
    snake = _snake()
    for direction in (UP, LEFT, DOWN):
        new_head = snake.advance(direction)
        assert new_head == (snake.head[0] + direction[0], snake.head[1] + direction[1])
    moved = snake.move_to(snake.advance(LEFT))
    assert moved.head == (4, 5)
    assert moved.tail == (6, 6)


def test_operations_do_not_mutate_original() -> None:
    snake = Snake.spawn((3, 3))
    grown = snake.grow_to(snake.advance(RIGHT))
    assert snake.segments == ((3, 3),)
    assert grown.segments == ((4, 3), (3, 3))


def test_tail_cell_counts_as_collision() -> None:
    snake = _snake()
    assert snake.would_collide_with_self((5, 6))
    assert snake.would_collide_with_self(snake.tail)
    assert not snake.would_collide_with_self((4, 5))


def test_invalid_bodies_fail_fast() -> None:
    with pytest.raises(AssertionError):
        Snake(segments=())
    with pytest.raises(AssertionError):
        Snake(segments=((1, 1), (1, 1)))


def test_grid_bounds() -> None:
    grid = Grid(20)
    assert grid.in_bounds((0, 0))
    assert grid.in_bounds((19, 19))
    assert not grid.in_bounds((20, 10))
    assert not grid.in_bounds((-1, 10))
    assert not grid.in_bounds((10, 20))
    assert grid.center == (10, 10)
    assert len(list(grid.cells())) == grid.cell_count == 400


def test_grid_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        Grid(0)


def test_food_never_on_snake() -> None:
    grid = Grid(6)
    generator = FoodGenerator(grid, random.Random(7))
    occupied = {(x, y) for x in range(6) for y in range(6) if (x + y) % 3}
    for _ in range(200):
        assert generator.generate(occupied) not in occupied


def test_food_falls_back_to_scan_on_crowded_board() -> None:
    grid = Grid(10)
    generator = FoodGenerator(grid, random.Random(1), max_attempts=0)
    free = (7, 3)
    occupied = {cell for cell in grid.cells() if cell != free}
    assert generator.generate(occupied) == free


def test_food_raises_when_board_is_full() -> None:
    grid = Grid(3)
    generator = FoodGenerator(grid, random.Random(1), max_attempts=5)
    with pytest.raises(GridFullError):
        generator.generate(set(grid.cells()))
