from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import Optional

from .cache import ValidationCache
from .engine import copy_grid, get_hint, validate_grid
from .models import EMPTY, CellPosition, GameState, Grid
from .puzzles import generate_puzzle

logger = logging.getLogger(__name__)


def _now(now: Optional[float]) -> float:
    return time.time() if now is None else now


def new_game(difficulty: str, now: Optional[float] = None) -> GameState:
    p = generate_puzzle(difficulty)
    logger.info("New %s game (%dx%d)", difficulty, p.config.size, p.config.size)
    return GameState(
        grid=p.puzzle,
        solution=p.solution,
        initial_grid=copy_grid(p.puzzle),
        config=p.config,
        difficulty=difficulty,
        start_time=_now(now),
    )


def _with_grid(
    state: GameState,
    grid: Grid,
    cache: Optional[ValidationCache],
    now: Optional[float],
) -> GameState:
    """Install a new grid and recompute conflicts + completion."""
    validation = validate_grid(grid, state.config, cache)
    complete = validation.is_valid and all(v is not EMPTY for row in grid for v in row)
    return replace(
        state,
        grid=grid,
        errors=frozenset(validation.conflicts),
        is_complete=complete,
        end_time=_now(now) if complete else state.end_time,
    )


def make_move(
    state: GameState,
    row: int,
    col: int,
    value: Optional[int],
    cache: Optional[ValidationCache] = None,
    now: Optional[float] = None,
) -> GameState:
    """
    Place `value` (or clear with None) and return the new state. Given cells
    are read-only: moves on them return `state` unchanged.
    """
    if state.initial_grid[row][col] is not EMPTY:
        return state
    if value is not None and not 1 <= value <= state.config.max_number:
        raise ValueError(f"Value {value} out of range (allowed 1..{state.config.max_number}).")

    grid = copy_grid(state.grid)
    grid[row][col] = value
    return _with_grid(state, grid, cache, now)


def apply_hint(
    state: GameState,
    cache: Optional[ValidationCache] = None,
    now: Optional[float] = None,
) -> GameState:
    hint = get_hint(state.grid, state.solution, state.config)
    if hint is None:
        return state

    grid = copy_grid(state.grid)
    grid[hint.row][hint.col] = state.solution[hint.row][hint.col]
    logger.debug("Hint at (%d, %d)", hint.row, hint.col)
    return replace(_with_grid(state, grid, cache, now), selected_cell=hint)


def reveal_solution(state: GameState, now: Optional[float] = None) -> GameState:
    return replace(
        state,
        grid=copy_grid(state.solution),
        errors=frozenset(),
        is_complete=True,
        end_time=_now(now),
    )


def reset_game(state: GameState, now: Optional[float] = None) -> GameState:
    return replace(
        state,
        grid=copy_grid(state.initial_grid),
        errors=frozenset(),
        is_complete=False,
        selected_cell=None,
        start_time=_now(now),
        end_time=None,
    )


def select_cell(state: GameState, row: int, col: int) -> GameState:
    return replace(state, selected_cell=CellPosition(row, col))


# -----------------------------
# Derived values
# -----------------------------

def is_initial_cell(state: GameState, row: int, col: int) -> bool:
    return state.initial_grid[row][col] is not EMPTY


def has_error(state: GameState, row: int, col: int) -> bool:
    return CellPosition(row, col) in state.errors


def progress(state: GameState) -> int:
    """Filled cells as a whole percentage (half rounds up)."""
    filled = sum(1 for row in state.grid for v in row if v is not EMPTY)
    total = state.config.size * state.config.size
    return (filled * 200 + total) // (total * 2)


def elapsed_seconds(state: GameState, now: Optional[float] = None) -> int:
    end = state.end_time if state.end_time is not None else _now(now)
    return max(0, int(end - state.start_time))


def format_time(seconds: int) -> str:
    mins, secs = divmod(seconds, 60)
    return f"{mins:02d}:{secs:02d}"
