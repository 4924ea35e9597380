"""
Tests for the game surface: copy-on-write moves, hints, reveal, reset
and the derived timer/progress values.
"""

import pytest

from sudokugame.cache import ValidationCache
from sudokugame.game import (
    apply_hint,
    elapsed_seconds,
    format_time,
    has_error,
    is_initial_cell,
    make_move,
    new_game,
    progress,
    reset_game,
    reveal_solution,
    select_cell,
)
from sudokugame.models import CellPosition


@pytest.fixture
def easy():
    return new_game("easy", now=100.0)


def test_new_game(easy):
    assert easy.difficulty == "easy"
    assert easy.config.size == 4
    assert easy.grid == easy.initial_grid
    assert easy.grid is not easy.initial_grid
    assert easy.start_time == 100.0
    assert not easy.is_complete
    assert easy.errors == frozenset()
    assert easy.end_time is None


def test_new_game_unknown_difficulty():
    with pytest.raises(ValueError):
        new_game("expert")


def test_move_is_copy_on_write(easy):
    moved = make_move(easy, 0, 1, 2)

    assert moved.grid[0][1] == 2
    assert easy.grid[0][1] is None
    assert moved.initial_grid[0][1] is None
    assert not moved.errors


def test_given_cells_are_read_only(easy):
    assert is_initial_cell(easy, 0, 0)
    assert make_move(easy, 0, 0, 3) is easy


def test_conflicting_move_marks_both_cells(easy):
    # (0, 1) = 1 clashes with the given 1 at (0, 0)
    moved = make_move(easy, 0, 1, 1)
    assert moved.errors == frozenset({CellPosition(0, 0), CellPosition(0, 1)})
    assert has_error(moved, 0, 1)

    cleared = make_move(moved, 0, 1, None)
    assert cleared.errors == frozenset()
    assert cleared.grid[0][1] is None


def test_out_of_range_value(easy):
    with pytest.raises(ValueError):
        make_move(easy, 0, 1, 5)
    with pytest.raises(ValueError):
        make_move(easy, 0, 1, 0)


def test_completing_the_puzzle(easy):
    cache = ValidationCache()
    state = easy
    for r in range(4):
        for c in range(4):
            if state.grid[r][c] is None:
                state = make_move(state, r, c, state.solution[r][c], cache, now=160.0)

    assert state.is_complete
    assert state.end_time == 160.0
    assert progress(state) == 100
    assert elapsed_seconds(state, now=999.0) == 60


def test_hint_fills_most_constrained_cell(easy):
    hinted = apply_hint(easy)
    assert hinted.selected_cell == CellPosition(0, 1)
    assert hinted.grid[0][1] == 2
    assert easy.grid[0][1] is None


def test_no_hint_when_full(easy):
    solved = reveal_solution(easy, now=120.0)
    assert apply_hint(solved) is solved


def test_reveal_solution(easy):
    solved = reveal_solution(easy, now=130.0)
    assert solved.grid == easy.solution
    assert solved.grid is not easy.solution
    assert solved.is_complete
    assert solved.end_time == 130.0

    solved.grid[0][0] = 4
    assert easy.solution[0][0] == 1


def test_reset_game(easy):
    played = select_cell(make_move(easy, 0, 1, 1), 0, 1)
    reset = reset_game(played, now=200.0)

    assert reset.grid == easy.initial_grid
    assert reset.grid is not reset.initial_grid
    assert reset.errors == frozenset()
    assert reset.selected_cell is None
    assert reset.start_time == 200.0
    assert reset.end_time is None
    assert not reset.is_complete


def test_progress_and_time(easy):
    assert progress(easy) == 50
    assert elapsed_seconds(easy, now=175.5) == 75
    assert format_time(75) == "01:15"
    assert format_time(0) == "00:00"
    assert format_time(3600) == "60:00"


def test_completing_move_validates_once(easy):
    state = easy
    for r, c in [(0, 1), (0, 2), (1, 0), (1, 3), (2, 1), (2, 2), (3, 0)]:
        state = make_move(state, r, c, state.solution[r][c])

    cache = ValidationCache()
    done = make_move(state, 3, 3, 1, cache)
    assert done.is_complete
    assert cache.misses == 1
    assert cache.hits == 0


def test_filled_grid_with_conflicts_is_not_complete(easy):
    state = easy
    for r in range(4):
        for c in range(4):
            if state.grid[r][c] is None:
                state = make_move(state, r, c, 4 if (r, c) == (3, 3) else state.solution[r][c])

    assert all(v is not None for row in state.grid for v in row)
    assert state.errors
    assert not state.is_complete
    assert state.end_time is None
