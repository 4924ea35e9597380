from __future__ import annotations

import logging
import random
from typing import Callable, Dict, Optional, Tuple

from .engine import copy_grid, count_solutions, generate_complete
from .geometry import difficulty_settings, get_grid_config
from .models import EMPTY, Grid, GridConfig, Puzzle

logger = logging.getLogger(__name__)


# -----------------------------
# Fixed puzzles
# -----------------------------

def _puzzle_4x4() -> Tuple[Grid, Grid]:
    solution: Grid = [
        [1, 2, 3, 4],
        [3, 4, 1, 2],
        [2, 1, 4, 3],
        [4, 3, 2, 1],
    ]
    puzzle: Grid = [
        [1, None, None, 4],
        [None, 4, 1, None],
        [2, None, None, 3],
        [None, 3, 2, None],
    ]
    return puzzle, solution


def _puzzle_6x6() -> Tuple[Grid, Grid]:
    solution: Grid = [
        [1, 2, 3, 4, 5, 6],
        [4, 5, 6, 1, 2, 3],
        [2, 3, 1, 5, 6, 4],
        [5, 6, 4, 2, 3, 1],
        [3, 1, 2, 6, 4, 5],
        [6, 4, 5, 3, 1, 2],
    ]
    puzzle: Grid = [
        [1, None, None, 4, None, 6],
        [None, 5, None, None, 2, None],
        [2, None, 1, None, None, 4],
        [None, 6, None, 2, None, None],
        [None, 1, None, None, 4, None],
        [6, None, 5, None, None, 2],
    ]
    return puzzle, solution


def _puzzle_16x16() -> Tuple[Grid, Grid]:
    # Shifted-pattern solution; every third anti-diagonal is cleared.
    solution: Grid = [
        [((r * 4 + r // 4 + c) % 16) + 1 for c in range(16)]
        for r in range(16)
    ]
    puzzle: Grid = [
        [EMPTY if (r + c) % 3 == 0 else solution[r][c] for c in range(16)]
        for r in range(16)
    ]
    return puzzle, solution


_FIXED: Dict[int, Callable[[], Tuple[Grid, Grid]]] = {
    4: _puzzle_4x4,
    6: _puzzle_6x6,
    16: _puzzle_16x16,
}


def generate_puzzle(difficulty: str) -> Puzzle:
    """
    Puzzle/solution pair for a difficulty. The content is fixed per size;
    each call returns fresh copies the caller may mutate.
    """
    config = get_grid_config(difficulty)
    puzzle, solution = _FIXED[config.size]()
    return Puzzle(puzzle=copy_grid(puzzle), solution=copy_grid(solution), config=config)


# -----------------------------
# Procedural extension
# -----------------------------

def carve_puzzle(
    solution: Grid,
    config: GridConfig,
    cells_to_remove: int,
    rng: Optional[random.Random] = None,
) -> Grid:
    """
    Clear cells of a complete grid in shuffled order, keeping a clear only
    while the puzzle still has exactly one solution. May remove fewer than
    `cells_to_remove` cells when uniqueness would break.
    """
    rng = rng if rng is not None else random.Random()
    puzzle = copy_grid(solution)

    positions = [(r, c) for r in range(config.size) for c in range(config.size)]
    rng.shuffle(positions)

    removed = 0
    for r, c in positions:
        if removed >= cells_to_remove:
            break
        backup = puzzle[r][c]
        puzzle[r][c] = EMPTY
        if count_solutions(puzzle, config, limit=2) == 1:
            removed += 1
        else:
            puzzle[r][c] = backup

    if removed < cells_to_remove:
        logger.info("Carved %d of %d requested cell(s) from %dx%d grid.", removed, cells_to_remove, config.size, config.size)
    return puzzle


def generate_random_puzzle(difficulty: str, rng: Optional[random.Random] = None) -> Puzzle:
    """Fresh random puzzle with a unique solution. Not used by generate_puzzle()."""
    config = get_grid_config(difficulty)
    rng = rng if rng is not None else random.Random()
    solution = generate_complete(config, rng)
    puzzle = carve_puzzle(solution, config, difficulty_settings(difficulty).cells_to_remove, rng)
    return Puzzle(puzzle=puzzle, solution=solution, config=config)
