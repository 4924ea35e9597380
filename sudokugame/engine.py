from __future__ import annotations

import logging
import random
from typing import Callable, List, Optional, Tuple

from .cache import ValidationCache
from .geometry import box_cells, box_index, full_mask, value_range
from .models import EMPTY, CellPosition, Grid, GridConfig, ValidationResult

logger = logging.getLogger(__name__)

CandidateOrder = Callable[[List[int]], List[int]]


# -----------------------------
# Grid helpers
# -----------------------------

def create_empty_grid(size: int) -> Grid:
    return [[EMPTY] * size for _ in range(size)]


def copy_grid(grid: Grid) -> Grid:
    return [row[:] for row in grid]


# -----------------------------
# Validity
# -----------------------------

def is_valid_move(grid: Grid, row: int, col: int, value: int, config: GridConfig) -> bool:
    """
    True if `value` at (row, col) duplicates nothing in its row, column or box.
    The cell itself is ignored, so a filled cell can be re-checked in place.
    """
    size = config.size

    for c in range(size):
        if c != col and grid[row][c] == value:
            return False

    for r in range(size):
        if r != row and grid[r][col] == value:
            return False

    for r, c in box_cells(config, row, col):
        if (r != row or c != col) and grid[r][c] == value:
            return False

    return True


def candidates(grid: Grid, row: int, col: int, config: GridConfig) -> List[int]:
    return [v for v in value_range(config) if is_valid_move(grid, row, col, v, config)]


def validate_grid(grid: Grid, config: GridConfig, cache: Optional[ValidationCache] = None) -> ValidationResult:
    """
    Every filled cell that clashes with another is reported, so two equal
    values in one row produce two conflicts. The grid is never modified.
    """
    if cache is not None:
        cached = cache.get(grid, config)
        if cached is not None:
            return cached

    conflicts: List[CellPosition] = []
    for r in range(config.size):
        for c in range(config.size):
            v = grid[r][c]
            if v is EMPTY:
                continue
            if not is_valid_move(grid, r, c, v, config):
                conflicts.append(CellPosition(r, c))

    result = ValidationResult(is_valid=not conflicts, conflicts=tuple(conflicts))
    if cache is not None:
        cache.put(grid, config, result)
    return result


def is_complete(grid: Grid, config: GridConfig, cache: Optional[ValidationCache] = None) -> bool:
    for row in grid:
        if any(v is EMPTY for v in row):
            return False
    return validate_grid(grid, config, cache).is_valid


# -----------------------------
# Search
# -----------------------------

class _SearchState:
    """Row/column/box bitmasks over a grid that is filled in place."""

    def __init__(self, grid: Grid, config: GridConfig) -> None:
        self.grid = grid
        self.config = config
        self.full = full_mask(config)

        n = config.size
        self.row_used = [0] * n
        self.col_used = [0] * n
        self.box_used = [0] * n
        self.empties: List[Tuple[int, int]] = []

        for r in range(n):
            for c in range(n):
                v = grid[r][c]
                if v is EMPTY:
                    self.empties.append((r, c))
                else:
                    bit = 1 << v
                    self.row_used[r] |= bit
                    self.col_used[c] |= bit
                    self.box_used[box_index(config, r, c)] |= bit

    def candidates_mask(self, r: int, c: int) -> int:
        used = self.row_used[r] | self.col_used[c] | self.box_used[box_index(self.config, r, c)]
        return self.full & ~used

    def values_of(self, mask: int) -> List[int]:
        return [v for v in value_range(self.config) if mask & (1 << v)]

    def most_constrained(self, short_circuit: bool = True) -> Optional[Tuple[int, int, int]]:
        """
        Empty cell with the fewest candidates, scanning row-major; the first
        minimum wins. Returns (row, col, mask) or None when nothing is empty.

        With `short_circuit` the scan also stops at the first single-candidate
        cell, so a later cell with no candidates can be passed over.
        """
        best: Optional[Tuple[int, int, int]] = None
        best_count = self.config.max_number + 1

        for r, c in self.empties:
            if self.grid[r][c] is not EMPTY:
                continue
            cm = self.candidates_mask(r, c)
            cnt = cm.bit_count()
            if cnt < best_count:
                best_count = cnt
                best = (r, c, cm)
                if cnt == 0 or (short_circuit and cnt == 1):
                    break

        return best

    def place(self, r: int, c: int, v: int) -> None:
        bit = 1 << v
        self.grid[r][c] = v
        self.row_used[r] |= bit
        self.col_used[c] |= bit
        self.box_used[box_index(self.config, r, c)] |= bit

    def remove(self, r: int, c: int) -> None:
        bit = 1 << self.grid[r][c]
        self.grid[r][c] = EMPTY
        self.row_used[r] ^= bit
        self.col_used[c] ^= bit
        self.box_used[box_index(self.config, r, c)] ^= bit


def _ascending(values: List[int]) -> List[int]:
    return list(values)


def _backtrack(state: _SearchState, order: CandidateOrder, stop_after: int = 1) -> int:
    """
    Depth-first search with an explicit stack of (row, col, untried values).
    Stops once `stop_after` solutions were reached, leaving the last one in
    the grid; otherwise every placement is undone before returning.
    """
    found = 0
    stack: List[Tuple[int, int, List[int]]] = []

    while True:
        choice = state.most_constrained()
        if choice is None:
            found += 1
            if found >= stop_after:
                return found
        else:
            r, c, mask = choice
            values = order(state.values_of(mask))
            values.reverse()  # pop() takes them in order
            stack.append((r, c, values))

        while stack:
            r, c, values = stack[-1]
            if state.grid[r][c] is not EMPTY:
                state.remove(r, c)
            if values:
                state.place(r, c, values.pop())
                break
            stack.pop()
        else:
            return found


def solve(grid: Grid, config: GridConfig) -> bool:
    """
    Fill every empty cell in place. On failure all placements are unwound
    and the grid is left exactly as given.
    """
    if not validate_grid(grid, config).is_valid:
        logger.debug("solve %dx%d: givens already conflict", config.size, config.size)
        return False

    state = _SearchState(grid, config)
    solved = _backtrack(state, _ascending) > 0
    logger.debug("solve %dx%d: %d empty cell(s), solved=%s", config.size, config.size, len(state.empties), solved)
    return solved


def count_solutions(grid: Grid, config: GridConfig, limit: int = 2) -> int:
    """Number of solutions, counting no further than `limit`. Grid untouched."""
    if limit <= 0 or not validate_grid(grid, config).is_valid:
        return 0
    state = _SearchState(copy_grid(grid), config)
    return _backtrack(state, _ascending, stop_after=limit)


def generate_complete(config: GridConfig, rng: Optional[random.Random] = None) -> Grid:
    """Random full grid: same search as solve(), candidates tried in shuffled order."""
    rng = rng if rng is not None else random.Random()

    def shuffled(values: List[int]) -> List[int]:
        return rng.sample(values, len(values))

    grid = create_empty_grid(config.size)
    if not _backtrack(_SearchState(grid, config), shuffled):
        raise ValueError(f"No complete grid exists for {config}.")
    return grid


def get_hint(puzzle: Grid, solution: Grid, config: GridConfig) -> Optional[CellPosition]:
    """
    Position of the most constrained empty cell (read its value from
    `solution`), or None when the puzzle has no empty cell.
    """
    choice = _SearchState(puzzle, config).most_constrained(short_circuit=False)
    if choice is None:
        return None
    r, c, _ = choice
    return CellPosition(r, c)
