from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional, Tuple

Cell = Optional[int]        # None = empty, otherwise a value 1..N
Grid = List[List[Cell]]

EMPTY: Cell = None


@dataclass(frozen=True)
class GridConfig:
    size: int           # board is size x size
    sub_grid_rows: int  # rows per sub-box
    sub_grid_cols: int  # cols per sub-box
    max_number: int     # largest legal value (== size)


@dataclass(frozen=True)
class CellPosition:
    row: int
    col: int


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    conflicts: Tuple[CellPosition, ...] = ()


@dataclass
class Puzzle:
    puzzle: Grid
    solution: Grid
    config: GridConfig


@dataclass(frozen=True)
class GameState:
    grid: Grid
    solution: Grid
    initial_grid: Grid
    config: GridConfig
    difficulty: str  # "easy" | "medium" | "hard"
    start_time: float
    errors: FrozenSet[CellPosition] = field(default_factory=frozenset)
    is_complete: bool = False
    selected_cell: Optional[CellPosition] = None
    end_time: Optional[float] = None
