from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .models import GridConfig

DIFFICULTIES = ("easy", "medium", "hard")
DEFAULT_DIFFICULTY = "medium"


@dataclass(frozen=True)
class DifficultySettings:
    name: str
    cells_to_remove: int


_CONFIGS: Dict[str, Tuple[int, int, int]] = {
    "easy": (4, 2, 2),
    "medium": (6, 2, 3),
    "hard": (16, 4, 4),
}

# Fixed removal counts per board, not the 40/50/70% share of cells.
_SETTINGS: Dict[str, DifficultySettings] = {
    "easy": DifficultySettings(name="4×4 Easy", cells_to_remove=6),
    "medium": DifficultySettings(name="6×6 Medium", cells_to_remove=18),
    "hard": DifficultySettings(name="16×16 Hard", cells_to_remove=180),
}


def grid_config(size: int, sub_grid_rows: int, sub_grid_cols: int) -> GridConfig:
    """Validate the geometry and build a config (values run 1..size)."""
    if size <= 0 or sub_grid_rows <= 0 or sub_grid_cols <= 0:
        raise ValueError(f"Invalid geometry: {size}x{size} with {sub_grid_rows}x{sub_grid_cols} boxes.")
    if sub_grid_rows * sub_grid_cols != size:
        raise ValueError(
            f"Sub-box {sub_grid_rows}x{sub_grid_cols} must hold exactly {size} cells."
        )
    if size % sub_grid_rows or size % sub_grid_cols:
        raise ValueError(f"Sub-box {sub_grid_rows}x{sub_grid_cols} does not tile a {size}x{size} grid.")
    return GridConfig(size=size, sub_grid_rows=sub_grid_rows, sub_grid_cols=sub_grid_cols, max_number=size)


def get_grid_config(difficulty: str) -> GridConfig:
    if difficulty not in _CONFIGS:
        raise ValueError(f"Unknown difficulty: {difficulty!r} (expected one of {', '.join(DIFFICULTIES)}).")
    return grid_config(*_CONFIGS[difficulty])


def difficulty_settings(difficulty: str) -> DifficultySettings:
    if difficulty not in _SETTINGS:
        raise ValueError(f"Unknown difficulty: {difficulty!r} (expected one of {', '.join(DIFFICULTIES)}).")
    return _SETTINGS[difficulty]


# -----------------------------
# Sub-box arithmetic
# -----------------------------

def box_origin(config: GridConfig, row: int, col: int) -> Tuple[int, int]:
    return (
        (row // config.sub_grid_rows) * config.sub_grid_rows,
        (col // config.sub_grid_cols) * config.sub_grid_cols,
    )


def box_index(config: GridConfig, row: int, col: int) -> int:
    """Boxes are numbered row-major: N // C boxes per band of R rows."""
    boxes_per_band = config.size // config.sub_grid_cols
    return (row // config.sub_grid_rows) * boxes_per_band + (col // config.sub_grid_cols)


def box_cells(config: GridConfig, row: int, col: int) -> List[Tuple[int, int]]:
    r0, c0 = box_origin(config, row, col)
    return [
        (r, c)
        for r in range(r0, r0 + config.sub_grid_rows)
        for c in range(c0, c0 + config.sub_grid_cols)
    ]


def value_range(config: GridConfig) -> range:
    return range(1, config.max_number + 1)


def full_mask(config: GridConfig) -> int:
    # bits 1..N set => (1<<(N+1)) - 2
    return (1 << (config.max_number + 1)) - 2
