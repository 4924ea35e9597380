from __future__ import annotations

from collections import OrderedDict
from typing import Hashable, Optional, Tuple

from .models import Grid, GridConfig, ValidationResult

DEFAULT_MAX_SIZE = 10_000

CacheKey = Tuple[Hashable, ...]


def fingerprint(grid: Grid, config: GridConfig) -> CacheKey:
    """
    Content key for a grid. Any mutation of the grid changes the key,
    so stale entries are never returned.
    """
    return (config, tuple(tuple(row) for row in grid))


class ValidationCache:
    """
    Optional LRU of validation results owned by the caller.
    Passing one to the engine only changes speed, never results.
    """

    def __init__(self, max_size: int = DEFAULT_MAX_SIZE) -> None:
        self.max_size = max_size
        self._entries: "OrderedDict[CacheKey, ValidationResult]" = OrderedDict()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, grid: Grid, config: GridConfig) -> Optional[ValidationResult]:
        key = fingerprint(grid, config)
        result = self._entries.get(key)
        if result is None:
            self.misses += 1
            return None
        self._entries.move_to_end(key)
        self.hits += 1
        return result

    def put(self, grid: Grid, config: GridConfig, result: ValidationResult) -> None:
        if self.max_size <= 0:
            return
        key = fingerprint(grid, config)
        self._entries[key] = result
        self._entries.move_to_end(key)
        while len(self._entries) > self.max_size:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
