from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np


Coordinate = Tuple[int, int]


class GameGrid:
    """Discrete 2D board for falling pieces.

    The grid uses 0 for empty cells and positive integers for filled cells.
    Integer values are the tetromino kind that left the block, for coloring.
    Row 0 is the top of the screen regardless of the current gravity.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = int(width)
        self.height = int(height)
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def reset(self) -> None:
        self.grid.fill(0)

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def can_place(self, cells: Iterable[Coordinate]) -> bool:
        for x, y in cells:
            if not self.is_inside(x, y):
                return False
            if self.grid[y, x] != 0:
                return False
        return True

    def merge(self, cells: Iterable[Coordinate], value: int) -> int:
        """Write cells into the board with `value`; returns how many were written.

        Destructive: whatever was in the target cells is overwritten.
        """
        written = 0
        for x, y in cells:
            if self.is_inside(x, y):
                self.grid[y, x] = value
                written += 1
        return written

    def full_rows(self) -> np.ndarray:
        return np.where(np.all(self.grid != 0, axis=1))[0]

    def clear_full_lines(self, gravity: int = 1) -> int:
        """Remove every full row in one event and return how many went.

        Replacement empty rows go in at the spawn edge: the top for normal
        gravity, the bottom when gravity is inverted.
        """
        full_rows = self.full_rows()
        if full_rows.size == 0:
            return 0
        num = int(full_rows.size)
        kept = np.delete(self.grid, full_rows, axis=0)
        new_rows = np.zeros((num, self.width), dtype=np.int8)
        if gravity > 0:
            self.grid = np.vstack((new_rows, kept))
        else:
            self.grid = np.vstack((kept, new_rows))
        return num

    def occupied_count(self) -> int:
        return int(np.count_nonzero(self.grid))

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
