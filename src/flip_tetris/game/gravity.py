"""Board flip and block settling for the inverted-gravity mode.

Gravity is a sign: +1 means pieces fall toward higher row indices (down the
screen), -1 means they fall toward row 0. Both helpers work in place on the
board's numpy array.
"""

from __future__ import annotations

import numpy as np


def spawn_band(height: int, rows: int, gravity: int) -> slice:
    """Rows nearest the edge pieces spawn from under `gravity`."""
    if gravity > 0:
        return slice(0, rows)
    return slice(height - rows, height)


def settle(grid: np.ndarray, gravity: int) -> int:
    """Let every resting block fall toward the floor until nothing moves.

    Each block falls on its own within its column. Returns the number of
    single-cell moves made.
    """
    height = grid.shape[0]
    if gravity > 0:
        rows = range(height - 2, -1, -1)
    else:
        rows = range(1, height)
    moves = 0
    moved = True
    while moved:
        moved = False
        for y in rows:
            for x in np.flatnonzero(grid[y]):
                cur = y
                nxt = cur + gravity
                while 0 <= nxt < height and grid[nxt, x] == 0:
                    grid[nxt, x] = grid[cur, x]
                    grid[cur, x] = 0
                    cur = nxt
                    nxt = cur + gravity
                    moves += 1
                    moved = True
    return moves


def flip_board(grid: np.ndarray, gravity: int, band_rows: int) -> int:
    """Reverse the board, clear the new spawn band and settle; returns the new gravity."""
    new_gravity = -gravity
    grid[:] = grid[::-1].copy()
    if band_rows > 0:
        grid[spawn_band(grid.shape[0], band_rows, new_gravity), :] = 0
    settle(grid, new_gravity)
    return new_gravity
