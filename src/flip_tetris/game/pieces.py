from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray
Coordinate = Tuple[int, int]


def _rot90(shape: Shape, k: int) -> Shape:
    k = k % 4
    if k == 0:
        return shape.copy()
    return np.rot90(shape, k, axes=(1, 0)).copy()  # rotate clockwise when k>0


# Square bounding boxes so rotation keeps the piece roughly in place
BASE_SHAPES = {
    TetrominoType.I: np.array([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0], [0, 0, 0]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1], [0, 0, 0]], dtype=np.int8),
}


def rotate_shape(shape: Shape, clockwise: bool = True) -> Shape:
    return _rot90(shape, 1 if clockwise else -1)


@dataclass(eq=False)
class Piece:
    """The falling tetromino: its kind, current shape matrix and board origin."""

    kind: TetrominoType
    x: int = 0
    y: int = 0
    rotation: int = 0  # 0..3
    shape: Shape = field(default=None)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.shape is None:
            self.shape = _rot90(BASE_SHAPES[self.kind], self.rotation)

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def cell_count(self) -> int:
        return int(np.count_nonzero(self.shape))

    def copy(self) -> "Piece":
        return Piece(self.kind, self.x, self.y, self.rotation, self.shape.copy())

    def moved(self, dx: int, dy: int) -> "Piece":
        return Piece(self.kind, self.x + dx, self.y + dy, self.rotation, self.shape.copy())

    def rotated(self, clockwise: bool = True) -> "Piece":
        delta = 1 if clockwise else -1
        return Piece(self.kind, self.x, self.y, (self.rotation + delta) % 4, rotate_shape(self.shape, clockwise))

    def cells_at(self, origin_x: int, origin_y: int) -> List[Coordinate]:
        h, w = self.shape.shape
        cells: List[Coordinate] = []
        for dy in range(h):
            for dx in range(w):
                if self.shape[dy, dx]:
                    cells.append((origin_x + dx, origin_y + dy))
        return cells

    def cells(self) -> List[Coordinate]:
        return self.cells_at(self.x, self.y)
