from __future__ import annotations

from typing import Iterable, Optional

from flip_tetris.game import GameConfig, Piece, TetrisEngine, TetrominoType
from flip_tetris.storage import MemoryHighScoreStore


def make_engine(store: Optional[MemoryHighScoreStore] = None, start: bool = True, **overrides) -> TetrisEngine:
    """A seeded classic engine with no post-clear animation unless asked for."""
    params = dict(random_seed=7, clear_delay_ms=0)
    params.update(overrides)
    engine = TetrisEngine(GameConfig(**params), store=store)
    if start:
        engine.start()
    return engine


def put_piece(engine: TetrisEngine, kind: TetrominoType, x: int, y: int, turns: int = 0) -> Piece:
    """Replace the active piece with `kind`, rotated clockwise `turns` times."""
    piece = Piece(kind)
    for _ in range(turns):
        piece = piece.rotated(True)
    piece.x = x
    piece.y = y
    engine.current_piece = piece
    return piece


def fill_rows(engine: TetrisEngine, rows: Iterable[int], gap_col: Optional[int] = None, value: int = 1) -> None:
    for y in rows:
        engine.grid.grid[y, :] = value
        if gap_col is not None:
            engine.grid.grid[y, gap_col] = 0
