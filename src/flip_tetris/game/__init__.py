"""Game module for Flip Tetris.

Exports the falling-piece engine and supporting classes:
- GameGrid: Board occupancy and line clearing
- Piece: Tetromino piece with matrix rotation
- TetrominoType: Enum of available piece types
- GameConfig / ScoringRules: Session configuration and score tables
- TetrisEngine: Spawning, movement, locking, flipping and the tick clock
"""

from .grid import GameGrid
from .pieces import Piece, TetrominoType
from .rules import GameConfig, ScoringRules
from .gravity import flip_board, settle
from .core import (
    Action,
    EngineSnapshot,
    GamePhase,
    PieceState,
    TetrisEngine,
    TickResult,
    WALL_KICKS,
)

__all__ = [
    "GameGrid",
    "Piece",
    "TetrominoType",
    "GameConfig",
    "ScoringRules",
    "flip_board",
    "settle",
    "Action",
    "EngineSnapshot",
    "GamePhase",
    "PieceState",
    "TetrisEngine",
    "TickResult",
    "WALL_KICKS",
]
