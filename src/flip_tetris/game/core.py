from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

import numpy as np

from flip_tetris.storage import HighScoreStore, MemoryHighScoreStore
from .grid import Coordinate, GameGrid
from .gravity import flip_board
from .pieces import Piece, TetrominoType
from .rules import GameConfig, ScoringRules

logger = logging.getLogger(__name__)


class Action(IntEnum):
    NONE = 0
    LEFT = 1
    RIGHT = 2
    ROTATE_CW = 3
    ROTATE_CCW = 4
    SOFT_DROP = 5
    HARD_DROP = 6
    HOLD = 7
    PAUSE = 8


class GamePhase(str, Enum):
    START = "start"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class PieceState(str, Enum):
    FALLING = "falling"
    LOCKING = "locking"
    CLEARED = "cleared"
    SPAWNING = "spawning"
    ANIMATING = "animating"
    TERMINAL = "terminal"


# Tried in order after the unkicked rotation. dy is against gravity: -1 means
# one row away from the floor, whichever way the floor currently is.
WALL_KICKS: Tuple[Tuple[int, int], ...] = (
    (1, 0), (-1, 0), (0, -1), (1, -1), (-1, -1), (2, 0), (-2, 0), (0, -2),
)


@dataclass
class TickResult:
    locked: bool = False
    lines_cleared: int = 0
    flipped: bool = False
    game_over: bool = False


@dataclass(frozen=True)
class EngineSnapshot:
    board: np.ndarray
    active_cells: Tuple[Coordinate, ...]
    ghost_cells: Tuple[Coordinate, ...]
    piece_kind: Optional[TetrominoType]
    next_kind: Optional[TetrominoType]
    hold_kind: Optional[TetrominoType]
    can_hold: bool
    score: int
    high_score: int
    level: int
    lines: int
    phase: GamePhase
    piece_state: PieceState
    gravity: int
    flip_count: int
    drop_interval: int


class TetrisEngine:
    """Falling-piece simulation for one game session.

    The host owns the clock: it calls `tick(dt_ms)` once per frame and maps
    its input events to the move/rotate/drop/hold/pause methods. Nothing here
    raises during play; rejected moves return False and calls made in the
    wrong phase do nothing.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        store: Optional[HighScoreStore] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules(level_scaling=self.config.level_scaling)
        self.rng = rng or random.Random(self.config.random_seed)
        self.store = store if store is not None else MemoryHighScoreStore()
        self.grid = GameGrid(self.config.width, self.config.height)
        self.phase = GamePhase.START
        self.high_score = self.store.load()
        self._reset_session()

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------
    def _reset_session(self) -> None:
        self.grid.reset()
        self.score = 0
        self.lines = 0
        self.level = self.config.initial_level
        self.drop_interval = self.config.drop_interval(self.level)
        self.gravity = self.config.gravity
        self.score_since_flip = 0
        self.flip_count = 0
        self.fall_accumulator = 0.0
        self.animation_ms = 0.0
        self.current_piece: Optional[Piece] = None
        self.hold_kind: Optional[TetrominoType] = None
        self.can_hold = True
        self.next_kind: TetrominoType = self._random_kind()
        self.piece_state = PieceState.SPAWNING

    def _begin(self) -> None:
        self._reset_session()
        self.high_score = self.store.load()
        self.phase = GamePhase.PLAYING
        logger.info(f"Session started on a {self.grid.width}x{self.grid.height} board")
        self.spawn()

    def start(self) -> None:
        if self.phase is GamePhase.START:
            self._begin()

    def restart(self) -> None:
        """Fresh session from any phase; the R key and env resets land here."""
        self._begin()

    def go_home(self) -> None:
        self._reset_session()
        self.phase = GamePhase.START
        logger.info("Session discarded, back to start")

    def toggle_pause(self) -> None:
        if self.phase is GamePhase.PLAYING:
            self.phase = GamePhase.PAUSED
            logger.info("Paused")
        elif self.phase is GamePhase.PAUSED:
            # Time spent paused must not turn into fall progress
            self.fall_accumulator = 0.0
            self.phase = GamePhase.PLAYING
            logger.info("Resumed")

    def _end_game(self) -> None:
        self.current_piece = None
        self.phase = GamePhase.GAME_OVER
        self.piece_state = PieceState.TERMINAL
        if self.store.submit(self.score):
            self.high_score = self.score
        logger.info(f"Game over: score={self.score} lines={self.lines} level={self.level}")

    # ------------------------------------------------------------------
    # Spawning
    # ------------------------------------------------------------------
    def _random_kind(self) -> TetrominoType:
        return self.rng.choice(list(TetrominoType))

    def _place_new(self, kind: TetrominoType) -> Optional[Piece]:
        piece = Piece(kind=kind)
        piece.x = (self.grid.width - piece.width) // 2
        piece.y = 0 if self.gravity > 0 else self.grid.height - piece.height
        if not self.grid.can_place(piece.cells()):
            self._end_game()
            return None
        self.current_piece = piece
        self.piece_state = PieceState.FALLING
        self.fall_accumulator = 0.0
        return piece

    def spawn(self) -> Optional[Piece]:
        """Bring in the lookahead piece; a blocked spawn ends the game."""
        if self.phase is not GamePhase.PLAYING or self.current_piece is not None:
            return None
        kind = self.next_kind
        self.next_kind = self._random_kind()
        self.can_hold = True
        return self._place_new(kind)

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def _can_act(self) -> bool:
        return self.phase is GamePhase.PLAYING and self.current_piece is not None

    def move(self, dx: int, dy: int) -> bool:
        if not self._can_act():
            return False
        piece = self.current_piece
        target = piece.moved(dx, dy)
        if not self.grid.can_place(target.cells()):
            return False
        piece.x, piece.y = target.x, target.y
        return True

    def move_left(self) -> bool:
        return self.move(-1, 0)

    def move_right(self) -> bool:
        return self.move(1, 0)

    def rotate(self, clockwise: bool = True) -> bool:
        if not self._can_act():
            return False
        piece = self.current_piece
        rotated = piece.rotated(clockwise)
        for dx, dy in ((0, 0),) + WALL_KICKS:
            x = piece.x + dx
            y = piece.y + dy * self.gravity
            if self.grid.can_place(rotated.cells_at(x, y)):
                piece.shape = rotated.shape
                piece.rotation = rotated.rotation
                piece.x = x
                piece.y = y
                return True
        return False

    def rotate_cw(self) -> bool:
        return self.rotate(True)

    def rotate_ccw(self) -> bool:
        return self.rotate(False)

    def soft_drop(self) -> bool:
        if self.move(0, self.gravity):
            self.score += self.rules.soft_drop_per_cell
            return True
        return False

    def hard_drop(self) -> int:
        if not self._can_act():
            return 0
        distance = 0
        while self.move(0, self.gravity):
            distance += 1
        self.score += distance * self.rules.hard_drop_per_cell
        self.lock()
        return distance

    def hold(self) -> bool:
        if not self.config.hold_enabled or not self._can_act() or not self.can_hold:
            return False
        kind = self.current_piece.kind
        self.current_piece = None
        if self.hold_kind is None:
            self.hold_kind = kind
            self.spawn()
        else:
            swapped, self.hold_kind = self.hold_kind, kind
            self._place_new(swapped)
        self.can_hold = False
        return True

    def ghost_cells(self) -> List[Coordinate]:
        if self.current_piece is None:
            return []
        ghost = self.current_piece
        while True:
            below = ghost.moved(0, self.gravity)
            if not self.grid.can_place(below.cells()):
                return ghost.cells()
            ghost = below

    # ------------------------------------------------------------------
    # Locking, clearing, flipping
    # ------------------------------------------------------------------
    def lock(self) -> TickResult:
        result = TickResult()
        if not self._can_act():
            return result
        piece = self.current_piece
        self.piece_state = PieceState.LOCKING
        self.grid.merge(piece.cells(), int(piece.kind))
        self.current_piece = None
        result.locked = True

        cleared = self.grid.clear_full_lines(self.gravity)
        self.piece_state = PieceState.CLEARED
        if cleared:
            gained = self._award_lines(cleared)
            if self.config.flip_threshold is not None:
                self.score_since_flip += gained
                if self.score_since_flip >= self.config.flip_threshold:
                    settled = self._flip()
                    result.flipped = True
                    if settled:
                        # Scored, but the counter just restarted and stays at 0
                        self._award_lines(settled)
                        cleared += settled
        result.lines_cleared = cleared

        if cleared and self.config.clear_delay_ms > 0:
            self.piece_state = PieceState.ANIMATING
            self.animation_ms = float(self.config.clear_delay_ms)
        else:
            self.piece_state = PieceState.SPAWNING
            self.spawn()
        result.game_over = self.phase is GamePhase.GAME_OVER
        return result

    def _award_lines(self, cleared: int) -> int:
        gained = self.rules.score_for_lines(cleared, self.level)
        self.score += gained
        self.lines += cleared
        logger.debug(f"Cleared {cleared} line(s) for {gained} points")
        new_level = self.config.level_for_lines(self.lines)
        if new_level > self.level:
            self.level = new_level
            self.drop_interval = self.config.drop_interval(self.level)
            logger.info(f"Level {self.level}, fall interval {self.drop_interval} ms")
        return gained

    def _flip(self) -> int:
        """Flip the board and gravity; returns rows the settle completed and cleared."""
        self.current_piece = None
        self.gravity = flip_board(self.grid.grid, self.gravity, self.config.flip_band_rows)
        # Settling can close gaps into full rows; they go in this same lock
        settled = self.grid.clear_full_lines(self.gravity)
        self.score_since_flip = 0
        self.flip_count += 1
        self.fall_accumulator = 0.0
        logger.info(f"Board flipped (#{self.flip_count}), gravity now {self.gravity:+d}")
        return settled

    # ------------------------------------------------------------------
    # Clock
    # ------------------------------------------------------------------
    def tick(self, dt_ms: float) -> TickResult:
        result = TickResult()
        if self.phase is not GamePhase.PLAYING:
            return result
        if self.piece_state is PieceState.ANIMATING:
            self.animation_ms -= dt_ms
            if self.animation_ms <= 0:
                self.animation_ms = 0.0
                self.piece_state = PieceState.SPAWNING
                self.spawn()
                result.game_over = self.phase is GamePhase.GAME_OVER
            return result
        if self.current_piece is None:
            return result
        self.fall_accumulator += dt_ms
        if self.fall_accumulator >= self.drop_interval:
            self.fall_accumulator = 0.0
            if not self.move(0, self.gravity):
                return self.lock()
        return result

    def apply(self, action: Action) -> bool:
        """Route one input action; returns whether it changed anything."""
        if action == Action.PAUSE:
            before = self.phase
            self.toggle_pause()
            return self.phase is not before
        if action == Action.LEFT:
            return self.move_left()
        if action == Action.RIGHT:
            return self.move_right()
        if action == Action.ROTATE_CW:
            return self.rotate_cw()
        if action == Action.ROTATE_CCW:
            return self.rotate_ccw()
        if action == Action.SOFT_DROP:
            return self.soft_drop()
        if action == Action.HARD_DROP:
            acted = self._can_act()
            self.hard_drop()
            return acted
        if action == Action.HOLD:
            return self.hold()
        return False

    # ------------------------------------------------------------------
    # Read-only views for hosts
    # ------------------------------------------------------------------
    def snapshot(self) -> EngineSnapshot:
        piece = self.current_piece
        return EngineSnapshot(
            board=self.grid.clone_state(),
            active_cells=tuple(piece.cells()) if piece else (),
            ghost_cells=tuple(self.ghost_cells()),
            piece_kind=piece.kind if piece else None,
            next_kind=self.next_kind,
            hold_kind=self.hold_kind,
            can_hold=self.can_hold,
            score=self.score,
            high_score=max(self.high_score, self.score),
            level=self.level,
            lines=self.lines,
            phase=self.phase,
            piece_state=self.piece_state,
            gravity=self.gravity,
            flip_count=self.flip_count,
            drop_interval=self.drop_interval,
        )

    def get_state(self) -> np.ndarray:
        # Overlay current piece on a copy of the grid for observation
        state = self.grid.clone_state()
        if self.current_piece is not None:
            for x, y in self.current_piece.cells():
                if self.grid.is_inside(x, y):
                    # Use negative to indicate falling piece overlay
                    state[y, x] = -int(self.current_piece.kind)
        return state
