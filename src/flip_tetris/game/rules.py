from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    soft_drop_per_cell: int = 1
    hard_drop_per_cell: int = 2
    level_scaling: bool = True

    def score_for_lines(self, lines: int, level: int = 1) -> int:
        if lines <= 0:
            return 0
        base = self.line_clear_scores[min(lines, 4) - 1]
        return base * level if self.level_scaling else base


@dataclass
class GameConfig:
    width: int = 20
    height: int = 20
    random_seed: Optional[int] = None
    initial_level: int = 1
    lines_per_level: int = 10
    initial_drop_ms: int = 800
    drop_step_ms: int = 50
    min_drop_ms: int = 50
    hold_enabled: bool = True
    clear_delay_ms: int = 700
    gravity: int = 1
    flip_threshold: Optional[int] = None
    flip_band_rows: int = 4
    level_scaling: bool = True

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if self.gravity not in (1, -1):
            raise ValueError(f"gravity must be 1 or -1, got {self.gravity}")
        if self.lines_per_level <= 0:
            raise ValueError("lines_per_level must be positive")
        if self.min_drop_ms <= 0 or self.initial_drop_ms < self.min_drop_ms:
            raise ValueError("drop intervals must be positive and initial >= minimum")
        if self.clear_delay_ms < 0 or self.drop_step_ms < 0:
            raise ValueError("timings cannot be negative")
        if self.flip_threshold is not None and self.flip_threshold <= 0:
            raise ValueError("flip_threshold must be positive or None")
        if not 0 <= self.flip_band_rows < self.height:
            raise ValueError("flip_band_rows must fit inside the board")

    @classmethod
    def classic(cls, **overrides) -> "GameConfig":
        """Hold, lookahead, leveling and a short post-clear animation."""
        return cls(**overrides)

    @classmethod
    def flip(cls, **overrides) -> "GameConfig":
        """Fixed one-second fall; every 100 points flips the board and gravity."""
        params = dict(
            initial_drop_ms=1000,
            drop_step_ms=0,
            hold_enabled=False,
            clear_delay_ms=0,
            flip_threshold=100,
            level_scaling=False,
        )
        params.update(overrides)
        return cls(**params)

    def level_for_lines(self, lines: int) -> int:
        return self.initial_level + lines // self.lines_per_level

    def drop_interval(self, level: int) -> int:
        steps = max(0, level - self.initial_level)
        return max(self.min_drop_ms, self.initial_drop_ms - steps * self.drop_step_ms)
