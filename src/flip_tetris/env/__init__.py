"""Gymnasium environments for Flip Tetris."""

from __future__ import annotations

from gymnasium.envs.registration import register

# Leveling game with hold and lookahead
register(
    id="FlipTetris-Classic-v0",
    entry_point="flip_tetris.env.tetris_env:FlipTetrisEnv",
)

# Gravity-flip variant
register(
    id="FlipTetris-v0",
    entry_point="flip_tetris.env.tetris_env:FlipTetrisEnv",
    kwargs={"variant": "flip"},
)

__all__ = ["FlipTetris-Classic-v0", "FlipTetris-v0"]
