from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from flip_tetris.game import Action, GameConfig, GamePhase, TetrisEngine, TetrominoType


_PALETTE = {
    0: (30, 30, 36),
    1: (0, 240, 240),  # I
    2: (240, 240, 0),  # O
    3: (160, 0, 240),  # T
    4: (0, 240, 0),    # S
    5: (240, 0, 0),    # Z
    6: (0, 0, 240),    # J
    7: (240, 160, 0),  # L
}


class FlipTetrisEnv(gym.Env):
    """Drives the engine one input action plus one fixed clock tick per step.

    Reward is the score gained during the step. The episode terminates at game
    over and is truncated after `max_episode_steps` steps.
    """

    metadata = {"render_modes": ["rgb_array"], "render_fps": 30}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 step_ms: float = 50.0, max_episode_steps: int = 10_000,
                 variant: str = "classic") -> None:
        super().__init__()
        if config is None:
            config = GameConfig.flip() if variant == "flip" else GameConfig.classic()
        self.config = config
        self.engine = TetrisEngine(self.config)
        self.render_mode = render_mode
        self.step_ms = float(step_ms)
        self.max_episode_steps = int(max_episode_steps)

        h, w = self.config.height, self.config.width
        kinds = len(TetrominoType)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-kinds, high=kinds, shape=(h, w), dtype=np.int8),
                "next": spaces.Discrete(kinds + 1),
                "hold": spaces.Discrete(kinds + 1),
                "gravity": spaces.Discrete(2),
            }
        )
        self.action_space = spaces.Discrete(len(Action))
        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        snap = self.engine.snapshot()
        return {
            "board": self.engine.get_state(),
            "next": int(snap.next_kind) if snap.next_kind is not None else 0,
            "hold": int(snap.hold_kind) if snap.hold_kind is not None else 0,
            "gravity": 0 if snap.gravity > 0 else 1,
        }

    def _get_info(self) -> Dict[str, Any]:
        snap = self.engine.snapshot()
        return {
            "score": snap.score,
            "lines": snap.lines,
            "level": snap.level,
            "flip_count": snap.flip_count,
            "phase": snap.phase.value,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.engine.restart()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        before = self.engine.score
        self.engine.apply(Action(int(action)))
        result = self.engine.tick(self.step_ms)
        self._steps += 1

        reward = float(self.engine.score - before)
        terminated = self.engine.phase is GamePhase.GAME_OVER
        truncated = self._steps >= self.max_episode_steps and not terminated

        info = self._get_info()
        info["locked"] = result.locked
        info["lines_cleared"] = result.lines_cleared
        info["flipped"] = result.flipped
        return self._get_obs(), reward, terminated, truncated, info

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        grid = self.engine.get_state()
        cell = 12
        h, w = grid.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                color = _PALETTE.get(abs(int(grid[y, x])), (200, 200, 200))
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
