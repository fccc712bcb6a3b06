"""High score persistence: the only state that outlives a session."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_PATH = Path.home() / ".flip_tetris" / "highscore.json"


class HighScoreStore:
    """Reads and writes a single high-score integer as a small JSON file."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.path = Path(path) if path is not None else DEFAULT_PATH

    def load(self) -> int:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return max(0, int(data.get("high_score", 0)))
        except FileNotFoundError:
            return 0
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable high score file {self.path}: {e}")
            return 0

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({"high_score": int(score)}), encoding="utf-8")

    def submit(self, score: int) -> bool:
        """Persist `score` if it beats the stored value; returns True when written."""
        if score <= self.load():
            return False
        self.save(score)
        logger.info(f"New high score {score} saved to {self.path}")
        return True


class MemoryHighScoreStore(HighScoreStore):
    """In-process store for hosts without a filesystem, and for tests."""

    def __init__(self, initial: int = 0) -> None:
        self.path = None
        self.value = int(initial)

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)
