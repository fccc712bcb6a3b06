import os
import sys

import pytest

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from helpers import make_engine  # noqa: E402
from flip_tetris.storage import MemoryHighScoreStore  # noqa: E402


@pytest.fixture
def store():
    return MemoryHighScoreStore()


@pytest.fixture
def engine(store):
    return make_engine(store=store)
