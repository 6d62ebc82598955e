from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol


logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "tetrisHighScore"


class HighScoreStore(Protocol):
    def load(self) -> Optional[int]:
        ...

    def save(self, score: int) -> None:
        ...


class InMemoryHighScoreStore:
    def __init__(self, initial: Optional[int] = None) -> None:
        self.value = initial
        self.saves = 0

    def load(self) -> Optional[int]:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)
        self.saves += 1


def default_high_score_path() -> Path:
    return Path.home() / ".falling_blocks_highscore.json"


class JsonHighScoreStore:
    """Best score kept as one integer under a fixed key in a JSON file."""

    def __init__(self, path: Optional[Path] = None, key: str = HIGH_SCORE_KEY) -> None:
        self.path = Path(path) if path is not None else default_high_score_path()
        self.key = key

    def load(self) -> Optional[int]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Ignoring unreadable high score file %s: %s", self.path, e)
            return None
        value = data.get(self.key) if isinstance(data, dict) else None
        if isinstance(value, bool) or not isinstance(value, int):
            logger.warning("No integer %r in high score file %s", self.key, self.path)
            return None
        return value

    def save(self, score: int) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps({self.key: int(score)}), encoding="utf-8")
