"""Game module for Falling Blocks.

Exports the engine and its supporting classes:
- Board: fixed 20x10 grid with collision, commit and line clearing
- Piece / TetrominoType: the seven kinds and the active piece
- PieceController: atomic move, rotate, ghost and hard drop
- ScoringRules: line-clear points and level thresholds
- GameSession: state machine, lock sequence and gravity timing
- ManualScheduler: virtual-clock timer driving gravity and clear delays
- HighScoreStore implementations for the persisted best score
"""

from .board import BOARD_HEIGHT, BOARD_WIDTH, Board
from .pieces import Piece, TetrominoType, base_shape, color_tag, pick_random, rotate_cw
from .controller import PieceController
from .rules import ScoringRules
from .scheduler import ManualScheduler, Scheduler, TimerHandle
from .persistence import HIGH_SCORE_KEY, HighScoreStore, InMemoryHighScoreStore, JsonHighScoreStore
from .core import Command, GameConfig, GameSession, GameSnapshot, Phase

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "Board",
    "Piece",
    "TetrominoType",
    "base_shape",
    "color_tag",
    "pick_random",
    "rotate_cw",
    "PieceController",
    "ScoringRules",
    "ManualScheduler",
    "Scheduler",
    "TimerHandle",
    "HIGH_SCORE_KEY",
    "HighScoreStore",
    "InMemoryHighScoreStore",
    "JsonHighScoreStore",
    "Command",
    "GameConfig",
    "GameSession",
    "GameSnapshot",
    "Phase",
]
