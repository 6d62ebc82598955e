from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Callable, List, Optional, Tuple

import numpy as np

from .board import Board
from .controller import PieceController
from .persistence import HighScoreStore, InMemoryHighScoreStore
from .pieces import Piece, Shape, TetrominoType, base_shape, pick_random
from .rules import ScoringRules
from .scheduler import ManualScheduler, Scheduler, TimerHandle


logger = logging.getLogger(__name__)


class Command(IntEnum):
    MOVE_LEFT = 0
    MOVE_RIGHT = 1
    SOFT_DROP = 2
    ROTATE = 3
    HARD_DROP = 4
    TOGGLE_PAUSE = 5
    START_GAME = 6
    RESET_GAME = 7


class Phase(Enum):
    START_SCREEN = "start_screen"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass
class GameConfig:
    initial_drop_interval_ms: float = 800.0
    speed_factor: float = 0.95
    clear_delay_ms: float = 300.0
    random_seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.initial_drop_interval_ms <= 0:
            raise ValueError("initial_drop_interval_ms must be > 0")
        if not 0 < self.speed_factor <= 1:
            raise ValueError("speed_factor must be in (0, 1]")
        if self.clear_delay_ms < 0:
            raise ValueError("clear_delay_ms must be >= 0")


@dataclass(frozen=True)
class GameSnapshot:
    """Read-only view of a session handed to renderers and agents."""

    phase: Phase
    board: np.ndarray
    active: Optional[Piece]
    ghost: Optional[Piece]
    next_kind: Optional[TetrominoType]
    next_shape: Optional[Shape]
    score: int
    level: int
    drop_interval_ms: float
    high_score: int
    clearing_rows: Tuple[int, ...]
    lines_cleared_total: int

    @property
    def is_paused(self) -> bool:
        return self.phase is Phase.PAUSED

    @property
    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER


Listener = Callable[[GameSnapshot], None]


class GameSession:
    """Single-player game: state machine, lock sequence, scoring and timers.

    Commands go through ``dispatch``; gravity ticks and the line-clear settle
    delay arrive through the scheduler. Everything runs on one thread, one
    event at a time.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        scheduler: Optional[Scheduler] = None,
        store: Optional[HighScoreStore] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.store = store if store is not None else InMemoryHighScoreStore()
        self.rng = random.Random(self.config.random_seed)
        self.high_score = self.store.load() or 0
        self._listeners: List[Listener] = []
        self._gravity: Optional[TimerHandle] = None
        self._settle: Optional[TimerHandle] = None
        # Bumped whenever a game ends or restarts; stale callbacks check it
        self._epoch = 0
        self.phase = Phase.START_SCREEN
        self._new_game_state()

    def _new_game_state(self) -> None:
        self.board = Board.empty()
        self.controller = PieceController(self.board)
        self.next_kind: Optional[TetrominoType] = None
        self.score = 0
        self.level = 1
        self.drop_interval_ms = float(self.config.initial_drop_interval_ms)
        self.clearing_rows: Tuple[int, ...] = ()
        self.lines_cleared_total = 0
        self.pieces_locked = 0

    @property
    def active_piece(self) -> Optional[Piece]:
        return self.controller.piece

    @property
    def is_paused(self) -> bool:
        return self.phase is Phase.PAUSED

    @property
    def is_game_over(self) -> bool:
        return self.phase is Phase.GAME_OVER

    def seed(self, seed: Optional[int]) -> None:
        self.rng.seed(seed)

    # ------------------------------------------------------------------
    # Observers

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> GameSnapshot:
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)
        return snap

    def snapshot(self) -> GameSnapshot:
        active = self.controller.piece
        ghost = None
        if active is not None and self.phase is Phase.PLAYING:
            ghost = self.controller.compute_ghost()
        return GameSnapshot(
            phase=self.phase,
            board=self.board.clone_state(),
            active=active.copy() if active is not None else None,
            ghost=ghost,
            next_kind=self.next_kind,
            next_shape=base_shape(self.next_kind) if self.next_kind is not None else None,
            score=self.score,
            level=self.level,
            drop_interval_ms=self.drop_interval_ms,
            high_score=self.high_score,
            clearing_rows=self.clearing_rows,
            lines_cleared_total=self.lines_cleared_total,
        )

    # ------------------------------------------------------------------
    # Commands

    def dispatch(self, command: Command) -> GameSnapshot:
        if command == Command.START_GAME:
            self._start()
        elif command == Command.RESET_GAME:
            self._reset()
        elif command == Command.TOGGLE_PAUSE:
            self._toggle_pause()
        elif self._accepts_piece_commands():
            if command == Command.MOVE_LEFT:
                self.controller.try_move(-1, 0)
            elif command == Command.MOVE_RIGHT:
                self.controller.try_move(1, 0)
            elif command == Command.ROTATE:
                self.controller.try_rotate()
            elif command == Command.SOFT_DROP:
                self._soft_drop()
            elif command == Command.HARD_DROP:
                self._hard_drop()
        return self._notify()

    def _accepts_piece_commands(self) -> bool:
        return self.phase is Phase.PLAYING and self.controller.piece is not None

    def _start(self) -> None:
        if self.phase not in (Phase.START_SCREEN, Phase.GAME_OVER):
            return
        self._cancel_timers()
        self._epoch += 1
        self._new_game_state()
        self.phase = Phase.PLAYING
        logger.info("Game started (drop interval %.0f ms)", self.drop_interval_ms)
        self._spawn_next()

    def _reset(self) -> None:
        self._cancel_timers()
        self._epoch += 1
        self._new_game_state()
        self.phase = Phase.START_SCREEN
        logger.debug("Session reset")

    def _toggle_pause(self) -> None:
        if self.phase is Phase.PLAYING:
            self.phase = Phase.PAUSED
            self._disarm_gravity()
        elif self.phase is Phase.PAUSED:
            self.phase = Phase.PLAYING
            if self.controller.piece is not None:
                self._arm_gravity()

    def _soft_drop(self) -> None:
        if not self.controller.try_move(0, 1):
            self._lock()

    def _hard_drop(self) -> None:
        self.controller.hard_drop()
        self._lock()

    # ------------------------------------------------------------------
    # Lock sequence

    def _lock(self) -> None:
        piece = self.controller.piece
        if piece is None:
            return
        self.board.commit(piece.shape, piece.origin_x, piece.origin_y, piece.color_tag)
        self.controller.clear()
        self.pieces_locked += 1
        self._disarm_gravity()
        rows = self.board.full_rows()
        logger.debug("Locked %s at (%d, %d), %d full rows", piece.kind.name, piece.origin_x, piece.origin_y, len(rows))
        if rows and self.config.clear_delay_ms > 0:
            # Rows stay on the board, marked, until the settle delay passes
            self.clearing_rows = tuple(rows)
            epoch = self._epoch
            self._settle = self.scheduler.call_later(
                self.config.clear_delay_ms, lambda: self._on_settle(epoch)
            )
        else:
            self._finish_lock()

    def _on_settle(self, epoch: int) -> None:
        if epoch != self._epoch or not self.clearing_rows:
            return
        self._settle = None
        self._finish_lock()
        self._notify()

    def _finish_lock(self) -> None:
        cleared = self.board.clear_full_rows()
        self.clearing_rows = ()
        self._award(len(cleared))
        self._spawn_next()

    def _award(self, lines: int) -> None:
        self.lines_cleared_total += lines
        self.score += self.rules.score_for_lines(lines)
        new_level = self.rules.level_for_score(self.score)
        if new_level > self.level:
            gained = new_level - self.level
            for _ in range(gained):
                self.drop_interval_ms *= self.config.speed_factor
            self.level = new_level
            # No lower bound: very high levels drive the interval towards zero
            logger.info("Level %d, drop interval %.1f ms", self.level, self.drop_interval_ms)

    def _spawn_next(self) -> None:
        kind = self.next_kind if self.next_kind is not None else pick_random(self.rng)
        self.next_kind = pick_random(self.rng)
        self.controller.spawn(kind)
        if self.controller.collides():
            self._game_over()
        elif self.phase is Phase.PLAYING:
            self._arm_gravity()

    def _game_over(self) -> None:
        self._cancel_timers()
        self._epoch += 1
        self.phase = Phase.GAME_OVER
        logger.info("Game over with score %d", self.score)
        if self.score > self.high_score:
            self.high_score = self.score
            self.store.save(self.score)
            logger.info("New high score %d", self.score)

    # ------------------------------------------------------------------
    # Timers

    def _arm_gravity(self) -> None:
        self._disarm_gravity()
        epoch = self._epoch
        self._gravity = self.scheduler.call_every(self.drop_interval_ms, lambda: self._on_gravity_tick(epoch))

    def _disarm_gravity(self) -> None:
        if self._gravity is not None:
            self._gravity.cancel()
            self._gravity = None

    def _cancel_timers(self) -> None:
        self._disarm_gravity()
        if self._settle is not None:
            self._settle.cancel()
            self._settle = None
        self.clearing_rows = ()

    def _on_gravity_tick(self, epoch: int) -> None:
        if epoch != self._epoch or not self._accepts_piece_commands():
            return
        self._soft_drop()
        self._notify()
