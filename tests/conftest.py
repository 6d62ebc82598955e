from __future__ import annotations

from typing import Callable, Iterable, Optional

import pytest

from falling_blocks.game import (
    Board,
    Command,
    GameConfig,
    GameSession,
    InMemoryHighScoreStore,
    ManualScheduler,
    Piece,
    TetrominoType,
    base_shape,
    rotate_cw,
)


def fill_rows(board: Board, rows: Iterable[int], gap_cols: Iterable[int] = (0,), tag: int = 1) -> None:
    gaps = set(gap_cols)
    for r in rows:
        for c in range(board.width):
            board.grid[r, c] = 0 if c in gaps else tag


def vertical_i(x: int, y: int) -> Piece:
    return Piece(TetrominoType.I, rotate_cw(base_shape(TetrominoType.I)), x, y)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_session(scheduler: ManualScheduler) -> Callable[..., GameSession]:
    def factory(clear_delay_ms: float = 0.0, seed: Optional[int] = 7, store=None, start: bool = True) -> GameSession:
        session = GameSession(
            GameConfig(clear_delay_ms=clear_delay_ms, random_seed=seed),
            scheduler=scheduler,
            store=store if store is not None else InMemoryHighScoreStore(),
        )
        if start:
            session.dispatch(Command.START_GAME)
        return session

    return factory
