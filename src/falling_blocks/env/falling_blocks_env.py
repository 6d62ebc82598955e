from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from falling_blocks.game import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    Command,
    GameConfig,
    GameSession,
    InMemoryHighScoreStore,
    ManualScheduler,
    TetrominoType,
    rotate_cw,
)
from falling_blocks.game.controller import ROTATION_OFFSETS


# Action index -> session command; None means "let gravity act"
ACTIONS: Tuple[Optional[Command], ...] = (
    Command.MOVE_LEFT,
    Command.MOVE_RIGHT,
    Command.ROTATE,
    Command.SOFT_DROP,
    Command.HARD_DROP,
    None,
)

MAX_TAG = len(TetrominoType)


def _compute_action_mask(session: GameSession) -> np.ndarray:
    """Which actions can act on the active piece; the no-op is always allowed."""
    mask = np.ones((len(ACTIONS),), dtype=np.bool_)
    piece = session.active_piece
    if piece is None:
        mask[:5] = False
        return mask
    board = session.board
    mask[0] = not board.collides(piece.shape, piece.origin_x - 1, piece.origin_y)
    mask[1] = not board.collides(piece.shape, piece.origin_x + 1, piece.origin_y)
    rotated = rotate_cw(piece.shape)
    mask[2] = any(
        not board.collides(rotated, piece.origin_x + dx, piece.origin_y + dy)
        for dx, dy in ROTATION_OFFSETS
    )
    return mask


class FallingBlocksEnv(gym.Env):
    metadata = {"render_modes": ["rgb_array"], "render_fps": 10}

    def __init__(self, config: Optional[GameConfig] = None, render_mode: Optional[str] = None,
                 ms_per_step: float = 100.0,
                 max_episode_steps: int = 10000) -> None:
        super().__init__()
        base = config or GameConfig()
        # No settle delay: a clear completes inside the step that caused it
        self.config = GameConfig(
            initial_drop_interval_ms=base.initial_drop_interval_ms,
            speed_factor=base.speed_factor,
            clear_delay_ms=0.0,
            random_seed=base.random_seed,
        )
        self.scheduler = ManualScheduler()
        self.session = GameSession(self.config, scheduler=self.scheduler, store=InMemoryHighScoreStore())
        self.render_mode = render_mode
        self.ms_per_step = float(ms_per_step)
        self.max_episode_steps = int(max_episode_steps)

        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=-MAX_TAG, high=MAX_TAG, shape=(BOARD_HEIGHT, BOARD_WIDTH), dtype=np.int8),
                "next_piece": spaces.Discrete(MAX_TAG + 1),
            }
        )
        self.action_space = spaces.Discrete(len(ACTIONS))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        board = self.session.board.clone_state()
        piece = self.session.active_piece
        if piece is not None and not self.session.is_game_over:
            for x, y in piece.cells():
                if 0 <= y < BOARD_HEIGHT and 0 <= x < BOARD_WIDTH:
                    # Use negative to indicate falling piece overlay
                    board[y, x] = -piece.color_tag
        next_kind = self.session.next_kind
        return {
            "board": board,
            "next_piece": int(next_kind) if next_kind is not None else 0,
        }

    def _get_info(self) -> Dict[str, Any]:
        return {
            "action_mask": _compute_action_mask(self.session),
            "score": self.session.score,
            "level": self.session.level,
            "lines_cleared_total": self.session.lines_cleared_total,
            "pieces_locked": self.session.pieces_locked,
            "steps": self._steps,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.session.seed(seed)
        self.session.dispatch(Command.RESET_GAME)
        self.session.dispatch(Command.START_GAME)
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        command = ACTIONS[int(action)]
        score_before = self.session.score

        if command is not None:
            self.session.dispatch(command)
        if not self.session.is_game_over:
            self.scheduler.advance(self.ms_per_step)

        self._steps += 1
        terminated = bool(self.session.is_game_over)
        truncated = not terminated and self._steps >= self.max_episode_steps
        reward = float(self.session.score - score_before)

        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def render(self) -> Optional[np.ndarray]:
        if self.render_mode != "rgb_array":
            return None
        board = self._get_obs()["board"]
        cell = 12
        h, w = board.shape
        img = np.zeros((h * cell, w * cell, 3), dtype=np.uint8)
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                if v > 0:
                    color = (70, 200, 120)
                elif v < 0:
                    color = (230, 230, 90)
                else:
                    color = (30, 30, 36)
                img[y * cell : (y + 1) * cell, x * cell : (x + 1) * cell, :] = color
        return img

    def close(self) -> None:
        pass
