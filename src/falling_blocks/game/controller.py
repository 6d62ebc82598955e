from __future__ import annotations

from typing import Optional, Tuple

from .board import Board
from .pieces import Piece, TetrominoType, base_shape, rotate_cw


# Rotation nudges tried in order: in place, left, right, up. This is a small
# ad-hoc kick, not SRS; near walls it accepts and rejects different
# rotations than a full kick table would.
ROTATION_OFFSETS: Tuple[Tuple[int, int], ...] = ((0, 0), (-1, 0), (1, 0), (0, -1))


class PieceController:
    """Owns the active piece and moves it against a board.

    Every mutator either applies fully or leaves the piece untouched.
    Without an active piece all operations are no-ops.
    """

    def __init__(self, board: Board) -> None:
        self.board = board
        self.piece: Optional[Piece] = None

    def spawn(self, kind: TetrominoType) -> Piece:
        piece = Piece(kind=kind, shape=base_shape(kind), origin_x=0, origin_y=0)
        piece.origin_x = self.board.width // 2 - piece.width // 2
        self.piece = piece
        return self.piece

    def clear(self) -> None:
        self.piece = None

    def collides(self) -> bool:
        if self.piece is None:
            return False
        return self.board.collides(self.piece.shape, self.piece.origin_x, self.piece.origin_y)

    def try_move(self, dx: int, dy: int) -> bool:
        if self.piece is None:
            return False
        new_x = self.piece.origin_x + dx
        new_y = self.piece.origin_y + dy
        if self.board.collides(self.piece.shape, new_x, new_y):
            return False
        self.piece.origin_x = new_x
        self.piece.origin_y = new_y
        return True

    def try_rotate(self) -> bool:
        if self.piece is None:
            return False
        rotated = rotate_cw(self.piece.shape)
        for dx, dy in ROTATION_OFFSETS:
            new_x = self.piece.origin_x + dx
            new_y = self.piece.origin_y + dy
            if not self.board.collides(rotated, new_x, new_y):
                self.piece.shape = rotated
                self.piece.origin_x = new_x
                self.piece.origin_y = new_y
                return True
        return False

    def _resting_y(self) -> int:
        assert self.piece is not None
        y = self.piece.origin_y
        while not self.board.collides(self.piece.shape, self.piece.origin_x, y + 1):
            y += 1
        return y

    def compute_hard_drop_target(self) -> Optional[Tuple[int, int]]:
        if self.piece is None:
            return None
        return self.piece.origin_x, self._resting_y()

    def compute_ghost(self) -> Optional[Piece]:
        """Where the piece would land, or None if it already rests."""
        if self.piece is None:
            return None
        y = self._resting_y()
        if y == self.piece.origin_y:
            return None
        ghost = self.piece.copy()
        ghost.origin_y = y
        return ghost

    def hard_drop(self) -> int:
        """Move the piece straight to its resting row; returns rows travelled."""
        target = self.compute_hard_drop_target()
        if target is None:
            return 0
        assert self.piece is not None
        distance = target[1] - self.piece.origin_y
        self.piece.origin_y = target[1]
        return distance
