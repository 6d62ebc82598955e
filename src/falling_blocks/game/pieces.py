from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    J = 2
    L = 3
    O = 4
    S = 5
    T = 6
    Z = 7


Shape = np.ndarray


BASE_SHAPES = {
    TetrominoType.I: np.array([[1, 1, 1, 1]], dtype=np.int8),
    TetrominoType.J: np.array([[1, 0, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.L: np.array([[0, 0, 1], [1, 1, 1]], dtype=np.int8),
    TetrominoType.O: np.array([[1, 1], [1, 1]], dtype=np.int8),
    TetrominoType.S: np.array([[0, 1, 1], [1, 1, 0]], dtype=np.int8),
    TetrominoType.T: np.array([[0, 1, 0], [1, 1, 1]], dtype=np.int8),
    TetrominoType.Z: np.array([[1, 1, 0], [0, 1, 1]], dtype=np.int8),
}


def base_shape(kind: TetrominoType) -> Shape:
    return BASE_SHAPES[kind].copy()


def color_tag(kind: TetrominoType) -> int:
    """Board cell value written for this kind; renderers map it to a color."""
    return int(kind)


def pick_random(rng: random.Random) -> TetrominoType:
    # Independent uniform draws, no 7-bag: droughts are possible.
    return rng.choice(list(TetrominoType))


def rotate_cw(shape: Shape) -> Shape:
    """Rotate a shape matrix 90 degrees clockwise.

    Equivalent to ``rotated[c][rows - 1 - r] = shape[r][c]``.
    """
    return np.ascontiguousarray(np.rot90(shape, 1, axes=(1, 0)))


@dataclass
class Piece:
    kind: TetrominoType
    shape: Shape
    origin_x: int
    origin_y: int
    color_tag: int = field(default=0)

    def __post_init__(self) -> None:
        if not self.color_tag:
            self.color_tag = color_tag(self.kind)

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    def cells(self) -> List[Tuple[int, int]]:
        """Board (x, y) coordinates of the filled cells."""
        ys, xs = np.nonzero(self.shape)
        return [(self.origin_x + int(x), self.origin_y + int(y)) for y, x in zip(ys, xs)]

    def copy(self) -> "Piece":
        return Piece(self.kind, self.shape.copy(), self.origin_x, self.origin_y, self.color_tag)

    def same_geometry(self, other: "Piece") -> bool:
        return (
            self.origin_x == other.origin_x
            and self.origin_y == other.origin_y
            and np.array_equal(self.shape, other.shape)
        )
