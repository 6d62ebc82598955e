import random
from collections import Counter

import numpy as np
import pytest

from falling_blocks.game import Piece, TetrominoType, base_shape, color_tag, pick_random, rotate_cw


def test_seven_kinds_with_four_cells_each():
    assert len(TetrominoType) == 7
    for kind in TetrominoType:
        assert int(base_shape(kind).sum()) == 4


def test_base_shape_is_a_copy():
    shape = base_shape(TetrominoType.T)
    shape[0, 0] = 9
    assert base_shape(TetrominoType.T)[0, 0] == 0


def test_color_tag_is_positive_and_distinct():
    tags = {color_tag(kind) for kind in TetrominoType}
    assert len(tags) == 7
    assert min(tags) > 0


def test_rotate_cw_matches_index_formula():
    shape = base_shape(TetrominoType.J)
    rotated = rotate_cw(shape)
    rows, cols = shape.shape
    assert rotated.shape == (cols, rows)
    for r in range(rows):
        for c in range(cols):
            assert rotated[c, rows - 1 - r] == shape[r, c]
    assert np.array_equal(rotated, np.array([[1, 1], [1, 0], [1, 0]]))


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_return_to_start(kind):
    shape = base_shape(kind)
    rotated = shape
    for _ in range(4):
        rotated = rotate_cw(rotated)
    assert np.array_equal(rotated, shape)


def test_pick_random_draws_every_kind_roughly_uniformly():
    rng = random.Random(0)
    counts = Counter(pick_random(rng) for _ in range(7000))
    assert set(counts) == set(TetrominoType)
    for kind in TetrominoType:
        assert 800 < counts[kind] < 1200


def test_piece_cells_are_board_coordinates():
    piece = Piece(TetrominoType.T, base_shape(TetrominoType.T), 4, -1)
    assert sorted(piece.cells()) == sorted([(5, -1), (4, 0), (5, 0), (6, 0)])
    assert piece.color_tag == int(TetrominoType.T)


def test_piece_width_follows_rotation():
    piece = Piece(TetrominoType.I, base_shape(TetrominoType.I), 0, 0)
    assert piece.width == 4
    piece.shape = rotate_cw(piece.shape)
    assert piece.width == 1
