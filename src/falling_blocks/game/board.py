from __future__ import annotations

from typing import List

import numpy as np

from .pieces import Shape


BOARD_WIDTH = 10
BOARD_HEIGHT = 20


class Board:
    """Fixed 20x10 playfield, row 0 at the top.

    The grid uses 0 for empty cells and positive integers for filled cells.
    The integer is the color tag of the piece that filled the cell; the
    engine itself only cares whether it is non-zero.
    """

    def __init__(self) -> None:
        self.width = BOARD_WIDTH
        self.height = BOARD_HEIGHT
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    def is_inside(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def collides(self, shape: Shape, origin_x: int, origin_y: int) -> bool:
        """True if any filled cell of ``shape`` at the origin is illegal.

        Cells left/right of the board or below it collide, as do cells on an
        occupied square. Cells above the top edge never collide.
        """
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys, xs):
            x = origin_x + int(dx)
            y = origin_y + int(dy)
            if x < 0 or x >= self.width or y >= self.height:
                return True
            if y >= 0 and self.grid[y, x] != 0:
                return True
        return False

    def commit(self, shape: Shape, origin_x: int, origin_y: int, color_tag: int) -> None:
        """Write the filled cells of ``shape`` into the grid.

        Cells falling outside the board are dropped.
        """
        ys, xs = np.nonzero(shape)
        for dy, dx in zip(ys, xs):
            x = origin_x + int(dx)
            y = origin_y + int(dy)
            if self.is_inside(x, y):
                self.grid[y, x] = color_tag

    def full_rows(self) -> List[int]:
        return [int(r) for r in np.where(np.all(self.grid != 0, axis=1))[0]]

    def clear_full_rows(self) -> List[int]:
        """Remove full rows and drop the rows above them.

        Returns the cleared row indices as they were before removal, in
        ascending order.
        """
        rows = self.full_rows()
        if not rows:
            return []
        kept = np.delete(self.grid, rows, axis=0)
        new_rows = np.zeros((len(rows), self.width), dtype=np.int8)
        # in place: the grid array object never changes
        self.grid[:] = np.vstack((new_rows, kept))
        return rows

    def clone_state(self) -> np.ndarray:
        return self.grid.copy()
