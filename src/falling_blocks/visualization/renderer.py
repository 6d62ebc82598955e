from __future__ import annotations

from typing import Optional, Tuple

import numpy as np
import pygame

from falling_blocks.game import GameSnapshot, Piece


def _color_for_value(v: int) -> Tuple[int, int, int]:
    palette = {
        0: (20, 20, 26),
        1: (34, 211, 238),   # I
        2: (96, 165, 250),   # J
        3: (251, 146, 60),   # L
        4: (250, 204, 21),   # O
        5: (52, 211, 153),   # S
        6: (192, 132, 252),  # T
        7: (251, 113, 133),  # Z
    }
    return palette.get(abs(v), (200, 200, 200))


CLEARING_COLOR = (245, 245, 245)
GHOST_COLOR = (120, 120, 140)
TEXT_COLOR = (230, 230, 235)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, side_panel: int = 180) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.side_panel = side_panel

    def window_size(self, snapshot: GameSnapshot) -> Tuple[int, int]:
        h, w = snapshot.board.shape
        return (
            w * self.cell_size + self.margin * 3 + self.side_panel,
            h * self.cell_size + self.margin * 2,
        )

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size - 1, self.cell_size - 1)

    def _draw_piece(self, surf: pygame.Surface, piece: Piece, outline: bool = False) -> None:
        h, w = surf.get_height() // self.cell_size, surf.get_width() // self.cell_size
        for x, y in piece.cells():
            if 0 <= x < w and 0 <= y < h:
                if outline:
                    pygame.draw.rect(surf, GHOST_COLOR, self._cell_rect(x, y), 2)
                else:
                    pygame.draw.rect(surf, _color_for_value(piece.color_tag), self._cell_rect(x, y))

    def _grid_surface(self, snapshot: GameSnapshot) -> pygame.Surface:
        board = snapshot.board
        h, w = board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill((30, 30, 36))
        for y in range(h):
            for x in range(w):
                v = int(board[y, x])
                color = CLEARING_COLOR if y in snapshot.clearing_rows else _color_for_value(v)
                pygame.draw.rect(surf, color, self._cell_rect(x, y))
        if snapshot.ghost is not None:
            self._draw_piece(surf, snapshot.ghost, outline=True)
        if snapshot.active is not None and not snapshot.is_paused:
            self._draw_piece(surf, snapshot.active)
        return surf

    def _preview_surface(self, shape: np.ndarray, tag: int) -> pygame.Surface:
        size = self.cell_size // 2
        h, w = shape.shape
        surf = pygame.Surface((w * size, h * size), pygame.SRCALPHA)
        for y in range(h):
            for x in range(w):
                if shape[y, x]:
                    pygame.draw.rect(surf, _color_for_value(tag), pygame.Rect(x * size, y * size, size - 1, size - 1))
        return surf

    def render(self, screen: pygame.Surface, snapshot: GameSnapshot, font: Optional[pygame.font.Font] = None) -> None:
        screen.fill((10, 10, 14))
        grid_surf = self._grid_surface(snapshot)
        screen.blit(grid_surf, (self.margin, self.margin))

        panel_x = self.margin * 2 + grid_surf.get_width()
        if snapshot.next_shape is not None and snapshot.next_kind is not None:
            screen.blit(self._preview_surface(snapshot.next_shape, int(snapshot.next_kind)), (panel_x, self.margin + 30))

        if font is None:
            return
        lines = [
            ("Next", self.margin),
            (f"Score {snapshot.score}", self.margin + 110),
            (f"Level {snapshot.level}", self.margin + 140),
            (f"Best {snapshot.high_score}", self.margin + 170),
        ]
        for text, y in lines:
            screen.blit(font.render(text, True, TEXT_COLOR), (panel_x, y))
        banner = {
            "start_screen": "Press Enter to start",
            "paused": "Paused",
            "game_over": "Game Over - Enter to play again",
        }.get(snapshot.phase.value)
        if banner:
            text = font.render(banner, True, TEXT_COLOR)
            rect = text.get_rect(center=(self.margin + grid_surf.get_width() // 2, screen.get_height() // 2))
            screen.blit(text, rect)

    def draw(self, screen: pygame.Surface, snapshot: GameSnapshot, font: Optional[pygame.font.Font] = None) -> None:
        self.render(screen, snapshot, font)
        pygame.display.flip()
