from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np
import pygame

from flip_tetris.game import EngineSnapshot, GamePhase, Piece, TetrominoType


Color = Tuple[int, int, int]


@dataclass(frozen=True)
class Theme:
    background: Color
    grid: Color
    border: Color
    text: Color
    ghost: Color


THEMES = {
    "light": Theme(background=(255, 255, 255), grid=(200, 200, 200), border=(0, 0, 0),
                   text=(0, 0, 0), ghost=(120, 120, 120)),
    "dark": Theme(background=(0, 0, 0), grid=(60, 60, 60), border=(255, 255, 255),
                  text=(255, 255, 255), ghost=(140, 140, 140)),
}

# Block colours; the board advances to the next one on every flip
BLOCK_COLORS: Tuple[Color, ...] = (
    (148, 0, 211),   # violet
    (75, 0, 130),    # indigo
    (0, 0, 255),     # blue
    (0, 200, 0),     # green
    (230, 200, 0),   # yellow
    (255, 127, 0),   # orange
    (255, 0, 0),     # red
)


def block_color(flip_count: int, base_index: int = 0) -> Color:
    return BLOCK_COLORS[(base_index + flip_count) % len(BLOCK_COLORS)]


class Renderer:
    def __init__(self, theme: str = "dark", cell_size: int = 28, margin: int = 20,
                 panel_width: int = 180, color_index: int = 0) -> None:
        self.theme = THEMES[theme]
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self.color_index = color_index
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, board_width: int, board_height: int) -> Tuple[int, int]:
        w = board_width * self.cell_size + self.margin * 3 + self.panel_width
        h = board_height * self.cell_size + self.margin * 2
        return w, h

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
            self._big_font = pygame.font.SysFont(None, 40)
        return self._font, self._big_font

    def _cell_rect(self, x: int, y: int) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - 1,
            self.cell_size - 1,
        )

    def _grid_surface(self, snap: EngineSnapshot, color: Color) -> pygame.Surface:
        board: np.ndarray = snap.board
        h, w = board.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(self.theme.background)
        for y in range(h):
            for x in range(w):
                rect = pygame.Rect(x * self.cell_size, y * self.cell_size, self.cell_size, self.cell_size)
                if board[y, x]:
                    pygame.draw.rect(surf, color, rect.inflate(-1, -1))
                else:
                    pygame.draw.rect(surf, self.theme.grid, rect, 1)
        return surf

    def _draw_preview(self, screen: pygame.Surface, kind: Optional[TetrominoType], x: int, y: int,
                      color: Color) -> None:
        if kind is None:
            return
        cell = max(8, self.cell_size // 2)
        for cx, cy in Piece(kind).cells_at(0, 0):
            pygame.draw.rect(screen, color, pygame.Rect(x + cx * cell, y + cy * cell, cell - 1, cell - 1))

    def draw(self, screen: pygame.Surface, snap: EngineSnapshot) -> None:
        font, big_font = self._fonts()
        color = block_color(snap.flip_count, self.color_index)
        screen.fill(self.theme.background)
        board_surf = self._grid_surface(snap, color)
        screen.blit(board_surf, (self.margin, self.margin))
        pygame.draw.rect(screen, self.theme.border, board_surf.get_rect(topleft=(self.margin, self.margin)), 2)

        for x, y in snap.ghost_cells:
            pygame.draw.rect(screen, self.theme.ghost, self._cell_rect(x, y), 1)
        for x, y in snap.active_cells:
            pygame.draw.rect(screen, color, self._cell_rect(x, y))

        panel_x = self.margin * 2 + board_surf.get_width()
        lines = [
            f"Score: {snap.score}",
            f"High: {snap.high_score}",
            f"Level: {snap.level}",
            f"Lines: {snap.lines}",
            "Gravity: " + ("down" if snap.gravity > 0 else "up"),
            "Next:",
        ]
        y = self.margin
        for text in lines:
            screen.blit(font.render(text, True, self.theme.text), (panel_x, y))
            y += 28
        self._draw_preview(screen, snap.next_kind, panel_x, y, color)
        y += self.cell_size * 2 + 12
        screen.blit(font.render("Hold:", True, self.theme.text), (panel_x, y))
        self._draw_preview(screen, snap.hold_kind, panel_x, y + 28, color)

        message = {
            GamePhase.START: "Press Enter to start",
            GamePhase.PAUSED: "Paused - P to resume",
            GamePhase.GAME_OVER: f"Game over: {snap.score} - Enter to restart",
        }.get(snap.phase)
        if message:
            text = big_font.render(message, True, self.theme.text, self.theme.background)
            rect = text.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
            screen.blit(text, rect)
        pygame.display.flip()
