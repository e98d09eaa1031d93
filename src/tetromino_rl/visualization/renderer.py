from __future__ import annotations

from typing import Optional

import numpy as np
import pygame

from tetromino_rl.game import GameState, GameStatus
from .palette import BACKGROUND, brighter, color_for_value, darker


class Renderer:
    """Draws an engine observation with row 0 at the bottom of the window."""

    def __init__(self, cell_size: int = 30, margin: int = 20, status_height: int = 28) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.status_height = status_height
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, width: int, height: int) -> tuple[int, int]:
        return (
            width * self.cell_size + self.margin * 2,
            height * self.cell_size + self.margin * 2 + self.status_height,
        )

    def _font_or_default(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 24)
        return self._font

    def _draw_square(self, surf: pygame.Surface, x: int, y: int, value: int) -> None:
        size = self.cell_size
        color = color_for_value(value)
        pygame.draw.rect(surf, color, pygame.Rect(x + 1, y + 1, size - 2, size - 2))
        light = brighter(color)
        dark = darker(color)
        pygame.draw.line(surf, light, (x, y + size - 1), (x, y))
        pygame.draw.line(surf, light, (x, y), (x + size - 1, y))
        pygame.draw.line(surf, dark, (x + 1, y + size - 1), (x + size - 1, y + size - 1))
        pygame.draw.line(surf, dark, (x + size - 1, y + size - 1), (x + size - 1, y + 1))

    def _grid_surface(self, state: np.ndarray) -> pygame.Surface:
        h, w = state.shape
        surf = pygame.Surface((w * self.cell_size, h * self.cell_size))
        surf.fill(BACKGROUND)
        for y in range(h):
            screen_row = h - 1 - y
            for x in range(w):
                v = int(state[y, x])
                if v != 0:
                    self._draw_square(surf, x * self.cell_size, screen_row * self.cell_size, v)
        return surf

    def _overlay(self, screen: pygame.Surface, text: str, color: tuple[int, int, int, int]) -> None:
        shade = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        shade.fill(color)
        screen.blit(shade, (0, 0))
        label = self._font_or_default().render(text, True, (255, 255, 255))
        screen.blit(label, label.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2)))

    def draw(self, screen: pygame.Surface, state: np.ndarray, status: GameStatus) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(state), (self.margin, self.margin))
        text = self._font_or_default().render(status.summary(), True, (230, 230, 230))
        screen.blit(text, (self.margin, screen.get_height() - self.status_height))
        if status.state == GameState.IDLE:
            self._overlay(screen, "Press ENTER to start, ESC to quit", (0, 0, 0, 150))
        elif status.game_over:
            self._overlay(screen, "GAME OVER - R to play again, ESC to quit", (200, 0, 0, 150))
        elif status.paused:
            self._overlay(screen, "PAUSED - P to resume", (0, 0, 0, 150))
        pygame.display.flip()
