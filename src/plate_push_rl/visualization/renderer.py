from __future__ import annotations

from typing import Optional, Tuple

import pygame

from plate_push_rl.game import PuzzleState, active_plate_count, is_exit_open


Color = Tuple[int, int, int]

BACKGROUND: Color = (10, 10, 14)
FLOOR: Color = (30, 30, 36)
WALL: Color = (70, 70, 80)
PLATE_OFF: Color = (45, 75, 95)
PLATE_ON: Color = (120, 200, 255)
EXIT_LOCKED: Color = (110, 60, 60)
EXIT_OPEN: Color = (140, 255, 170)
HEAVY: Color = (255, 90, 90)
HEAVY_CORE: Color = (190, 60, 60)
LIGHT: Color = (190, 140, 90)
LIGHT_CORE: Color = (150, 105, 65)
PLAYER: Color = (245, 245, 245)
TEXT: Color = (230, 230, 230)


def format_seconds(seconds: Optional[float]) -> str:
    if seconds is None:
        return "-"
    return f"{seconds:.2f}s"


class Renderer:
    def __init__(self, cell_size: int = 48, margin: int = 20, hud_height: int = 40) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.hud_height = hud_height
        self._font: Optional[pygame.font.Font] = None
        self._big_font: Optional[pygame.font.Font] = None

    def window_size(self, state: PuzzleState) -> Tuple[int, int]:
        width = state.width * self.cell_size + self.margin * 2
        height = state.height * self.cell_size + self.margin * 2 + self.hud_height
        return width, height

    def cell_rect(self, x: int, y: int, inset: int = 1) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size + inset,
            self.margin + self.hud_height + y * self.cell_size + inset,
            self.cell_size - 2 * inset,
            self.cell_size - 2 * inset,
        )

    def _fonts(self) -> Tuple[pygame.font.Font, pygame.font.Font]:
        if self._font is None or self._big_font is None:
            self._font = pygame.font.SysFont(None, 24)
            self._big_font = pygame.font.SysFont(None, 64)
        return self._font, self._big_font

    def _draw_grid(self, surf: pygame.Surface, state: PuzzleState) -> None:
        exit_open = is_exit_open(state)
        inner = self.cell_size // 5
        for y in range(state.height):
            for x in range(state.width):
                pos = (x, y)
                if pos in state.walls:
                    pygame.draw.rect(surf, WALL, self.cell_rect(x, y), border_radius=8)
                    continue
                pygame.draw.rect(surf, FLOOR, self.cell_rect(x, y), border_radius=8)
                block = state.block_at(pos)
                if pos in state.plates:
                    color = PLATE_ON if block.heavy else PLATE_OFF
                    pygame.draw.rect(surf, color, self.cell_rect(x, y, inner), border_radius=6)
                if state.is_exit(pos):
                    color = EXIT_OPEN if exit_open else EXIT_LOCKED
                    pygame.draw.rect(surf, color, self.cell_rect(x, y, inner // 2), 3, border_radius=8)
                if block.heavy:
                    pygame.draw.rect(surf, HEAVY, self.cell_rect(x, y, inner // 2), border_radius=8)
                    pygame.draw.rect(surf, HEAVY_CORE, self.cell_rect(x, y, inner), border_radius=6)
                for level in range(block.light_count):
                    # Each stacked light block is drawn a little higher
                    rect = self.cell_rect(x, y, inner // 2 + 2).move(0, -level * (self.cell_size // 5))
                    pygame.draw.rect(surf, LIGHT, rect, border_radius=8)
                    pygame.draw.rect(surf, LIGHT_CORE, rect.inflate(-inner, -inner), border_radius=6)
        px, py = state.player
        pygame.draw.circle(surf, PLAYER, self.cell_rect(px, py).center, self.cell_size // 3)

    def _draw_hud(self, surf: pygame.Surface, state: PuzzleState, level_name: str,
                  elapsed: float, best: Optional[float]) -> None:
        font, _ = self._fonts()
        active = active_plate_count(state)
        status = "OPEN" if is_exit_open(state) else "LOCKED"
        line = (
            f"Level {level_name}   Plates: {active}/{len(state.plates)} • Exit: {status}"
            f"   Time: {elapsed:.2f}   Best: {format_seconds(best)}"
        )
        surf.blit(font.render(line, True, TEXT), (self.margin, self.margin))

    def _draw_solved(self, surf: pygame.Surface) -> None:
        font, big = self._fonts()
        shade = pygame.Surface(surf.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 140))
        surf.blit(shade, (0, 0))
        cx, cy = surf.get_width() // 2, surf.get_height() // 2
        title = big.render("Solved", True, TEXT)
        surf.blit(title, title.get_rect(center=(cx, cy - 10)))
        hint = font.render("N for the next level, R to replay", True, TEXT)
        surf.blit(hint, hint.get_rect(center=(cx, cy + 30)))

    def draw(self, screen: pygame.Surface, state: PuzzleState, level_name: str = "",
             elapsed: float = 0.0, best: Optional[float] = None) -> None:
        screen.fill(BACKGROUND)
        self._draw_hud(screen, state, level_name, elapsed, best)
        self._draw_grid(screen, state)
        if state.won:
            self._draw_solved(screen)
        pygame.display.flip()
