"""
Pygame Renderer
Draws the map as tiles, fog as dark squares, camps as red blocks and the
scout as a green marker. The sidebar shows the HUD and the action buttons.

Interface used by the game loop:
- __init__(width, height)
- render_frame(game, debug_mode)
- handle_input() -> dict
- cleanup()
"""
import pygame
from typing import Dict, Any, List, Optional, Tuple

from pocketrok.core.config import (
    MAP_W,
    MAP_H,
    TILE_SIZE,
    SIDEBAR_WIDTH,
    MAP_OFFSET,
    FPS,
    BUILDING_IDS,
    BUILDING_STATS,
    UNIT_TYPES,
    UNIT_STATS,
    TRAIN_BATCH,
)
from pocketrok.core.effects import fmt


class Layout:
    """Pixel <-> cell conversion and sidebar button placement."""

    BUTTON_HEIGHT = 24
    BUTTON_GAP = 4

    def __init__(self, offset: Tuple[int, int] = MAP_OFFSET, tile_size: int = TILE_SIZE):
        self.offset_x, self.offset_y = offset
        self.tile_size = tile_size
        self.buttons = self._build_buttons()

    def cell_to_screen(self, x: int, y: int) -> tuple:
        """Top-left pixel of a cell"""
        return (self.offset_x + x * self.tile_size, self.offset_y + y * self.tile_size)

    def cell_at(self, sx: int, sy: int) -> Optional[tuple]:
        """Cell under a pixel, or None outside the map"""
        if sx < self.offset_x or sy < self.offset_y:
            return None
        x = (sx - self.offset_x) // self.tile_size
        y = (sy - self.offset_y) // self.tile_size
        if 0 <= x < MAP_W and 0 <= y < MAP_H:
            return (x, y)
        return None

    def button_at(self, sx: int, sy: int) -> Optional[str]:
        for action, _label, rect in self.buttons:
            if rect.collidepoint(sx, sy):
                return action
        return None

    def _build_buttons(self) -> List[tuple]:
        entries = [(f"upgrade:{b}", f"Upgrade {BUILDING_STATS[b]['name']}") for b in BUILDING_IDS]
        entries += [(f"train:{u}", f"Train {TRAIN_BATCH} {UNIT_STATS[u]['short']}") for u in UNIT_TYPES]
        entries += [("scout", "Scout (5 gold)"), ("attack", "Attack"), ("save", "Save"), ("reset", "Reset")]

        buttons = []
        top = 300
        width = (SIDEBAR_WIDTH - 24) // 2
        for i, (action, label) in enumerate(entries):
            col, row = i % 2, i // 2
            rect = pygame.Rect(
                8 + col * (width + 8),
                top + row * (self.BUTTON_HEIGHT + self.BUTTON_GAP),
                width, self.BUTTON_HEIGHT
            )
            buttons.append((action, label, rect))
        return buttons


class PygameRenderer:
    """Pygame frontend for Pocket RoK."""

    # Colors
    COLOR_BG = (10, 15, 36)
    COLOR_TILE = (23, 48, 88)
    COLOR_FOG = (11, 14, 27)
    COLOR_CAMP = (139, 43, 43)
    COLOR_SCOUT = (61, 220, 132)
    COLOR_SELECTION = (255, 255, 100)
    COLOR_TEXT = (230, 230, 230)
    COLOR_DIM = (150, 150, 150)
    COLOR_BUTTON = (40, 60, 100)
    COLOR_BUTTON_OFF = (45, 45, 55)

    def __init__(self, width: int = 976, height: int = 640):
        pygame.init()
        pygame.display.set_caption("Pocket RoK")

        self.width = width
        self.height = height
        self.screen = pygame.display.set_mode((width, height))
        self.clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 22)
        self.small_font = pygame.font.Font(None, 18)
        self.layout = Layout()

    def render_frame(self, game: Any, debug_mode: bool = False) -> None:
        """Render one frame of the game."""
        self.screen.fill(self.COLOR_BG)

        self._draw_tiles()
        self._draw_camps(game, debug_mode)
        self._draw_fog(game, debug_mode)
        self._draw_scout(game)
        self._draw_selection(game)
        self._draw_sidebar(game)

        pygame.display.flip()
        self.clock.tick(FPS)

    def _draw_tiles(self) -> None:
        for y in range(MAP_H):
            for x in range(MAP_W):
                sx, sy = self.layout.cell_to_screen(x, y)
                pygame.draw.rect(self.screen, self.COLOR_TILE, (sx, sy, TILE_SIZE - 2, TILE_SIZE - 2))

    def _draw_fog(self, game, debug_mode: bool) -> None:
        """Cover every hidden cell."""
        if debug_mode:
            return
        for y in range(MAP_H):
            for x in range(MAP_W):
                if not game.is_revealed(x, y):
                    sx, sy = self.layout.cell_to_screen(x, y)
                    pygame.draw.rect(self.screen, self.COLOR_FOG, (sx, sy, TILE_SIZE - 2, TILE_SIZE - 2))

    def _draw_camps(self, game, debug_mode: bool) -> None:
        """Camps on revealed cells only (all of them in debug mode)."""
        camps = game.world.camps.values() if debug_mode else game.visible_camps()
        for camp in camps:
            sx, sy = self.layout.cell_to_screen(camp.x, camp.y)
            pygame.draw.rect(self.screen, self.COLOR_CAMP, (sx + 6, sy + 6, TILE_SIZE - 12, TILE_SIZE - 12))
            label = self.small_font.render(str(camp.strength), True, self.COLOR_TEXT)
            self.screen.blit(label, (sx + 8, sy + 9))

    def _draw_scout(self, game) -> None:
        x, y = game.scout_pos
        sx, sy = self.layout.cell_to_screen(x, y)
        pygame.draw.rect(self.screen, self.COLOR_SCOUT, (sx + 8, sy + 8, TILE_SIZE - 16, TILE_SIZE - 16))

    def _draw_selection(self, game) -> None:
        selection = game.selection.current
        if selection is None:
            return
        sx, sy = self.layout.cell_to_screen(selection.x, selection.y)
        pygame.draw.rect(self.screen, self.COLOR_SELECTION, (sx, sy, TILE_SIZE - 2, TILE_SIZE - 2), 2)

    def _draw_sidebar(self, game) -> None:
        r, rate = game.resources, game.rates
        lines = [
            f"Food {fmt(r.food)}   Wood {fmt(r.wood)}",
            f"Stone {fmt(r.stone)}   Gold {fmt(r.gold)}",
            f"Per hour: {fmt(rate.food)}/{fmt(rate.wood)}/{fmt(rate.stone)}/{fmt(rate.gold)}",
            "",
        ]
        for building_id in BUILDING_IDS:
            lines.append(f"{BUILDING_STATS[building_id]['name']}: L{game.buildings[building_id]}")
        lines.append("")
        lines.append("Army: " + "  ".join(
            f"{UNIT_STATS[u]['short']} {fmt(game.army[u])}" for u in UNIT_TYPES))

        y = 10
        for line in lines:
            surface = self.font.render(line, True, self.COLOR_TEXT)
            self.screen.blit(surface, (10, y))
            y += 20

        for action, label, rect in self.layout.buttons:
            enabled = action != "attack" or game.attack_enabled
            color = self.COLOR_BUTTON if enabled else self.COLOR_BUTTON_OFF
            pygame.draw.rect(self.screen, color, rect)
            text = self.small_font.render(label, True, self.COLOR_TEXT if enabled else self.COLOR_DIM)
            self.screen.blit(text, (rect.x + 6, rect.y + 6))

        footer = [game.cost_text(), game.train_cost_text(), game.status_line]
        y = self.height - 20 * len(footer) - 10
        for line in footer:
            surface = self.small_font.render(line, True, self.COLOR_DIM)
            self.screen.blit(surface, (10, y))
            y += 20

    def handle_input(self) -> Dict[str, Any]:
        """Process pygame events and return input state."""
        result = {
            'quit': False,
            'cell_click': None,
            'action': None,
        }

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                result['quit'] = True
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    result['quit'] = True
                elif event.key == pygame.K_s:
                    result['action'] = "scout"
                elif event.key == pygame.K_a:
                    result['action'] = "attack"
                elif event.key == pygame.K_F5:
                    result['action'] = "save"
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                sx, sy = event.pos
                action = self.layout.button_at(sx, sy)
                if action:
                    result['action'] = action
                else:
                    result['cell_click'] = self.layout.cell_at(sx, sy)

        return result

    def cleanup(self) -> None:
        """Clean up pygame resources."""
        pygame.quit()
