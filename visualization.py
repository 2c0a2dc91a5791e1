# visualization.py
"""
Handles the visualization of the sand grid and user input using Pygame.
"""
import logging
from typing import Optional, Tuple

import numpy as np
import pygame

from constants import (
    BACKGROUND_COLOR, HUD_COLOR, HUD_FONT_SIZE, BRUSH_MIN, BRUSH_MAX
)
from grid import Coordinate, Grid
from particle import Particle, ParticleKind
from simulation import Simulator

# --- Data Contracts ---
#
# class Visualizer:
#   - __init__(self, grid_width: int, grid_height: int, vis_params: dict):
#     - Inputs:
#       - grid_width, grid_height: dimensions of the grid in cells.
#       - vis_params: the "visualization" section of config.json.
#         - "cell_size": int, pixels per cell edge.
#         - "brush_radius": int
#         - "fps": int
#     - Side Effects: Initializes Pygame and creates a display surface.
#
#   - handle_events(self, grid: Grid, simulator: Simulator) -> bool:
#     - Outputs:
#       - bool: False if the user has quit, True otherwise.
#     - Side Effects: paints or erases particles under the mouse, changes
#       the selected material and brush size, clears the grid.
#
#   - draw(self, grid: Grid) -> None:
#     - Side Effects: renders the grid and HUD, then waits for the next
#       frame tick.

# Keyboard bindings for the material selector. None is the eraser.
MATERIAL_KEYS = {
    pygame.K_1: ParticleKind.SAND,
    pygame.K_2: ParticleKind.WATER,
    pygame.K_3: ParticleKind.WOOD,
    pygame.K_4: None,
}


def screen_to_coordinate(
    pos: Tuple[int, int], cell_size: int, width: int, height: int
) -> Optional[Coordinate]:
    """Converts a pixel position to a grid coordinate, None if off-grid."""
    return Coordinate.create(
        (int(pos[0] // cell_size), int(pos[1] // cell_size)), width, height
    )


def grid_to_color_array(grid: Grid[Particle]) -> np.ndarray:
    """
    Builds an RGB image of the grid.

    Returns:
        np.ndarray: uint8 array of shape (width, height, 3), the layout
        pygame.surfarray expects.
    """
    pixels = np.empty((grid.width, grid.height, 3), dtype=np.uint8)
    pixels[:, :] = BACKGROUND_COLOR
    for coord, particle in grid.occupied():
        pixels[coord.x, coord.y] = particle.color
    return pixels


class Visualizer:
    """
    Renders the grid and turns mouse and keyboard input into brush strokes.
    """
    def __init__(self, grid_width: int, grid_height: int, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params or {}
        self.cell_size = vis_params.get('cell_size', 5)
        self.brush_radius = vis_params.get('brush_radius', 5)
        self.fps = vis_params.get('fps', 60)
        self.grid_width = grid_width
        self.grid_height = grid_height

        pygame.init()
        pygame.font.init()

        self.window_size = (grid_width * self.cell_size, grid_height * self.cell_size)
        self.screen = pygame.display.set_mode(self.window_size)
        pygame.display.set_caption("Falling Sand")
        self.clock = pygame.time.Clock()

        try:
            self.font = pygame.font.SysFont("consolas", HUD_FONT_SIZE)
        except pygame.error:
            logging.warning("Consolas font not found, falling back to default font.")
            self.font = pygame.font.SysFont(None, HUD_FONT_SIZE + 4)

        self.current_kind: Optional[ParticleKind] = ParticleKind.SAND

        logging.info(
            f"Visualizer initialized with Pygame display "
            f"({self.window_size[0]}x{self.window_size[1]}, cell size {self.cell_size}px)."
        )

    def handle_events(self, grid: Grid[Particle], simulator: Simulator) -> bool:
        """
        Processes pending input and applies the brush.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                elif event.key == pygame.K_c:
                    grid.reset()
                    logging.info("Grid cleared by user.")
                elif event.key == pygame.K_LEFTBRACKET:
                    self.brush_radius = max(BRUSH_MIN, self.brush_radius - 1)
                    logging.debug(f"Brush radius set to {self.brush_radius}.")
                elif event.key == pygame.K_RIGHTBRACKET:
                    self.brush_radius = min(BRUSH_MAX, self.brush_radius + 1)
                    logging.debug(f"Brush radius set to {self.brush_radius}.")
                elif event.key in MATERIAL_KEYS:
                    self.current_kind = MATERIAL_KEYS[event.key]
                    logging.info(f"Material selected: {self._material_label()}.")

        buttons = pygame.mouse.get_pressed(3)
        if buttons[0] or buttons[2]:
            coord = screen_to_coordinate(
                pygame.mouse.get_pos(), self.cell_size, self.grid_width, self.grid_height
            )
            if coord is not None:
                # Right button always erases
                kind = self.current_kind if buttons[0] else None
                simulator.paint(grid, coord, self.brush_radius, kind)
        return True

    def _material_label(self) -> str:
        return self.current_kind.label if self.current_kind is not None else "Eraser"

    def draw(self, grid: Grid[Particle]) -> None:
        """Draws the grid and HUD, then ticks the frame clock."""
        surface = pygame.surfarray.make_surface(grid_to_color_array(grid))
        if self.cell_size != 1:
            surface = pygame.transform.scale(surface, self.window_size)
        self.screen.blit(surface, (0, 0))

        hud_lines = [
            f"Material: {self._material_label()}  (1:Sand 2:Water 3:Wood 4:Eraser)",
            f"Brush: {self.brush_radius}  ([ / ])    FPS: {self.clock.get_fps():.0f}",
            "LMB paint  RMB erase  C clear  Esc quit",
        ]
        y = 6
        for line in hud_lines:
            text = self.font.render(line, True, HUD_COLOR)
            self.screen.blit(text, (6, y))
            y += HUD_FONT_SIZE + 2

        pygame.display.flip()
        self.clock.tick(self.fps)

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
