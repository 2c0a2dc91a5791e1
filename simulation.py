# simulation.py
"""
Handles the core simulation logic: moving particles through the grid.

This module defines the Simulator class, which advances the grid by one
frame in place. Rows are scanned bottom-to-top so that a cell's downward
destination is final before the cell above it is considered; the
horizontal sweep direction of each row and every tie between equally
valid destinations are chosen at random so no side is favoured.
"""
import logging
from typing import Callable, Dict, Optional

import numpy as np

from grid import Coordinate, Grid
from particle import Particle, ParticleKind

# --- Data Contracts ---
#
# class Simulator:
#   - __init__(self, params: Dict[str, Any]):
#     - Inputs:
#       - params: Dictionary of simulation parameters from config.json.
#         - "seed": Optional[int]
#     - Side Effects: Creates the random source and the rule table.
#     - Invariants: the rule table covers every ParticleKind.
#
#   - init(self, grid: Grid[Particle]) -> None:
#     - Side Effects: clears the ticked flag of every occupant. Must run
#       once per frame before any simulate call of that frame.
#
#   - simulate(self, grid: Grid[Particle], coord: Coordinate) -> bool:
#     - Outputs: True if the occupant of coord moved.
#     - Side Effects: may swap the occupant with a neighbouring cell.
#     - Invariants: occupants are only ever swapped, never created or
#       destroyed; a particle acts at most once per frame.
#
#   - step(self, grid: Grid[Particle]) -> int:
#     - Outputs: number of particles that moved this frame.

DOWN = (0, 1)
UP = (0, -1)
DIAGONALS_DOWN = ((-1, 1), (1, 1))
SIDEWAYS = ((-1, 0), (1, 0))

Rule = Callable[[Grid[Particle], Coordinate], bool]


class Simulator:
    """
    Applies the per-kind movement rules to a grid, one frame at a time.
    """
    def __init__(self, params: Optional[Dict] = None):
        """
        Initializes the simulator.

        Args:
            params (Optional[Dict]): Simulation parameters from config.
        """
        params = params or {}
        self.seed = params.get('seed')

        # Every random choice in a run draws from this one seeded generator.
        self.rng = np.random.default_rng(self.seed)
        self.moves_last_frame = 0

        self._rules: Dict[ParticleKind, Rule] = {
            ParticleKind.SAND: self._simulate_sand,
            ParticleKind.WATER: self._simulate_water,
            ParticleKind.WOOD: self._simulate_wood,
        }
        missing = [kind.name for kind in ParticleKind if kind not in self._rules]
        if missing:
            msg = f"No movement rule registered for particle kinds: {missing}."
            logging.critical(msg)
            raise ValueError(msg)

        logging.info(f"Simulator initialized (seed={self.seed}).")

    def init(self, grid: Grid[Particle]) -> None:
        """Clears the per-frame ticked flag on every particle."""
        for _, particle in grid.occupied():
            particle.ticked = False

    def step(self, grid: Grid[Particle]) -> int:
        """
        Executes one frame of the simulation.

        Returns:
            int: The number of particles that moved.
        """
        self.init(grid)
        moves = 0
        width = grid.width
        for y in range(grid.height - 1, -1, -1):
            if self.rng.random() < 0.5:
                columns = range(width)
            else:
                columns = range(width - 1, -1, -1)
            for x in columns:
                if self.simulate(grid, Coordinate(x, y, width, grid.height)):
                    moves += 1
        self.moves_last_frame = moves
        return moves

    def simulate(self, grid: Grid[Particle], coord: Coordinate) -> bool:
        """
        Gives the particle at coord its turn for this frame.

        Empty cells and particles that already acted this frame are
        skipped.
        """
        particle = grid.occupant(coord)
        if particle is None or particle.ticked:
            return False
        particle.ticked = True
        return self._rules[particle.kind](grid, coord)

    def _is_solid(self, grid: Grid[Particle], coord: Coordinate) -> bool:
        occupant = grid.occupant(coord)
        return occupant is not None and occupant.is_solid

    def _simulate_sand(self, grid: Grid[Particle], coord: Coordinate) -> bool:
        if coord.is_at_bottom():
            return False

        below = coord.move_by(*DOWN)
        if not self._is_solid(grid, below):
            grid.swap(coord, below)
            return True

        for target in coord.random_neighbors(DIAGONALS_DOWN, self.rng):
            if self._is_solid(grid, target):
                continue
            # Lift whatever sits in the target out of the way first, so
            # liquid is not dragged up the slope one cell at a time.
            above = target.move_by(*UP)
            if grid.is_empty(above):
                grid.swap(target, above)
            grid.swap(coord, target)
            return True
        return False

    def _simulate_water(self, grid: Grid[Particle], coord: Coordinate) -> bool:
        if not coord.is_at_bottom():
            below = coord.move_by(*DOWN)
            if grid.is_empty(below):
                grid.swap(coord, below)
                return True

            for target in coord.random_neighbors(DIAGONALS_DOWN, self.rng):
                if grid.is_empty(target):
                    grid.swap(coord, target)
                    return True

        for target in coord.random_neighbors(SIDEWAYS, self.rng):
            if grid.is_empty(target):
                grid.swap(coord, target)
                return True
        return False

    def _simulate_wood(self, grid: Grid[Particle], coord: Coordinate) -> bool:
        return False

    def paint(
        self, grid: Grid[Particle], center: Coordinate, radius: int,
        kind: Optional[ParticleKind]
    ) -> int:
        """
        Fills a disk around center with fresh particles of kind.

        A kind of None erases instead.

        Returns:
            int: The number of cells written.
        """
        coords = center.neighbors(radius)
        for coord in coords:
            if kind is None:
                grid.clear(coord)
            else:
                grid.set(coord, Particle.create(kind, self.rng))
        return len(coords)
