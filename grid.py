# grid.py
"""
Coordinates and the cell grid the simulation runs on.

A Coordinate is a position validated once, at construction, against a
fixed world size. The Grid is a dense row-major store of cells indexed by
those coordinates. Everything downstream of Coordinate.create trusts the
coordinate it is given; an index that does not fit the grid is a bug, not
a runtime condition.
"""
import logging
import math
from dataclasses import dataclass
from functools import lru_cache
from typing import Generic, Iterator, List, Optional, Sequence, Tuple, TypeVar

import numpy as np
from numba import jit

# --- Data Contracts ---
#
# class Coordinate:
#   - create(point: Tuple[int, int], width: int, height: int) -> Optional[Coordinate]
#     - Outputs: a Coordinate, or None if point lies outside the world.
#     - Invariants: 0 <= x < width and 0 <= y < height for every instance.
#
# class Grid(Generic[T]):
#   - __init__(self, width: int, height: int):
#     - Side Effects: allocates width * height empty cells.
#     - Invariants: the cell count never changes.
#   - swap(self, a: Coordinate, b: Coordinate) -> None:
#     - Side Effects: exchanges the occupants of a and b. The cells
#       themselves stay in place.

T = TypeVar("T")


class GridInvariantError(RuntimeError):
    """Raised when a coordinate does not belong to the grid it indexes."""


@jit(nopython=True)
def _disk_offsets_numba(radius):
    """
    Numba-jitted function returning the (dx, dy) offsets of a brush disk.

    An offset is kept when its Euclidean length, rounded to the nearest
    integer, is strictly less than radius.
    """
    count = 0
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if math.floor(math.sqrt(dx * dx + dy * dy) + 0.5) < radius:
                count += 1

    offsets = np.empty((count, 2), dtype=np.int64)
    i = 0
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if math.floor(math.sqrt(dx * dx + dy * dy) + 0.5) < radius:
                offsets[i, 0] = dx
                offsets[i, 1] = dy
                i += 1
    return offsets


@lru_cache(maxsize=32)
def _disk_offsets(radius: int) -> Tuple[Tuple[int, int], ...]:
    if radius <= 0:
        return ()
    return tuple((int(dx), int(dy)) for dx, dy in _disk_offsets_numba(radius))


@dataclass(frozen=True)
class Coordinate:
    """A grid position bound to the (width, height) of its world."""
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def create(cls, point: Tuple[int, int], width: int, height: int) -> Optional["Coordinate"]:
        """Returns a Coordinate for point, or None if it is out of bounds."""
        x, y = point
        if 0 <= x < width and 0 <= y < height:
            return cls(x, y, width, height)
        return None

    def move_by(self, dx: int, dy: int) -> Optional["Coordinate"]:
        return Coordinate.create((self.x + dx, self.y + dy), self.width, self.height)

    def is_at_bottom(self) -> bool:
        return self.y == self.height - 1

    def neighbors(self, radius: int) -> List["Coordinate"]:
        """
        Returns the in-bounds coordinates of a disk centred on self.

        Used by the brush. A radius of 1 covers only this coordinate.
        """
        coords = []
        for dx, dy in _disk_offsets(radius):
            coord = self.move_by(dx, dy)
            if coord is not None:
                coords.append(coord)
        return coords

    def random_neighbors(
        self, offsets: Sequence[Tuple[int, int]], rng: np.random.Generator
    ) -> List["Coordinate"]:
        """
        Returns the offsets applied to self, in a uniformly random order.

        Offsets that land outside the world are dropped. This is how the
        simulator breaks ties between equally valid destinations.
        """
        coords = []
        for i in rng.permutation(len(offsets)):
            dx, dy = offsets[i]
            coord = self.move_by(dx, dy)
            if coord is not None:
                coords.append(coord)
        return coords

    def __iter__(self) -> Iterator[int]:
        # Allows `x, y = coord`
        yield self.x
        yield self.y


class Cell(Generic[T]):
    """A single grid slot holding at most one occupant."""
    __slots__ = ("coordinate", "occupant")

    def __init__(self, coordinate: Coordinate, occupant: Optional[T] = None):
        self.coordinate = coordinate
        self.occupant = occupant

    def is_empty(self) -> bool:
        return self.occupant is None

    def __repr__(self) -> str:
        return f"Cell(({self.coordinate.x}, {self.coordinate.y}), {self.occupant!r})"


class Grid(Generic[T]):
    """
    A fixed-size, row-major collection of cells.

    Cells are created once and never move; set, clear and swap only change
    which occupant a cell holds.
    """
    def __init__(self, width: int, height: int):
        """
        Allocates an empty grid.

        Args:
            width (int): Number of columns.
            height (int): Number of rows.
        """
        if width <= 0 or height <= 0:
            msg = f"Configuration error: grid dimensions must be positive, got {width}x{height}."
            logging.critical(msg)
            raise ValueError(msg)

        self.width = width
        self.height = height
        self._cells: List[Cell[T]] = [
            Cell(Coordinate(x, y, width, height))
            for y in range(height)
            for x in range(width)
        ]
        logging.debug(f"Grid allocated with {len(self._cells)} cells ({width}x{height}).")

    def _index(self, coord: Coordinate) -> int:
        # Coordinates are bounds-checked when built, so only a coordinate
        # from a differently sized world can get here invalid.
        if coord.width != self.width or coord.height != self.height:
            msg = (
                f"Coordinate ({coord.x}, {coord.y}) was built for a "
                f"{coord.width}x{coord.height} world, not this "
                f"{self.width}x{self.height} grid."
            )
            logging.critical(msg)
            raise GridInvariantError(msg)
        return coord.y * self.width + coord.x

    def coordinate(self, x: int, y: int) -> Optional[Coordinate]:
        return Coordinate.create((x, y), self.width, self.height)

    def get(self, coord: Coordinate) -> Cell[T]:
        """Returns the live cell at coord."""
        return self._cells[self._index(coord)]

    # Cells are mutable objects, so the same accessor serves both roles.
    get_mut = get

    def occupant(self, coord: Coordinate) -> Optional[T]:
        return self._cells[self._index(coord)].occupant

    def is_empty(self, coord: Coordinate) -> bool:
        return self._cells[self._index(coord)].occupant is None

    def set(self, coord: Coordinate, value: T) -> None:
        self._cells[self._index(coord)].occupant = value

    def clear(self, coord: Coordinate) -> None:
        self._cells[self._index(coord)].occupant = None

    def swap(self, a: Coordinate, b: Coordinate) -> None:
        """Exchanges the occupants of the cells at a and b."""
        i, j = self._index(a), self._index(b)
        cells = self._cells
        cells[i].occupant, cells[j].occupant = cells[j].occupant, cells[i].occupant

    def reset(self) -> None:
        """Empties every cell."""
        for cell in self._cells:
            cell.occupant = None

    def iter(self) -> Iterator[Cell[T]]:
        """Yields every cell in row-major order."""
        return iter(self._cells)

    iter_mut = iter

    def __iter__(self) -> Iterator[Cell[T]]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def occupied(self) -> Iterator[Tuple[Coordinate, T]]:
        """Yields (coordinate, occupant) for every non-empty cell."""
        for cell in self._cells:
            if cell.occupant is not None:
                yield cell.coordinate, cell.occupant

    def count(self) -> int:
        return sum(1 for cell in self._cells if cell.occupant is not None)
