"""
env/grid.py

Cell storage for the maze.

This module owns the mapping from integer grid coordinates to cells.
It knows nothing about carving order, randomness, agents or drawing.

Coordinates are (x, y) tuples, 1-indexed:
    x in [1, columns], y in [1, rows], y grows upward.

Responsibilities:
- Cell creation (fully walled)
- Lookup with an explicit miss (None)
- Wall flag removal
- Neighbour enumeration
- The two carving working sets (unvisited, visit_stack)
"""

from enum import IntEnum
from typing import Dict, Iterator, List, Optional, Tuple

Coord = Tuple[int, int]


class WallDirection(IntEnum):
    """Wall IDs. 1 = left, 2 = right, 3 = up, 4 = down."""

    LEFT = 1
    RIGHT = 2
    UP = 3
    DOWN = 4

    @property
    def offset(self) -> Coord:
        return _WALL_OFFSETS[self]

    @property
    def opposite(self) -> "WallDirection":
        return _WALL_OPPOSITES[self]


_WALL_OFFSETS = {
    WallDirection.LEFT: (-1, 0),
    WallDirection.RIGHT: (1, 0),
    WallDirection.UP: (0, 1),
    WallDirection.DOWN: (0, -1),
}

_WALL_OPPOSITES = {
    WallDirection.LEFT: WallDirection.RIGHT,
    WallDirection.RIGHT: WallDirection.LEFT,
    WallDirection.UP: WallDirection.DOWN,
    WallDirection.DOWN: WallDirection.UP,
}

# Neighbour search order: left, right, up, down
NEIGHBOUR_OFFSETS = [(-1, 0), (1, 0), (0, 1), (0, -1)]


class Cell:
    """
    One maze cell.

    Walls start fully enclosed. `visual` is whatever handle the
    rendering adapter returned for this cell; the grid never looks at it.
    """

    __slots__ = ("_position", "walls", "is_spawn", "is_end", "visual")

    def __init__(self, position: Coord, visual=None):
        self._position = (int(position[0]), int(position[1]))
        self.walls: Dict[WallDirection, bool] = {d: True for d in WallDirection}
        self.is_spawn = False
        self.is_end = False
        self.visual = visual

    @property
    def position(self) -> Coord:
        return self._position

    @property
    def x(self) -> int:
        return self._position[0]

    @property
    def y(self) -> int:
        return self._position[1]

    def has_wall(self, direction: WallDirection) -> bool:
        return self.walls[direction]

    def open_walls(self) -> List[WallDirection]:
        return [d for d in WallDirection if not self.walls[d]]

    def __repr__(self) -> str:
        return f"Cell(x={self.x}, y={self.y})"


class Grid:
    """
    Coordinate -> Cell map plus the carving working sets.

    `unvisited` is an insertion-ordered dict used as a set: O(1)
    membership and removal, and seeded generation stays reproducible.
    `visit_stack` is the depth-first backtracking path.
    """

    def __init__(self, columns: int, rows: int):
        assert columns > 0 and rows > 0, "Grid dimensions must be positive"

        self.columns = columns
        self.rows = rows

        self._cells: Dict[Coord, Cell] = {}

        # Carving working sets
        self.unvisited: Dict[Cell, None] = {}
        self.visit_stack: List[Cell] = []

    # --------------------------------------------------
    # Cells
    # --------------------------------------------------

    def create_cell(self, coord: Coord, visual=None) -> Cell:
        """
        Insert a fully walled cell at `coord` if none exists.

        Args:
            coord: Grid coordinate (x, y)
            visual: Optional opaque renderer handle

        Returns:
            cell: The new cell, or the existing one if already present
        """
        coord = (int(coord[0]), int(coord[1]))
        cell = self._cells.get(coord)
        if cell is not None:
            return cell

        cell = Cell(coord, visual=visual)
        self._cells[coord] = cell
        self.unvisited[cell] = None
        return cell

    def cell_at(self, coord: Coord) -> Optional[Cell]:
        """Return the cell at `coord`, or None if there is none."""
        return self._cells.get((int(coord[0]), int(coord[1])))

    def cells(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, coord) -> bool:
        return (int(coord[0]), int(coord[1])) in self._cells

    # --------------------------------------------------
    # Walls
    # --------------------------------------------------

    def remove_wall(self, coord: Coord, direction: WallDirection) -> None:
        """Clear one wall flag. No-op if the cell does not exist."""
        cell = self.cell_at(coord)
        if cell is None:
            return
        cell.walls[WallDirection(direction)] = False

    def has_wall(self, coord: Coord, direction: WallDirection) -> bool:
        """
        Query a wall flag.

        Missing cells count as solid so that callers never walk off
        the grid.
        """
        cell = self.cell_at(coord)
        if cell is None:
            return True
        return cell.walls[WallDirection(direction)]

    # --------------------------------------------------
    # Topology
    # --------------------------------------------------

    def neighbors(self, coord: Coord) -> List[Coord]:
        """Existing coordinates one cardinal step away (left, right, up, down)."""
        x, y = coord
        result = []
        for dx, dy in NEIGHBOUR_OFFSETS:
            n = (x + dx, y + dy)
            if n in self._cells:
                result.append(n)
        return result

    def is_edge(self, coord: Coord) -> bool:
        x, y = coord
        return x == 1 or x == self.columns or y == 1 or y == self.rows

    def edge_cells(self) -> List[Cell]:
        return [c for c in self._cells.values() if self.is_edge(c.position)]
