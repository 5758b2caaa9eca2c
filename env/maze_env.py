"""
env/maze_env.py

Procedural maze generation on a walled cell grid.

This module defines ONLY the maze geometry.
It contains NO agent logic, NO fitness, NO search loop.

Responsibilities:
- Size normalization (even dimensions, at least 4x4)
- Randomized depth-first carving (recursive backtracker, iterative)
- The 2x2 centre room with exactly one entrance
- Exit placement on the outer boundary
- Telling the rendering adapter which walls disappeared

The maze is deterministic given a seed.
"""

import numpy as np
from collections import deque
from typing import List, Optional, Set, Tuple

from env.grid import Cell, Coord, Grid, WallDirection
from render.base import HeadlessRenderer


def is_odd(value: int) -> bool:
    return value % 2 != 0


def normalize_dimensions(rows: int, columns: int) -> Tuple[int, int]:
    """
    Correct requested maze dimensions so generation cannot fail.

    Odd values are decremented, anything <= 3 becomes 4. This
    guarantees an even grid with a well defined 2x2 centre.

    Args:
        rows: Requested number of rows
        columns: Requested number of columns

    Returns:
        (rows, columns): Normalized dimensions
    """
    if is_odd(rows):
        rows -= 1
    if is_odd(columns):
        columns -= 1

    if rows <= 3:
        rows = 4
    if columns <= 3:
        columns = 4

    return rows, columns


class MazeEnv:
    """
    Perfect maze with a sealed centre room and one boundary exit.

    The grid is carved once per reset() and never changes afterwards.
    Every cell except three of the four centre cells belongs to a single
    spanning tree; the centre room joins that tree through one entrance
    cell only.

    This class does NOT provide:
    - Agent movement
    - Fitness computation
    - Drawing (it only notifies the renderer)
    """

    def __init__(
        self,
        rows: int,
        columns: int,
        cell_size: float = 1.0,
        renderer: Optional[HeadlessRenderer] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize maze environment.

        Args:
            rows: Requested number of rows (normalized, never rejected)
            columns: Requested number of columns (normalized, never rejected)
            cell_size: Size of one cell in world units
            renderer: Rendering adapter (headless if None)
            seed: Random seed for reproducible generation
        """
        assert cell_size > 0, "Cell size must be positive"

        self.rows, self.columns = normalize_dimensions(rows, columns)
        self.cell_size = cell_size
        self.renderer = renderer if renderer is not None else HeadlessRenderer()

        self.rng = np.random.RandomState(seed)

        # Populated by reset()
        self.grid: Optional[Grid] = None
        self.centre_cells: List[Cell] = []
        self.current_cell: Optional[Cell] = None
        self.spawn_cell: Optional[Cell] = None
        self.exit_cell: Optional[Cell] = None

    # --------------------------------------------------
    # Lifecycle
    # --------------------------------------------------

    def reset(self) -> Grid:
        """
        Generate a new maze, discarding any previous one.

        Order matters: the centre room is prepared before carving so
        that three of its cells are never reachable by the carver, and
        the exit is chosen after carving.

        Returns:
            grid: The freshly carved grid
        """
        self.build_cells()
        self.create_centre()
        self.run_algorithm()
        self.make_exit()

        # Roles are only assigned on a finished maze
        self.spawn_cell.is_spawn = True
        return self.grid

    def build_cells(self) -> Grid:
        """Create one fully walled cell per coordinate, all unvisited."""
        self.grid = Grid(self.columns, self.rows)
        self.centre_cells = []
        self.current_cell = None
        self.spawn_cell = None
        self.exit_cell = None

        for x in range(1, self.columns + 1):
            for y in range(1, self.rows + 1):
                coord = (x, y)
                visual = self.renderer.instantiate_cell_visual(
                    coord, self.to_world_coords(coord)
                )
                self.grid.create_cell(coord, visual=visual)

        return self.grid

    # --------------------------------------------------
    # Centre room
    # --------------------------------------------------

    def create_centre(self) -> Cell:
        """
        Open the 2x2 centre room and pick its single entrance.

        The three cells that are not the entrance leave the unvisited
        set, so the carver can only ever attach the room through the
        entrance.

        Returns:
            entrance: The chosen centre cell (carving starts here)
        """
        self._require_grid()
        c = self.columns // 2
        r = self.rows // 2

        top_left = self.grid.cell_at((c, r + 1))
        top_right = self.grid.cell_at((c + 1, r + 1))
        bottom_left = self.grid.cell_at((c, r))
        bottom_right = self.grid.cell_at((c + 1, r))

        self.remove_wall(top_left, WallDirection.DOWN)
        self.remove_wall(top_left, WallDirection.RIGHT)
        self.remove_wall(top_right, WallDirection.DOWN)
        self.remove_wall(top_right, WallDirection.LEFT)
        self.remove_wall(bottom_left, WallDirection.UP)
        self.remove_wall(bottom_left, WallDirection.RIGHT)
        self.remove_wall(bottom_right, WallDirection.UP)
        self.remove_wall(bottom_right, WallDirection.LEFT)

        self.centre_cells = [top_left, top_right, bottom_left, bottom_right]

        entrance = self.centre_cells[self.rng.randint(len(self.centre_cells))]
        for cell in self.centre_cells:
            if cell is not entrance:
                del self.grid.unvisited[cell]

        self.current_cell = entrance
        self.spawn_cell = entrance
        return entrance

    # --------------------------------------------------
    # Carving
    # --------------------------------------------------

    def begin_carving(self, start: Cell) -> None:
        """Place the carving cursor on `start` and mark it visited."""
        self._require_grid()
        self.current_cell = start
        self.grid.unvisited.pop(start, None)

    def carve_step(self) -> bool:
        """
        Execute one iteration of the depth-first carving loop.

        Either advances into a random unvisited neighbour (removing the
        wall pair between them), or backtracks one cell.

        Returns:
            progressed: False once there is nothing left to do
        """
        grid = self.grid
        if not grid.unvisited:
            return False

        neighbours = self.unvisited_neighbours(self.current_cell)
        if neighbours:
            check_cell = neighbours[self.rng.randint(len(neighbours))]
            grid.visit_stack.append(self.current_cell)
            self.compare_walls(self.current_cell, check_cell)
            self.current_cell = check_cell
            del grid.unvisited[check_cell]
            return True

        if grid.visit_stack:
            self.current_cell = grid.visit_stack.pop()
            return True

        return False

    def run_algorithm(self) -> None:
        """Carve from the current cursor until every reachable cell is visited."""
        if self.current_cell is None:
            raise RuntimeError("Carving cursor not set, call create_centre() first")

        self.begin_carving(self.current_cell)
        while self.carve_step():
            pass

    def unvisited_neighbours(self, cell: Cell) -> List[Cell]:
        candidates = [self.grid.cell_at(p) for p in self.grid.neighbors(cell.position)]
        return [n for n in candidates if n in self.grid.unvisited]

    def compare_walls(self, current: Cell, neighbour: Cell) -> None:
        """Remove the pair of walls separating two adjacent cells."""
        if neighbour.x < current.x:
            self.remove_wall(neighbour, WallDirection.RIGHT)
            self.remove_wall(current, WallDirection.LEFT)
        elif neighbour.x > current.x:
            self.remove_wall(neighbour, WallDirection.LEFT)
            self.remove_wall(current, WallDirection.RIGHT)
        elif neighbour.y > current.y:
            self.remove_wall(neighbour, WallDirection.DOWN)
            self.remove_wall(current, WallDirection.UP)
        elif neighbour.y < current.y:
            self.remove_wall(neighbour, WallDirection.UP)
            self.remove_wall(current, WallDirection.DOWN)

    def remove_wall(self, cell: Optional[Cell], direction: WallDirection) -> None:
        """Clear a wall on the grid and hide it on the renderer."""
        if cell is None:
            return
        self.grid.remove_wall(cell.position, direction)
        self.renderer.set_wall_visible(cell.visual, direction, False)

    # --------------------------------------------------
    # Exit
    # --------------------------------------------------

    def make_exit(self) -> Cell:
        """
        Choose a random boundary cell as the exit and open its outer wall.

        Edge precedence: left, right, top, otherwise bottom.

        Returns:
            exit_cell: The chosen cell
        """
        self._require_grid()
        edge_cells = self.grid.edge_cells()
        exit_cell = edge_cells[self.rng.randint(len(edge_cells))]
        exit_cell.is_end = True

        if exit_cell.x == 1:
            self.remove_wall(exit_cell, WallDirection.LEFT)
        elif exit_cell.x == self.columns:
            self.remove_wall(exit_cell, WallDirection.RIGHT)
        elif exit_cell.y == self.rows:
            self.remove_wall(exit_cell, WallDirection.UP)
        else:
            self.remove_wall(exit_cell, WallDirection.DOWN)

        self.exit_cell = exit_cell
        return exit_cell

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def get_start(self) -> Coord:
        """Grid coordinate of the centre-room entrance (agent spawn)."""
        if self.spawn_cell is None or not self.spawn_cell.is_spawn:
            raise RuntimeError("Must call reset() first")
        return self.spawn_cell.position

    def get_goal(self) -> Coord:
        """Grid coordinate of the exit cell."""
        if self.exit_cell is None:
            raise RuntimeError("Must call reset() first")
        return self.exit_cell.position

    def reachable_from(self, coord: Coord) -> Set[Coord]:
        """
        Breadth-first flood over open walls.

        Args:
            coord: Starting coordinate

        Returns:
            reachable: Every coordinate connected to `coord`
        """
        self._require_grid()
        seen = {coord}
        queue = deque([coord])
        while queue:
            cell = self.grid.cell_at(queue.popleft())
            for direction in cell.open_walls():
                dx, dy = direction.offset
                n = (cell.x + dx, cell.y + dy)
                if n in self.grid and n not in seen:
                    seen.add(n)
                    queue.append(n)
        return seen

    def to_world_coords(self, coord: Coord) -> Tuple[float, float]:
        """
        Convert a grid coordinate to the cell centre in world units.

        The maze is centred on the world origin.
        """
        start_x = -(self.cell_size * (self.columns // 2)) + self.cell_size / 2
        start_y = -(self.cell_size * (self.rows // 2)) + self.cell_size / 2
        return (
            start_x + (coord[0] - 1) * self.cell_size,
            start_y + (coord[1] - 1) * self.cell_size,
        )

    def to_ascii(self) -> str:
        """Text drawing of the maze for debugging. S = spawn, E = exit."""
        self._require_grid()
        lines = []
        for y in range(self.rows, 0, -1):
            top = "+"
            mid = ""
            for x in range(1, self.columns + 1):
                cell = self.grid.cell_at((x, y))
                top += ("---" if cell.walls[WallDirection.UP] else "   ") + "+"
                if x == 1:
                    mid += "|" if cell.walls[WallDirection.LEFT] else " "
                label = " S " if cell.is_spawn else " E " if cell.is_end else "   "
                mid += label + ("|" if cell.walls[WallDirection.RIGHT] else " ")
            lines.append(top)
            lines.append(mid)

        bottom = "+"
        for x in range(1, self.columns + 1):
            cell = self.grid.cell_at((x, 1))
            bottom += ("---" if cell.walls[WallDirection.DOWN] else "   ") + "+"
        lines.append(bottom)
        return "\n".join(lines)

    def _require_grid(self) -> None:
        if self.grid is None:
            raise RuntimeError("Must call reset() first")


# Validation
if __name__ == "__main__":
    print("MazeEnv - walled grid maze with centre room")
    print("=" * 60)

    env = MazeEnv(rows=9, columns=12, seed=42)
    env.reset()

    print(f"Maze size: {env.columns} x {env.rows}")
    print(f"Start: {env.get_start()}")
    print(f"Goal: {env.get_goal()}")
    print()
    print(env.to_ascii())
