import pygame

from env.grid import WallDirection
from render.base import HeadlessRenderer


class MazeRenderer(HeadlessRenderer):
    """
    pygame implementation of the rendering adapter.

    Cell handles are grid coordinates, agent handles are integers.
    Nothing is drawn until draw() is called.
    """

    def __init__(self, rows, columns, cell_px=32, disable_cell_visual=False):
        super().__init__()
        self.disable_cell_visual = disable_cell_visual
        self.rows = rows
        self.columns = columns
        self.cell = cell_px

        self.width_px = columns * self.cell
        self.height_px = rows * self.cell

        self.screen = pygame.display.set_mode(
            (self.width_px, self.height_px)
        )
        pygame.display.set_caption("Maze Search")

        self.colors = {
            "bg": (30, 30, 30),
            "cell": (45, 45, 55),
            "wall": (230, 230, 230),
            "start": (0, 200, 0),
            "goal": (200, 0, 0),
            "agent": (50, 100, 255),
        }

        # handle -> {WallDirection: visible}
        self.walls = {}
        # handle -> grid coordinate
        self.agents = {}

    # =====================
    # ADAPTER
    # =====================
    def instantiate_cell_visual(self, coord, world_pos):
        self.walls[coord] = {d: True for d in WallDirection}
        return coord

    def instantiate_agent_visual(self, coord, world_pos):
        handle = self._new_handle()
        self.agents[handle] = coord
        return handle

    def set_wall_visible(self, handle, direction, visible):
        if handle in self.walls:
            self.walls[handle][direction] = visible

    def set_position(self, handle, coord, world_pos):
        self.agents[handle] = coord

    # =====================
    # DRAW MAZE
    # =====================
    def _rect(self, coord):
        # Grid y grows upward, screen y grows downward
        x, y = coord
        return pygame.Rect(
            (x - 1) * self.cell,
            (self.rows - y) * self.cell,
            self.cell,
            self.cell
        )

    def draw(self, env):
        self.screen.fill(self.colors["bg"])

        for coord, walls in self.walls.items():
            rect = self._rect(coord)

            if not self.disable_cell_visual:
                pygame.draw.rect(self.screen, self.colors["cell"], rect.inflate(-2, -2))

            if walls[WallDirection.UP]:
                pygame.draw.line(self.screen, self.colors["wall"], rect.topleft, rect.topright, 2)
            if walls[WallDirection.DOWN]:
                pygame.draw.line(self.screen, self.colors["wall"], rect.bottomleft, rect.bottomright, 2)
            if walls[WallDirection.LEFT]:
                pygame.draw.line(self.screen, self.colors["wall"], rect.topleft, rect.bottomleft, 2)
            if walls[WallDirection.RIGHT]:
                pygame.draw.line(self.screen, self.colors["wall"], rect.topright, rect.bottomright, 2)

        if env.spawn_cell is not None:
            pygame.draw.rect(self.screen, self.colors["start"],
                             self._rect(env.spawn_cell.position).inflate(-8, -8))
        if env.exit_cell is not None:
            pygame.draw.rect(self.screen, self.colors["goal"],
                             self._rect(env.exit_cell.position).inflate(-8, -8))

    # =====================
    # DRAW AGENTS
    # =====================
    def draw_agents(self):
        radius = max(2, self.cell // 6)
        for coord in self.agents.values():
            pygame.draw.circle(
                self.screen,
                self.colors["agent"],
                self._rect(coord).center,
                radius
            )

        pygame.display.flip()
