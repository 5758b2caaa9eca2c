"""
Grid-walking search agent.

This module implements a single individual of the search population:
where it stands, what it has done, and how it scored.
It contains NO wall queries, NO fitness formula and NO selection.

Key responsibilities:
- Grid and world position
- The fixed-capacity move history (a replay buffer once full)
- Move counter and collision penalty bookkeeping
"""

from collections import deque
from enum import IntEnum
from typing import Tuple

import numpy as np

from env.grid import WallDirection


class MoveDirection(IntEnum):
    """
    Movement codes chosen by agents.

    These are numbered differently from WallDirection; `wall` is the
    one place the two are related.
    """

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3

    @property
    def offset(self) -> Tuple[int, int]:
        return _MOVE_OFFSETS[self]

    @property
    def wall(self) -> WallDirection:
        return _MOVE_TO_WALL[self]


_MOVE_OFFSETS = {
    MoveDirection.UP: (0, 1),
    MoveDirection.DOWN: (0, -1),
    MoveDirection.LEFT: (-1, 0),
    MoveDirection.RIGHT: (1, 0),
}

_MOVE_TO_WALL = {
    MoveDirection.UP: WallDirection.UP,
    MoveDirection.DOWN: WallDirection.DOWN,
    MoveDirection.LEFT: WallDirection.LEFT,
    MoveDirection.RIGHT: WallDirection.RIGHT,
}


class Agent:
    """
    One member of the search population.

    The agent does NOT:
    - Check walls (the population does that against the grid)
    - Compute its own score (evo.fitness does)
    """

    def __init__(
        self,
        grid_pos: Tuple[int, int],
        max_moves: int,
        world_pos: Tuple[float, float] = (0.0, 0.0),
        visual=None
    ):
        """
        Args:
            grid_pos: Starting grid coordinate (the spawn cell)
            max_moves: Move budget and move history capacity
            world_pos: Starting position in world units
            visual: Opaque renderer handle
        """
        assert max_moves > 0, "max_moves must be positive"

        self.grid_pos = (int(grid_pos[0]), int(grid_pos[1]))
        self.world_pos = (float(world_pos[0]), float(world_pos[1]))
        self.max_moves = max_moves
        self.visual = visual

        self.moves: deque = deque()
        self.moved_times = 0
        self.penalty = 0.0
        self.score = 0.0

    # --------------------------------------------------
    # Budget
    # --------------------------------------------------

    @property
    def is_exhausted(self) -> bool:
        return self.moved_times >= self.max_moves

    @property
    def has_full_history(self) -> bool:
        return len(self.moves) == self.max_moves

    # --------------------------------------------------
    # Movement
    # --------------------------------------------------

    def next_direction(self, rng: np.random.RandomState) -> MoveDirection:
        """
        Replay the oldest recorded move once the history is full,
        otherwise pick one of the four directions uniformly.
        """
        if self.has_full_history:
            return self.moves.popleft()
        return MoveDirection(rng.randint(0, 4))

    def move(self, direction: MoveDirection, step: float = 1.0) -> None:
        """Shift grid and world position one cell in `direction`."""
        dx, dy = direction.offset
        self.grid_pos = (self.grid_pos[0] + dx, self.grid_pos[1] + dy)
        self.world_pos = (self.world_pos[0] + dx * step, self.world_pos[1] + dy * step)

    def record(self, direction: MoveDirection) -> None:
        self.moves.append(direction)

    def add_penalty(self, amount: float = 1.0) -> None:
        self.penalty += amount

    def get_state(self) -> dict:
        return {
            "grid_pos": self.grid_pos,
            "world_pos": self.world_pos,
            "moved_times": self.moved_times,
            "penalty": self.penalty,
            "score": self.score,
            "moves": [int(m) for m in self.moves],
        }

    def __repr__(self) -> str:
        return (f"Agent(grid_pos={self.grid_pos}, moved_times={self.moved_times}, "
                f"penalty={self.penalty}, score={self.score})")
