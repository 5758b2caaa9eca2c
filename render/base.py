"""
render/base.py

Rendering collaborator interface.

The maze and the population only ever talk to a renderer through the
four calls below and only ever keep the opaque handle it returns.
HeadlessRenderer implements all of them as no-ops and is what the
simulation uses when nothing is being drawn (tests, batch experiments).
"""

from typing import Tuple

from env.grid import WallDirection


class HeadlessRenderer:
    """No-op rendering adapter."""

    def __init__(self):
        self._next_handle = 0

    def _new_handle(self) -> int:
        handle = self._next_handle
        self._next_handle += 1
        return handle

    def instantiate_cell_visual(self, coord: Tuple[int, int],
                                world_pos: Tuple[float, float]):
        return self._new_handle()

    def instantiate_agent_visual(self, coord: Tuple[int, int],
                                 world_pos: Tuple[float, float]):
        return self._new_handle()

    def set_wall_visible(self, handle, direction: WallDirection, visible: bool) -> None:
        pass

    def set_position(self, handle, coord: Tuple[int, int],
                     world_pos: Tuple[float, float]) -> None:
        pass
