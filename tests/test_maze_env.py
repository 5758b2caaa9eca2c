"""Tests for env.maze_env."""

import time

import pytest

from env.grid import WallDirection
from env.maze_env import MazeEnv, normalize_dimensions
from render.base import HeadlessRenderer


class RecordingRenderer(HeadlessRenderer):
    def __init__(self):
        super().__init__()
        self.cells = []
        self.hidden = []

    def instantiate_cell_visual(self, coord, world_pos):
        self.cells.append(coord)
        return coord

    def set_wall_visible(self, handle, direction, visible):
        self.hidden.append((handle, direction, visible))


def _open_passages(env):
    """Count adjacent cell pairs with no wall between them."""
    count = 0
    for cell in env.grid.cells():
        for direction in (WallDirection.RIGHT, WallDirection.UP):
            dx, dy = direction.offset
            if (cell.x + dx, cell.y + dy) in env.grid and not cell.walls[direction]:
                count += 1
    return count


SEEDS = [0, 1, 2, 7, 42, 123]
SIZES = [(4, 4), (6, 8), (10, 10), (5, 9), (12, 6)]


class TestNormalizeDimensions:
    def test_odd_is_decremented(self):
        assert normalize_dimensions(5, 5) == (4, 4)
        assert normalize_dimensions(11, 9) == (10, 8)

    def test_small_is_forced_to_four(self):
        assert normalize_dimensions(3, 2) == (4, 4)
        assert normalize_dimensions(1, 0) == (4, 4)
        assert normalize_dimensions(-6, 4) == (4, 4)

    def test_even_is_kept(self):
        assert normalize_dimensions(6, 12) == (6, 12)

    def test_env_normalizes_instead_of_rejecting(self):
        env = MazeEnv(rows=5, columns=5, seed=0)
        assert (env.rows, env.columns) == (4, 4)


class TestCentreRoom:
    def test_centre_coordinates_for_five_by_five(self):
        env = MazeEnv(rows=5, columns=5, seed=0)
        env.build_cells()
        env.create_centre()
        assert [c.position for c in env.centre_cells] == [(2, 3), (3, 3), (2, 2), (3, 2)]

    def test_three_centre_cells_leave_unvisited(self):
        env = MazeEnv(rows=6, columns=6, seed=3)
        env.build_cells()
        entrance = env.create_centre()
        unvisited = env.grid.unvisited
        assert entrance in unvisited
        assert sum(1 for c in env.centre_cells if c in unvisited) == 1
        assert len(unvisited) == 36 - 3

    def test_room_is_internally_open(self):
        env = MazeEnv(rows=6, columns=6, seed=3)
        env.build_cells()
        env.create_centre()
        tl, tr, bl, br = env.centre_cells
        assert not tl.walls[WallDirection.DOWN] and not tl.walls[WallDirection.RIGHT]
        assert not tr.walls[WallDirection.DOWN] and not tr.walls[WallDirection.LEFT]
        assert not bl.walls[WallDirection.UP] and not bl.walls[WallDirection.RIGHT]
        assert not br.walls[WallDirection.UP] and not br.walls[WallDirection.LEFT]

    @pytest.mark.parametrize("seed", SEEDS)
    def test_sealed_cells_keep_outer_walls(self, seed):
        env = MazeEnv(rows=8, columns=8, seed=seed)
        env.reset()
        centre = {c.position for c in env.centre_cells}
        for cell in env.centre_cells:
            if cell is env.spawn_cell:
                continue
            for direction in WallDirection:
                dx, dy = direction.offset
                if (cell.x + dx, cell.y + dy) not in centre:
                    assert cell.walls[direction]


class TestCarving:
    def test_fresh_grid_is_fully_walled(self):
        env = MazeEnv(rows=6, columns=6, seed=0)
        env.build_cells()
        for cell in env.grid.cells():
            assert all(cell.walls.values())

    def test_single_step_clears_one_wall_pair(self):
        env = MazeEnv(rows=6, columns=6, seed=5)
        env.build_cells()
        env.begin_carving(env.grid.cell_at((3, 4)))
        before = len(env.grid.unvisited)

        assert env.carve_step()

        cleared = sum(1 for c in env.grid.cells() for w in c.walls.values() if not w)
        assert cleared == 2
        assert len(env.grid.unvisited) == before - 1
        assert len(env.grid.visit_stack) == 1

    def test_run_algorithm_requires_cursor(self):
        env = MazeEnv(rows=4, columns=4, seed=0)
        env.build_cells()
        with pytest.raises(RuntimeError):
            env.run_algorithm()

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("rows,columns", SIZES)
    def test_every_cell_reachable_from_entrance(self, seed, rows, columns):
        env = MazeEnv(rows=rows, columns=columns, seed=seed)
        env.reset()
        assert len(env.grid.unvisited) == 0
        reachable = env.reachable_from(env.get_start())
        assert len(reachable) == env.rows * env.columns

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("rows,columns", SIZES)
    def test_tree_plus_centre_room(self, seed, rows, columns):
        # Spanning tree over n - 3 cells has n - 4 edges, the room adds 4
        env = MazeEnv(rows=rows, columns=columns, seed=seed)
        env.reset()
        assert _open_passages(env) == env.rows * env.columns

    @pytest.mark.parametrize("seed", SEEDS)
    def test_wall_removal_is_symmetric(self, seed):
        env = MazeEnv(rows=10, columns=8, seed=seed)
        env.reset()
        for cell in env.grid.cells():
            for direction in WallDirection:
                dx, dy = direction.offset
                other = env.grid.cell_at((cell.x + dx, cell.y + dy))
                if other is not None:
                    assert cell.walls[direction] == other.walls[direction.opposite]

    def test_same_seed_same_maze(self):
        a = MazeEnv(rows=10, columns=10, seed=11)
        b = MazeEnv(rows=10, columns=10, seed=11)
        a.reset()
        b.reset()
        assert a.to_ascii() == b.to_ascii()

    def test_large_grid_carves_in_linear_time(self):
        env = MazeEnv(rows=120, columns=120, seed=0)
        start = time.perf_counter()
        env.reset()
        elapsed = time.perf_counter() - start
        assert len(env.grid.unvisited) == 0
        assert len(env.reachable_from(env.get_start())) == 120 * 120
        assert elapsed < 3.0


class TestRolesAndExit:
    @pytest.mark.parametrize("seed", SEEDS)
    def test_exactly_one_spawn_and_one_end(self, seed):
        env = MazeEnv(rows=8, columns=10, seed=seed)
        env.reset()
        cells = list(env.grid.cells())
        assert sum(c.is_spawn for c in cells) == 1
        assert sum(c.is_end for c in cells) == 1
        assert env.spawn_cell in env.centre_cells

    @pytest.mark.parametrize("seed", SEEDS)
    def test_exit_on_boundary_with_outer_wall_open(self, seed):
        env = MazeEnv(rows=8, columns=10, seed=seed)
        env.reset()
        exit_cell = env.exit_cell
        assert env.grid.is_edge(exit_cell.position)

        outward = [d for d in WallDirection
                   if not exit_cell.walls[d]
                   and (exit_cell.x + d.offset[0], exit_cell.y + d.offset[1]) not in env.grid]
        assert len(outward) == 1

    def test_exit_wall_precedence(self):
        env = MazeEnv(rows=4, columns=4, seed=0)
        env.build_cells()
        env.grid.edge_cells = lambda: [env.grid.cell_at((1, 4))]
        env.make_exit()
        corner = env.grid.cell_at((1, 4))
        assert not corner.walls[WallDirection.LEFT]
        assert corner.walls[WallDirection.UP]

    def test_top_edge_opens_up_wall(self):
        env = MazeEnv(rows=4, columns=4, seed=0)
        env.build_cells()
        env.grid.edge_cells = lambda: [env.grid.cell_at((2, 4))]
        env.make_exit()
        assert not env.grid.cell_at((2, 4)).walls[WallDirection.UP]

    def test_bottom_edge_opens_down_wall(self):
        env = MazeEnv(rows=4, columns=4, seed=0)
        env.build_cells()
        env.grid.edge_cells = lambda: [env.grid.cell_at((3, 1))]
        env.make_exit()
        assert not env.grid.cell_at((3, 1)).walls[WallDirection.DOWN]

    def test_start_and_goal_require_reset(self):
        env = MazeEnv(rows=4, columns=4, seed=0)
        with pytest.raises(RuntimeError):
            env.get_start()
        with pytest.raises(RuntimeError):
            env.get_goal()

    def test_reset_regenerates(self):
        env = MazeEnv(rows=8, columns=8, seed=9)
        first = env.reset()
        second = env.reset()
        assert first is not second
        assert sum(c.is_spawn for c in second.cells()) == 1
        assert sum(c.is_end for c in second.cells()) == 1


class TestRendererNotifications:
    def test_cell_visual_per_coordinate(self):
        renderer = RecordingRenderer()
        env = MazeEnv(rows=4, columns=6, renderer=renderer, seed=0)
        env.reset()
        assert len(renderer.cells) == 24
        assert env.grid.cell_at((2, 3)).visual == (2, 3)

    def test_every_open_wall_was_hidden(self):
        renderer = RecordingRenderer()
        env = MazeEnv(rows=6, columns=6, renderer=renderer, seed=4)
        env.reset()
        hidden = {(h, d) for h, d, visible in renderer.hidden if not visible}
        for cell in env.grid.cells():
            for direction in cell.open_walls():
                assert (cell.position, direction) in hidden


class TestWorldCoords:
    def test_grid_is_centred_on_origin(self):
        env = MazeEnv(rows=4, columns=4, cell_size=1.0)
        assert env.to_world_coords((1, 1)) == (-1.5, -1.5)
        assert env.to_world_coords((4, 4)) == (1.5, 1.5)

    def test_cell_size_scales(self):
        env = MazeEnv(rows=4, columns=6, cell_size=2.0)
        assert env.to_world_coords((1, 1)) == (-5.0, -3.0)
