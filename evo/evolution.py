"""
evo/evolution.py

Population of grid-walking agents searching for the maze exit.

Each agent executes one move per tick:
    1. Skip if its move budget is spent
    2. Stop the whole search if it stands on the exit
    3. Replay a recorded move, or draw a random one
    4. Move if no wall blocks that direction, else take a penalty
    5. Record the move, rescore
    6. Stop the whole search if the move landed on the exit

Selection (crossover) picks the two fittest agents once every agent
is exhausted. It does NOT recombine or mutate move histories and does
NOT start a new generation.

This module does NOT:
- Carve or modify the maze
- Own the clock (see algo/search.py)
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional

from env.maze_env import MazeEnv
from evo.fitness import calculate_fitness
from render.base import HeadlessRenderer
from sim.agent import Agent


@dataclass
class Selection:
    """Outcome of crossover: the fittest agent and the one it displaced."""

    primary: Agent
    secondary: Agent


class Population:
    """
    Fixed-size batch of agents sharing one maze.

    Hyperparameters:
    - population_size: Number of agents
    - max_moves: Move budget per agent (also move history capacity)
    - mutation_chance: Reserved, not used by any operator
    """

    def __init__(
        self,
        env: MazeEnv,
        population_size: int = 100,
        max_moves: int = 10,
        mutation_chance: float = 0.2,
        renderer: Optional[HeadlessRenderer] = None,
        seed: Optional[int] = None
    ):
        """
        Spawn the population on the maze entrance.

        Args:
            env: Carved maze (reset() already called)
            population_size: Number of agents
            max_moves: Move budget per agent
            mutation_chance: Reserved for a mutation operator
            renderer: Rendering adapter (defaults to the maze's)
            seed: Random seed for move selection
        """
        assert population_size > 0, "population_size must be positive"
        assert max_moves > 0, "max_moves must be positive"
        assert 0.0 <= mutation_chance <= 1.0, "mutation_chance must be in [0, 1]"

        self.env = env
        self.population_size = population_size
        self.max_moves = max_moves
        self.mutation_chance = mutation_chance
        self.renderer = renderer if renderer is not None else env.renderer

        self.rng = np.random.RandomState(seed)

        # Raises if the maze has not been generated
        self.spawn_pos = env.get_start()
        self.exit_pos = env.get_goal()

        self.agents = self._initialize_population()

    def _initialize_population(self) -> List[Agent]:
        world_pos = self.env.to_world_coords(self.spawn_pos)

        agents = []
        for i in range(self.population_size):
            visual = self.renderer.instantiate_agent_visual(self.spawn_pos, world_pos)
            agents.append(Agent(
                grid_pos=self.spawn_pos,
                max_moves=self.max_moves,
                world_pos=world_pos,
                visual=visual
            ))
            self.evaluate(agents[-1])
        return agents

    def __len__(self) -> int:
        return len(self.agents)

    def __iter__(self):
        return iter(self.agents)

    # --------------------------------------------------
    # Tick
    # --------------------------------------------------

    def tick(self) -> Optional[Agent]:
        """
        Advance every live agent by exactly one move.

        Returns:
            agent: The agent found on the exit, or None.
                   Agents after it in the batch are not advanced.
        """
        for agent in self.agents:
            if self.step_agent(agent):
                return agent
        return None

    def step_agent(self, agent: Agent) -> bool:
        """
        Process one tick for one agent.

        Returns:
            found_exit: True if the agent stood on or reached the exit
        """
        if agent.is_exhausted:
            return False

        agent.moved_times += 1

        cell = self.env.grid.cell_at(agent.grid_pos)
        if cell.is_end and cell.position == agent.grid_pos:
            return True

        direction = agent.next_direction(self.rng)
        dx, dy = direction.offset
        target = (agent.grid_pos[0] + dx, agent.grid_pos[1] + dy)

        # The open exit wall leads off the grid
        if not cell.has_wall(direction.wall) and target in self.env.grid:
            agent.move(direction, step=self.env.cell_size)
            self.renderer.set_position(agent.visual, agent.grid_pos, agent.world_pos)
        else:
            agent.add_penalty()

        agent.record(direction)
        self.evaluate(agent)

        # Stepping onto the exit ends the search even on the final move
        return self.env.grid.cell_at(agent.grid_pos).is_end

    def evaluate(self, agent: Agent) -> float:
        agent.score = calculate_fitness(agent.grid_pos, self.exit_pos, agent.penalty)
        return agent.score

    def all_exhausted(self) -> bool:
        return all(agent.is_exhausted for agent in self.agents)

    # --------------------------------------------------
    # Selection
    # --------------------------------------------------

    def crossover(self) -> Selection:
        """
        Pick the two parents for the next generation.

        A single scan tracks the running maximum: whenever a new highest
        score appears, the previous holder becomes the secondary parent.
        If the very first agent is never beaten, it is both parents.

        Recombination and mutation are not implemented; the selection
        is returned and the population is left untouched.

        Returns:
            selection: (primary, secondary)
        """
        dad = None
        mom = None
        temp = None
        highest_score = -np.inf

        for agent in self.agents:
            if agent.score > highest_score:
                dad = agent
                mom = temp if temp is not None else dad
                temp = agent
                highest_score = agent.score

        return Selection(primary=dad, secondary=mom)

    # --------------------------------------------------
    # Introspection
    # --------------------------------------------------

    def best_agent(self) -> Agent:
        return max(self.agents, key=lambda a: a.score)

    def statistics(self) -> Dict:
        """
        Summary of the current population state.

        Returns:
            stats: best/mean/std score, mean penalty, mean moves taken
        """
        scores = np.array([a.score for a in self.agents])
        penalties = np.array([a.penalty for a in self.agents])
        moved = np.array([a.moved_times for a in self.agents])
        return {
            'best_fitness': float(np.max(scores)),
            'mean_fitness': float(np.mean(scores)),
            'std_fitness': float(np.std(scores)),
            'mean_penalty': float(np.mean(penalties)),
            'mean_moves': float(np.mean(moved)),
        }
