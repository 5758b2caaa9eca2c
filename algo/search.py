"""
algo/search.py

Tick scheduler for the population search.

The driver owns the simulation state and a logical clock. An external
scheduler (a pygame clock, a test, or run()) feeds it elapsed time;
each time the clock passes the next scheduled tick, every live agent
moves exactly once and the schedule moves forward by `interval`.

The search ends permanently when:
- an agent is found standing on the exit (GOAL_FOUND), or
- every agent has spent its move budget (BUDGET_EXHAUSTED), at which
  point selection runs once.

There are no hidden timers and no background threads.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from env.maze_env import MazeEnv
from evo.evolution import Population, Selection
from sim.agent import Agent


class EventKind(Enum):
    GOAL_FOUND = "goal_found"
    BUDGET_EXHAUSTED = "budget_exhausted"


@dataclass
class TerminalEvent:
    kind: EventKind
    tick: int
    agent: Optional[Agent] = None
    selection: Optional[Selection] = None


@dataclass
class SimulationState:
    """Everything the search mutates, in one place."""

    env: MazeEnv
    population: Population
    clock: float = 0.0
    next_time: float = 0.0
    ticks: int = 0
    running: bool = True
    event: Optional[TerminalEvent] = None
    history: Dict[str, List] = field(default_factory=lambda: {
        'tick': [],
        'best_fitness': [],
        'mean_fitness': [],
    })


class SearchDriver:
    """
    Advances a Population over a MazeEnv in fixed intervals.
    """

    def __init__(
        self,
        env: MazeEnv,
        population: Population,
        interval: float = 0.5,
        verbose: bool = False
    ):
        """
        Args:
            env: Carved maze
            population: Population spawned on `env`
            interval: Time between ticks
            verbose: Whether to print progress
        """
        assert interval > 0, "interval must be positive"

        self.interval = interval
        self.verbose = verbose
        self.state = SimulationState(env=env, population=population)

    @property
    def is_running(self) -> bool:
        return self.state.running

    @property
    def history(self) -> Dict[str, List]:
        return self.state.history

    # --------------------------------------------------
    # Stepping
    # --------------------------------------------------

    def advance(self, delta_time: float) -> Optional[TerminalEvent]:
        """
        Move the clock forward and run every tick that came due.

        Args:
            delta_time: Elapsed time since the previous call (>= 0)

        Returns:
            event: The terminal event if the search ended during this
                   call, else None. Once ended, always None.
        """
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")

        state = self.state
        if not state.running:
            return None

        state.clock += delta_time

        while state.running and state.clock >= state.next_time:
            event = self._tick()
            state.next_time += self.interval
            if event is not None:
                return event

        return None

    def _tick(self) -> Optional[TerminalEvent]:
        state = self.state
        population = state.population

        found = population.tick()
        state.ticks += 1

        stats = population.statistics()
        state.history['tick'].append(state.ticks)
        state.history['best_fitness'].append(stats['best_fitness'])
        state.history['mean_fitness'].append(stats['mean_fitness'])

        if found is not None:
            if self.verbose:
                print(f"Found end at {found.grid_pos} on tick {state.ticks}")
            return self._finish(TerminalEvent(
                kind=EventKind.GOAL_FOUND,
                tick=state.ticks,
                agent=found
            ))

        if population.all_exhausted():
            selection = population.crossover()
            if self.verbose:
                print(
                    f"Move budget exhausted after {state.ticks} ticks | "
                    f"Primary: {selection.primary.score:6.2f} | "
                    f"Secondary: {selection.secondary.score:6.2f}"
                )
            return self._finish(TerminalEvent(
                kind=EventKind.BUDGET_EXHAUSTED,
                tick=state.ticks,
                selection=selection
            ))

        return None

    def _finish(self, event: TerminalEvent) -> TerminalEvent:
        self.state.running = False
        self.state.event = event
        return event

    # --------------------------------------------------
    # Headless run
    # --------------------------------------------------

    def run(self, max_ticks: Optional[int] = None) -> Dict:
        """
        Drive the search to completion without a real clock.

        Args:
            max_ticks: Optional safety cap on the number of ticks

        Returns:
            summary: Terminal event, tick count, final statistics,
                     history and wall time
        """
        population = self.state.population

        if self.verbose:
            print("=" * 60)
            print(f"Starting search on {self.state.env.columns} x {self.state.env.rows} maze")
            print(f"Population size: {population.population_size}")
            print(f"Max moves: {population.max_moves}")
            print(f"Start: {population.spawn_pos} | Goal: {population.exit_pos}")
            print("=" * 60)

        start_time = time.time()

        # First tick is due immediately
        event = self.advance(0.0)
        while event is None and self.is_running:
            if max_ticks is not None and self.state.ticks >= max_ticks:
                break
            event = self.advance(self.interval)

        total_time = time.time() - start_time

        if self.verbose:
            print("=" * 60)
            print(f"Search complete in {total_time:.3f}s")

        return {
            'event': event,
            'success': event is not None and event.kind is EventKind.GOAL_FOUND,
            'ticks': self.state.ticks,
            'statistics': population.statistics(),
            'history': self.state.history,
            'total_time': total_time,
        }
