"""
experiments/run_all.py

Batch search trials over freshly generated mazes.

Every trial generates a new maze from its seed, spawns a population on
the centre-room entrance and runs the search headless until it ends.
Trials share one configuration so that results are comparable.
"""

import sys
import os
import numpy as np
import time
from typing import Dict, List, Optional

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def get_shared_config():
    return {
        'maze_rows': 10,
        'maze_columns': 10,
        'cell_size': 1.0,
        'cell_px': 32,
        'disable_cell_visual': False,
        'population_size': 100,
        'max_moves': 10,
        'mutation_chance': 0.2,
        'interval': 0.5,
    }


def create_components(config: Dict, seed: Optional[int], renderer=None):
    from env.maze_env import MazeEnv
    from evo.evolution import Population
    from algo.search import SearchDriver
    from render.base import HeadlessRenderer

    if renderer is None:
        renderer = HeadlessRenderer()

    env = MazeEnv(
        rows=config['maze_rows'],
        columns=config['maze_columns'],
        cell_size=config['cell_size'],
        renderer=renderer,
        seed=seed
    )
    env.reset()

    population = Population(
        env=env,
        population_size=config['population_size'],
        max_moves=config['max_moves'],
        mutation_chance=config['mutation_chance'],
        seed=None if seed is None else seed + 1
    )

    driver = SearchDriver(
        env=env,
        population=population,
        interval=config['interval'],
        verbose=config.get('verbose', False)
    )

    return {
        'env': env,
        'population': population,
        'driver': driver
    }


def run_search(config: Dict, seed: Optional[int], verbose: bool = True) -> Dict:
    components = create_components(dict(config, verbose=verbose), seed=seed)
    results = components['driver'].run()

    if verbose:
        print()
        print(components['env'].to_ascii())
        print()
        print(f"Success: {results['success']}")
        print(f"Ticks: {results['ticks']}")
        print(f"Best fitness: {results['statistics']['best_fitness']:.2f}")
        print(f"Mean penalty: {results['statistics']['mean_penalty']:.2f}")

    return results


def run_trials(config: Dict, seeds: List[int], verbose: bool = True) -> Dict:
    if verbose:
        print("=" * 70)
        print(f"SEARCH TRIALS: {len(seeds)} mazes")
        print("=" * 70)

    start = time.time()
    successes, ticks, best_fitness = [], [], []

    for seed in seeds:
        r = run_search(config, seed=seed, verbose=False)
        successes.append(r['success'])
        ticks.append(r['ticks'])
        best_fitness.append(r['statistics']['best_fitness'])

        if verbose:
            print(
                f"Seed {seed:5d} | "
                f"{'FOUND' if r['success'] else 'exhausted':9s} | "
                f"Ticks: {r['ticks']:4d} | "
                f"Best: {r['statistics']['best_fitness']:6.2f}"
            )

    summary = {
        'num_trials': len(seeds),
        'success_rate': float(np.mean(successes)),
        'mean_ticks': float(np.mean(ticks)),
        'mean_best_fitness': float(np.mean(best_fitness)),
        'std_best_fitness': float(np.std(best_fitness)),
        'total_time': time.time() - start,
    }

    if verbose:
        print("=" * 70)
        print(f"  Success rate: {summary['success_rate']:.2%}")
        print(f"  Mean ticks: {summary['mean_ticks']:.1f}")
        print(f"  Best fitness: {summary['mean_best_fitness']:.2f} ± {summary['std_best_fitness']:.2f}")
        print(f"  Total time: {summary['total_time']:.1f}s")

    return summary


def main():
    config = get_shared_config()
    run_search(config, seed=42, verbose=True)
    print()
    run_trials(config, seeds=list(range(10)))


if __name__ == "__main__":
    main()
