"""Tests for experiments.run_all."""

from algo.search import SearchDriver
from experiments.run_all import create_components, get_shared_config, run_search, run_trials


def _small_config():
    config = get_shared_config()
    config.update(maze_rows=6, maze_columns=6, population_size=8, max_moves=5)
    return config


def test_shared_config_defaults():
    config = get_shared_config()
    assert config['population_size'] == 100
    assert config['max_moves'] == 10
    assert config['mutation_chance'] == 0.2
    assert config['interval'] == 0.5


def test_create_components_wires_everything():
    components = create_components(_small_config(), seed=3)
    env = components['env']
    population = components['population']
    assert isinstance(components['driver'], SearchDriver)
    assert (env.rows, env.columns) == (6, 6)
    assert len(population) == 8
    assert population.exit_pos == env.get_goal()


def test_odd_config_is_normalized():
    config = _small_config()
    config.update(maze_rows=7, maze_columns=3)
    env = create_components(config, seed=0)['env']
    assert (env.rows, env.columns) == (6, 4)


def test_run_search_is_reproducible():
    a = run_search(_small_config(), seed=5, verbose=False)
    b = run_search(_small_config(), seed=5, verbose=False)
    assert a['ticks'] == b['ticks']
    assert a['statistics'] == b['statistics']


def test_run_search_verbose_prints_maze(capsys):
    run_search(_small_config(), seed=1, verbose=True)
    out = capsys.readouterr().out
    assert " S " in out
    assert "Ticks:" in out


def test_run_trials_summary():
    summary = run_trials(_small_config(), seeds=[0, 1, 2], verbose=False)
    assert summary['num_trials'] == 3
    assert 0.0 <= summary['success_rate'] <= 1.0
    assert 1 <= summary['mean_ticks'] <= 5
