from typing import Tuple

# Each blocked move costs this fraction of a point
PENALTY_DIVISOR = 5


def calculate_fitness(
    grid_pos: Tuple[int, int],
    exit_pos: Tuple[int, int],
    penalty: float
) -> float:
    """
    Score an agent position against the exit.

    score = |(x - ex) + |y - ey|| - penalty / 5

    The absolute value is nested, so this is NOT the Manhattan distance
    |dx| + |dy|: opposite-signed offsets cancel. Kept as is; see
    manhattan_distance() for the true distance.
    """
    dx = grid_pos[0] - exit_pos[0]
    dy = grid_pos[1] - exit_pos[1]
    return float(abs(dx + abs(dy)) - penalty / PENALTY_DIVISOR)


def manhattan_distance(a: Tuple[int, int], b: Tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])
