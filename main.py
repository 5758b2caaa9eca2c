import pygame

from experiments.run_all import get_shared_config, create_components
from env.maze_env import normalize_dimensions
from render.renderer import MazeRenderer

if __name__ == "__main__":
    config = get_shared_config()
    config['verbose'] = True

    rows, columns = normalize_dimensions(config['maze_rows'], config['maze_columns'])

    pygame.init()
    renderer = MazeRenderer(rows, columns, cell_px=config['cell_px'],
                            disable_cell_visual=config['disable_cell_visual'])
    components = create_components(config, seed=None, renderer=renderer)
    env, driver = components['env'], components['driver']

    clock = pygame.time.Clock()
    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

        driver.advance(clock.tick(60) / 1000.0)
        renderer.draw(env)
        renderer.draw_agents()

    pygame.quit()
