"""
Interactive evolution demo.

Opens a window on the built-in circuit and evolves a population of
drivers while you watch.

Keys:
    SPACE   start / pause
    R       reset with a fresh random population
    + / -   more / fewer ticks per frame
    UP/DOWN population size (restarts the run)
    [ / ]   mutation rate
    , / .   crossover rate
    D       debug panel
    C       follow the leader / whole track
    K       show checkpoints
    ESC     quit
"""

import sys
import os
import logging
import pygame
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from evoracer.simulation import Simulation
from evoracer.renderer import Renderer
from evoracer.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_LOG_FORMAT,
    MIN_POPULATION_SIZE,
    MAX_POPULATION_SIZE,
    MAX_TICKS_PER_FRAME
)

POPULATION_STEP = 10
RATE_STEP = 0.05

logger = logging.getLogger(__name__)


def _clamp(value, low, high):
    return max(low, min(high, value))


def handle_key(simulation: Simulation, key: int) -> bool:
    """Apply one key press to the simulation. Returns False to quit."""
    config = simulation.config

    if key == pygame.K_ESCAPE:
        return False
    elif key == pygame.K_SPACE:
        if simulation.running:
            simulation.pause()
        else:
            simulation.start()
    elif key == pygame.K_r:
        simulation.reset()
    elif key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
        simulation.set_ticks_per_frame(_clamp(config.ticks_per_frame + 1, 1, MAX_TICKS_PER_FRAME))
    elif key in (pygame.K_MINUS, pygame.K_KP_MINUS):
        simulation.set_ticks_per_frame(_clamp(config.ticks_per_frame - 1, 1, MAX_TICKS_PER_FRAME))
    elif key == pygame.K_UP:
        size = _clamp(config.population_size + POPULATION_STEP, MIN_POPULATION_SIZE, MAX_POPULATION_SIZE)
        simulation.set_population_size(max(size, config.elite_count))
    elif key == pygame.K_DOWN:
        size = _clamp(config.population_size - POPULATION_STEP, MIN_POPULATION_SIZE, MAX_POPULATION_SIZE)
        simulation.set_population_size(max(size, config.elite_count))
    elif key == pygame.K_LEFTBRACKET:
        simulation.set_mutation_rate(round(_clamp(config.mutation_rate - RATE_STEP, 0.0, 1.0), 2))
    elif key == pygame.K_RIGHTBRACKET:
        simulation.set_mutation_rate(round(_clamp(config.mutation_rate + RATE_STEP, 0.0, 1.0), 2))
    elif key == pygame.K_COMMA:
        simulation.set_crossover_rate(round(_clamp(config.crossover_rate - RATE_STEP, 0.0, 1.0), 2))
    elif key == pygame.K_PERIOD:
        simulation.set_crossover_rate(round(_clamp(config.crossover_rate + RATE_STEP, 0.0, 1.0), 2))
    return True


def main():
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format=DEFAULT_LOG_FORMAT)

    simulation = Simulation()
    renderer = Renderer(track=simulation.track)
    logger.info("Press SPACE to start evolving")

    try:
        running = True
        while running:
            renderer.render_frame(simulation)

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    running = handle_key(simulation, event.key) and running

            simulation.run_frame()

    finally:
        simulation.close()
        renderer.close()


if __name__ == "__main__":
    main()
