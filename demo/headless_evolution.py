"""
Headless evolution run.

Evolves drivers on the built-in circuit without opening a window and logs
a summary line per generation.
"""

import sys
import os
import argparse
import logging
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
from evoracer.config import SimulationConfig
from evoracer.simulation import Simulation
from evoracer.constants import DEFAULT_LOG_LEVEL, DEFAULT_LOG_FORMAT, DEFAULT_POPULATION_SIZE

logger = logging.getLogger(__name__)


def parse_args():
    parser = argparse.ArgumentParser(description="Evolve racing drivers without a window")
    parser.add_argument("--generations", type=int, default=20)
    parser.add_argument("--population", type=int, default=DEFAULT_POPULATION_SIZE)
    parser.add_argument("--mutation-rate", type=float, default=None)
    parser.add_argument("--workers", type=int, default=1, help="threads used to step cars")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--max-ticks", type=int, default=None, help="give up on a generation after this many ticks")
    return parser.parse_args()


def main():
    args = parse_args()
    logging.basicConfig(level=DEFAULT_LOG_LEVEL, format=DEFAULT_LOG_FORMAT)

    settings = {"population_size": args.population, "max_workers": args.workers}
    if args.mutation_rate is not None:
        settings["mutation_rate"] = args.mutation_rate
    config = SimulationConfig(**settings)

    with Simulation(config=config, seed=args.seed) as simulation:
        for _ in range(args.generations):
            stats = simulation.run_generation(max_ticks=args.max_ticks)
            if stats is None:
                break

        history = simulation.history
        if history:
            best = max(history, key=lambda stats: stats.best_fitness)
            logger.info(
                f"Finished {len(history)} generations; best fitness {best.best_fitness:.3f} "
                f"in generation {best.generation} ({best.best_checkpoints} checkpoints)"
            )


if __name__ == "__main__":
    main()
