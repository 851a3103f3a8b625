"""
Simulation clock and generation management.

The Simulation owns one track, the shared sensor and physics, and the
current population. Every tick steps each living car once; when the last
car dies the population is ranked, a summary is logged and recorded, and
a new generation is bred before the next tick starts.

All state lives on the Simulation instance. A host loop drives it with
``advance(n)`` or ``run_frame()``; another thread may call ``pause()`` or
``request_stop()`` and the current ``advance`` returns at the next tick
boundary.
"""

import logging
import threading
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

import numpy as np
from numpy.random import default_rng

from .brain import Brain
from .car import Car
from .car_physics import CarPhysics
from .config import SimulationConfig
from .distance_sensor import DistanceSensor
from .evolution import GeneticAlgorithm
from .track_generator import Track, build_default_track
from .constants import (
    BRAIN_FEEDBACK_INPUTS,
    BRAIN_OUTPUT_SIZE,
    DEBUG_PANEL_WEIGHTS_SHOWN
)

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    generation: int
    population_size: int
    best_fitness: float
    mean_fitness: float
    best_checkpoints: int
    ticks: int
    death_reasons: Dict[str, int] = field(default_factory=dict)


def _step_car(car: Car, dt: float) -> None:
    car.step(dt)


class Simulation:
    """Explicit simulation context: track, population, clock and commands"""

    def __init__(self, track: Optional[Track] = None,
                 config: Optional[SimulationConfig] = None,
                 seed: Optional[int] = None):
        """
        Initialize simulation with a fresh random population.

        Args:
            track: Track to race on; the built-in circuit when omitted
            config: Runtime settings; defaults when omitted
            seed: Seed for the single random generator behind all brains and breeding
        """
        self.track = track if track is not None else build_default_track()
        self.config = config if config is not None else SimulationConfig()
        self.seed = seed

        self.sensor = DistanceSensor(self.track)
        self.physics = CarPhysics()

        self.running = False
        self._stop_event = threading.Event()
        self._lock = threading.RLock()
        self._executor: Optional[ThreadPoolExecutor] = None

        self._populate(self.config.population_size)
        logger.info(
            f"Simulation initialized: population {self.config.population_size}, "
            f"{len(self.track.checkpoints)} checkpoints, seed {seed}"
        )

    # ------------------------------------------------------------------
    # Population lifecycle

    def _populate(self, population_size: int) -> None:
        self.rng = default_rng(self.seed)
        self._generation = 1
        self._history: List[GenerationStats] = []
        self._previous_best_car: Optional[Car] = None
        self._best_fitness_ever: Optional[float] = None
        self.tick_count = 0
        self.total_ticks = 0

        input_size = self.sensor.num_rays + BRAIN_FEEDBACK_INPUTS
        brains = [
            Brain(input_size, self.config.hidden_size, BRAIN_OUTPUT_SIZE,
                  rng=self.rng, weight_scale=self.config.weight_init_scale)
            for _ in range(population_size)
        ]
        self._cars = self._spawn_cars(brains)

    def _spawn_cars(self, brains: List[Brain]) -> List[Car]:
        return [
            Car(self.track, self.sensor, self.physics, brain,
                generation=self._generation,
                lifetime_limit=self.config.lifetime_limit,
                car_id=f"g{self._generation}-{index}")
            for index, brain in enumerate(brains)
        ]

    def _evolve(self) -> GenerationStats:
        config = self.config
        ga = GeneticAlgorithm(
            rng=self.rng,
            mutation_rate=config.mutation_rate,
            crossover_rate=config.crossover_rate,
            mutation_scale=config.mutation_scale,
            elite_count=config.elite_count,
            parent_pool_fraction=config.parent_pool_fraction
        )
        ranked = ga.rank(self._cars)
        stats = self._generation_stats(ranked)
        self._history.append(stats)

        leader = ranked[0]
        self._previous_best_car = leader
        if self._best_fitness_ever is None or leader.fitness > self._best_fitness_ever:
            self._best_fitness_ever = leader.fitness

        reasons = ", ".join(f"{reason} {count}" for reason, count in sorted(stats.death_reasons.items()))
        logger.info(
            f"Generation {stats.generation} finished after {stats.ticks} ticks: "
            f"best {stats.best_fitness:.3f} ({stats.best_checkpoints} checkpoints), "
            f"mean {stats.mean_fitness:.3f}, deaths: {reasons}"
        )

        brains = ga.next_generation_brains(self._cars, config.population_size)
        self._generation += 1
        self._cars = self._spawn_cars(brains)
        self.tick_count = 0
        return stats

    def _generation_stats(self, ranked: List[Car]) -> GenerationStats:
        fitness = np.array([car.fitness for car in ranked])
        reasons = Counter(car.death_reason for car in ranked if car.death_reason is not None)
        return GenerationStats(
            generation=self._generation,
            population_size=len(ranked),
            best_fitness=float(fitness.max()),
            mean_fitness=float(fitness.mean()),
            best_checkpoints=ranked[0].checkpoint_index,
            ticks=self.tick_count,
            death_reasons=dict(reasons)
        )

    # ------------------------------------------------------------------
    # Clock

    def tick(self) -> bool:
        """
        Step every living car once, evolving if that finished the generation.

        Returns:
            True if a new generation was created during this tick
        """
        with self._lock:
            dt = self.config.time_step
            alive = [car for car in self._cars if car.alive]

            if self.config.max_workers > 1:
                executor = self._get_executor()
                # Joins every step before the extinction check below
                list(executor.map(_step_car, alive, [dt] * len(alive)))
            else:
                for car in alive:
                    car.step(dt)

            self.tick_count += 1
            self.total_ticks += 1

            if any(car.alive for car in self._cars):
                return False
            self._evolve()
            return True

    def advance(self, n_ticks: int) -> int:
        """
        Run up to ``n_ticks`` ticks.

        A pause or stop request ends the run at the next tick boundary. A
        request made before the call is honoured too: nothing runs until
        ``start()`` clears it.

        Returns:
            Number of generations created
        """
        evolutions = 0
        for _ in range(n_ticks):
            if self._stop_event.is_set():
                break
            if self.tick():
                evolutions += 1
        return evolutions

    def run_frame(self) -> int:
        """Advance by ``ticks_per_frame`` ticks while running, otherwise do nothing"""
        if not self.running:
            return 0
        return self.advance(self.config.ticks_per_frame)

    def run_generation(self, max_ticks: Optional[int] = None) -> Optional[GenerationStats]:
        """
        Tick until the current generation ends.

        Args:
            max_ticks: Give up after this many ticks

        Returns:
            Stats of the finished generation, or None if stopped or out of ticks
        """
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            if self._stop_event.is_set():
                return None
            ticks += 1
            if self.tick():
                return self._history[-1]

        logger.warning(
            f"Generation {self._generation} still has {self.alive_count} cars alive after {max_ticks} ticks"
        )
        return None

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.config.max_workers, thread_name_prefix="evoracer"
            )
        return self._executor

    # ------------------------------------------------------------------
    # Commands

    def start(self) -> None:
        self._stop_event.clear()
        self.running = True
        logger.info("Simulation started")

    def pause(self) -> None:
        self.running = False
        self._stop_event.set()
        logger.info("Simulation paused")

    def request_stop(self) -> None:
        """Ask the advance in progress to return at the next tick boundary. Stays set until ``start()``."""
        self._stop_event.set()

    def reset(self, population_size: Optional[int] = None) -> None:
        """Discard the run and start again from a random generation 1"""
        with self._lock:
            if population_size is not None:
                self.config = replace(self.config, population_size=population_size)
            self._populate(self.config.population_size)
        logger.info(f"Simulation reset with population {self.config.population_size}")

    def set_population_size(self, population_size: int) -> None:
        """Change the population size. Restarts the run."""
        self.reset(population_size=population_size)

    def set_mutation_rate(self, mutation_rate: float) -> None:
        """Used from the next reproduction on"""
        with self._lock:
            self.config = replace(self.config, mutation_rate=mutation_rate)
        logger.info(f"Mutation rate set to {mutation_rate:.2f}")

    def set_crossover_rate(self, crossover_rate: float) -> None:
        """Used from the next reproduction on"""
        with self._lock:
            self.config = replace(self.config, crossover_rate=crossover_rate)
        logger.info(f"Crossover rate set to {crossover_rate:.2f}")

    def set_ticks_per_frame(self, ticks_per_frame: int) -> None:
        with self._lock:
            self.config = replace(self.config, ticks_per_frame=ticks_per_frame)
        logger.info(f"Ticks per frame set to {ticks_per_frame}")

    # ------------------------------------------------------------------
    # Read access

    @property
    def cars(self) -> List[Car]:
        return list(self._cars)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def alive_count(self) -> int:
        return sum(1 for car in self._cars if car.alive)

    @property
    def best_car(self) -> Car:
        """Highest-fitness living car, or highest overall once all are dead"""
        alive = [car for car in self._cars if car.alive]
        return max(alive or self._cars, key=lambda car: car.fitness)

    @property
    def previous_best_car(self) -> Optional[Car]:
        return self._previous_best_car

    @property
    def best_fitness_ever(self) -> Optional[float]:
        return self._best_fitness_ever

    @property
    def history(self) -> List[GenerationStats]:
        return list(self._history)

    def get_debug_data(self) -> dict:
        """Structured data about the current leader for the debug panel"""
        leader = self.best_car
        brain = leader.brain
        return {
            'generation': self._generation,
            'alive': self.alive_count,
            'population': len(self._cars),
            'car_id': leader.car_id,
            'car_position': leader.position,
            'car_angle': leader.heading,
            'speed': leader.speed,
            'controls': {
                'steer': leader.steer,
                'throttle': leader.throttle
            },
            'brain': {
                'inputs': brain.last_inputs.copy(),
                'hidden': brain.last_hidden.copy(),
                'outputs': brain.last_outputs.copy(),
                'weights': brain.get_genes()[:DEBUG_PANEL_WEIGHTS_SHOWN]
            },
            'fitness': {
                'checkpoints': leader.checkpoint_index,
                'distance_score': leader.progress.distance_score,
                'total': leader.fitness
            },
            'sensor_data': {
                'distances': leader.sensor_readings.copy(),
                'angles': self.sensor.get_sensor_angles(leader.heading)
            }
        }

    # ------------------------------------------------------------------
    # Resources

    def close(self) -> None:
        """Shut down the worker pool"""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        logger.info("Simulation closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    def __str__(self) -> str:
        return (f"Simulation: generation {self._generation}, "
                f"{self.alive_count}/{len(self._cars)} alive, tick {self.tick_count}")
