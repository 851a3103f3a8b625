"""
Runtime-tunable simulation settings.

Fixed physical and geometric defaults live in constants; the values the
viewer or a host loop may change while the simulation runs are gathered
here so a Simulation can swap them atomically between generations.
"""

from dataclasses import dataclass
from .constants import (
    DEFAULT_POPULATION_SIZE,
    MIN_POPULATION_SIZE,
    MAX_POPULATION_SIZE,
    DEFAULT_MUTATION_RATE,
    DEFAULT_CROSSOVER_RATE,
    MUTATION_SCALE,
    WEIGHT_INIT_SCALE,
    ELITE_COUNT,
    PARENT_POOL_FRACTION,
    BRAIN_HIDDEN_SIZE,
    SIMULATION_TIME_STEP,
    DEFAULT_TICKS_PER_FRAME,
    MAX_TICKS_PER_FRAME,
    LIFETIME_LIMIT
)


@dataclass(frozen=True)
class SimulationConfig:
    population_size: int = DEFAULT_POPULATION_SIZE
    mutation_rate: float = DEFAULT_MUTATION_RATE
    crossover_rate: float = DEFAULT_CROSSOVER_RATE
    mutation_scale: float = MUTATION_SCALE
    weight_init_scale: float = WEIGHT_INIT_SCALE
    elite_count: int = ELITE_COUNT
    parent_pool_fraction: float = PARENT_POOL_FRACTION
    hidden_size: int = BRAIN_HIDDEN_SIZE
    time_step: float = SIMULATION_TIME_STEP
    ticks_per_frame: int = DEFAULT_TICKS_PER_FRAME
    max_workers: int = 1  # > 1 steps cars on a thread pool
    lifetime_limit: float = LIFETIME_LIMIT

    def __post_init__(self):
        if not MIN_POPULATION_SIZE <= self.population_size <= MAX_POPULATION_SIZE:
            raise ValueError(
                f"population_size must be in [{MIN_POPULATION_SIZE}, {MAX_POPULATION_SIZE}]: "
                f"{self.population_size}"
            )
        if not 0.0 <= self.mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1]: {self.mutation_rate}")
        if not 0.0 <= self.crossover_rate <= 1.0:
            raise ValueError(f"crossover_rate must be in [0, 1]: {self.crossover_rate}")
        if self.mutation_scale < 0:
            raise ValueError(f"mutation_scale must not be negative: {self.mutation_scale}")
        if self.weight_init_scale <= 0:
            raise ValueError(f"weight_init_scale must be positive: {self.weight_init_scale}")
        if not 0 <= self.elite_count <= self.population_size:
            raise ValueError(
                f"elite_count must be in [0, population_size]: {self.elite_count}"
            )
        if not 0.0 < self.parent_pool_fraction <= 1.0:
            raise ValueError(f"parent_pool_fraction must be in (0, 1]: {self.parent_pool_fraction}")
        if self.hidden_size < 1:
            raise ValueError(f"hidden_size must be at least 1: {self.hidden_size}")
        if self.time_step <= 0:
            raise ValueError(f"time_step must be positive: {self.time_step}")
        if not 1 <= self.ticks_per_frame <= MAX_TICKS_PER_FRAME:
            raise ValueError(
                f"ticks_per_frame must be in [1, {MAX_TICKS_PER_FRAME}]: {self.ticks_per_frame}"
            )
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
        if self.lifetime_limit <= 0:
            raise ValueError(f"lifetime_limit must be positive: {self.lifetime_limit}")
