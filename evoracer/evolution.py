"""
Generational genetic algorithm over brain genomes.

Ranking is a stable sort by fitness, best first. The top ``elite_count``
brains are copied into the next generation untouched; every other child
is bred from two parents drawn uniformly from the top
``parent_pool_fraction`` of the ranking, optionally recombined with a
single-point crossover, then mutated gene by gene.
"""

import logging
import math
from typing import List, Optional, Sequence

import numpy as np
from numpy.random import default_rng

from .brain import Brain
from .errors import EmptyPopulationError, InvalidGenomeLengthError
from .constants import (
    DEFAULT_MUTATION_RATE,
    DEFAULT_CROSSOVER_RATE,
    MUTATION_SCALE,
    ELITE_COUNT,
    PARENT_POOL_FRACTION
)

logger = logging.getLogger(__name__)


def single_point_crossover(parent_a: np.ndarray, parent_b: np.ndarray, cut: int) -> np.ndarray:
    """
    Child genome made of ``parent_a[:cut]`` followed by ``parent_b[cut:]``.

    Raises:
        InvalidGenomeLengthError: Parents differ in length
        ValueError: ``cut`` is outside [0, len]
    """
    parent_a = np.asarray(parent_a, dtype=np.float64)
    parent_b = np.asarray(parent_b, dtype=np.float64)
    if parent_a.shape != parent_b.shape:
        raise InvalidGenomeLengthError(
            f"Cannot cross genomes of shapes {parent_a.shape} and {parent_b.shape}"
        )
    if not 0 <= cut <= parent_a.shape[0]:
        raise ValueError(f"Cut point {cut} outside [0, {parent_a.shape[0]}]")
    return np.concatenate([parent_a[:cut], parent_b[cut:]])


def mutate_genes(genes: np.ndarray, rate: float, scale: float, rng: np.random.Generator) -> np.ndarray:
    """
    Return a mutated copy of ``genes``.

    Each gene independently, with probability ``rate``, gets an offset drawn
    uniformly from [-scale, scale].
    """
    genes = np.asarray(genes, dtype=np.float64)
    mask = rng.random(genes.shape) < rate
    offsets = rng.uniform(-1.0, 1.0, size=genes.shape) * scale
    return genes + offsets * mask


class GeneticAlgorithm:
    """Builds the next generation of brains from a ranked population"""

    def __init__(self,
                 rng: Optional[np.random.Generator] = None,
                 mutation_rate: float = DEFAULT_MUTATION_RATE,
                 crossover_rate: float = DEFAULT_CROSSOVER_RATE,
                 mutation_scale: float = MUTATION_SCALE,
                 elite_count: int = ELITE_COUNT,
                 parent_pool_fraction: float = PARENT_POOL_FRACTION):
        if not 0.0 <= mutation_rate <= 1.0:
            raise ValueError(f"mutation_rate must be in [0, 1]: {mutation_rate}")
        if not 0.0 <= crossover_rate <= 1.0:
            raise ValueError(f"crossover_rate must be in [0, 1]: {crossover_rate}")
        if elite_count < 0:
            raise ValueError(f"elite_count must not be negative: {elite_count}")
        if not 0.0 < parent_pool_fraction <= 1.0:
            raise ValueError(f"parent_pool_fraction must be in (0, 1]: {parent_pool_fraction}")

        self.rng = rng if rng is not None else default_rng()
        self.mutation_rate = float(mutation_rate)
        self.crossover_rate = float(crossover_rate)
        self.mutation_scale = float(mutation_scale)
        self.elite_count = int(elite_count)
        self.parent_pool_fraction = float(parent_pool_fraction)

    def rank(self, cars: Sequence) -> List:
        """
        Sort cars by fitness, best first. Ties keep their population order.

        Raises:
            EmptyPopulationError: Fewer than two cars
        """
        if len(cars) < 2:
            raise EmptyPopulationError(f"Need at least 2 cars to evolve, got {len(cars)}")
        return sorted(cars, key=lambda car: car.fitness, reverse=True)

    def parent_pool_size(self, population_size: int) -> int:
        return max(1, math.ceil(population_size * self.parent_pool_fraction))

    def select_parent(self, ranked: Sequence) -> Brain:
        pool = self.parent_pool_size(len(ranked))
        return ranked[int(self.rng.integers(0, pool))].brain

    def reproduce(self, parent_a: Brain, parent_b: Brain) -> Brain:
        """Breed one child brain from two parents"""
        genes_a = parent_a.get_genes()
        if self.rng.random() < self.crossover_rate:
            cut = int(self.rng.integers(0, genes_a.shape[0]))
            child = single_point_crossover(genes_a, parent_b.get_genes(), cut)
        else:
            child = genes_a
        child = mutate_genes(child, self.mutation_rate, self.mutation_scale, self.rng)
        return Brain.from_genes(child, parent_a)

    def next_generation_brains(self, cars: Sequence, population_size: int) -> List[Brain]:
        """
        Brains for the next generation.

        Args:
            cars: Finished population, any order
            population_size: Number of brains to produce

        Returns:
            List of independent brains; the first ones are the elite clones in rank order
        """
        ranked = self.rank(cars)

        brains = [car.brain.clone() for car in ranked[:min(self.elite_count, population_size)]]
        while len(brains) < population_size:
            parent_a = self.select_parent(ranked)
            parent_b = self.select_parent(ranked)
            brains.append(self.reproduce(parent_a, parent_b))

        logger.debug(
            f"Bred {population_size} brains: {min(self.elite_count, population_size)} elites, "
            f"parent pool {self.parent_pool_size(len(ranked))}, "
            f"mutation rate {self.mutation_rate}, crossover rate {self.crossover_rate}"
        )
        return brains
