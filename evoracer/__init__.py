"""Neural-network racing drivers evolved with a genetic algorithm."""

from .errors import DegenerateGeometryError, InvalidGenomeLengthError, EmptyPopulationError
from .track_generator import Track, StartPose, TrackBuilder, build_default_track
from .distance_sensor import DistanceSensor
from .car_physics import CarState, CarPhysics
from .brain import Brain
from .progress_tracker import ProgressTracker
from .car import Car
from .evolution import GeneticAlgorithm, single_point_crossover, mutate_genes
from .config import SimulationConfig
from .simulation import Simulation, GenerationStats

__all__ = [
    "DegenerateGeometryError",
    "InvalidGenomeLengthError",
    "EmptyPopulationError",
    "Track",
    "StartPose",
    "TrackBuilder",
    "build_default_track",
    "DistanceSensor",
    "CarState",
    "CarPhysics",
    "Brain",
    "ProgressTracker",
    "Car",
    "GeneticAlgorithm",
    "single_point_crossover",
    "mutate_genes",
    "SimulationConfig",
    "Simulation",
    "GenerationStats",
]
