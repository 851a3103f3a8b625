import numpy as np
import pytest

from evoracer.brain import Brain
from evoracer.car_physics import CarPhysics
from evoracer.distance_sensor import DistanceSensor
from evoracer.track_generator import build_default_track
from evoracer.constants import BRAIN_INPUT_SIZE, BRAIN_HIDDEN_SIZE, BRAIN_OUTPUT_SIZE


@pytest.fixture(scope="session")
def default_track():
    return build_default_track()


@pytest.fixture
def sensor(default_track):
    return DistanceSensor(default_track)


@pytest.fixture
def physics():
    return CarPhysics()


@pytest.fixture
def full_throttle_brain():
    """Brain that always answers steer 0, throttle 1"""
    genes = np.zeros(Brain.genome_length_for(BRAIN_INPUT_SIZE, BRAIN_HIDDEN_SIZE, BRAIN_OUTPUT_SIZE))
    genes[-1] = 20.0  # bias of the throttle output
    return Brain(weights=genes)
