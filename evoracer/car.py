"""
Vehicle implementation.

A Car couples one Brain to the shared sensor and physics of a simulation
and runs the per-tick pipeline: advance clocks, sense, check collision
and stagnation, think, move, score progress, check timeouts. A car that
dies is frozen with its last pose and fitness and never steps again.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from .brain import Brain
from .car_physics import CarPhysics, CarState
from .distance_sensor import DistanceSensor
from .progress_tracker import ProgressTracker
from .track_generator import Track
from .constants import (
    CAR_WIDTH,
    CAR_LENGTH,
    CAR_LAUNCH_SPEED,
    COLLISION_SENSOR_THRESHOLD,
    STAGNATION_SLOW_TIMEOUT,
    STAGNATION_MIN_SPEED,
    STAGNATION_HARD_TIMEOUT,
    LIFETIME_LIMIT,
    SIMULATION_TIME_STEP,
    DEATH_COLLISION,
    DEATH_STAGNATION,
    DEATH_TIMEOUT,
    DEATH_LIFETIME
)

logger = logging.getLogger(__name__)


class Car:
    """One evolving driver: body state, progress and an exclusively owned brain"""

    def __init__(self, track: Track, sensor: DistanceSensor, physics: CarPhysics, brain: Brain,
                 generation: int = 1,
                 lifetime_limit: float = LIFETIME_LIMIT,
                 car_id: str = "car"):
        """
        Spawn a car at the track's start pose.

        Args:
            track: Track to drive on
            sensor: Shared ray sensor for the track
            physics: Shared physics integrator
            brain: Controller owned by this car from now on
            generation: Generation number shown to observers
            lifetime_limit: Total time after which the car is retired
            car_id: Identifier for log messages
        """
        expected_inputs = sensor.num_rays + 2
        if brain.input_size != expected_inputs:
            raise ValueError(
                f"Brain takes {brain.input_size} inputs but the sensor feeds {expected_inputs}"
            )

        self.track = track
        self.sensor = sensor
        self.physics = physics
        self.brain = brain
        self.generation = generation
        self.lifetime_limit = lifetime_limit
        self.car_id = car_id

        self.width = CAR_WIDTH
        self.length = CAR_LENGTH

        self.state: CarState = physics.spawn(track.start, CAR_LAUNCH_SPEED)
        self.progress = ProgressTracker(track)
        self.alive = True
        self.death_reason: Optional[str] = None
        self.ticks_alive = 0

        # Last controls, fed back to the brain on the next tick
        self.steer = 0.0
        self.throttle = 0.0
        self.sensor_readings = np.ones(sensor.num_rays)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.state.x, self.state.y)

    @property
    def heading(self) -> float:
        return self.state.heading

    @property
    def speed(self) -> float:
        return self.state.speed

    @property
    def fitness(self) -> float:
        return self.progress.fitness

    @property
    def checkpoint_index(self) -> int:
        return self.progress.checkpoint_index

    def step(self, dt: float = SIMULATION_TIME_STEP) -> None:
        """
        Run one tick of the pipeline. Does nothing once the car is dead.

        Args:
            dt: Age units added to both clocks
        """
        if not self.alive:
            return

        self.progress.advance_clock(dt)
        self.ticks_alive += 1

        self.sensor_readings = self.sensor.get_sensor_distances(self.position, self.state.heading)
        if self.sensor_readings.min() < COLLISION_SENSOR_THRESHOLD:
            self._die(DEATH_COLLISION)
            return

        if self.progress.age > STAGNATION_SLOW_TIMEOUT and self.state.speed < STAGNATION_MIN_SPEED:
            self._die(DEATH_STAGNATION)
            return

        inputs = np.concatenate([self.sensor_readings, (self.throttle, self.steer)])
        outputs = self.brain.predict(inputs)
        self.steer = self.physics.clamp_steering(float(outputs[0]))
        self.throttle = self.physics.clamp_throttle(float(outputs[1]))

        self.state = self.physics.step(self.state, self.steer, self.throttle)
        self.progress.update(self.position)

        if self.progress.age > STAGNATION_HARD_TIMEOUT:
            self._die(DEATH_TIMEOUT)
        elif self.progress.lifetime > self.lifetime_limit:
            self._die(DEATH_LIFETIME)

    def _die(self, reason: str) -> None:
        self.alive = False
        self.death_reason = reason
        logger.debug(
            f"{self.car_id} died ({reason}) after {self.ticks_alive} ticks, fitness {self.fitness:.3f}"
        )

    def get_corners(self) -> Tuple[Tuple[float, float], ...]:
        """World coordinates of the body rectangle, front-left first, for drawing"""
        cos_h = np.cos(self.state.heading)
        sin_h = np.sin(self.state.heading)
        half_length = self.length / 2.0
        half_width = self.width / 2.0
        corners = []
        for local_x, local_y in ((half_length, -half_width), (half_length, half_width),
                                 (-half_length, half_width), (-half_length, -half_width)):
            corners.append((
                self.state.x + local_x * cos_h - local_y * sin_h,
                self.state.y + local_x * sin_h + local_y * cos_h
            ))
        return tuple(corners)

    def __str__(self) -> str:
        status = "alive" if self.alive else f"dead ({self.death_reason})"
        return (f"Car {self.car_id} gen {self.generation}: {status}, "
                f"fitness {self.fitness:.3f}, pos ({self.state.x:.1f}, {self.state.y:.1f})")
