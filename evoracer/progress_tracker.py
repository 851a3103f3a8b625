"""
Checkpoint progress tracking and fitness scoring.

This module provides the ProgressTracker class which follows a car around
the track's checkpoints, keeps the two clocks the lifecycle rules need
(time since the last capture and total time since spawn) and turns
progress into a scalar fitness:

    fitness = checkpoint_index + (1 - distance_to_next / normalization)

``checkpoint_index`` counts captures since spawn and keeps growing across
laps, so a car on its second lap always outranks one on its first.
"""

import math
from typing import Tuple
from .track_generator import Track
from .constants import CHECKPOINT_CAPTURE_RADIUS, FITNESS_DISTANCE_NORMALIZATION


class ProgressTracker:
    """Tracks checkpoint captures, ages and fitness for one car"""

    def __init__(self, track: Track,
                 capture_radius: float = CHECKPOINT_CAPTURE_RADIUS,
                 normalization: float = FITNESS_DISTANCE_NORMALIZATION):
        """
        Initialize progress tracker.

        Args:
            track: Track whose checkpoints are followed; checkpoint 0 is the start
            capture_radius: Distance at which the next checkpoint counts as reached
            normalization: Distance that maps to a zero distance score
        """
        if not track.checkpoints:
            raise ValueError("Track has no checkpoints")
        if normalization <= 0:
            raise ValueError(f"normalization must be positive: {normalization}")

        self.track = track
        self.capture_radius = capture_radius
        self.normalization = normalization
        self.reset()

    def reset(self) -> None:
        """Reset to the freshly spawned state"""
        self.checkpoint_index = 0
        self.age = 0.0  # time since the last capture
        self.lifetime = 0.0  # time since spawn
        self.distance_to_next = 0.0
        self.fitness = 0.0

    @property
    def next_checkpoint_index(self) -> int:
        return (self.checkpoint_index + 1) % len(self.track.checkpoints)

    @property
    def next_checkpoint(self) -> Tuple[float, float]:
        return self.track.checkpoints[self.next_checkpoint_index]

    @property
    def laps(self) -> int:
        return self.checkpoint_index // len(self.track.checkpoints)

    @property
    def distance_score(self) -> float:
        return self.fitness - self.checkpoint_index

    def advance_clock(self, dt: float) -> None:
        self.age += dt
        self.lifetime += dt

    def update(self, car_position: Tuple[float, float]) -> bool:
        """
        Update progress from the car's new position.

        Args:
            car_position: Current car position (x, y)

        Returns:
            True if the next checkpoint was captured this update
        """
        target_x, target_y = self.next_checkpoint
        distance = math.hypot(target_x - car_position[0], target_y - car_position[1])

        captured = distance < self.capture_radius
        if captured:
            self.checkpoint_index += 1
            self.age = 0.0

        self.distance_to_next = distance
        self.fitness = self.checkpoint_index + (1.0 - distance / self.normalization)
        return captured

    def get_progress_info(self) -> dict:
        """
        Get progress information for display/logging.

        Returns:
            Dictionary with progress information
        """
        return {
            "checkpoint_index": self.checkpoint_index,
            "next_checkpoint_index": self.next_checkpoint_index,
            "laps": self.laps,
            "distance_to_next": self.distance_to_next,
            "distance_score": self.distance_score,
            "fitness": self.fitness,
            "age": self.age,
            "lifetime": self.lifetime,
        }

    def __str__(self) -> str:
        return (f"ProgressTracker: checkpoints {self.checkpoint_index}, "
                f"fitness {self.fitness:.3f}, age {self.age:.1f}")
