"""
Distance sensor implementation for fan-shaped wall detection.

This module provides the DistanceSensor class which casts a symmetric fan
of rays from the car center against every wall edge of the track and
reports, per ray, the normalized distance to the closest hit.
"""

import math
import numpy as np
from typing import List, Tuple
from .track_generator import Track
from .constants import (
    SENSOR_NUM_RAYS,
    SENSOR_MAX_DISTANCE,
    SENSOR_HALF_ANGLE,
    SENSOR_NO_HIT
)


class DistanceSensor:
    """Ray fan sensor for track wall detection"""

    def __init__(self, track: Track,
                 num_rays: int = SENSOR_NUM_RAYS,
                 max_distance: float = SENSOR_MAX_DISTANCE,
                 half_angle: float = SENSOR_HALF_ANGLE):
        """
        Initialize distance sensor.

        Args:
            track: Track whose walls are sensed
            num_rays: Number of rays, odd so the middle one points straight ahead
            max_distance: Ray length in world units
            half_angle: Angle from the heading to the outermost ray in radians

        Raises:
            ValueError: Ray count is even or below 3, or the fan does not reach behind the car
        """
        if num_rays < 3 or num_rays % 2 == 0:
            raise ValueError(f"num_rays must be odd and at least 3: {num_rays}")
        if 2 * half_angle <= math.pi:
            raise ValueError(f"Sensor fan must span more than pi radians: {2 * half_angle}")
        if max_distance <= 0:
            raise ValueError(f"max_distance must be positive: {max_distance}")

        self.track = track
        self.num_rays = num_rays
        self.max_distance = float(max_distance)
        self.half_angle = float(half_angle)
        self.ray_offsets = np.linspace(-self.half_angle, self.half_angle, num_rays)
        self.wall_segments = track.wall_segments

    def get_sensor_angles(self, car_angle: float) -> np.ndarray:
        """
        Get absolute world angles for all rays.

        Args:
            car_angle: Car heading in radians

        Returns:
            numpy array of ``num_rays`` angles in radians, left-most offset first
        """
        return car_angle + self.ray_offsets

    def get_sensor_distances(self, car_position: Tuple[float, float], car_angle: float) -> np.ndarray:
        """
        Get normalized distances to the track walls along every ray.

        Args:
            car_position: Car center position (x, y)
            car_angle: Car heading in radians

        Returns:
            numpy array of ``num_rays`` readings in [0, 1]; 1.0 means nothing within range
        """
        px, py = float(car_position[0]), float(car_position[1])
        readings = np.full(self.num_rays, SENSOR_NO_HIT, dtype=np.float64)

        segments = self._nearby_segments(px, py)
        if len(segments) == 0:
            return readings

        angles = self.get_sensor_angles(car_angle)
        # Ray vectors, shape (R, 1) so they broadcast against (1, M) edges
        rx = (np.cos(angles) * self.max_distance)[:, None]
        ry = (np.sin(angles) * self.max_distance)[:, None]

        cx = segments[:, 0][None, :]
        cy = segments[:, 1][None, :]
        ex = (segments[:, 2] - segments[:, 0])[None, :]
        ey = (segments[:, 3] - segments[:, 1])[None, :]

        bottom = ey * rx - ex * ry
        t_top = ex * (py - cy) - ey * (px - cx)
        u_top = (cy - py) * (-rx) - (cx - px) * (-ry)

        valid = bottom != 0
        safe_bottom = np.where(valid, bottom, 1.0)
        t = t_top / safe_bottom
        u = u_top / safe_bottom
        hit = valid & (t >= 0) & (t <= 1) & (u >= 0) & (u <= 1)

        nearest = np.where(hit, t, SENSOR_NO_HIT).min(axis=1)
        return np.minimum(readings, nearest)

    def _nearby_segments(self, px: float, py: float) -> np.ndarray:
        """Wall edges that can touch the square of half-side max_distance around the car"""
        segments = self.wall_segments
        reach = self.max_distance
        xs = segments[:, [0, 2]]
        ys = segments[:, [1, 3]]
        outside = (
            (xs.max(axis=1) < px - reach) | (xs.min(axis=1) > px + reach) |
            (ys.max(axis=1) < py - reach) | (ys.min(axis=1) > py + reach)
        )
        return segments[~outside]

    def get_hit_points(self, car_position: Tuple[float, float], car_angle: float,
                       readings: np.ndarray) -> List[Tuple[float, float]]:
        """
        Calculate ray end points for visualization.

        Args:
            car_position: Car center position (x, y)
            car_angle: Car heading in radians
            readings: Normalized readings as returned by get_sensor_distances

        Returns:
            List of (x, y) end points, one per ray
        """
        end_points = []
        for angle, reading in zip(self.get_sensor_angles(car_angle), readings):
            distance = reading * self.max_distance
            end_x = car_position[0] + distance * math.cos(angle)
            end_y = car_position[1] + distance * math.sin(angle)
            end_points.append((end_x, end_y))
        return end_points
