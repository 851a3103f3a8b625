"""
Centerline generation system for smooth closed tracks.

This module turns a sparse cyclic list of control points into a dense,
closed centerline by sampling a Catmull-Rom spline through every
consecutive quadruple of control points.
"""

import math
from typing import List, Sequence, Tuple
from .errors import DegenerateGeometryError
from .constants import (
    GEOMETRY_EPSILON,
    SPLINE_STEPS_PER_SEGMENT,
    TRACK_MIN_CONTROL_POINTS,
)

Point = Tuple[float, float]


def catmull_rom(p0: Point, p1: Point, p2: Point, p3: Point, t: float) -> Point:
    """
    Evaluate a uniform Catmull-Rom segment between p1 and p2.

    Args:
        p0, p1, p2, p3: Four consecutive control points
        t: Curve parameter, 0 at p1 and 1 at p2

    Returns:
        Interpolated (x, y) point
    """
    tt = t * t
    ttt = tt * t
    x = 0.5 * ((2 * p1[0]) +
               (-p0[0] + p2[0]) * t +
               (2 * p0[0] - 5 * p1[0] + 4 * p2[0] - p3[0]) * tt +
               (-p0[0] + 3 * p1[0] - 3 * p2[0] + p3[0]) * ttt)
    y = 0.5 * ((2 * p1[1]) +
               (-p0[1] + p2[1]) * t +
               (2 * p0[1] - 5 * p1[1] + 4 * p2[1] - p3[1]) * tt +
               (-p0[1] + 3 * p1[1] - 3 * p2[1] + p3[1]) * ttt)
    return (x, y)


class CenterlineGenerator:
    """Generates closed spline centerlines from control points"""

    def __init__(self, steps_per_segment: int = SPLINE_STEPS_PER_SEGMENT):
        if steps_per_segment < 1:
            raise ValueError(f"steps_per_segment must be at least 1: {steps_per_segment}")
        self.steps_per_segment = steps_per_segment

    def generate_centerline(self, control_points: Sequence[Point]) -> List[Point]:
        """
        Generate a dense closed centerline.

        The last point is not a copy of the first; the loop is closed
        implicitly by treating the list as cyclic.

        Args:
            control_points: Ordered cyclic control points

        Returns:
            List of (x, y) points, ``len(control_points) * steps_per_segment`` long

        Raises:
            DegenerateGeometryError: Too few, non-finite or coincident neighbouring control points
        """
        points = self._validate_control_points(control_points)
        count = len(points)

        centerline = []
        for i in range(count):
            p0 = points[(i - 1) % count]
            p1 = points[i]
            p2 = points[(i + 1) % count]
            p3 = points[(i + 2) % count]

            for j in range(self.steps_per_segment):
                t = j / self.steps_per_segment
                centerline.append(catmull_rom(p0, p1, p2, p3, t))

        return centerline

    def _validate_control_points(self, control_points: Sequence[Point]) -> List[Point]:
        if len(control_points) < TRACK_MIN_CONTROL_POINTS:
            raise DegenerateGeometryError(
                f"Track needs at least {TRACK_MIN_CONTROL_POINTS} control points, got {len(control_points)}"
            )

        points = []
        for index, point in enumerate(control_points):
            x, y = float(point[0]), float(point[1])
            if not (math.isfinite(x) and math.isfinite(y)):
                raise DegenerateGeometryError(f"Control point {index} is not finite: {point}")
            points.append((x, y))

        for index, point in enumerate(points):
            following = points[(index + 1) % len(points)]
            if math.hypot(following[0] - point[0], following[1] - point[1]) < GEOMETRY_EPSILON:
                raise DegenerateGeometryError(
                    f"Control points {index} and {(index + 1) % len(points)} coincide: {point}"
                )
        return points

    def get_centerline_tangent(self, points: Sequence[Point], index: int) -> Tuple[float, float]:
        """
        Calculate the unit direction of the edge leaving ``points[index]``.

        Args:
            points: Closed centerline points
            index: Index of the edge start, wrapped cyclically

        Returns:
            Normalized tangent vector (dx, dy)

        Raises:
            DegenerateGeometryError: The edge has zero length
        """
        count = len(points)
        start = points[index % count]
        end = points[(index + 1) % count]
        dx = end[0] - start[0]
        dy = end[1] - start[1]
        length = math.hypot(dx, dy)
        if not math.isfinite(length) or length < GEOMETRY_EPSILON:
            raise DegenerateGeometryError(f"Degenerate centerline edge at index {index % count}")
        return (dx / length, dy / length)
