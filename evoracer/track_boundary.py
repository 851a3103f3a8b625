"""
Track boundary calculation system.

This module calculates the inner and outer walls of a closed track by
offsetting every centerline point along the normal of the edge that
leaves it, and checks the resulting polylines for crossings.
"""

from typing import List, Sequence, Tuple

import numpy as np

from .centerline_generator import CenterlineGenerator
from .errors import DegenerateGeometryError

Point = Tuple[float, float]


def polyline_segments(points: Sequence[Point]) -> np.ndarray:
    """
    Build the closed edge list of a polyline.

    Args:
        points: Cyclic polyline points

    Returns:
        (N, 4) array of [ax, ay, bx, by] rows, the last row wrapping back to the first point
    """
    start = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    end = np.roll(start, -1, axis=0)
    return np.hstack([start, end])


def segments_intersect(first: np.ndarray, second: np.ndarray) -> np.ndarray:
    """
    Pairwise proper intersection test between two edge lists.

    Touching at endpoints and collinear overlap are not reported.

    Args:
        first: (N, 4) edges
        second: (M, 4) edges

    Returns:
        (N, M) boolean matrix
    """
    ax, ay, bx, by = (first[:, k][:, None] for k in range(4))
    cx, cy, dx, dy = (second[:, k][None, :] for k in range(4))

    rx, ry = bx - ax, by - ay
    sx, sy = dx - cx, dy - cy
    denom = rx * sy - ry * sx
    parallel = denom == 0
    safe = np.where(parallel, 1.0, denom)

    qx, qy = cx - ax, cy - ay
    t = (qx * sy - qy * sx) / safe
    u = (qx * ry - qy * rx) / safe
    return ~parallel & (t > 0) & (t < 1) & (u > 0) & (u < 1)


class TrackBoundary:
    """Calculates track walls from a closed centerline"""

    def __init__(self):
        self.centerline_generator = CenterlineGenerator()

    def generate_boundaries(self, centerline: Sequence[Point], half_width: float) -> Tuple[List[Point], List[Point]]:
        """
        Generate inner and outer walls from a closed centerline.

        Args:
            centerline: Closed centerline points
            half_width: Distance from the centerline to each wall

        Returns:
            Tuple of (inner_wall, outer_wall) point lists aligned index for index with the centerline

        Raises:
            DegenerateGeometryError: An edge has zero length or the width is not positive
        """
        if len(centerline) < 3:
            raise DegenerateGeometryError("Centerline needs at least 3 points to enclose an area")
        if half_width <= 0:
            raise DegenerateGeometryError(f"Track half-width must be positive: {half_width}")

        inner_wall = []
        outer_wall = []

        for i, point in enumerate(centerline):
            tangent = self.centerline_generator.get_centerline_tangent(centerline, i)
            normal = self._get_normal_vector(tangent)

            inner_wall.append((
                point[0] + normal[0] * half_width,
                point[1] + normal[1] * half_width
            ))
            outer_wall.append((
                point[0] - normal[0] * half_width,
                point[1] - normal[1] * half_width
            ))

        return inner_wall, outer_wall

    def _get_normal_vector(self, tangent: Tuple[float, float]) -> Tuple[float, float]:
        # Rotate tangent 90 degrees counterclockwise to get left normal
        return (-tangent[1], tangent[0])

    def find_self_intersections(self, polyline: Sequence[Point]) -> List[Tuple[int, int]]:
        """
        Find pairs of non-adjacent edges of a closed polyline that cross.

        Args:
            polyline: Closed polyline points

        Returns:
            Sorted list of (i, j) edge index pairs with i < j
        """
        segments = polyline_segments(polyline)
        count = len(segments)
        if count < 4:
            return []

        crossings = segments_intersect(segments, segments)

        # Neighbouring edges share an endpoint; ignore them and the diagonal
        index = np.arange(count)
        gap = np.abs(index[:, None] - index[None, :])
        adjacent = (gap <= 1) | (gap == count - 1)
        crossings &= ~adjacent

        pairs = np.argwhere(np.triu(crossings))
        return [(int(i), int(j)) for i, j in pairs]

    def find_wall_crossings(self, inner_wall: Sequence[Point], outer_wall: Sequence[Point]) -> List[Tuple[int, int]]:
        """
        Find inner/outer edge pairs that cross each other.

        Returns:
            List of (inner_edge, outer_edge) index pairs
        """
        crossings = segments_intersect(polyline_segments(inner_wall), polyline_segments(outer_wall))
        return [(int(i), int(j)) for i, j in np.argwhere(crossings)]

    def validate_boundaries(self, inner_wall: Sequence[Point], outer_wall: Sequence[Point]) -> None:
        """
        Reject walls that fold over themselves or cross each other.

        Raises:
            DegenerateGeometryError: Describes the first crossing found
        """
        for label, wall in (("Inner", inner_wall), ("Outer", outer_wall)):
            crossings = self.find_self_intersections(wall)
            if crossings:
                first, second = crossings[0]
                raise DegenerateGeometryError(
                    f"{label} wall self-intersects between edges {first} and {second} "
                    f"({len(crossings)} crossing(s)); reduce the half-width or spread the control points"
                )

        crossings = self.find_wall_crossings(inner_wall, outer_wall)
        if crossings:
            first, second = crossings[0]
            raise DegenerateGeometryError(
                f"Inner wall edge {first} crosses outer wall edge {second}"
            )

    def create_track_polygon(self, inner_wall: Sequence[Point], outer_wall: Sequence[Point]) -> Tuple[List[Point], List[Point]]:
        """
        Split the track surface into its two closed outlines.

        Returns:
            Tuple of (fill_outline, hole_outline): the wall enclosing the larger area is filled,
            the other is cut out of it
        """
        if self._calculate_polygon_area(inner_wall) > self._calculate_polygon_area(outer_wall):
            return list(inner_wall), list(outer_wall)
        return list(outer_wall), list(inner_wall)

    def _calculate_polygon_area(self, polygon: Sequence[Point]) -> float:
        """Calculate polygon area using shoelace formula"""
        if len(polygon) < 3:
            return 0.0

        area = 0.0
        n = len(polygon)

        for i in range(n):
            j = (i + 1) % n
            area += polygon[i][0] * polygon[j][1]
            area -= polygon[j][0] * polygon[i][1]

        return abs(area) / 2.0
