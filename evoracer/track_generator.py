"""
Track construction.

A Track is built once from cyclic control points: a Catmull-Rom centerline,
two walls offset by the half-width, checkpoints sampled along the
centerline and the start pose. It is immutable afterwards and shared by
every car of every generation.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple

import numpy as np

from .centerline_generator import CenterlineGenerator
from .track_boundary import TrackBoundary, polyline_segments
from .constants import (
    CHECKPOINT_STRIDE,
    DEFAULT_CONTROL_POINTS,
    SPLINE_STEPS_PER_SEGMENT,
    TRACK_HALF_WIDTH,
)

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass(frozen=True)
class StartPose:
    x: float
    y: float
    angle: float  # radians, 0 = positive x


@dataclass(frozen=True)
class Track:
    control_points: Tuple[Point, ...]
    center_line: Tuple[Point, ...]
    inner_wall: Tuple[Point, ...]
    outer_wall: Tuple[Point, ...]
    checkpoints: Tuple[Point, ...]
    checkpoint_indices: Tuple[int, ...]
    start: StartPose
    half_width: float
    # Both walls as closed edge lists, one [ax, ay, bx, by] row per edge
    wall_segments: np.ndarray = field(compare=False, repr=False)

    def get_track_bounds(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        """Axis-aligned bounds of both walls as ((min_x, min_y), (max_x, max_y))"""
        points = np.asarray(self.inner_wall + self.outer_wall)
        min_x, min_y = points.min(axis=0)
        max_x, max_y = points.max(axis=0)
        return ((float(min_x), float(min_y)), (float(max_x), float(max_y)))

    def get_total_track_length(self) -> float:
        """Length of the closed centerline"""
        edges = polyline_segments(self.center_line)
        return float(np.hypot(edges[:, 2] - edges[:, 0], edges[:, 3] - edges[:, 1]).sum())

    def get_start_position(self) -> Tuple[float, float, float]:
        """Start pose as (x, y, angle)"""
        return (self.start.x, self.start.y, self.start.angle)


class TrackBuilder:
    """Builds immutable tracks from control points"""

    def __init__(self,
                 half_width: float = TRACK_HALF_WIDTH,
                 steps_per_segment: int = SPLINE_STEPS_PER_SEGMENT,
                 checkpoint_stride: int = CHECKPOINT_STRIDE):
        if checkpoint_stride < 1:
            raise ValueError(f"checkpoint_stride must be at least 1: {checkpoint_stride}")
        self.half_width = half_width
        self.checkpoint_stride = checkpoint_stride
        self.centerline_generator = CenterlineGenerator(steps_per_segment)
        self.track_boundary = TrackBoundary()

    def build(self, control_points: Sequence[Point], validate: bool = True) -> Track:
        """
        Build a closed track.

        Args:
            control_points: Ordered cyclic control points, at least 4
            validate: Also reject walls that cross themselves or each other

        Returns:
            Fully populated Track

        Raises:
            DegenerateGeometryError: The control points cannot form a valid track
        """
        center_line = self.centerline_generator.generate_centerline(control_points)
        inner_wall, outer_wall = self.track_boundary.generate_boundaries(center_line, self.half_width)

        if validate:
            self.track_boundary.validate_boundaries(inner_wall, outer_wall)

        checkpoint_indices = tuple(range(0, len(center_line), self.checkpoint_stride))
        checkpoints = tuple(center_line[i] for i in checkpoint_indices)

        start_x, start_y = center_line[0]
        next_x, next_y = center_line[1]
        start = StartPose(start_x, start_y, math.atan2(next_y - start_y, next_x - start_x))

        wall_segments = np.vstack([polyline_segments(inner_wall), polyline_segments(outer_wall)])
        wall_segments.setflags(write=False)

        track = Track(
            control_points=tuple((float(x), float(y)) for x, y in control_points),
            center_line=tuple(center_line),
            inner_wall=tuple(inner_wall),
            outer_wall=tuple(outer_wall),
            checkpoints=checkpoints,
            checkpoint_indices=checkpoint_indices,
            start=start,
            half_width=float(self.half_width),
            wall_segments=wall_segments,
        )

        logger.debug(
            f"Built track: {len(center_line)} centerline points, {len(checkpoints)} checkpoints, "
            f"length {track.get_total_track_length():.1f}"
        )
        return track


def build_default_track(builder: Optional[TrackBuilder] = None) -> Track:
    """Build the built-in stadium circuit"""
    builder = builder or TrackBuilder()
    return builder.build(DEFAULT_CONTROL_POINTS)
