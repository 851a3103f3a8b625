import math

import numpy as np
import pytest

from evoracer.centerline_generator import CenterlineGenerator, catmull_rom
from evoracer.errors import DegenerateGeometryError
from evoracer.track_boundary import TrackBoundary
from evoracer.track_generator import TrackBuilder
from evoracer.constants import (
    DEFAULT_CONTROL_POINTS,
    GEOMETRY_EPSILON,
    SPLINE_STEPS_PER_SEGMENT,
    CHECKPOINT_STRIDE,
    TRACK_HALF_WIDTH
)

SQUARE = [(0.0, 0.0), (400.0, 0.0), (400.0, 400.0), (0.0, 400.0)]
BOWTIE = [(0.0, 0.0), (300.0, 300.0), (300.0, 0.0), (0.0, 300.0)]


def test_catmull_rom_passes_through_inner_control_points():
    p0, p1, p2, p3 = (0.0, 0.0), (10.0, 5.0), (20.0, -5.0), (30.0, 0.0)
    assert catmull_rom(p0, p1, p2, p3, 0.0) == pytest.approx(p1)
    assert catmull_rom(p0, p1, p2, p3, 1.0) == pytest.approx(p2)


def test_walls_and_centerline_have_equal_length(default_track):
    expected = len(DEFAULT_CONTROL_POINTS) * SPLINE_STEPS_PER_SEGMENT
    assert len(default_track.center_line) == expected
    assert len(default_track.inner_wall) == expected
    assert len(default_track.outer_wall) == expected


@pytest.mark.parametrize("polyline", ["center_line", "inner_wall", "outer_wall"])
def test_consecutive_points_never_coincide(default_track, polyline):
    points = np.asarray(getattr(default_track, polyline))
    # Rolling by one pairs the last point with the first
    edge_lengths = np.hypot(*(np.roll(points, -1, axis=0) - points).T)
    assert edge_lengths.shape == (len(points),)
    assert edge_lengths.min() > GEOMETRY_EPSILON


def test_wall_segments_close_both_loops(default_track):
    count = len(default_track.inner_wall)
    segments = default_track.wall_segments
    assert segments.shape == (2 * count, 4)
    assert tuple(segments[count - 1, 2:]) == pytest.approx(default_track.inner_wall[0])
    assert tuple(segments[2 * count - 1, 2:]) == pytest.approx(default_track.outer_wall[0])


def test_walls_sit_half_width_from_centerline(default_track):
    for center, inner, outer in zip(default_track.center_line, default_track.inner_wall, default_track.outer_wall):
        assert math.dist(center, inner) == pytest.approx(TRACK_HALF_WIDTH)
        assert math.dist(center, outer) == pytest.approx(TRACK_HALF_WIDTH)


def test_checkpoints_sample_centerline(default_track):
    assert default_track.checkpoint_indices[0] == 0
    assert all(b - a == CHECKPOINT_STRIDE for a, b in zip(default_track.checkpoint_indices,
                                                          default_track.checkpoint_indices[1:]))
    for index, checkpoint in zip(default_track.checkpoint_indices, default_track.checkpoints):
        assert checkpoint == default_track.center_line[index]


def test_start_pose_faces_along_main_straight(default_track):
    start = default_track.start
    assert (start.x, start.y) == pytest.approx(DEFAULT_CONTROL_POINTS[0])
    assert abs(start.angle) < 0.01
    assert default_track.get_start_position() == (start.x, start.y, start.angle)


def test_default_walls_do_not_cross():
    boundary = TrackBoundary()
    track = TrackBuilder().build(DEFAULT_CONTROL_POINTS)
    assert boundary.find_self_intersections(track.inner_wall) == []
    assert boundary.find_self_intersections(track.outer_wall) == []
    assert boundary.find_wall_crossings(track.inner_wall, track.outer_wall) == []


def test_track_bounds_and_length(default_track):
    (min_x, min_y), (max_x, max_y) = default_track.get_track_bounds()
    assert min_x < 100.0 and max_x > 1100.0
    assert min_y < 120.0 and max_y > 600.0
    assert 1500.0 < default_track.get_total_track_length() < 4000.0


def test_too_few_control_points_rejected():
    with pytest.raises(DegenerateGeometryError):
        TrackBuilder().build(SQUARE[:3])


def test_non_finite_control_point_rejected():
    points = list(SQUARE)
    points[2] = (float("nan"), 400.0)
    with pytest.raises(DegenerateGeometryError):
        TrackBuilder().build(points)


def test_coincident_control_points_rejected():
    with pytest.raises(DegenerateGeometryError):
        TrackBuilder().build([(50.0, 50.0)] * 4)


@pytest.mark.parametrize("duplicate", [1, 3])
def test_coincident_neighbouring_control_points_rejected(duplicate):
    # Index 3 copies the first point, so the pair sits across the wrap
    points = list(SQUARE)
    points[duplicate] = points[(duplicate + 1) % len(points)]
    with pytest.raises(DegenerateGeometryError, match="coincide"):
        CenterlineGenerator().generate_centerline(points)


def test_degenerate_geometry_is_a_value_error():
    with pytest.raises(ValueError):
        TrackBuilder().build([(50.0, 50.0)] * 4)


def test_zero_length_centerline_edge_rejected():
    with pytest.raises(DegenerateGeometryError):
        TrackBoundary().generate_boundaries([(0.0, 0.0), (10.0, 0.0), (10.0, 0.0), (0.0, 10.0)], 5.0)


def test_self_crossing_layout_rejected():
    with pytest.raises(DegenerateGeometryError):
        TrackBuilder(half_width=20.0).build(BOWTIE)


def test_self_crossing_layout_allowed_without_validation():
    track = TrackBuilder(half_width=20.0).build(BOWTIE, validate=False)
    assert len(track.inner_wall) == len(track.center_line)


def test_find_self_intersections_reports_crossing_edges():
    figure_eight = [(0.0, 0.0), (100.0, 100.0), (100.0, 0.0), (0.0, 100.0)]
    assert TrackBoundary().find_self_intersections(figure_eight) == [(0, 2)]


def test_find_self_intersections_ignores_simple_polygon():
    assert TrackBoundary().find_self_intersections(SQUARE) == []


def test_track_polygon_fills_larger_outline(default_track):
    boundary = TrackBoundary()
    fill, hole = boundary.create_track_polygon(default_track.inner_wall, default_track.outer_wall)
    assert boundary._calculate_polygon_area(fill) > boundary._calculate_polygon_area(hole)


def test_centerline_generator_is_cyclic():
    centerline = CenterlineGenerator(steps_per_segment=10).generate_centerline(SQUARE)
    assert len(centerline) == 40
    assert centerline[0] == pytest.approx(SQUARE[0])
    assert centerline[10] == pytest.approx(SQUARE[1])


def test_track_is_immutable(default_track):
    with pytest.raises(Exception):
        default_track.half_width = 10.0
    assert not default_track.wall_segments.flags.writeable
    assert isinstance(default_track.wall_segments, np.ndarray)
