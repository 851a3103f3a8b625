import math
from types import SimpleNamespace

import numpy as np
import pytest

from evoracer.distance_sensor import DistanceSensor
from evoracer.constants import SENSOR_NUM_RAYS, SENSOR_MAX_DISTANCE, TRACK_HALF_WIDTH


def _wall_track(*segments):
    return SimpleNamespace(wall_segments=np.array(segments, dtype=float))


def test_rejects_even_or_tiny_ray_counts(default_track):
    with pytest.raises(ValueError):
        DistanceSensor(default_track, num_rays=8)
    with pytest.raises(ValueError):
        DistanceSensor(default_track, num_rays=1)


def test_rejects_fan_not_reaching_behind(default_track):
    with pytest.raises(ValueError):
        DistanceSensor(default_track, half_angle=math.pi / 2)


def test_ray_fan_is_symmetric_around_heading(sensor):
    angles = sensor.get_sensor_angles(0.3)
    assert len(angles) == SENSOR_NUM_RAYS
    assert angles[SENSOR_NUM_RAYS // 2] == pytest.approx(0.3)
    assert angles[0] - 0.3 == pytest.approx(-(angles[-1] - 0.3))


def test_readings_are_normalized(sensor, default_track):
    for center in default_track.center_line[::25]:
        readings = sensor.get_sensor_distances(center, 1.0)
        assert readings.shape == (SENSOR_NUM_RAYS,)
        assert np.all(readings >= 0.0)
        assert np.all(readings <= 1.0)


def test_far_from_track_reads_no_hit(sensor):
    readings = sensor.get_sensor_distances((5000.0, 5000.0), 0.0)
    assert np.all(readings == 1.0)


def test_main_straight_sees_walls_on_both_sides(sensor, default_track):
    (ax, ay), (bx, by) = default_track.center_line[2], default_track.center_line[3]
    position = ((ax + bx) / 2, (ay + by) / 2)
    heading = math.atan2(by - ay, bx - ax)
    readings = sensor.get_sensor_distances(position, heading)
    expected = TRACK_HALF_WIDTH / SENSOR_MAX_DISTANCE
    # Rays 1 and 7 point 90 degrees right and left of the heading
    assert readings[1] == pytest.approx(expected, abs=0.01)
    assert readings[7] == pytest.approx(expected, abs=0.01)
    assert readings[4] == 1.0


def test_single_wall_distances():
    sensor = DistanceSensor(_wall_track([10.0, -50.0, 10.0, 50.0]))
    readings = sensor.get_sensor_distances((0.0, 0.0), 0.0)
    offsets = sensor.ray_offsets

    for offset, reading in zip(offsets, readings):
        if abs(offset) < math.pi / 2 - 1e-6:
            assert reading == pytest.approx(10.0 / math.cos(offset) / SENSOR_MAX_DISTANCE)
        else:
            # Parallel to the wall or pointing away from it
            assert reading == 1.0


def test_reading_is_one_exactly_when_nothing_is_hit():
    sensor = DistanceSensor(_wall_track([10.0, -50.0, 10.0, 50.0]))
    readings = sensor.get_sensor_distances((0.0, 0.0), 0.0)
    angles = sensor.get_sensor_angles(0.0)
    hits = np.cos(angles) > 1e-9
    assert np.all(readings[hits] < 1.0)
    assert np.all(readings[~hits] == 1.0)


def test_nearest_wall_wins():
    sensor = DistanceSensor(_wall_track([30.0, -50.0, 30.0, 50.0], [10.0, -50.0, 10.0, 50.0]))
    readings = sensor.get_sensor_distances((0.0, 0.0), 0.0)
    assert readings[SENSOR_NUM_RAYS // 2] == pytest.approx(10.0 / SENSOR_MAX_DISTANCE)


def test_wall_beyond_range_is_ignored():
    sensor = DistanceSensor(_wall_track([500.0, -50.0, 500.0, 50.0]))
    assert np.all(sensor.get_sensor_distances((0.0, 0.0), 0.0) == 1.0)


def test_hit_points_land_on_wall():
    sensor = DistanceSensor(_wall_track([10.0, -50.0, 10.0, 50.0]))
    readings = sensor.get_sensor_distances((0.0, 0.0), 0.0)
    points = sensor.get_hit_points((0.0, 0.0), 0.0, readings)
    assert points[SENSOR_NUM_RAYS // 2] == pytest.approx((10.0, 0.0))
