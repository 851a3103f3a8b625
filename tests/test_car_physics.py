import math

import pytest

from evoracer.car_physics import CarPhysics, CarState
from evoracer.track_generator import StartPose
from evoracer.constants import CAR_LAUNCH_SPEED


def test_zero_speed_gives_zero_turn(physics):
    state = CarState(x=0.0, y=0.0, heading=0.4)
    after = physics.step(state, 1.0, 1.0)
    assert after.heading == 0.4


def test_turn_scales_with_previous_speed(physics):
    state = CarState(x=0.0, y=0.0, vx=12.0, vy=0.0, heading=0.0)
    after = physics.step(state, 1.0, 0.2)
    assert after.heading == pytest.approx(0.1)


def test_push_then_friction_then_move(physics):
    state = CarState(x=0.0, y=0.0)
    after = physics.step(state, 0.0, 1.0)
    assert after.vx == pytest.approx(0.5 * 0.95)
    assert after.x == pytest.approx(0.5 * 0.95)
    assert after.vy == pytest.approx(0.0)


def test_throttle_floor_applied(physics):
    after = physics.step(CarState(x=0.0, y=0.0), 0.0, 0.0)
    assert after.vx == pytest.approx(0.2 * 0.5 * 0.95)


def test_steering_clamped(physics):
    state = CarState(x=0.0, y=0.0, vx=6.0, vy=0.0)
    assert physics.step(state, 5.0, 1.0) == physics.step(state, 1.0, 1.0)
    assert physics.step(state, -5.0, 1.0) == physics.step(state, -1.0, 1.0)


def test_step_is_pure_and_deterministic(physics):
    state = CarState(x=3.0, y=4.0, vx=1.0, vy=-2.0, heading=0.7)
    snapshot = state.copy()
    first = physics.step(state, 0.3, 0.8)
    second = physics.step(state, 0.3, 0.8)
    assert first == second
    assert state == snapshot


def test_speed_settles_at_terminal_velocity(physics):
    state = CarState(x=0.0, y=0.0)
    for _ in range(500):
        state = physics.step(state, 0.0, 1.0)
    # v = (v + 0.5) * 0.95 has fixed point 9.5
    assert state.speed == pytest.approx(9.5, rel=1e-6)


def test_friction_slows_coasting_car(physics):
    state = CarState(x=0.0, y=0.0, vx=0.0, vy=10.0, heading=0.0)
    after = physics.step(state, 0.0, 0.2)
    assert after.vy == pytest.approx(9.5)


def test_spawn_gives_forward_nudge(physics):
    state = physics.spawn(StartPose(10.0, 20.0, math.pi / 2))
    assert (state.x, state.y) == (10.0, 20.0)
    assert state.heading == math.pi / 2
    assert state.speed == pytest.approx(CAR_LAUNCH_SPEED)
    assert state.vy == pytest.approx(CAR_LAUNCH_SPEED)


def test_invalid_parameters_rejected():
    with pytest.raises(ValueError):
        CarPhysics(max_speed=0.0)
    with pytest.raises(ValueError):
        CarPhysics(friction=1.5)
