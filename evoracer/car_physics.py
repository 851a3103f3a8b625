"""
Car physics integration.

Point-mass kinematics with a fixed per-tick explicit Euler step: steering
turns the heading in proportion to speed, throttle pushes along the
heading, friction bleeds velocity, and the position follows the velocity.
The step is a pure function of its inputs, so replaying the same controls
from the same state always gives the same trajectory.
"""

import math
from dataclasses import dataclass, replace
from .track_generator import StartPose
from .constants import (
    CAR_TURN_GAIN,
    CAR_MAX_SPEED,
    CAR_THROTTLE_FORCE,
    CAR_FRICTION,
    CAR_LAUNCH_SPEED,
    THROTTLE_MIN,
    THROTTLE_MAX,
    STEERING_MIN,
    STEERING_MAX
)


@dataclass
class CarState:
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    heading: float = 0.0  # radians, 0 = positive x

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    @property
    def position(self):
        return (self.x, self.y)

    def copy(self) -> "CarState":
        return replace(self)


class CarPhysics:
    """Per-tick integrator for car motion"""

    def __init__(self,
                 turn_gain: float = CAR_TURN_GAIN,
                 max_speed: float = CAR_MAX_SPEED,
                 throttle_force: float = CAR_THROTTLE_FORCE,
                 friction: float = CAR_FRICTION,
                 throttle_min: float = THROTTLE_MIN):
        if max_speed <= 0:
            raise ValueError(f"max_speed must be positive: {max_speed}")
        if not 0.0 <= friction <= 1.0:
            raise ValueError(f"friction must be in [0, 1]: {friction}")
        if not 0.0 <= throttle_min <= THROTTLE_MAX:
            raise ValueError(f"throttle_min must be in [0, {THROTTLE_MAX}]: {throttle_min}")

        self.turn_gain = turn_gain
        self.max_speed = max_speed
        self.throttle_force = throttle_force
        self.friction = friction
        self.throttle_min = throttle_min

    def clamp_steering(self, steering: float) -> float:
        return max(STEERING_MIN, min(STEERING_MAX, steering))

    def clamp_throttle(self, throttle: float) -> float:
        return max(self.throttle_min, min(THROTTLE_MAX, throttle))

    def step(self, state: CarState, steering: float, throttle: float) -> CarState:
        """
        Advance a car state by one tick.

        Args:
            state: Current state, left untouched
            steering: Steering command, clamped to [-1, 1]
            throttle: Throttle command, clamped to [throttle_min, 1]

        Returns:
            New CarState
        """
        steering = self.clamp_steering(steering)
        throttle = self.clamp_throttle(throttle)

        # Turning authority scales with the speed before this tick's push
        heading = state.heading + steering * self.turn_gain * (state.speed / self.max_speed)

        vx = state.vx + math.cos(heading) * throttle * self.throttle_force
        vy = state.vy + math.sin(heading) * throttle * self.throttle_force
        vx *= self.friction
        vy *= self.friction

        return CarState(
            x=state.x + vx,
            y=state.y + vy,
            vx=vx,
            vy=vy,
            heading=heading
        )

    def spawn(self, start: StartPose, launch_speed: float = CAR_LAUNCH_SPEED) -> CarState:
        """Start state at the track's start pose with a forward nudge"""
        return CarState(
            x=start.x,
            y=start.y,
            vx=math.cos(start.angle) * launch_speed,
            vy=math.sin(start.angle) * launch_speed,
            heading=start.angle
        )
