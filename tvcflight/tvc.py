"""Thrust-vector allocation for a three-motor gimballed vehicle."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

import numpy as np

from tvcflight.adam import AdamOptimizer

SERVO_ANGLE_LIMIT = 0.2618  # about 15 degrees, in radians
SERVO_DT = 0.02  # 50 Hz servo loop

RAD_TO_DEG = 57.2957795
GEAR_COEF = 1.0
SERVO_ZEROS = (90.0, 90.0, 90.0, 90.0, 90.0, 90.0)

NUM_ANGLES = 6

DEFAULT_RADIUS = 0.09
DEFAULT_Z = -1.0
DEFAULT_THRUST = 5.0


@dataclass
class TVCMotor:
    """One gimballed motor: roll in radians, thrust in newtons, position in metres."""

    roll: float = 0.0
    thrust: float = 0.0
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)


@dataclass
class TVCState:
    """The three motors and the torque they are asked to produce."""

    motors: Tuple[TVCMotor, TVCMotor, TVCMotor] = field(
        default_factory=lambda: (TVCMotor(), TVCMotor(), TVCMotor())
    )
    target_torque: Tuple[float, float, float] = (0.0, 0.0, 0.0)

    def set_target_torque(self, tx: float, ty: float, tz: float) -> None:
        """Set the torque the allocation aims for."""
        self.target_torque = (float(tx), float(ty), float(tz))


def clamp(x: float, min_val: float, max_val: float) -> float:
    """Limit ``x`` to the range ``[min_val, max_val]``."""
    return max(min_val, min(max_val, x))


def clamp_servo_circle(pitch: float, yaw: float, max_angle: float) -> Tuple[float, float]:
    """Scale ``(pitch, yaw)`` back onto a circular cone of radius ``max_angle``."""
    magnitude = math.hypot(pitch, yaw)
    if magnitude > max_angle:
        scale = max_angle / magnitude
        return pitch * scale, yaw * scale
    return pitch, yaw


def _clamp_all(angles: np.ndarray) -> np.ndarray:
    pairs = [clamp_servo_circle(p, y, SERVO_ANGLE_LIMIT) for p, y in angles.reshape(3, 2)]
    return np.array(pairs, dtype=float).reshape(-1)


def _angles(x: Sequence[float]) -> np.ndarray:
    arr = np.array(x, dtype=float)
    if arr.shape != (NUM_ANGLES,):
        raise ValueError(f"expected {NUM_ANGLES} servo angles, got shape {arr.shape}")
    return arr


def initialize_tvc_circle(
    radius: float = DEFAULT_RADIUS,
    z: float = DEFAULT_Z,
    thrust: float = DEFAULT_THRUST,
) -> TVCState:
    """Place three motors evenly on a circle below the centre of mass, rolled outward."""
    motors: List[TVCMotor] = []
    for theta in (0.0, 2.0 * math.pi / 3.0, 4.0 * math.pi / 3.0):
        motors.append(
            TVCMotor(
                roll=theta + math.pi,
                thrust=thrust,
                position=(radius * math.cos(theta), radius * math.sin(theta), z),
            )
        )
    return TVCState(motors=(motors[0], motors[1], motors[2]))


def torque_cost(x: Sequence[float], state: TVCState) -> float:
    """Norm of the gap between target torque and the torque produced by angles ``x``.

    ``x`` holds a (pitch, yaw) pair per motor, in radians.
    """
    angles = _angles(x).reshape(3, 2)
    torque = np.zeros(3)
    for motor, (pitch, yaw) in zip(state.motors, angles):
        thrust_vec = np.array(
            [
                -motor.thrust * math.sin(yaw),
                -motor.thrust * math.sin(pitch),
                -motor.thrust * math.cos(yaw) * math.cos(pitch),
            ]
        )
        torque += np.cross(np.array(motor.position, dtype=float), thrust_vec)
    return float(np.linalg.norm(np.array(state.target_torque, dtype=float) - torque))


def optimize_tvc(
    state: TVCState,
    x: Sequence[float],
    optimizer: AdamOptimizer,
    steps: int = 100,
) -> np.ndarray:
    """Run ``steps`` Adam steps, keeping each motor inside the servo cone."""
    angles = _angles(x)
    for _ in range(steps):
        angles = _clamp_all(optimizer.step(torque_cost, angles, state))
    return angles


def solve_angles(
    state: TVCState,
    x: Sequence[float],
    optimizer: AdamOptimizer,
    cost_threshold: float = 0.01,
    max_steps: int = 100,
) -> Tuple[np.ndarray, float, int]:
    """Step until the cost falls to ``cost_threshold`` or ``max_steps`` is reached.

    Returns the angles, their cost and the number of steps taken.
    """
    angles = _angles(x)
    cost = torque_cost(angles, state)
    steps = 0
    while cost > cost_threshold and steps < max_steps:
        angles = optimizer.step(torque_cost, angles, state)
        cost = torque_cost(angles, state)
        steps += 1
    return angles, cost, steps


def servo_commands(angles: Sequence[float]) -> Tuple[float, ...]:
    """Servo positions in degrees for six angles in radians."""
    return tuple(
        angle * RAD_TO_DEG * GEAR_COEF + zero
        for angle, zero in zip(_angles(angles), SERVO_ZEROS)
    )


def tvc_out(angles: Sequence[float]) -> Tuple[float, ...]:
    """Clamp the angles to the servo cone and return the servo positions in degrees."""
    return servo_commands(_clamp_all(_angles(angles)))


def orientation_from_rotation(rotation: Sequence[Sequence[float]]) -> Tuple[float, float, float]:
    """Roll, pitch and yaw in degrees from a 3x3 rotation matrix."""
    rot = np.array(rotation, dtype=float)
    if rot.shape != (3, 3):
        raise ValueError(f"rotation must be 3x3, got shape {rot.shape}")
    roll = math.atan2(rot[2, 1], rot[2, 2]) * RAD_TO_DEG
    pitch = math.asin(clamp(-rot[2, 0], -1.0, 1.0)) * RAD_TO_DEG
    yaw = math.atan2(rot[1, 0], rot[0, 0]) * RAD_TO_DEG
    return roll, pitch, yaw