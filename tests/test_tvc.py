import math

import numpy as np
import pytest

from tvcflight.adam import AdamOptimizer
from tvcflight.tvc import (
    DEFAULT_RADIUS,
    DEFAULT_THRUST,
    DEFAULT_Z,
    SERVO_ANGLE_LIMIT,
    SERVO_ZEROS,
    TVCState,
    clamp,
    clamp_servo_circle,
    initialize_tvc_circle,
    optimize_tvc,
    orientation_from_rotation,
    servo_commands,
    solve_angles,
    torque_cost,
    tvc_out,
)


def test_clamp_limits():
    assert clamp(5.0, 0.0, 1.0) == 1.0
    assert clamp(-1.0, 0.0, 1.0) == 0.0
    assert clamp(0.5, 0.0, 1.0) == 0.5


def test_clamp_servo_circle_inside_unchanged():
    assert clamp_servo_circle(0.1, 0.05, SERVO_ANGLE_LIMIT) == (0.1, 0.05)


def test_clamp_servo_circle_scales_onto_cone():
    pitch, yaw = clamp_servo_circle(0.6, 0.8, SERVO_ANGLE_LIMIT)
    assert math.hypot(pitch, yaw) == pytest.approx(SERVO_ANGLE_LIMIT)
    assert pitch / yaw == pytest.approx(0.6 / 0.8)


def test_initialize_tvc_circle_geometry():
    state = initialize_tvc_circle()
    assert len(state.motors) == 3
    for motor in state.motors:
        x, y, z = motor.position
        assert math.hypot(x, y) == pytest.approx(DEFAULT_RADIUS)
        assert z == DEFAULT_Z
        assert motor.thrust == DEFAULT_THRUST
        theta = math.atan2(y, x)
        assert math.cos(motor.roll) == pytest.approx(-math.cos(theta))
        assert math.sin(motor.roll) == pytest.approx(-math.sin(theta))
    assert state.motors[0].position[0] == pytest.approx(DEFAULT_RADIUS)


def test_set_target_torque():
    state = TVCState()
    state.set_target_torque(0.1, 0.1, -0.05)
    assert state.target_torque == (0.1, 0.1, -0.05)


def test_torque_cost_zero_for_symmetric_straight_thrust():
    state = initialize_tvc_circle()
    assert torque_cost([0.0] * 6, state) == pytest.approx(0.0, abs=1e-12)


def test_torque_cost_equals_target_norm_when_no_torque():
    state = initialize_tvc_circle()
    state.set_target_torque(0.3, 0.0, 0.4)
    assert torque_cost([0.0] * 6, state) == pytest.approx(0.5)


def test_torque_cost_rejects_wrong_length():
    with pytest.raises(ValueError):
        torque_cost([0.0] * 5, initialize_tvc_circle())


def test_optimize_tvc_reduces_cost_and_respects_cone():
    state = initialize_tvc_circle()
    state.set_target_torque(0.1, 0.1, -0.05)
    start = np.zeros(6)
    before = torque_cost(start, state)
    angles = optimize_tvc(state, start, AdamOptimizer(6, learning_rate=0.01), 200)
    assert torque_cost(angles, state) < before
    for pitch, yaw in angles.reshape(3, 2):
        assert math.hypot(pitch, yaw) <= SERVO_ANGLE_LIMIT + 1e-9


def test_solve_angles_stops_immediately_when_already_good():
    state = initialize_tvc_circle()
    angles, cost, steps = solve_angles(state, [0.0] * 6, AdamOptimizer(6))
    assert steps == 0
    assert cost == pytest.approx(0.0, abs=1e-12)
    assert list(angles) == [0.0] * 6


def test_solve_angles_improves_and_bounds_steps():
    state = initialize_tvc_circle()
    state.set_target_torque(0.05, -0.05, 0.02)
    start = [0.0] * 6
    before = torque_cost(start, state)
    angles, cost, steps = solve_angles(
        state, start, AdamOptimizer(6, learning_rate=0.01), 0.01, 50
    )
    assert 1 <= steps <= 50
    assert cost < before
    assert cost == pytest.approx(torque_cost(angles, state))


def test_servo_commands_zero_angles_give_zero_positions():
    assert servo_commands([0.0] * 6) == SERVO_ZEROS


def test_servo_commands_degrees():
    commands = servo_commands([math.radians(10.0)] + [0.0] * 5)
    assert commands[0] == pytest.approx(100.0, abs=1e-5)
    assert commands[1:] == SERVO_ZEROS[1:]


def test_tvc_out_clamps_before_conversion():
    assert tvc_out([1.0, 0.0, 0.0, 0.0, 0.0, 0.0]) == pytest.approx(
        servo_commands([SERVO_ANGLE_LIMIT, 0.0, 0.0, 0.0, 0.0, 0.0])
    )


def test_tvc_out_leaves_small_angles_alone():
    angles = [0.05, -0.05, 0.1, 0.0, 0.0, -0.1]
    assert tvc_out(angles) == pytest.approx(servo_commands(angles))


def test_orientation_identity():
    assert orientation_from_rotation(np.eye(3)) == pytest.approx((0.0, 0.0, 0.0))


def test_orientation_yaw_quarter_turn():
    rotation = [[0.0, -1.0, 0.0], [1.0, 0.0, 0.0], [0.0, 0.0, 1.0]]
    roll, pitch, yaw = orientation_from_rotation(rotation)
    assert roll == pytest.approx(0.0)
    assert pitch == pytest.approx(0.0)
    assert yaw == pytest.approx(90.0, abs=1e-4)


def test_orientation_rejects_bad_shape():
    with pytest.raises(ValueError):
        orientation_from_rotation([[1.0, 0.0], [0.0, 1.0]])