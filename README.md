# tvcflight

Building blocks for the flight software of a vehicle steered by three
gimballed, thrust-vectored motors.

## Modules

- `tvcflight.vecmath`: quaternion and 3-vector helpers. Quaternions are
  `(w, x, y, z)` tuples and vectors are `(x, y, z)` tuples. It provides
  `quat_product`, `quat_length`, `quat_normalize`, `quat_conjugate`,
  `quat_inverse`, `vec_rotation` (computes `q * (0, v) * q^-1`),
  `euler_to_quat(pitch, yaw, roll)`, `quat_to_euler`, `vec_length`, `vec_dot`,
  `vec_angle`, `vec_cross` and `vec_proj`. `vec_proj` returns the component of
  `v` perpendicular to a unit vector `b`. Normalising, inverting or taking the
  angle of a zero-length input raises `ValueError`.
- `tvcflight.adam`: `AdamOptimizer(size, learning_rate=0.001, beta1=0.9,
  beta2=0.999, epsilon=1e-8)`. `step(cost, x, context)` takes one Adam step
  and returns the new parameters. `gradient(cost, x, context, h=1e-4)` returns
  the central-difference gradient. In both, the cost is called as
  `cost(x, context)`.
- `tvcflight.ukf`: `UnscentedKalmanFilter(x0, p0, q, alpha=1e-3, beta=2.0,
  kappa=0.0)`. Use it as follows:
  - Set the process model `f(x, dt)` with `set_process_model`.
  - Register sensors with `add_sensor(h, r)`.
  - Queue measurements with `set_measurement(z)`.
  - Call `predict(dt)`, then `update()`. `update()` consumes one queued
    measurement per sensor, in the order the sensors were registered.

  `state()` and the `covariance` property return copies of the current
  estimate.
- `tvcflight.control`: `L1AdaptiveController`, a PD attitude law on roll and
  pitch with L1 adaptive augmentation. `step(rotation, quat, gyro, target)`
  advances the estimator by one control period (`dt`, 0.002 s by default). It
  returns a `ControlOutput` with these fields:
  - `global_error`
  - `body_error`
  - `ang_acc_target`
  - `torque_target`, the adaptively corrected roll and pitch torques

  `reset()` clears the adaptive state.
- `tvcflight.esc`: `thrust_to_pulse(thrust)` maps a thrust of 0 to 16 N
  linearly onto a pulse width of 1000 to 2000 µs, with clamping at both ends.
  `EscBank(num_motors=3)` starts with every motor at 1000 µs. It offers
  `set_thrust(index, thrust)`, `set_all_thrust(thrust)` and `pulses()`.
- `tvcflight.tvc`: thrust-vector allocation.
  - `TVCMotor` and `TVCState` describe the motors and the target torque. Set
    the target with `TVCState.set_target_torque(tx, ty, tz)`.
  - `initialize_tvc_circle(radius=0.09, z=-1.0, thrust=5.0)` places three
    motors 120° apart on a circle.
  - `torque_cost(x, state)` scores six angles, a (pitch, yaw) pair per motor,
    against the target torque.
  - `optimize_tvc(state, x, optimizer, steps=100)` runs a fixed number of Adam
    steps. After each step it clamps every pair to the servo cone
    (`SERVO_ANGLE_LIMIT`, about 15°).
  - `solve_angles(state, x, optimizer, cost_threshold=0.01, max_steps=100)`
    steps until the cost reaches the threshold, without clamping. It returns
    `(angles, cost, steps)`.
  - `servo_commands(angles)` converts the six angles to servo positions in
    degrees around a 90° zero.
  - `tvc_out(angles)` clamps the angles to the cone first and then does the
    same conversion.
  - `clamp`, `clamp_servo_circle` and `orientation_from_rotation` (roll, pitch
    and yaw in degrees from a rotation matrix) complete the module.

## Installation

```
pip install .
```

To also install the test dependencies:

```
pip install ".[test]"
```

## Example

```python
import numpy as np

from tvcflight.adam import AdamOptimizer
from tvcflight.control import L1AdaptiveController
from tvcflight.tvc import initialize_tvc_circle, solve_angles, tvc_out

controller = L1AdaptiveController()
output = controller.step(
    rotation=np.eye(3),
    quat=[1.0, 0.0, 0.0, 0.0],
    gyro=[0.0, 0.0, 0.0],
    target=[0.0, 0.0, 1.0],
)

state = initialize_tvc_circle()
state.set_target_torque(output.torque_target[0], output.torque_target[1], 0.0)

optimizer = AdamOptimizer(6)
angles, cost, steps = solve_angles(state, np.zeros(6), optimizer)
commands = tvc_out(angles)  # six servo positions in degrees
```

## What the package does not do

The package works only on numbers passed to it. It does not:

- read an IMU, barometer or GPS;
- drive servos or ESCs, since `EscBank`, `servo_commands` and `tvc_out` only
  compute the pulse widths and positions to command;
- log flight data;
- provide a flight loop or a command to run one.

The caller supplies the sensor readings and sends the computed commands to
the hardware.

## Running the tests

```
pytest
```