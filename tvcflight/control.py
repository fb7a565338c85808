"""Attitude control law with L1 adaptive augmentation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from tvcflight.vecmath import quat_conjugate, vec_rotation

DEFAULT_TARGET = (0.0, 0.0, 1.0)

L1_GAMMA = (50.0, 50.0)
L1_WC = (20.0, 15.0)
L1_DT = 0.002

MMOI = (0.2218606474, 0.2218606474, 0.01)
CM_TVC_DISTANCE = 0.5
MASS = 0.749
THRUST_FORCE_MEAS = 2.0

GAIN_P = -0.1
GAIN_D = 0.2


@dataclass(frozen=True)
class ControlOutput:
    """Results of one control-law evaluation."""

    global_error: np.ndarray
    body_error: np.ndarray
    ang_acc_target: np.ndarray
    torque_target: np.ndarray


def _vector(values: Sequence[float], size: int, name: str) -> np.ndarray:
    arr = np.array(values, dtype=float)
    if arr.shape != (size,):
        raise ValueError(f"{name} must have {size} components, got shape {arr.shape}")
    return arr


class L1AdaptiveController:
    """PD attitude controller on roll and pitch with an L1 adaptive term."""

    def __init__(
        self,
        gamma: Sequence[float] = L1_GAMMA,
        wc: Sequence[float] = L1_WC,
        dt: float = L1_DT,
        mmoi: Sequence[float] = MMOI,
        gain_p: float = GAIN_P,
        gain_d: float = GAIN_D,
    ) -> None:
        self.gamma = _vector(gamma, 2, "gamma")
        self.wc = _vector(wc, 2, "wc")
        self.mmoi = _vector(mmoi, 3, "mmoi")
        if dt <= 0.0:
            raise ValueError("dt must be positive")
        if np.any(self.mmoi[:2] == 0.0):
            raise ValueError("roll and pitch moments of inertia must be non-zero")
        self.dt = dt
        self.gain_p = gain_p
        self.gain_d = gain_d
        self.reset()

    def reset(self) -> None:
        """Clear the adaptive estimator and filter state."""
        self.sigma_hat = np.zeros(2)
        self.eta = np.zeros(2)
        self.xhat_err = np.zeros(2)
        self.xhat_w = np.zeros(2)

    def step(
        self,
        rotation: Sequence[Sequence[float]],
        quat: Sequence[float],
        gyro: Sequence[float],
        target: Sequence[float] = DEFAULT_TARGET,
    ) -> ControlOutput:
        """Run one control period and return the commanded torques."""
        rot = np.array(rotation, dtype=float)
        if rot.shape != (3, 3):
            raise ValueError(f"rotation must be 3x3, got shape {rot.shape}")
        q = _vector(quat, 4, "quat")
        rates = _vector(gyro, 3, "gyro")
        aim = _vector(target, 3, "target")

        forward = rot[0]
        global_error = np.cross(forward, aim)
        body_error = np.array(vec_rotation(quat_conjugate(q), global_error))

        ang_acc = np.array(
            [
                self.gain_p * -body_error[2] + self.gain_d * rates[2],
                self.gain_p * body_error[1] + self.gain_d * -rates[1],
            ]
        )
        inertia = self.mmoi[:2]
        torque = ang_acc * inertia

        xhat_err_dot = self.xhat_w.copy()
        xhat_w_dot = (torque + self.sigma_hat) / inertia
        self.xhat_err = self.xhat_err + xhat_err_dot * self.dt
        self.xhat_w = self.xhat_w + xhat_w_dot * self.dt

        measured = np.array([-body_error[2], body_error[1]])
        pred_err = self.xhat_err - measured

        self.sigma_hat = self.sigma_hat - self.gamma * pred_err * self.dt
        self.eta = self.eta + (self.wc * (self.sigma_hat - self.eta)) * self.dt

        return ControlOutput(
            global_error=global_error,
            body_error=body_error,
            ang_acc_target=ang_acc,
            torque_target=torque - self.eta,
        )