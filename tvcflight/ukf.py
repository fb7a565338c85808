"""Generic unscented Kalman filter with any number of registered sensors."""

from __future__ import annotations

import math
from collections import deque
from typing import Callable, Deque, List, Optional, Sequence, Tuple

import numpy as np

ProcessModel = Callable[[np.ndarray, float], Sequence[float]]
MeasurementModel = Callable[[np.ndarray], Sequence[float]]


class UnscentedKalmanFilter:
    """Unscented Kalman filter over an N-dimensional state.

    A process model ``f(x, dt)`` is set with :meth:`set_process_model`.
    Each sensor is a measurement function ``h(x)`` paired with its noise
    covariance. Measurements queued with :meth:`set_measurement` are
    consumed by :meth:`update`, one per sensor, in registration order.
    """

    def __init__(
        self,
        x0: Sequence[float],
        p0: Sequence[Sequence[float]],
        q: Sequence[Sequence[float]],
        alpha: float = 1e-3,
        beta: float = 2.0,
        kappa: float = 0.0,
    ) -> None:
        x = np.array(x0, dtype=float)
        if x.ndim != 1 or x.size == 0:
            raise ValueError("initial state must be a non-empty 1-D vector")
        n = x.size
        p = np.array(p0, dtype=float)
        noise = np.array(q, dtype=float)
        if p.shape != (n, n):
            raise ValueError(f"initial covariance must be {n}x{n}, got {p.shape}")
        if noise.shape != (n, n):
            raise ValueError(f"process noise must be {n}x{n}, got {noise.shape}")

        lam = alpha * alpha * (n + kappa) - n
        if n + lam <= 0.0:
            raise ValueError("alpha and kappa give a non-positive sigma-point spread")

        self._n = n
        self._x = x
        self._p = p
        self._q = noise
        self._gamma = math.sqrt(n + lam)

        count = 2 * n + 1
        self._wm = np.full(count, 1.0 / (2.0 * (n + lam)))
        self._wc = self._wm.copy()
        self._wm[0] = lam / (n + lam)
        self._wc[0] = self._wm[0] + (1.0 - alpha * alpha + beta)

        self._f: Optional[ProcessModel] = None
        self._sensors: List[Tuple[MeasurementModel, np.ndarray]] = []
        self._pending: Deque[np.ndarray] = deque()
        self._sigma: Optional[np.ndarray] = None

    @property
    def covariance(self) -> np.ndarray:
        """A copy of the current state covariance."""
        return self._p.copy()

    def set_process_model(self, f: ProcessModel) -> None:
        """Set the process model ``f(x, dt)`` returning the next state."""
        self._f = f

    def add_sensor(self, h: MeasurementModel, r: Sequence[Sequence[float]]) -> None:
        """Register a measurement function with its noise covariance."""
        noise = np.array(r, dtype=float)
        if noise.ndim != 2 or noise.shape[0] != noise.shape[1] or noise.shape[0] == 0:
            raise ValueError("measurement covariance must be a non-empty square matrix")
        self._sensors.append((h, noise))

    def set_measurement(self, z: Sequence[float]) -> None:
        """Queue a measurement for the next :meth:`update`."""
        self._pending.append(np.array(z, dtype=float).reshape(-1))

    def state(self) -> np.ndarray:
        """A copy of the current state estimate."""
        return self._x.copy()

    def _sigma_points(self) -> np.ndarray:
        root = np.linalg.cholesky(self._p)
        spread = self._gamma * root.T
        return np.vstack([self._x, self._x + spread, self._x - spread])

    def predict(self, dt: float) -> None:
        """Propagate the estimate through the process model over ``dt``."""
        if self._f is None:
            raise RuntimeError("no process model has been set")
        points = self._sigma_points()
        propagated = np.array(
            [np.asarray(self._f(point, dt), dtype=float).reshape(-1) for point in points]
        )
        if propagated.shape != points.shape:
            raise ValueError(
                f"process model must return {self._n} values, got shape {propagated.shape[1:]}"
            )
        self._sigma = propagated
        self._x = self._wm @ propagated
        deviation = propagated - self._x
        self._p = (self._wc[:, None] * deviation).T @ deviation + self._q

    def update(self) -> None:
        """Fold in one queued measurement for each registered sensor."""
        if self._sigma is None:
            raise RuntimeError("predict must be called before update")
        if len(self._pending) < len(self._sensors):
            raise ValueError(
                f"{len(self._sensors)} measurements needed, {len(self._pending)} queued"
            )
        sigma = self._sigma
        weighted = self._wc[:, None]
        for h, r in self._sensors:
            m = r.shape[0]
            z_points = np.array([np.asarray(h(point), dtype=float).reshape(-1) for point in sigma])
            if z_points.shape != (sigma.shape[0], m):
                raise ValueError(f"measurement function must return {m} values")
            z_pred = self._wm @ z_points
            dz = z_points - z_pred
            dx = sigma - self._x
            s = (weighted * dz).T @ dz + r
            c = (weighted * dx).T @ dz
            gain = c @ np.linalg.inv(s)

            z = self._pending.popleft()
            if z.size != m:
                raise ValueError(f"measurement must have {m} values, got {z.size}")
            self._x = self._x + gain @ (z - z_pred)
            self._p = self._p - gain @ s @ gain.T