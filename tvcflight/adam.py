"""Adam optimiser driven by a numerically differentiated cost function."""

from __future__ import annotations

from typing import Any, Callable, Sequence

import numpy as np

CostFunction = Callable[[np.ndarray, Any], float]


class AdamOptimizer:
    """Adam with central-difference gradients over a fixed-size parameter vector."""

    def __init__(
        self,
        size: int,
        learning_rate: float = 0.001,
        beta1: float = 0.9,
        beta2: float = 0.999,
        epsilon: float = 1e-8,
    ) -> None:
        if size <= 0:
            raise ValueError("size must be positive")
        self.size = size
        self.learning_rate = learning_rate
        self.beta1 = beta1
        self.beta2 = beta2
        self.epsilon = epsilon
        self.t = 0
        self._beta1_power = 1.0
        self._beta2_power = 1.0
        self._m = np.zeros(size)
        self._v = np.zeros(size)

    def _check(self, x: Sequence[float]) -> np.ndarray:
        arr = np.array(x, dtype=float)
        if arr.shape != (self.size,):
            raise ValueError(f"expected {self.size} parameters, got shape {arr.shape}")
        return arr

    def gradient(
        self,
        cost: CostFunction,
        x: Sequence[float],
        context: Any = None,
        h: float = 1e-4,
    ) -> np.ndarray:
        """Central-difference gradient of ``cost`` at ``x``."""
        base = self._check(x)
        grad = np.empty(self.size)
        for i in range(self.size):
            plus = base.copy()
            minus = base.copy()
            plus[i] += h
            minus[i] -= h
            grad[i] = (cost(plus, context) - cost(minus, context)) / (2 * h)
        return grad

    def step(self, cost: CostFunction, x: Sequence[float], context: Any = None) -> np.ndarray:
        """Take one Adam step from ``x`` and return the new parameters."""
        params = self._check(x)
        self.t += 1
        self._beta1_power *= self.beta1
        self._beta2_power *= self.beta2

        grad = self.gradient(cost, params, context)
        self._m = self.beta1 * self._m + (1.0 - self.beta1) * grad
        self._v = self.beta2 * self._v + (1.0 - self.beta2) * grad * grad

        m_hat = self._m / (1.0 - self._beta1_power)
        v_hat = self._v / (1.0 - self._beta2_power)
        return params - self.learning_rate * m_hat / (np.sqrt(v_hat) + self.epsilon)