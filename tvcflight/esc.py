"""Thrust-to-pulse mapping for the electronic speed controllers."""

from __future__ import annotations

from typing import List, Tuple

NUM_MOTORS = 3
PINS = (8, 9, 17)

THRUST_MIN = 0.0
THRUST_MAX = 16.0

PULSE_MIN = 1000
PULSE_MAX = 2000


def thrust_to_pulse(thrust: float) -> int:
    """Map a thrust in newtons to a servo pulse width in microseconds."""
    if thrust <= THRUST_MIN:
        return PULSE_MIN
    if thrust >= THRUST_MAX:
        return PULSE_MAX
    frac = (thrust - THRUST_MIN) / (THRUST_MAX - THRUST_MIN)
    return int(PULSE_MIN + frac * (PULSE_MAX - PULSE_MIN) + 0.5)


class EscBank:
    """The commanded pulse widths of a set of ESCs, armed at zero throttle."""

    def __init__(self, num_motors: int = NUM_MOTORS) -> None:
        if num_motors <= 0:
            raise ValueError("num_motors must be positive")
        self._pulses: List[int] = [PULSE_MIN] * num_motors

    def __len__(self) -> int:
        return len(self._pulses)

    def set_thrust(self, index: int, thrust: float) -> None:
        """Command one motor by thrust in newtons."""
        if not 0 <= index < len(self._pulses):
            raise IndexError(f"motor index {index} out of range 0..{len(self._pulses) - 1}")
        self._pulses[index] = thrust_to_pulse(thrust)

    def set_all_thrust(self, thrust: float) -> None:
        """Command every motor to the same thrust in newtons."""
        pulse = thrust_to_pulse(thrust)
        self._pulses = [pulse] * len(self._pulses)

    def pulses(self) -> Tuple[int, ...]:
        """The current pulse width of each motor, in microseconds."""
        return tuple(self._pulses)