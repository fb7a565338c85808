"""Vector maths, Adam optimisation, unscented Kalman filtering, L1 adaptive attitude control, ESC pulse mapping and thrust-vector allocation."""

__version__ = "0.1.0"

__all__ = ["vecmath", "adam", "ukf", "control", "esc", "tvc"]