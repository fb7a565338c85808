"""Quaternion and 3-vector helpers used by the flight code.

Quaternions are ``(w, x, y, z)`` tuples and vectors are ``(x, y, z)`` tuples.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

Quat = Tuple[float, float, float, float]
Vec3 = Tuple[float, float, float]


def _as_quat(q: Sequence[float]) -> Quat:
    if len(q) != 4:
        raise ValueError(f"quaternion needs 4 components, got {len(q)}")
    w, x, y, z = (float(c) for c in q)
    return (w, x, y, z)


def _as_vec(v: Sequence[float]) -> Vec3:
    if len(v) != 3:
        raise ValueError(f"vector needs 3 components, got {len(v)}")
    x, y, z = (float(c) for c in v)
    return (x, y, z)


def quat_product(p: Sequence[float], q: Sequence[float]) -> Quat:
    """Hamilton product ``p * q``."""
    p0, p1, p2, p3 = _as_quat(p)
    q0, q1, q2, q3 = _as_quat(q)
    return (
        p0 * q0 - p1 * q1 - p2 * q2 - p3 * q3,
        p0 * q1 + p1 * q0 + p2 * q3 - p3 * q2,
        p0 * q2 - p1 * q3 + p2 * q0 + p3 * q1,
        p0 * q3 + p1 * q2 - p2 * q1 + p3 * q0,
    )


def quat_length(q: Sequence[float]) -> float:
    """Euclidean norm of a quaternion."""
    return math.sqrt(sum(c * c for c in _as_quat(q)))


def quat_normalize(q: Sequence[float]) -> Quat:
    """Return ``q`` scaled to unit length."""
    quat = _as_quat(q)
    length = quat_length(quat)
    if length == 0.0:
        raise ValueError("cannot normalize a zero-length quaternion")
    w, x, y, z = (c / length for c in quat)
    return (w, x, y, z)


def quat_conjugate(q: Sequence[float]) -> Quat:
    """Conjugate: the vector part negated."""
    w, x, y, z = _as_quat(q)
    return (w, -x, -y, -z)


def quat_inverse(q: Sequence[float]) -> Quat:
    """Multiplicative inverse: conjugate divided by the squared norm."""
    quat = _as_quat(q)
    norm_sq = quat_length(quat) ** 2
    if norm_sq == 0.0:
        raise ValueError("a zero-length quaternion has no inverse")
    w, x, y, z = (c / norm_sq for c in quat_conjugate(quat))
    return (w, x, y, z)


def vec_rotation(q: Sequence[float], v: Sequence[float]) -> Vec3:
    """Rotate ``v`` by ``q`` as ``q * (0, v) * q^-1``."""
    quat = _as_quat(q)
    vx, vy, vz = _as_vec(v)
    inner = quat_product((0.0, vx, vy, vz), quat_inverse(quat))
    _, x, y, z = quat_product(quat, inner)
    return (x, y, z)


def euler_to_quat(pitch: float, yaw: float, roll: float) -> Quat:
    """Quaternion for the given pitch, yaw and roll angles in radians."""
    cp, sp = math.cos(pitch / 2), math.sin(pitch / 2)
    cy, sy = math.cos(yaw / 2), math.sin(yaw / 2)
    cr, sr = math.cos(roll / 2), math.sin(roll / 2)
    return (
        cp * cy * cr + sp * sy * sr,
        sp * cy * cr - cp * sy * sr,
        cp * sy * cr + sp * cy * sr,
        cp * cy * sr - sp * sy * cr,
    )


def quat_to_euler(q: Sequence[float]) -> Vec3:
    """The three terms the flight code derives from a quaternion.

    The first and third are the ``w²-x²-y²+z²`` and ``w²+x²-y²-z²``
    denominators; the second is the ``asin(2(wy + zx))`` angle.
    """
    q0, q1, q2, q3 = _as_quat(q)
    return (
        q0 ** 2 - q1 ** 2 - q2 ** 2 + q3 ** 2,
        math.asin(2 * (q0 * q2 + q3 * q1)),
        q0 ** 2 + q1 ** 2 - q2 ** 2 - q3 ** 2,
    )


def vec_length(v: Sequence[float]) -> float:
    """Euclidean length of a vector."""
    return math.sqrt(sum(c * c for c in _as_vec(v)))


def vec_dot(v: Sequence[float], b: Sequence[float]) -> float:
    """Dot product."""
    return sum(a * c for a, c in zip(_as_vec(v), _as_vec(b)))


def vec_angle(v: Sequence[float], b: Sequence[float]) -> float:
    """Angle term ``acos(dot(v, b) / |v| * |b|)``, exact when ``b`` is a unit vector."""
    length_v = vec_length(v)
    if length_v == 0.0:
        raise ValueError("angle with a zero-length vector is undefined")
    return math.acos(vec_dot(v, b) / length_v * vec_length(b))


def vec_cross(v: Sequence[float], b: Sequence[float]) -> Vec3:
    """Cross product ``v x b``."""
    v1, v2, v3 = _as_vec(v)
    b1, b2, b3 = _as_vec(b)
    return (v2 * b3 - v3 * b2, v3 * b1 - v1 * b3, v1 * b2 - v2 * b1)


def vec_proj(v: Sequence[float], b: Sequence[float]) -> Vec3:
    """Component of ``v`` perpendicular to the unit vector ``b``."""
    vec = _as_vec(v)
    unit = _as_vec(b)
    d = vec_dot(vec, unit)
    x, y, z = (a - d * c for a, c in zip(vec, unit))
    return (x, y, z)