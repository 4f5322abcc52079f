# -*- coding: utf-8 -*-
"""Rigid-transform helpers.

Quaternions are numpy arrays in MJCF order ``(w, x, y, z)``.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

IDENTITY_QUAT = np.array([1.0, 0.0, 0.0, 0.0], dtype=float)


def normalize(vec: Sequence[float], fallback: Optional[Sequence[float]] = None) -> np.ndarray:
    v = np.asarray(vec, dtype=float)
    n = float(np.linalg.norm(v))
    if n < 1e-12:
        if fallback is None:
            return v.copy()
        return np.asarray(fallback, dtype=float).copy()
    return v / n


def quat_normalize(q: Sequence[float]) -> np.ndarray:
    return normalize(q, IDENTITY_QUAT)


def quat_multiply(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    aw, ax, ay, az = (float(c) for c in a)
    bw, bx, by, bz = (float(c) for c in b)
    return np.array([
        aw * bw - ax * bx - ay * by - az * bz,
        aw * bx + ax * bw + ay * bz - az * by,
        aw * by - ax * bz + ay * bw + az * bx,
        aw * bz + ax * by - ay * bx + az * bw,
    ], dtype=float)


def quat_from_axis_angle(axis: Sequence[float], theta: float) -> np.ndarray:
    axis = np.asarray(axis, dtype=float)
    norm = np.linalg.norm(axis)
    if norm < 1e-12:
        return IDENTITY_QUAT.copy()
    axis = axis / norm
    half = 0.5 * float(theta)
    s = math.sin(half)
    return np.array([math.cos(half), axis[0] * s, axis[1] * s, axis[2] * s], dtype=float)


def quat_to_matrix(q: Sequence[float]) -> np.ndarray:
    w, x, y, z = quat_normalize(q)
    return np.array([
        [1.0 - 2.0 * (y * y + z * z), 2.0 * (x * y - w * z), 2.0 * (x * z + w * y)],
        [2.0 * (x * y + w * z), 1.0 - 2.0 * (x * x + z * z), 2.0 * (y * z - w * x)],
        [2.0 * (x * z - w * y), 2.0 * (y * z + w * x), 1.0 - 2.0 * (x * x + y * y)],
    ], dtype=float)


def matrix_to_quat(R: np.ndarray) -> np.ndarray:
    R = np.asarray(R, dtype=float)
    trace = float(R[0, 0] + R[1, 1] + R[2, 2])
    if trace > 0.0:
        s = 2.0 * math.sqrt(trace + 1.0)
        q = [0.25 * s, (R[2, 1] - R[1, 2]) / s, (R[0, 2] - R[2, 0]) / s, (R[1, 0] - R[0, 1]) / s]
    elif R[0, 0] > R[1, 1] and R[0, 0] > R[2, 2]:
        s = 2.0 * math.sqrt(1.0 + R[0, 0] - R[1, 1] - R[2, 2])
        q = [(R[2, 1] - R[1, 2]) / s, 0.25 * s, (R[0, 1] + R[1, 0]) / s, (R[0, 2] + R[2, 0]) / s]
    elif R[1, 1] > R[2, 2]:
        s = 2.0 * math.sqrt(1.0 + R[1, 1] - R[0, 0] - R[2, 2])
        q = [(R[0, 2] - R[2, 0]) / s, (R[0, 1] + R[1, 0]) / s, 0.25 * s, (R[1, 2] + R[2, 1]) / s]
    else:
        s = 2.0 * math.sqrt(1.0 + R[2, 2] - R[0, 0] - R[1, 1])
        q = [(R[1, 0] - R[0, 1]) / s, (R[0, 2] + R[2, 0]) / s, (R[1, 2] + R[2, 1]) / s, 0.25 * s]
    q = np.array(q, dtype=float)
    if q[0] < 0.0:
        q = -q
    return quat_normalize(q)


def euler_to_quat(angles: Sequence[float], seq: str = "xyz") -> np.ndarray:
    """Compose an orientation from three angles (radians).

    Each character of ``seq`` names the axis of one elementary rotation.
    Lowercase axes rotate with the frame (post-multiplied), uppercase axes are
    fixed in the parent frame (pre-multiplied).
    """
    if len(seq) != 3 or any(c not in "xyzXYZ" for c in seq):
        raise ValueError(f"Invalid euler sequence: {seq!r}")
    unit = {"x": (1.0, 0.0, 0.0), "y": (0.0, 1.0, 0.0), "z": (0.0, 0.0, 1.0)}
    q = IDENTITY_QUAT.copy()
    for c, angle in zip(seq, angles):
        step = quat_from_axis_angle(unit[c.lower()], float(angle))
        if c.islower():
            q = quat_multiply(q, step)
        else:
            q = quat_multiply(step, q)
    return quat_normalize(q)


def quat_between_vectors(a: Sequence[float], b: Sequence[float]) -> np.ndarray:
    """Shortest-arc rotation taking direction ``a`` onto direction ``b``."""
    a = normalize(a)
    b = normalize(b)
    d = float(np.dot(a, b))
    if d > 1.0 - 1e-12:
        return IDENTITY_QUAT.copy()
    if d < -1.0 + 1e-12:
        ortho = np.cross(a, (1.0, 0.0, 0.0))
        if np.linalg.norm(ortho) < 1e-6:
            ortho = np.cross(a, (0.0, 1.0, 0.0))
        return quat_from_axis_angle(ortho, math.pi)
    c = np.cross(a, b)
    return quat_normalize(np.array([1.0 + d, c[0], c[1], c[2]], dtype=float))


def transform_from_pos_quat(
    pos: Sequence[float],
    quat: Sequence[float],
    scale: Optional[Sequence[float]] = None,
) -> np.ndarray:
    T = np.eye(4, dtype=float)
    R = quat_to_matrix(quat)
    if scale is not None:
        R = R @ np.diag(np.asarray(scale, dtype=float))
    T[:3, :3] = R
    T[:3, 3] = np.asarray(pos, dtype=float)
    return T


def transform_point(T: np.ndarray, p: Sequence[float]) -> np.ndarray:
    p = np.asarray(p, dtype=float)
    return T[:3, :3] @ p + T[:3, 3]
