# -*- coding: utf-8 -*-
"""Primitive geometry descriptors and geom placement.

Primitive axes follow MJCF: cylinders and capsules are aligned with local +Z,
planes lie in the local XY plane. Sizes are half-extents.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from ..description.model import CompilerSettings, Shape
from ..kinematics.frames import IDENTITY_QUAT, euler_to_quat, quat_between_vectors, quat_normalize

DEFAULT_RADIUS = 0.05
DEFAULT_HALF_LENGTH = 0.1
DEFAULT_PLANE_HALF = 10.0
MIN_SEGMENT = 1e-4
Z_AXIS = (0.0, 0.0, 1.0)


@dataclass(frozen=True)
class BoxGeometry:
    half_extents: Tuple[float, float, float]
    kind: str = "box"


@dataclass(frozen=True)
class SphereGeometry:
    radius: float
    kind: str = "sphere"


@dataclass(frozen=True)
class CylinderGeometry:
    radius: float
    half_length: float
    kind: str = "cylinder"


@dataclass(frozen=True)
class CapsuleGeometry:
    radius: float
    half_length: float
    kind: str = "capsule"


@dataclass(frozen=True)
class EllipsoidGeometry:
    radii: Tuple[float, float, float]
    kind: str = "ellipsoid"


@dataclass(frozen=True)
class PlaneGeometry:
    half_x: float
    half_y: float
    kind: str = "plane"


def _size(shape: Shape, index: int, default: float) -> float:
    # Zero means "unset" in MJCF size vectors.
    if len(shape.size) > index and shape.size[index] != 0.0:
        return float(shape.size[index])
    return default


def segment_frame(fromto: np.ndarray) -> Tuple[np.ndarray, np.ndarray, float]:
    """Center, orientation (+Z onto the segment) and half-length of a fromto pair."""
    a = np.asarray(fromto[:3], dtype=float)
    b = np.asarray(fromto[3:6], dtype=float)
    direction = b - a
    length = float(np.linalg.norm(direction))
    center = (a + b) / 2.0
    if length < MIN_SEGMENT:
        return center, IDENTITY_QUAT.copy(), 0.0
    return center, quat_between_vectors(Z_AXIS, direction), length / 2.0


def build_primitive(shape: Shape):
    """Geometry descriptor for a primitive shape, or ``None`` for other kinds."""
    kind = shape.kind
    half_from_segment = None
    if shape.is_segment_pair:
        half_from_segment = segment_frame(shape.fromto)[2]

    if kind == "box":
        sx = _size(shape, 0, DEFAULT_RADIUS)
        sy = _size(shape, 1, sx)
        sz = half_from_segment if half_from_segment is not None else _size(shape, 2, sx)
        return BoxGeometry((sx, sy, sz))
    if kind == "sphere":
        return SphereGeometry(_size(shape, 0, DEFAULT_RADIUS))
    if kind in ("cylinder", "capsule"):
        radius = _size(shape, 0, DEFAULT_RADIUS)
        half = half_from_segment if half_from_segment is not None else _size(shape, 1, DEFAULT_HALF_LENGTH)
        cls = CylinderGeometry if kind == "cylinder" else CapsuleGeometry
        return cls(radius, half)
    if kind == "ellipsoid":
        rx = _size(shape, 0, DEFAULT_RADIUS)
        ry = _size(shape, 1, rx)
        rz = half_from_segment if half_from_segment is not None else _size(shape, 2, rx)
        return EllipsoidGeometry((rx, ry, rz))
    if kind == "plane":
        hx = _size(shape, 0, DEFAULT_PLANE_HALF)
        hy = _size(shape, 1, hx)
        return PlaneGeometry(hx, hy)
    return None


def orientation_of(
    quat: Optional[np.ndarray],
    euler: Optional[np.ndarray],
    settings: CompilerSettings,
) -> np.ndarray:
    """Resolve an authored quat/euler pair; quat wins when both are present."""
    if quat is not None:
        return quat_normalize(quat)
    if euler is not None:
        angles = [settings.to_radians(a) for a in euler]
        return euler_to_quat(angles, settings.eulerseq)
    return IDENTITY_QUAT.copy()


def shape_placement(shape: Shape, settings: CompilerSettings) -> Tuple[np.ndarray, np.ndarray]:
    """Local position and orientation of a geom relative to its link container.

    A fromto pair defines the whole frame and overrides ``pos``/``quat``.
    """
    if shape.is_segment_pair and shape.kind in ("capsule", "cylinder", "box", "ellipsoid"):
        center, quat, _ = segment_frame(shape.fromto)
        return center, quat
    pos = np.zeros(3, dtype=float) if shape.pos is None else np.asarray(shape.pos, dtype=float).copy()
    return pos, orientation_of(shape.quat, shape.euler, settings)
