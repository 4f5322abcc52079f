# -*- coding: utf-8 -*-
"""Joint payloads and the joint-value runtime.

A compiled JointPivot node carries one payload variant. Values are applied
relative to a rest snapshot taken by :func:`bind`, never incrementally, so
applying the same value twice yields the same transform.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Sequence, Union

import numpy as np

from ..api.errors import JointError
from .frames import IDENTITY_QUAT, normalize, quat_from_axis_angle, quat_multiply, quat_normalize

if TYPE_CHECKING:
    from ..scene.node import SceneNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JointLimit:
    lower: float
    upper: float

    def clamp(self, value: float) -> float:
        return min(max(float(value), self.lower), self.upper)


@dataclass
class Revolute:
    name: str
    axis: np.ndarray
    limit: Optional[JointLimit] = None
    continuous: bool = False

    @property
    def joint_type(self) -> str:
        return "continuous" if self.continuous else "revolute"


@dataclass
class Prismatic:
    name: str
    axis: np.ndarray
    limit: Optional[JointLimit] = None

    @property
    def joint_type(self) -> str:
        return "prismatic"


@dataclass
class Ball:
    name: str
    axis: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    limit: Optional[JointLimit] = None

    @property
    def joint_type(self) -> str:
        return "ball"


@dataclass
class Floating:
    name: str
    axis: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    limit: Optional[JointLimit] = None

    @property
    def joint_type(self) -> str:
        return "floating"


JointPayload = Union[Revolute, Prismatic, Ball, Floating]


def make_payload(
    jtype: str,
    name: str,
    axis: Sequence[float],
    limit: Optional[JointLimit] = None,
) -> JointPayload:
    axis = normalize(axis, (0.0, 0.0, 1.0))
    if jtype == "revolute":
        return Revolute(name=name, axis=axis, limit=limit)
    if jtype == "continuous":
        return Revolute(name=name, axis=axis, limit=limit, continuous=True)
    if jtype == "prismatic":
        return Prismatic(name=name, axis=axis, limit=limit)
    if jtype == "ball":
        return Ball(name=name, axis=axis, limit=limit)
    if jtype == "floating":
        return Floating(name=name, axis=axis)
    raise JointError(f"No runtime payload for joint type: {jtype}")


@dataclass
class JointHandle:
    node: "SceneNode"
    payload: JointPayload
    rest_position: np.ndarray
    rest_orientation: np.ndarray
    value: float = 0.0

    def clamp(self, value: float) -> float:
        limit = self.payload.limit
        if limit is None or (isinstance(self.payload, Revolute) and self.payload.continuous):
            return float(value)
        return limit.clamp(value)


def bind(node: "SceneNode") -> JointHandle:
    """Snapshot ``node``'s current local transform as the rest reference."""
    payload = getattr(node, "joint", None)
    if payload is None:
        raise JointError(f"Node has no joint payload: {getattr(node, 'name', node)!r}")
    return JointHandle(
        node=node,
        payload=payload,
        rest_position=np.asarray(node.position, dtype=float).copy(),
        rest_orientation=np.asarray(node.orientation, dtype=float).copy(),
    )


def _commit(handle: JointHandle) -> None:
    # Dependents read world positions right after a joint update.
    handle.node.update_world_matrix(update_parents=True)


def apply(handle: JointHandle, value: float) -> bool:
    """Apply a scalar joint value; returns False for joints without a scalar DOF."""
    payload = handle.payload
    node = handle.node
    value = float(value)

    if isinstance(payload, Revolute):
        node.orientation = quat_multiply(handle.rest_orientation, quat_from_axis_angle(payload.axis, value))
    elif isinstance(payload, Prismatic):
        node.position = handle.rest_position + value * np.asarray(payload.axis, dtype=float)
    else:
        logger.debug("Scalar value ignored for %s joint %s", payload.joint_type, payload.name)
        return False

    handle.value = value
    _commit(handle)
    return True


def apply_orientation(handle: JointHandle, quat: Sequence[float]) -> bool:
    """Rotate a ball or floating joint to ``quat`` (w, x, y, z) relative to rest."""
    if not isinstance(handle.payload, (Ball, Floating)):
        return False
    handle.node.orientation = quat_multiply(handle.rest_orientation, quat_normalize(quat))
    _commit(handle)
    return True


def apply_pose(handle: JointHandle, position: Sequence[float], quat: Sequence[float] = IDENTITY_QUAT) -> bool:
    if not isinstance(handle.payload, Floating):
        return False
    handle.node.position = handle.rest_position + np.asarray(position, dtype=float)
    handle.node.orientation = quat_multiply(handle.rest_orientation, quat_normalize(quat))
    _commit(handle)
    return True


def reset(handle: JointHandle) -> None:
    handle.node.position = handle.rest_position.copy()
    handle.node.orientation = handle.rest_orientation.copy()
    handle.value = 0.0
    _commit(handle)


def world_axis(handle: JointHandle) -> np.ndarray:
    """Joint axis in world space, taken through the parent's world rotation."""
    axis = np.asarray(handle.payload.axis, dtype=float)
    parent = handle.node.parent
    if parent is None:
        return normalize(axis)
    return normalize(parent.world_matrix[:3, :3] @ axis)


def handle_for(node: "SceneNode") -> JointHandle:
    """Return the node's persistent handle, binding it on first use."""
    handle = getattr(node, "_joint_handle", None)
    if handle is None:
        handle = bind(node)
        node._joint_handle = handle
    return handle


def set_joint_value(node: "SceneNode", value: float) -> bool:
    """Apply ``value`` to a JointPivot node. No range clamping is done here."""
    return apply(handle_for(node), value)
