# -*- coding: utf-8 -*-
"""Backend-neutral transform node used for the compiled hierarchy."""
from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Sequence

import numpy as np

from ..kinematics.frames import IDENTITY_QUAT, quat_normalize, transform_from_pos_quat
from ..kinematics.joints import set_joint_value


class NodeRole(str, Enum):
    MODEL = "model"
    BODY_OFFSET = "body-offset"
    JOINT_PIVOT = "joint-pivot"
    GEOM_COMPENSATION = "geom-compensation"
    LINK_CONTAINER = "link-container"
    SHAPE_GROUP = "shape-group"
    SHAPE = "shape"
    MESH_PART = "mesh-part"


class ShapeGroup(str, Enum):
    VISUAL = "visual"
    COLLISION = "collision"


class SceneNode:
    """A named node with a local rigid transform, optional scale and geometry.

    ``world_matrix`` is a cache refreshed by :meth:`update_world_matrix`.
    """

    def __init__(
        self,
        name: str,
        role: NodeRole,
        position: Optional[Sequence[float]] = None,
        orientation: Optional[Sequence[float]] = None,
    ):
        self.name = name
        self.role = role
        self.position = np.zeros(3, dtype=float) if position is None else np.asarray(position, dtype=float).copy()
        self.orientation = IDENTITY_QUAT.copy() if orientation is None else quat_normalize(orientation)
        self.scale = np.ones(3, dtype=float)
        self.visible = True
        self.group: Optional[ShapeGroup] = None
        self.geometry: Any = None
        self.material: Any = None
        self.joint: Any = None
        self.user_data: Dict[str, Any] = {}
        self.parent: Optional[SceneNode] = None
        self.children: List[SceneNode] = []
        self.world_matrix = np.eye(4, dtype=float)
        self._joint_handle: Any = None

    def __repr__(self) -> str:
        return f"SceneNode(name={self.name!r}, role={self.role.value}, children={len(self.children)})"

    # ----- structure -----

    def add(self, child: "SceneNode") -> "SceneNode":
        if child.parent is not None:
            child.parent.remove(child)
        child.parent = self
        self.children.append(child)
        return child

    def remove(self, child: "SceneNode") -> None:
        if child in self.children:
            self.children.remove(child)
            child.parent = None

    def traverse(self) -> Iterator["SceneNode"]:
        yield self
        for child in self.children:
            yield from child.traverse()

    def find_by_name(self, name: str) -> Optional["SceneNode"]:
        for node in self.traverse():
            if node.name == name:
                return node
        return None

    def clone(self, deep: bool = True) -> "SceneNode":
        """Copy this node (and its subtree when ``deep``).

        Geometry buffers are shared between clones, materials are copied.
        """
        node = SceneNode(self.name, self.role, self.position, self.orientation)
        node.scale = self.scale.copy()
        node.visible = self.visible
        node.group = self.group
        node.geometry = self.geometry
        node.material = copy.copy(self.material)
        node.joint = self.joint
        node.user_data = dict(self.user_data)
        node.world_matrix = self.world_matrix.copy()
        if deep:
            for child in self.children:
                node.add(child.clone(deep=True))
        return node

    # ----- transforms -----

    @property
    def local_matrix(self) -> np.ndarray:
        return transform_from_pos_quat(self.position, self.orientation, self.scale)

    def update_world_matrix(self, update_parents: bool = False) -> None:
        """Recompute world matrices of this node and its whole subtree."""
        if update_parents and self.parent is not None:
            chain = []
            node = self.parent
            while node is not None:
                chain.append(node)
                node = node.parent
            for ancestor in reversed(chain):
                ancestor._refresh_own_world()
        self._refresh_own_world()
        for child in self.children:
            child.update_world_matrix()

    def _refresh_own_world(self) -> None:
        if self.parent is None:
            self.world_matrix = self.local_matrix
        else:
            self.world_matrix = self.parent.world_matrix @ self.local_matrix

    def world_position(self) -> np.ndarray:
        return self.world_matrix[:3, 3].copy()

    # ----- joints -----

    @property
    def axis(self) -> Optional[np.ndarray]:
        return getattr(self.joint, "axis", None)

    @property
    def limit(self):
        return getattr(self.joint, "limit", None)

    @property
    def joint_type(self) -> Optional[str]:
        return getattr(self.joint, "joint_type", None)

    def set_joint_value(self, value: float) -> bool:
        return set_joint_value(self, value)


def set_group_visible(root: SceneNode, group: ShapeGroup, visible: bool) -> int:
    """Toggle every shape-group node tagged ``group``; returns how many changed."""
    count = 0
    for node in root.traverse():
        if node.role == NodeRole.SHAPE_GROUP and node.group == group:
            node.visible = visible
            count += 1
    return count
