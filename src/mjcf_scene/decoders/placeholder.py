# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Optional

from ..scene.node import NodeRole, SceneNode
from ..scene.shapes import BoxGeometry

DEFAULT_PLACEHOLDER_SIZE = 0.05


def make_placeholder(reference: str, material: Any = None, size: Optional[float] = None) -> SceneNode:
    """Small box standing in for a mesh that could not be resolved or decoded."""
    half = (size if size is not None else DEFAULT_PLACEHOLDER_SIZE) / 2.0
    node = SceneNode(f"placeholder:{reference}", NodeRole.SHAPE)
    node.geometry = BoxGeometry((half, half, half))
    node.material = material
    node.user_data["placeholder"] = True
    node.user_data["missing_reference"] = reference
    return node


def is_placeholder(node: SceneNode) -> bool:
    return bool(node.user_data.get("placeholder"))
