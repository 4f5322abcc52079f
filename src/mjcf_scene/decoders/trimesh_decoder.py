# -*- coding: utf-8 -*-
"""Default mesh codec backed by trimesh.

Loading runs in a worker thread so the compile coroutine stays responsive;
the compiler still awaits each decode before moving on.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse

import numpy as np
import trimesh

from ..api.errors import DecodeError
from ..kinematics.frames import matrix_to_quat
from ..scene.node import NodeRole, SceneNode
from .base import Decoded, MeshDecoder, MeshPrimitive

logger = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("stl", "obj", "dae", "glb", "gltf", "ply", "off")


def _to_primitive(mesh: trimesh.Trimesh, source: str) -> MeshPrimitive:
    return MeshPrimitive(
        vertices=np.asarray(mesh.vertices, dtype=float),
        faces=np.asarray(mesh.faces, dtype=np.int64),
        source=source,
    )


def _scene_to_tree(scene: trimesh.Scene, source: str) -> SceneNode:
    root = SceneNode(Path(source).stem or "mesh", NodeRole.MESH_PART)
    for node_name in scene.graph.nodes_geometry:
        transform, geometry_name = scene.graph[node_name]
        geometry = scene.geometry.get(geometry_name)
        if not isinstance(geometry, trimesh.Trimesh):
            logger.debug("Skipping non-mesh geometry %s in %s", geometry_name, source)
            continue
        T = np.asarray(transform, dtype=float)
        part = SceneNode(str(node_name), NodeRole.MESH_PART, T[:3, 3], matrix_to_quat(T[:3, :3]))
        part.geometry = _to_primitive(geometry, source)
        root.add(part)
    return root


def url_to_path(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme == "file":
        return unquote(parsed.path)
    return url


class TrimeshDecoder(MeshDecoder):
    """Decode any format trimesh understands into a primitive or a sub-tree."""

    extensions = DEFAULT_EXTENSIONS

    def __init__(self, extensions=None):
        if extensions is not None:
            self.extensions = tuple(e.lower().lstrip(".") for e in extensions)

    def _load(self, url: str):
        if url.startswith(("http://", "https://")):
            return trimesh.load_remote(url)
        return trimesh.load(url_to_path(url))

    async def decode(self, url: str) -> Decoded:
        try:
            loaded = await asyncio.to_thread(self._load, url)
        except Exception as e:
            raise DecodeError(f"Failed to load mesh {url}: {e}") from e

        if isinstance(loaded, trimesh.Trimesh):
            return _to_primitive(loaded, url)
        if isinstance(loaded, trimesh.Scene):
            nodes = list(loaded.graph.nodes_geometry)
            if len(nodes) == 1:
                transform, geometry_name = loaded.graph[nodes[0]]
                geometry = loaded.geometry.get(geometry_name)
                if isinstance(geometry, trimesh.Trimesh):
                    return _to_primitive(geometry.copy().apply_transform(transform), url)
            return _scene_to_tree(loaded, url)
        raise DecodeError(f"Unsupported mesh content in {url}: {type(loaded).__name__}")
