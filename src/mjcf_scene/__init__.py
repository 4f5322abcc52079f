"""Compile MJCF robot descriptions into a manipulable transform hierarchy."""
from .api import Diagnostic, LoadResult, MjcfSceneError
from .config import SceneConfig, load_config
from .description import parse
from .scene import CompiledModel, NodeRole, SceneNode, ShapeGroup, compile_description, set_group_visible
from .assets import MeshCache
from .api.loader import load_mjcf, load_mjcf_async, load_mjcf_file

__version__ = "0.1.0"

__all__ = [
    "load_mjcf",
    "load_mjcf_async",
    "load_mjcf_file",
    "parse",
    "compile_description",
    "CompiledModel",
    "SceneNode",
    "NodeRole",
    "ShapeGroup",
    "set_group_visible",
    "MeshCache",
    "SceneConfig",
    "load_config",
    "Diagnostic",
    "LoadResult",
    "MjcfSceneError",
]
