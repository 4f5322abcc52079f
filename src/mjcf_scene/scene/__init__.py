from .node import NodeRole, SceneNode, ShapeGroup, set_group_visible
from .materials import SurfaceDescriptor, make_material
from .classifier import Classification, classify
from .compiler import CompiledModel, compile_description, compile_description_async

__all__ = [
    "NodeRole",
    "SceneNode",
    "ShapeGroup",
    "set_group_visible",
    "SurfaceDescriptor",
    "make_material",
    "Classification",
    "classify",
    "CompiledModel",
    "compile_description",
    "compile_description_async",
]
