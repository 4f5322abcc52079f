from .base import DecoderRegistry, MeshDecoder, MeshPrimitive
from .placeholder import make_placeholder
from .trimesh_decoder import TrimeshDecoder

__all__ = ["MeshDecoder", "MeshPrimitive", "DecoderRegistry", "TrimeshDecoder", "make_placeholder"]
