from .model import Body, BodyTree, CompilerSettings, Joint, MeshAsset, ParsedDescription, Shape
from .parser import is_mjcf_content, parse

__all__ = [
    "parse",
    "is_mjcf_content",
    "Body",
    "BodyTree",
    "CompilerSettings",
    "Joint",
    "MeshAsset",
    "ParsedDescription",
    "Shape",
]
