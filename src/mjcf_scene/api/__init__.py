from .diagnostics import Diagnostic, DiagnosticLog
from .errors import AssetError, DecodeError, DescriptionError, JointError, MjcfSceneError
from .types import LoadResult

__all__ = [
    "Diagnostic",
    "DiagnosticLog",
    "LoadResult",
    "MjcfSceneError",
    "DescriptionError",
    "AssetError",
    "DecodeError",
    "JointError",
]
