from .matching import AssetIndex, clean_file_path, find_asset
from .cache import MaxEntriesPolicy, MeshCache, NoEviction, SessionPolicy
from .resolver import AssetResolver, resolve

__all__ = [
    "AssetIndex",
    "clean_file_path",
    "find_asset",
    "MeshCache",
    "NoEviction",
    "MaxEntriesPolicy",
    "SessionPolicy",
    "AssetResolver",
    "resolve",
]
