# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Any, Iterable, Mapping, Optional, Sequence
from urllib.parse import urlparse

from ..api.diagnostics import DiagnosticLog
from ..decoders.base import DecoderRegistry, MeshPrimitive
from ..decoders.placeholder import make_placeholder
from ..decoders.trimesh_decoder import TrimeshDecoder
from ..scene.node import SceneNode
from .cache import MeshCache, instantiate
from .matching import AssetIndex

logger = logging.getLogger(__name__)


def default_registry(extensions: Optional[Iterable[str]] = None) -> DecoderRegistry:
    registry = DecoderRegistry()
    registry.register(TrimeshDecoder(extensions))
    return registry


def file_extension(reference: str) -> str:
    path = urlparse(reference.replace("\\", "/")).path or reference
    suffix = PurePosixPath(path).suffix
    return suffix[1:].lower() if suffix else ""


class AssetResolver:
    """Turns authored mesh references into scene nodes, decoding at most once.

    Resolution never fails: unresolved references, unsupported extensions and
    decoder errors all yield a placeholder node plus a warning diagnostic.
    Failures are not cached, so a later load can still succeed.
    """

    def __init__(
        self,
        assets: Mapping[str, str],
        cache: Optional[MeshCache] = None,
        decoders: Optional[DecoderRegistry] = None,
        base_dir: str = "",
        diagnostics: Optional[DiagnosticLog] = None,
        placeholder_material: Any = None,
        placeholder_size: Optional[float] = None,
    ):
        self.index = AssetIndex(assets, base_dir)
        self.cache = cache if cache is not None else MeshCache()
        self.decoders = decoders if decoders is not None else default_registry()
        self.diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
        self.placeholder_material = placeholder_material
        self.placeholder_size = placeholder_size
        self.decode_count = 0

    def placeholder(self, reference: str) -> SceneNode:
        return make_placeholder(reference, self.placeholder_material, self.placeholder_size)

    async def resolve(self, reference: str, scale: Optional[Sequence[float]] = None) -> SceneNode:
        entry = self.cache.get(reference)
        if entry is not None:
            return instantiate(entry, reference, scale)

        url = self.index.find(reference)
        if url is None:
            self.diagnostics.warning("unresolved-asset", f"Mesh not found in asset table: {reference}", reference)
            return self.placeholder(reference)

        ext = file_extension(reference) or file_extension(url)
        decoder = self.decoders.get(ext) if ext else None
        if decoder is None:
            self.diagnostics.warning(
                "unsupported-extension", f"No decoder for extension '{ext or '?'}': {reference}", reference
            )
            return self.placeholder(reference)

        try:
            decoded = await decoder.decode(url)
        except Exception as e:
            # Any codec failure degrades to a placeholder.
            self.diagnostics.warning("decode-failed", f"Failed to decode {reference}: {e}", reference)
            return self.placeholder(reference)

        if not isinstance(decoded, (MeshPrimitive, SceneNode)):
            self.diagnostics.warning(
                "decode-failed", f"Decoder returned no geometry for {reference}: {type(decoded).__name__}", reference
            )
            return self.placeholder(reference)

        self.decode_count += 1
        logger.debug("Decoded %s from %s", reference, url)
        self.cache.put(reference, decoded)
        return instantiate(decoded, reference, scale)


async def resolve(
    reference: str,
    assets: Mapping[str, str],
    cache: Optional[MeshCache] = None,
    decoders: Optional[DecoderRegistry] = None,
    diagnostics: Optional[DiagnosticLog] = None,
    scale: Optional[Sequence[float]] = None,
) -> SceneNode:
    """One-off resolution; build an :class:`AssetResolver` when resolving many references."""
    resolver = AssetResolver(assets, cache=cache, decoders=decoders, diagnostics=diagnostics)
    return await resolver.resolve(reference, scale)
