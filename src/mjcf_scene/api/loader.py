# -*- coding: utf-8 -*-
"""Entry points: MJCF text (plus an asset table) -> :class:`LoadResult`.

Nothing about the description or its assets makes these functions raise;
problems come back as diagnostics and, when fatal, ``model=None``. The
blocking wrappers refuse to run inside an event loop; await
:func:`load_mjcf_async` there.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Dict, Mapping, Optional

from ..assets.cache import MeshCache
from ..config.loader import SceneConfig
from ..decoders.base import DecoderRegistry
from ..description.parser import parse
from ..scene.compiler import compile_description_async
from ..scene.materials import MaterialFactory
from .diagnostics import DiagnosticLog
from .errors import DescriptionError
from .types import LoadResult

logger = logging.getLogger(__name__)


def _require_no_running_loop(name: str, alternative: str) -> None:
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return
    raise RuntimeError(f"{name}() cannot be called from a running event loop; await {alternative}() instead")


async def load_mjcf_async(
    text: str,
    assets: Optional[Mapping[str, str]] = None,
    cache: Optional[MeshCache] = None,
    decoders: Optional[DecoderRegistry] = None,
    config: Optional[SceneConfig] = None,
    material_factory: Optional[MaterialFactory] = None,
) -> LoadResult:
    diagnostics = DiagnosticLog()
    try:
        parsed = parse(text, diagnostics)
        if parsed is None:
            return LoadResult(model=None, diagnostics=diagnostics.records)
        model = await compile_description_async(
            parsed,
            assets or {},
            cache=cache,
            decoders=decoders,
            diagnostics=diagnostics,
            config=config if config is not None else SceneConfig.load(),
            material_factory=material_factory,
        )
    except Exception as e:
        logger.exception("MJCF load failed")
        diagnostics.error("load-failed", f"Failed to load MJCF: {e}")
        return LoadResult(model=None, diagnostics=diagnostics.records)
    return LoadResult(model=model, diagnostics=diagnostics.records)


def load_mjcf(text: str, assets: Optional[Mapping[str, str]] = None, **kwargs) -> LoadResult:
    """Blocking variant of :func:`load_mjcf_async`."""
    _require_no_running_loop("load_mjcf", "load_mjcf_async")
    return asyncio.run(load_mjcf_async(text, assets, **kwargs))


def scan_assets(directory: str) -> Dict[str, str]:
    """Asset table of every file below ``directory``, keyed by POSIX relative path."""
    root = Path(directory).expanduser().resolve()
    return {p.relative_to(root).as_posix(): str(p) for p in sorted(root.rglob("*")) if p.is_file()}


def load_mjcf_file(path: str, assets: Optional[Mapping[str, str]] = None, **kwargs) -> LoadResult:
    """Load an MJCF file; meshes are looked up next to it unless ``assets`` is given."""
    fpath = Path(path).expanduser()
    try:
        with open(fpath, "r", encoding="utf-8") as f:
            text = f.read()
    except OSError as e:
        raise DescriptionError(f"Cannot read MJCF file {fpath}: {e}") from e
    if assets is None:
        assets = scan_assets(str(fpath.parent))
    return load_mjcf(text, assets, **kwargs)
