# -*- coding: utf-8 -*-
"""Decoded-mesh cache with an injected eviction policy.

Entries are keyed by the authored file reference, not the resolved URL, so
every geom naming the same mesh shares one decode. Entries are never handed
out directly: :meth:`MeshCache.instantiate` returns a fresh clone that the
caller may scale and reparent freely.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from ..decoders.base import Decoded, MeshPrimitive
from ..scene.node import NodeRole, SceneNode

logger = logging.getLogger(__name__)


class EvictionPolicy:
    """Decides which entries leave the cache and when."""

    def after_insert(self, cache: "MeshCache") -> None:
        pass

    def on_session_start(self, cache: "MeshCache") -> None:
        pass


class NoEviction(EvictionPolicy):
    """Keep every entry for the cache's lifetime (cross-reload reuse)."""


class MaxEntriesPolicy(EvictionPolicy):
    """Least-recently-used eviction once ``max_entries`` is exceeded."""

    def __init__(self, max_entries: int):
        if max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self.max_entries = int(max_entries)

    def after_insert(self, cache: "MeshCache") -> None:
        while len(cache) > self.max_entries:
            cache.evict_oldest()


class SessionPolicy(EvictionPolicy):
    """Drop everything whenever a new load session begins."""

    def on_session_start(self, cache: "MeshCache") -> None:
        cache.clear()


def make_policy(kind: str, max_entries: Optional[int] = None) -> EvictionPolicy:
    kind = (kind or "none").strip().lower()
    if kind in ("none", "unbounded"):
        return NoEviction()
    if kind in ("lru", "max_entries"):
        return MaxEntriesPolicy(max_entries or 256)
    if kind == "session":
        return SessionPolicy()
    raise ValueError(f"Unknown cache policy: {kind}")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0


class MeshCache:
    def __init__(self, policy: Optional[EvictionPolicy] = None):
        self.policy = policy or NoEviction()
        self.stats = CacheStats()
        self._entries: "OrderedDict[str, Decoded]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self):
        return list(self._entries)

    def get(self, key: str) -> Optional[Decoded]:
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None
        self._entries.move_to_end(key)
        self.stats.hits += 1
        return entry

    def put(self, key: str, entry: Decoded) -> None:
        self._entries[key] = entry
        self._entries.move_to_end(key)
        self.policy.after_insert(self)

    def evict_oldest(self) -> Optional[str]:
        if not self._entries:
            return None
        key, _ = self._entries.popitem(last=False)
        self.stats.evictions += 1
        logger.debug("Evicted mesh cache entry %s", key)
        return key

    def clear(self) -> None:
        self.stats.evictions += len(self._entries)
        self._entries.clear()

    def begin_session(self) -> None:
        self.policy.on_session_start(self)

    def instantiate(self, key: str, scale: Optional[Sequence[float]] = None) -> Optional[SceneNode]:
        """Fresh node for a cached entry, with ``scale`` applied after cloning."""
        entry = self.get(key)
        if entry is None:
            return None
        return instantiate(entry, key, scale)


def instantiate(entry: Decoded, name: str, scale: Optional[Sequence[float]] = None) -> SceneNode:
    if isinstance(entry, MeshPrimitive):
        node = SceneNode(name, NodeRole.SHAPE)
        node.geometry = entry
    else:
        node = entry.clone(deep=True)
    if scale is not None:
        node.scale = np.asarray(scale, dtype=float).copy()
    return node

