# -*- coding: utf-8 -*-
"""Fuzzy lookup of authored mesh references in an asset table.

Authored references rarely match the delivered keys exactly (``package://``
prefixes, ``meshdir`` prefixes, relative segments, case). Lookups try the
strategies below in order and return the first hit.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


def clean_file_path(path: str) -> str:
    """Normalise separators and collapse ``.``/``..`` segments.

    Leading ``..`` segments that would climb above the root are dropped.
    """
    path = path.replace("\\", "/")
    parts: List[str] = []
    for segment in path.split("/"):
        if segment in ("", "."):
            continue
        if segment == "..":
            if parts:
                parts.pop()
            continue
        parts.append(segment)
    lead = "/" if path.startswith("/") else ""
    return lead + "/".join(parts)


def strip_reference(path: str) -> str:
    """Drop ``blob:``/``package://`` prefixes and a leading ``./``."""
    clean = path.replace("\\", "/")
    if clean.startswith("blob:"):
        idx = clean.find("/", 5)
        if idx != -1:
            clean = clean[idx + 1:]
    if clean.startswith("package://"):
        clean = clean[len("package://"):]
        idx = clean.find("/")
        if idx != -1:
            clean = clean[idx + 1:]
    if clean.startswith("./"):
        clean = clean[2:]
    return clean


def _basename(path: str) -> str:
    return path.rsplit("/", 1)[-1]


def _with_dir(base_dir: str, path: str) -> str:
    if not base_dir:
        return path
    return f"{base_dir.rstrip('/')}/{path}"


def find_asset(path: str, assets: Mapping[str, str], base_dir: str = "") -> Optional[str]:
    """Linear-scan lookup; prefer :class:`AssetIndex` when resolving many references."""
    if path in assets:
        return assets[path]

    clean = strip_reference(path)
    normalized = clean_file_path(clean)
    for candidate in (_with_dir(base_dir, normalized), normalized, clean):
        if candidate in assets:
            return assets[candidate]

    filename = _basename(normalized)
    if filename in assets:
        return assets[filename]

    lower_name = filename.lower()
    for key, value in assets.items():
        if key.lower() == lower_name:
            return value

    search = normalized.lower()
    for key, value in assets.items():
        key_lower = key.lower()
        if key_lower.endswith(search):
            return value
        key_name = _basename(key_lower)
        if key_name and search.endswith(key_name):
            return value

    if assets:
        logger.debug("Asset lookup failed for %r (searched %r, %d assets)", path, search, len(assets))
    return None


class AssetIndex:
    """Precomputed lookup maps over one asset table."""

    def __init__(self, assets: Mapping[str, str], base_dir: str = ""):
        self.base_dir = base_dir
        self.direct: Dict[str, str] = {}
        self.lowercase: Dict[str, str] = {}
        self.filename: Dict[str, str] = {}
        self.filename_lower: Dict[str, str] = {}
        self.suffixes: Dict[str, str] = {}

        for key, value in assets.items():
            cleaned = clean_file_path(key)
            self.direct[key] = value
            self.direct.setdefault(cleaned, value)
            if base_dir:
                self.direct.setdefault(_with_dir(base_dir, cleaned), value)
            self.lowercase.setdefault(key.lower(), value)
            self.lowercase.setdefault(cleaned.lower(), value)
            name = _basename(key)
            self.filename.setdefault(name, value)
            self.filename_lower.setdefault(name.lower(), value)
            parts = cleaned.lower().split("/")
            for i in range(1, len(parts)):
                self.suffixes.setdefault("/".join(parts[i:]), value)

    def __len__(self) -> int:
        return len(self.direct)

    def find(self, path: str) -> Optional[str]:
        result = self.direct.get(path)
        if result is not None:
            return result

        clean = strip_reference(path)
        normalized = clean_file_path(clean)
        lower = normalized.lower()
        filename = _basename(normalized)

        if self.base_dir:
            result = self.direct.get(_with_dir(self.base_dir, normalized))
            if result is not None:
                return result
        for lookup, key in (
            (self.direct, normalized),
            (self.direct, clean),
            (self.lowercase, lower),
            (self.filename, filename),
            (self.filename_lower, filename.lower()),
            (self.suffixes, lower),
        ):
            result = lookup.get(key)
            if result is not None:
                return result
        return None
