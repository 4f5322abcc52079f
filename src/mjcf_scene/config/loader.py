# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
import importlib.resources as resources
import yaml

Color = Tuple[float, float, float]


def _default_config_path() -> Path:
    pkg = "mjcf_scene"
    res = resources.files(pkg) / "resources" / "configs" / "default.yaml"
    # as_file handles zip/installed packages
    with resources.as_file(res) as p:
        return Path(p)


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Packaged defaults, with the YAML file at ``path`` merged over them."""
    cfg = _read_yaml(_default_config_path())
    if path:
        cfg = _merge(cfg, _read_yaml(Path(path).expanduser()))
    return cfg


def _color(value: Any, default: Color) -> Color:
    if not isinstance(value, (list, tuple)) or len(value) < 3:
        return default
    return (float(value[0]), float(value[1]), float(value[2]))


@dataclass
class SceneConfig:
    default_color: Color = (0.533, 0.533, 0.533)
    collision_color: Color = (0.659, 0.333, 0.969)
    collision_opacity: float = 0.35
    placeholder_color: Color = (1.0, 0.42, 0.42)
    placeholder_opacity: float = 0.7
    placeholder_size: float = 0.05
    cache_policy: str = "none"
    cache_max_entries: int = 256
    decoder_extensions: List[str] = field(default_factory=lambda: ["stl", "obj", "dae", "glb", "gltf", "ply", "off"])

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "SceneConfig":
        out = cls()
        materials = cfg.get("materials", {}) or {}
        collision = materials.get("collision", {}) or {}
        placeholder = materials.get("placeholder", {}) or {}
        cache = cfg.get("cache", {}) or {}
        decoders = cfg.get("decoders", {}) or {}

        out.default_color = _color(materials.get("default_color"), out.default_color)
        out.collision_color = _color(collision.get("color"), out.collision_color)
        out.collision_opacity = float(collision.get("opacity", out.collision_opacity))
        out.placeholder_color = _color(placeholder.get("color"), out.placeholder_color)
        out.placeholder_opacity = float(placeholder.get("opacity", out.placeholder_opacity))
        out.placeholder_size = float(placeholder.get("size", out.placeholder_size))
        out.cache_policy = str(cache.get("policy", out.cache_policy))
        out.cache_max_entries = int(cache.get("max_entries", out.cache_max_entries))
        if decoders.get("extensions"):
            out.decoder_extensions = [str(e).lower().lstrip(".") for e in decoders["extensions"]]
        return out

    @classmethod
    def load(cls, path: Optional[str] = None) -> "SceneConfig":
        return cls.from_dict(load_config(path))
