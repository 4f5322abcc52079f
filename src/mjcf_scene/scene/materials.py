# -*- coding: utf-8 -*-
"""Surface descriptors handed to the host renderer.

The library never renders; it only records the color and opacity a host
should use for each shape. Hosts may inject their own factory with the same
signature as :func:`make_material`.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

Color = Tuple[float, float, float]


@dataclass
class SurfaceDescriptor:
    color: Color
    opacity: float = 1.0
    transparent: bool = False
    depth_write: bool = True
    name: str = ""


MaterialFactory = Callable[..., SurfaceDescriptor]


def _channel(value: float, default: float) -> float:
    value = float(value)
    if not math.isfinite(value):
        return default
    return min(max(value, 0.0), 1.0)


def make_material(
    color: Sequence[float],
    opacity: float = 1.0,
    transparent: bool = False,
    name: str = "",
) -> SurfaceDescriptor:
    rgb = tuple(_channel(c, 0.5) for c in list(color)[:3])
    opacity = _channel(opacity, 1.0)
    transparent = bool(transparent or opacity < 1.0)
    return SurfaceDescriptor(
        color=rgb,  # type: ignore[arg-type]
        opacity=opacity,
        transparent=transparent,
        depth_write=not transparent,
        name=name,
    )


def material_from_rgba(
    rgba: Sequence[float],
    factory: Optional[MaterialFactory] = None,
    name: str = "",
) -> SurfaceDescriptor:
    """Build a descriptor from an MJCF rgba quadruple (alpha defaults to 1)."""
    factory = factory or make_material
    vals = list(rgba)
    alpha = vals[3] if len(vals) > 3 else 1.0
    alpha = _channel(alpha, 1.0)
    return factory(vals[:3], opacity=alpha, transparent=alpha < 1.0, name=name)
