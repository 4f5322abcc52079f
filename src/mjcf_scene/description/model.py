# -*- coding: utf-8 -*-
"""Intermediate model produced by the parser and consumed by the compiler."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

# MJCF joint type -> compiled joint type
MJCF_JOINT_TYPES = {
    "hinge": "revolute",
    "slide": "prismatic",
    "ball": "ball",
    "free": "floating",
    "fixed": "fixed",
}


@dataclass
class CompilerSettings:
    angle: str = "radian"
    meshdir: str = ""
    eulerseq: str = "xyz"

    @property
    def uses_degrees(self) -> bool:
        return self.angle == "degree"

    def to_radians(self, value: float) -> float:
        if self.uses_degrees:
            return float(np.deg2rad(value))
        return float(value)


@dataclass
class MeshAsset:
    name: str
    file: str
    scale: Optional[np.ndarray] = None


@dataclass
class Joint:
    name: str
    jtype: str
    axis: np.ndarray
    pos: np.ndarray
    range: Optional[Tuple[float, float]] = None

    @property
    def is_active(self) -> bool:
        return self.jtype != "fixed"


@dataclass
class Shape:
    kind: str
    name: Optional[str] = None
    size: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=float))
    mesh: Optional[str] = None
    pos: Optional[np.ndarray] = None
    quat: Optional[np.ndarray] = None
    euler: Optional[np.ndarray] = None
    fromto: Optional[np.ndarray] = None
    rgba: Optional[np.ndarray] = None
    group: Optional[int] = None
    contype: Optional[int] = None
    conaffinity: Optional[int] = None

    @property
    def is_segment_pair(self) -> bool:
        return self.fromto is not None and len(self.fromto) == 6

    @property
    def label(self) -> str:
        return self.name or self.kind or "geom"


@dataclass
class Body:
    name: str
    pos: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=float))
    quat: Optional[np.ndarray] = None
    euler: Optional[np.ndarray] = None
    shapes: List[Shape] = field(default_factory=list)
    joints: List[Joint] = field(default_factory=list)
    children: List["Body"] = field(default_factory=list)

    @property
    def joint(self) -> Optional[Joint]:
        # Only the first declared joint is load-bearing.
        return self.joints[0] if self.joints else None

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass
class BodyTree:
    roots: List[Body] = field(default_factory=list)
    world_shapes: List[Shape] = field(default_factory=list)

    def walk(self):
        for root in self.roots:
            yield from root.walk()


@dataclass
class ParsedDescription:
    model_name: str
    bodies: BodyTree
    meshes: Dict[str, MeshAsset]
    settings: CompilerSettings
