# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Sequence, Union

import numpy as np

from ..scene.node import SceneNode


@dataclass
class MeshPrimitive:
    """One decoded triangle mesh. Buffers are shared by every clone."""

    vertices: np.ndarray
    faces: np.ndarray
    source: str = ""
    kind: str = "mesh"

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def face_count(self) -> int:
        return int(self.faces.shape[0])

    def bounds(self) -> np.ndarray:
        if self.vertex_count == 0:
            return np.zeros((2, 3), dtype=float)
        return np.array([self.vertices.min(axis=0), self.vertices.max(axis=0)], dtype=float)


Decoded = Union[MeshPrimitive, SceneNode]


class MeshDecoder:
    """Abstract mesh codec interface."""

    extensions: Sequence[str] = ()

    async def decode(self, url: str) -> Decoded:
        raise NotImplementedError


@dataclass
class DecoderRegistry:
    """Maps lowercase file extensions (without the dot) to decoders."""

    decoders: Dict[str, MeshDecoder] = field(default_factory=dict)

    def register(self, decoder: MeshDecoder, extensions: Optional[Iterable[str]] = None) -> None:
        for ext in extensions if extensions is not None else decoder.extensions:
            self.decoders[ext.lower().lstrip(".")] = decoder

    def get(self, extension: str) -> Optional[MeshDecoder]:
        return self.decoders.get(extension.lower().lstrip("."))

    def __contains__(self, extension: str) -> bool:
        return self.get(extension) is not None

    @property
    def extensions(self):
        return sorted(self.decoders)
