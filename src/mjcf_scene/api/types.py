# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Optional

from .diagnostics import ERROR, WARNING, Diagnostic

if TYPE_CHECKING:
    from ..scene.compiler import CompiledModel
    from ..scene.node import SceneNode


@dataclass
class LoadResult:
    model: Optional["CompiledModel"]
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.model is not None

    @property
    def links(self) -> Dict[str, "SceneNode"]:
        return self.model.links if self.model is not None else {}

    @property
    def joints(self) -> Dict[str, "SceneNode"]:
        return self.model.joints if self.model is not None else {}

    @property
    def errors(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == ERROR]

    @property
    def warnings(self) -> List[Diagnostic]:
        return [d for d in self.diagnostics if d.severity == WARNING]
