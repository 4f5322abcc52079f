# -*- coding: utf-8 -*-
"""Split a body's shapes into visual and collision display groups."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from ..description.model import Shape

COLLISION_GROUPS = (None, 0, 3)


@dataclass
class Classification:
    visual: List[Shape] = field(default_factory=list)
    collision: List[Shape] = field(default_factory=list)


def is_visual_only(shape: Shape) -> bool:
    return shape.group == 1 and shape.contype == 0 and shape.conaffinity == 0


def is_collision(shape: Shape) -> bool:
    return shape.group in COLLISION_GROUPS


def classify(shapes: Iterable[Shape]) -> Classification:
    """Assign every shape to at least one group.

    The two rules are evaluated independently, so a shape may land in both
    lists. A shape matching neither rule (e.g. group 2) is treated as visual.
    """
    result = Classification()
    for shape in shapes:
        visual = is_visual_only(shape)
        collision = is_collision(shape)
        if visual or not collision:
            result.visual.append(shape)
        if collision:
            result.collision.append(shape)
    return result
