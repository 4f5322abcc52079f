# -*- coding: utf-8 -*-
"""Parsed MJCF body tree -> transform hierarchy.

Layout of a non-root body with an active joint::

    body_offset_<body>          body pos/quat
    └── <joint>                 joint pos, identity; the only node joints mutate
        └── geom_compensation_<body>   -joint pos
            └── <body>          link container: visual/collision groups, child bodies

A fixed or jointless non-root body keeps only ``body_offset_<body>`` and the
link container. A root body is a single link container carrying its own
pos/quat. With the joint value at zero the pivot and compensation offsets
cancel exactly, so shapes sit at their authored body-relative positions
wherever the pivot is.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

import numpy as np

from ..api.diagnostics import DiagnosticLog
from ..assets.cache import MeshCache, make_policy
from ..assets.resolver import AssetResolver, default_registry
from ..config.loader import SceneConfig
from ..decoders.base import DecoderRegistry
from ..decoders.placeholder import is_placeholder
from ..description.model import Body, Joint, ParsedDescription, Shape
from ..kinematics.joints import JointLimit, make_payload
from .classifier import classify
from .materials import MaterialFactory, make_material, material_from_rgba
from .node import NodeRole, SceneNode, ShapeGroup
from .shapes import build_primitive, orientation_of, shape_placement

logger = logging.getLogger(__name__)

WORLD_LINK = "world"
ROTATIONAL_TYPES = ("revolute", "continuous", "ball")


@dataclass
class CompiledModel:
    root: SceneNode
    links: Dict[str, SceneNode] = field(default_factory=dict)
    joints: Dict[str, SceneNode] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.root.name

    def link(self, name: str) -> Optional[SceneNode]:
        return self.links.get(name)

    def joint(self, name: str) -> Optional[SceneNode]:
        return self.joints.get(name)

    def set_joint_values(self, values: Mapping[str, float], clamp: bool = False) -> List[str]:
        """Apply several joint values by name; returns the names that were not found."""
        missing = []
        for name, value in values.items():
            node = self.joints.get(name)
            if node is None:
                missing.append(name)
                continue
            if clamp and node.limit is not None and node.joint_type != "continuous":
                value = node.limit.clamp(value)
            node.set_joint_value(value)
        return missing


class HierarchyCompiler:
    def __init__(
        self,
        parsed: ParsedDescription,
        resolver: AssetResolver,
        diagnostics: DiagnosticLog,
        config: Optional[SceneConfig] = None,
        material_factory: Optional[MaterialFactory] = None,
    ):
        self.parsed = parsed
        self.settings = parsed.settings
        self.resolver = resolver
        self.diagnostics = diagnostics
        self.config = config or SceneConfig()
        self.make_material = material_factory or make_material
        self.links: Dict[str, SceneNode] = {}
        self.joints: Dict[str, SceneNode] = {}

    # ----- registries -----

    def _register(self, table: Dict[str, SceneNode], kind: str, name: str, node: SceneNode) -> None:
        if name in table:
            self.diagnostics.warning("registry-collision", f"Duplicate {kind} name '{name}', last definition wins", name)
        table[name] = node

    # ----- transforms -----

    def _body_orientation(self, body: Body) -> np.ndarray:
        return orientation_of(body.quat, body.euler, self.settings)

    def _joint_limit(self, joint: Joint) -> Optional[JointLimit]:
        if joint.range is None:
            return None
        lower, upper = joint.range
        if joint.jtype in ROTATIONAL_TYPES:
            lower, upper = self.settings.to_radians(lower), self.settings.to_radians(upper)
        return JointLimit(float(lower), float(upper))

    # ----- shapes -----

    def _paint(self, node: SceneNode, shape: Shape) -> None:
        if shape.rgba is not None:
            material = material_from_rgba(shape.rgba, self.make_material, name=shape.label)
            for part in node.traverse():
                if part.geometry is not None:
                    part.material = material
            return
        if is_placeholder(node):
            return
        default = self.make_material(self.config.default_color, name="default")
        for part in node.traverse():
            if part.geometry is not None and part.material is None:
                part.material = default

    def _tint_collision(self, node: SceneNode) -> None:
        material = self.make_material(
            self.config.collision_color,
            opacity=self.config.collision_opacity,
            transparent=True,
            name="collision",
        )
        for part in node.traverse():
            if part.geometry is not None:
                part.material = material

    async def _shape_node(self, shape: Shape) -> Optional[SceneNode]:
        pos, quat = shape_placement(shape, self.settings)

        if shape.kind == "mesh":
            mesh = self.parsed.meshes.get(shape.mesh or "")
            if mesh is None:
                self.diagnostics.warning("unknown-mesh", f"Mesh asset not declared: {shape.mesh}", shape.label)
                node = self.resolver.placeholder(shape.mesh or shape.label)
            else:
                node = await self.resolver.resolve(mesh.file, mesh.scale)
        else:
            geometry = build_primitive(shape)
            if geometry is None:
                self.diagnostics.warning("unsupported-shape", f"Unsupported geom type: {shape.kind}", shape.label)
                return None
            node = SceneNode(shape.label, NodeRole.SHAPE)
            node.geometry = geometry

        node.name = shape.label
        node.role = NodeRole.SHAPE
        node.position = pos
        node.orientation = quat
        self._paint(node, shape)
        return node

    async def _add_shapes(self, shapes: List[Shape], link: SceneNode) -> None:
        visual_group = SceneNode("visual", NodeRole.SHAPE_GROUP)
        visual_group.group = ShapeGroup.VISUAL
        collision_group = SceneNode("collision", NodeRole.SHAPE_GROUP)
        collision_group.group = ShapeGroup.COLLISION
        collision_group.visible = False

        classification = classify(shapes)
        visual_ids = {id(s) for s in classification.visual}
        collision_ids = {id(s) for s in classification.collision}

        # Sequential on purpose: each mesh decode completes before the next starts.
        for shape in shapes:
            node = await self._shape_node(shape)
            if node is None:
                continue
            in_visual = id(shape) in visual_ids
            if in_visual:
                node.group = ShapeGroup.VISUAL
                visual_group.add(node)
            if id(shape) in collision_ids:
                collider = node.clone(deep=True) if in_visual else node
                collider.group = ShapeGroup.COLLISION
                self._tint_collision(collider)
                collision_group.add(collider)

        link.add(visual_group)
        link.add(collision_group)

    async def _link_container(self, body: Body) -> SceneNode:
        link = SceneNode(body.name, NodeRole.LINK_CONTAINER)
        self._register(self.links, "link", body.name, link)
        await self._add_shapes(body.shapes, link)
        return link

    # ----- bodies -----

    async def _build_root(self, body: Body, parent: SceneNode) -> None:
        link = await self._link_container(body)
        link.position = np.asarray(body.pos, dtype=float).copy()
        link.orientation = self._body_orientation(body)
        if body.joint is not None:
            self.diagnostics.info("root-joint-ignored", f"Joint '{body.joint.name}' on a root body is not compiled", body.name)
        parent.add(link)
        for child in body.children:
            await self._build_child(child, link)

    async def _build_child(self, body: Body, parent_link: SceneNode) -> None:
        offset = SceneNode(f"body_offset_{body.name}", NodeRole.BODY_OFFSET, body.pos, self._body_orientation(body))
        parent_link.add(offset)

        joint = body.joint
        if joint is None or not joint.is_active:
            link = await self._link_container(body)
            offset.add(link)
        else:
            pivot = SceneNode(joint.name, NodeRole.JOINT_PIVOT, joint.pos)
            pivot.joint = make_payload(joint.jtype, joint.name, joint.axis, self._joint_limit(joint))
            self._register(self.joints, "joint", joint.name, pivot)
            compensation = SceneNode(f"geom_compensation_{body.name}", NodeRole.GEOM_COMPENSATION, -np.asarray(joint.pos, dtype=float))
            link = await self._link_container(body)
            offset.add(pivot)
            pivot.add(compensation)
            compensation.add(link)

        for child in body.children:
            await self._build_child(child, link)

    async def compile(self) -> CompiledModel:
        root = SceneNode(self.parsed.model_name, NodeRole.MODEL)

        if self.parsed.bodies.world_shapes:
            world = SceneNode(WORLD_LINK, NodeRole.LINK_CONTAINER)
            self._register(self.links, "link", WORLD_LINK, world)
            await self._add_shapes(self.parsed.bodies.world_shapes, world)
            root.add(world)

        for body in self.parsed.bodies.roots:
            await self._build_root(body, root)

        root.update_world_matrix()
        logger.info(
            "Compiled model %s: %d links, %d joints",
            root.name,
            len(self.links),
            len(self.joints),
        )
        return CompiledModel(root=root, links=self.links, joints=self.joints)


def make_resolver(
    parsed: ParsedDescription,
    assets: Mapping[str, str],
    diagnostics: DiagnosticLog,
    config: SceneConfig,
    cache: Optional[MeshCache] = None,
    decoders: Optional[DecoderRegistry] = None,
    material_factory: Optional[MaterialFactory] = None,
) -> AssetResolver:
    factory = material_factory or make_material
    if cache is None:
        cache = MeshCache(make_policy(config.cache_policy, config.cache_max_entries))
    return AssetResolver(
        assets,
        cache=cache,
        decoders=decoders if decoders is not None else default_registry(config.decoder_extensions),
        base_dir=parsed.settings.meshdir,
        diagnostics=diagnostics,
        placeholder_material=factory(
            config.placeholder_color,
            opacity=config.placeholder_opacity,
            transparent=True,
            name="placeholder",
        ),
        placeholder_size=config.placeholder_size,
    )


async def compile_description_async(
    parsed: ParsedDescription,
    assets: Optional[Mapping[str, str]] = None,
    cache: Optional[MeshCache] = None,
    decoders: Optional[DecoderRegistry] = None,
    diagnostics: Optional[DiagnosticLog] = None,
    config: Optional[SceneConfig] = None,
    material_factory: Optional[MaterialFactory] = None,
) -> CompiledModel:
    diagnostics = diagnostics if diagnostics is not None else DiagnosticLog()
    config = config or SceneConfig()
    if cache is not None:
        cache.begin_session()
    resolver = make_resolver(parsed, assets or {}, diagnostics, config, cache, decoders, material_factory)
    compiler = HierarchyCompiler(parsed, resolver, diagnostics, config, material_factory)
    return await compiler.compile()


def compile_description(parsed: ParsedDescription, assets: Optional[Mapping[str, str]] = None, **kwargs: Any) -> CompiledModel:
    """Synchronous wrapper; must not be called from a running event loop."""
    return asyncio.run(compile_description_async(parsed, assets, **kwargs))
