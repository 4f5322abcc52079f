# -*- coding: utf-8 -*-
"""MJCF text -> intermediate body tree.

Numeric attributes are parsed leniently: a token that is not a float reads as
0.0. Angles are kept in the authored unit; conversion happens at compile time
using :class:`CompilerSettings`.
"""
from __future__ import annotations

import logging
import math
import xml.etree.ElementTree as ET
from pathlib import PurePosixPath
from typing import Dict, Optional, Tuple

import numpy as np

from ..api.diagnostics import DiagnosticLog
from ..kinematics.frames import normalize
from .model import (
    MJCF_JOINT_TYPES,
    Body,
    BodyTree,
    CompilerSettings,
    Joint,
    MeshAsset,
    ParsedDescription,
    Shape,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL_NAME = "mjcf_robot"
DEFAULT_CLASS = "main"
DEFAULT_AXIS = (0.0, 0.0, 1.0)

AttribMap = Dict[str, str]
ClassTable = Dict[str, Dict[str, AttribMap]]


def _parse_floats(text: Optional[str]) -> np.ndarray:
    if not text:
        return np.zeros(0, dtype=float)
    vals = []
    for token in text.split():
        try:
            vals.append(float(token))
        except ValueError:
            vals.append(0.0)
    return np.array(vals, dtype=float)


def _parse_vec(text: Optional[str], length: int, default: float = 0.0) -> np.ndarray:
    vals = list(_parse_floats(text))
    if len(vals) < length:
        vals.extend([default] * (length - len(vals)))
    return np.array(vals[:length], dtype=float)


def _parse_int(text: Optional[str]) -> Optional[int]:
    if text is None or not text.strip():
        return None
    vals = _parse_floats(text)
    return int(vals[0]) if len(vals) else 0


def _parse_quat(text: Optional[str]) -> Optional[np.ndarray]:
    vals = _parse_floats(text)
    if len(vals) < 4:
        return None
    return vals[:4].copy()


def _parse_euler(text: Optional[str]) -> Optional[np.ndarray]:
    if text is None:
        return None
    return _parse_vec(text, 3)


def _collect_classes(root: ET.Element) -> ClassTable:
    """Resolve ``<default>`` trees into flat per-class attribute tables."""
    classes: ClassTable = {}

    def visit(node: ET.Element, inherited: Dict[str, AttribMap], name: str) -> None:
        resolved = {tag: dict(attrib) for tag, attrib in inherited.items()}
        for child in node:
            if child.tag == "default":
                continue
            resolved.setdefault(child.tag, {}).update(child.attrib)
        classes[name] = resolved
        for child in node.findall("default"):
            visit(child, resolved, child.get("class", name))

    for top in root.findall("default"):
        visit(top, {}, top.get("class", DEFAULT_CLASS))
    return classes


def _parse_compiler(root: ET.Element) -> CompilerSettings:
    settings = CompilerSettings()
    for comp in root.findall("compiler"):
        angle = comp.get("angle")
        if angle:
            settings.angle = "degree" if angle.strip().lower() == "degree" else "radian"
        if comp.get("meshdir") is not None:
            settings.meshdir = comp.get("meshdir", "")
        seq = comp.get("eulerseq")
        if seq and len(seq.strip()) == 3 and all(c in "xyzXYZ" for c in seq.strip()):
            settings.eulerseq = seq.strip()
    return settings


class _DescriptionReader:
    def __init__(self, root: ET.Element, diagnostics: DiagnosticLog):
        self.root = root
        self.diagnostics = diagnostics
        self.classes = _collect_classes(root)
        self._body_count = 0

    def effective(self, elem: ET.Element, childclass: Optional[str]) -> AttribMap:
        class_name = elem.get("class") or childclass or DEFAULT_CLASS
        if class_name not in self.classes and class_name != DEFAULT_CLASS:
            self.diagnostics.warning("unknown-class", f"Default class not defined: {class_name}", elem.get("name"))
        attrib = dict(self.classes.get(class_name, {}).get(elem.tag, {}))
        attrib.update(elem.attrib)
        return attrib

    def meshes(self) -> Dict[str, MeshAsset]:
        table: Dict[str, MeshAsset] = {}
        index = 0
        for asset in self.root.findall("asset"):
            for mesh_el in asset.findall("mesh"):
                attrs = self.effective(mesh_el, None)
                file = attrs.get("file")
                if not file:
                    index += 1
                    continue
                name = attrs.get("name")
                if not name:
                    stem = PurePosixPath(file.replace("\\", "/")).name.split(".")[0]
                    name = stem or f"mesh_{index}"
                scale = None
                if attrs.get("scale"):
                    vals = _parse_floats(attrs["scale"])
                    if len(vals) == 1:
                        scale = np.repeat(vals, 3)
                    elif len(vals) >= 3:
                        scale = vals[:3].copy()
                table[name] = MeshAsset(name=name, file=file, scale=scale)
                index += 1
        return table

    def shape(self, geom_el: ET.Element, childclass: Optional[str]) -> Shape:
        attrs = self.effective(geom_el, childclass)
        mesh = attrs.get("mesh") or None
        kind = (attrs.get("type") or ("mesh" if mesh else "sphere")).strip().lower()

        quat = _parse_quat(attrs.get("quat")) if "quat" in attrs else None
        euler = _parse_euler(attrs.get("euler")) if quat is None else None

        fromto = None
        if "fromto" in attrs:
            vals = _parse_floats(attrs["fromto"])
            if len(vals) == 6:
                fromto = vals

        rgba = None
        if "rgba" in attrs:
            vals = _parse_floats(attrs["rgba"])
            if len(vals) >= 3:
                rgba = np.array([vals[0], vals[1], vals[2], vals[3] if len(vals) > 3 else 1.0], dtype=float)

        return Shape(
            kind=kind,
            name=attrs.get("name") or None,
            size=_parse_floats(attrs.get("size")),
            mesh=mesh,
            pos=_parse_vec(attrs["pos"], 3) if "pos" in attrs else None,
            quat=quat,
            euler=euler,
            fromto=fromto,
            rgba=rgba,
            group=_parse_int(attrs.get("group")),
            contype=_parse_int(attrs.get("contype")),
            conaffinity=_parse_int(attrs.get("conaffinity")),
        )

    def joint(self, joint_el: ET.Element, childclass: Optional[str], body_name: str, index: int) -> Joint:
        attrs = self.effective(joint_el, childclass)
        name = attrs.get("name") or f"{body_name}_joint{index + 1}"

        if joint_el.tag == "freejoint":
            mjcf_type = "free"
        else:
            mjcf_type = (attrs.get("type") or "hinge").strip().lower()
        jtype = MJCF_JOINT_TYPES.get(mjcf_type)
        if jtype is None:
            self.diagnostics.warning("unknown-joint-type", f"Unknown joint type '{mjcf_type}', treated as continuous", name)
            jtype = "continuous"

        if "axis" in attrs:
            vals = _parse_floats(attrs["axis"])
            raw = [
                vals[0] if len(vals) > 0 else 0.0,
                vals[1] if len(vals) > 1 else 0.0,
                vals[2] if len(vals) > 2 else 1.0,
            ]
            axis = normalize(raw, DEFAULT_AXIS)
        else:
            axis = np.array(DEFAULT_AXIS, dtype=float)

        joint_range: Optional[Tuple[float, float]] = None
        limited = (attrs.get("limited") or "auto").strip().lower()
        if "range" in attrs and limited != "false":
            vals = _parse_floats(attrs["range"])
            joint_range = (
                float(vals[0]) if len(vals) > 0 else -math.pi,
                float(vals[1]) if len(vals) > 1 else math.pi,
            )

        return Joint(
            name=name,
            jtype=jtype,
            axis=axis,
            pos=_parse_vec(attrs.get("pos"), 3),
            range=joint_range,
        )

    def body(self, body_el: ET.Element, childclass: Optional[str]) -> Body:
        name = body_el.get("name")
        if not name:
            name = f"body_{self._body_count}"
        self._body_count += 1

        quat = _parse_quat(body_el.get("quat")) if "quat" in body_el.attrib else None
        body = Body(
            name=name,
            pos=_parse_vec(body_el.get("pos"), 3),
            quat=quat,
            euler=_parse_euler(body_el.get("euler")) if quat is None else None,
        )

        childclass = body_el.get("childclass") or childclass
        for child in body_el:
            if child.tag == "geom":
                body.shapes.append(self.shape(child, childclass))
            elif child.tag in ("joint", "freejoint"):
                body.joints.append(self.joint(child, childclass, name, len(body.joints)))
            elif child.tag == "body":
                body.children.append(self.body(child, childclass))

        if len(body.joints) > 1:
            ignored = ", ".join(j.name for j in body.joints[1:])
            self.diagnostics.info("extra-joints", f"Only the first joint is used; ignored: {ignored}", name)
        return body

    def worldbody(self, world_el: ET.Element) -> BodyTree:
        tree = BodyTree()
        for child in world_el:
            if child.tag == "geom":
                tree.world_shapes.append(self.shape(child, None))
            elif child.tag == "body":
                tree.roots.append(self.body(child, None))
        return tree


def parse(text: str, diagnostics: Optional[DiagnosticLog] = None) -> Optional[ParsedDescription]:
    """Parse MJCF text.

    Returns ``None`` and records an error diagnostic when the document is not
    well-formed, its root is not ``<mujoco>`` or it has no ``<worldbody>``.
    """
    if diagnostics is None:
        diagnostics = DiagnosticLog()
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        diagnostics.error("xml-syntax", f"XML parsing error: {e}")
        return None

    if root.tag != "mujoco":
        diagnostics.error("missing-root", f"No <mujoco> root element found (got <{root.tag}>)")
        return None

    world_el = root.find("worldbody")
    if world_el is None:
        diagnostics.error("missing-worldbody", "No <worldbody> element found")
        return None

    try:
        reader = _DescriptionReader(root, diagnostics)
        settings = _parse_compiler(root)
        meshes = reader.meshes()
        bodies = reader.worldbody(world_el)
    except Exception as e:
        logger.exception("Unexpected failure while reading MJCF")
        diagnostics.error("parse-failed", f"Failed to parse MJCF: {e}")
        return None

    logger.debug(
        "Parsed MJCF: angle=%s meshdir=%r meshes=%d bodies=%d",
        settings.angle,
        settings.meshdir,
        len(meshes),
        sum(1 for _ in bodies.walk()),
    )
    return ParsedDescription(
        model_name=root.get("model") or DEFAULT_MODEL_NAME,
        bodies=bodies,
        meshes=meshes,
        settings=settings,
    )


def is_mjcf_content(text: str) -> bool:
    """True when the document root is ``<mujoco>``.

    URDF files may embed a ``<mujoco>`` element as metadata; those are not MJCF.
    """
    try:
        root = ET.fromstring(text)
    except ET.ParseError:
        return False
    return root.tag.lower() == "mujoco"
