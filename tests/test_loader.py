import asyncio
from pathlib import Path

import pytest

from mjcf_scene import load_mjcf, load_mjcf_async, load_mjcf_file
from mjcf_scene.api.errors import DescriptionError
from mjcf_scene.decoders.placeholder import is_placeholder

MESHY = """
<mujoco model="meshy">
  <compiler meshdir="meshes"/>
  <asset>
    <mesh name="part" file="part.stl"/>
    <mesh name="lost" file="lost.stl"/>
  </asset>
  <worldbody>
    <body name="base">
      <geom name="part" type="mesh" mesh="part"/>
      <geom name="lost" type="mesh" mesh="lost"/>
      <geom name="ghost" type="mesh" mesh="undeclared"/>
    </body>
  </worldbody>
</mujoco>
"""


def test_structural_failure_returns_none():
    result = load_mjcf("<mujoco><worldbody>")
    assert not result.ok
    assert result.model is None
    assert [d.code for d in result.errors] == ["xml-syntax"]
    assert result.links == {} and result.joints == {}


def test_missing_assets_degrade_to_placeholders(registry, fake_decoder):
    result = load_mjcf(MESHY, {"meshes/part.stl": "mem://part"}, decoders=registry)
    assert result.ok
    shapes = {n.name: n for n in result.links["base"].traverse() if n.role.value == "shape"}
    assert not is_placeholder(shapes["part"])
    assert is_placeholder(shapes["lost"])
    assert is_placeholder(shapes["ghost"])
    codes = {d.code for d in result.warnings}
    assert {"unresolved-asset", "unknown-mesh"} <= codes
    assert fake_decoder.calls == ["mem://part"]


def test_unexpected_failures_are_contained():
    def broken_factory(*args, **kwargs):
        raise RuntimeError("renderer gone")

    result = load_mjcf(
        '<mujoco><worldbody><body name="b"><geom type="box" size="1 1 1"/></body></worldbody></mujoco>',
        material_factory=broken_factory,
    )
    assert result.model is None
    assert result.errors[0].code == "load-failed"


def test_load_file_scans_neighbouring_assets(tmp_path: Path, registry, fake_decoder):
    (tmp_path / "meshes").mkdir()
    (tmp_path / "meshes" / "part.stl").write_bytes(b"solid part\nendsolid part\n")
    model_file = tmp_path / "robot.xml"
    model_file.write_text(MESHY, encoding="utf-8")

    result = load_mjcf_file(str(model_file), decoders=registry)
    assert result.ok
    assert fake_decoder.calls == [str((tmp_path / "meshes" / "part.stl").resolve())]


def test_load_file_missing():
    with pytest.raises(DescriptionError):
        load_mjcf_file("/nonexistent/robot.xml")


def test_blocking_load_inside_event_loop_points_to_async():
    text = '<mujoco><worldbody><body name="b"/></worldbody></mujoco>'

    async def run():
        with pytest.raises(RuntimeError, match="load_mjcf_async"):
            load_mjcf(text)
        return await load_mjcf_async(text)

    result = asyncio.run(run())
    assert result.ok
    assert "b" in result.links
