import numpy as np

from mjcf_scene.api.diagnostics import DiagnosticLog
from mjcf_scene.description import is_mjcf_content, parse

ARM = """
<mujoco model="arm">
  <compiler angle="degree" meshdir="meshes" eulerseq="zyx"/>
  <asset>
    <mesh file="base_link.STL"/>
    <mesh name="upper" file="upper.stl" scale="0.001"/>
  </asset>
  <worldbody>
    <geom type="plane" size="1 1 0.1"/>
    <body name="base" pos="0 0 0.1">
      <geom type="mesh" mesh="base_link"/>
      <body name="upper" pos="0 0 0.5" euler="0 0 90">
        <joint name="shoulder" range="-90 90"/>
        <geom mesh="upper" group="1" contype="0" conaffinity="0"/>
      </body>
    </body>
  </worldbody>
</mujoco>
"""


def test_model_name_and_compiler_settings():
    parsed = parse(ARM)
    assert parsed.model_name == "arm"
    assert parsed.settings.angle == "degree"
    assert parsed.settings.meshdir == "meshes"
    assert parsed.settings.eulerseq == "zyx"


def test_defaults_without_compiler_element():
    parsed = parse("<mujoco><worldbody/></mujoco>")
    assert parsed.model_name == "mjcf_robot"
    assert parsed.settings.angle == "radian"
    assert parsed.bodies.roots == []


def test_mesh_table_names_and_scale():
    parsed = parse(ARM)
    assert set(parsed.meshes) == {"base_link", "upper"}
    assert parsed.meshes["base_link"].file == "base_link.STL"
    assert parsed.meshes["base_link"].scale is None
    assert np.allclose(parsed.meshes["upper"].scale, [0.001, 0.001, 0.001])


def test_body_tree_and_joint_defaults():
    parsed = parse(ARM)
    (base,) = parsed.bodies.roots
    assert base.name == "base"
    assert np.allclose(base.pos, [0, 0, 0.1])
    (upper,) = base.children
    joint = upper.joint
    assert joint.name == "shoulder"
    assert joint.jtype == "revolute"
    assert np.allclose(joint.axis, [0, 0, 1])
    assert np.allclose(joint.pos, [0, 0, 0])
    # Still in authored units; conversion happens at compile time.
    assert joint.range == (-90.0, 90.0)
    assert np.allclose(upper.euler, [0, 0, 90])
    assert upper.quat is None


def test_world_shapes_and_type_inference():
    parsed = parse(ARM)
    (plane,) = parsed.bodies.world_shapes
    assert plane.kind == "plane"
    upper = parsed.bodies.roots[0].children[0]
    (shape,) = upper.shapes
    assert shape.kind == "mesh"
    assert shape.mesh == "upper"
    assert (shape.group, shape.contype, shape.conaffinity) == (1, 0, 0)

    bare = parse('<mujoco><worldbody><body><geom size="0.1"/></body></worldbody></mujoco>')
    assert bare.bodies.roots[0].shapes[0].kind == "sphere"


def test_quat_takes_priority_over_euler():
    parsed = parse('<mujoco><worldbody><body name="b" quat="0 1 0 0" euler="0 0 1"/></worldbody></mujoco>')
    body = parsed.bodies.roots[0]
    assert np.allclose(body.quat, [0, 1, 0, 0])
    assert body.euler is None


def test_malformed_numbers_default_to_zero():
    parsed = parse('<mujoco><worldbody><body name="b" pos="1 abc 3"/></worldbody></mujoco>')
    assert np.allclose(parsed.bodies.roots[0].pos, [1, 0, 3])


def test_axis_is_normalized():
    parsed = parse(
        '<mujoco><worldbody><body name="a"><body name="b">'
        '<joint name="j" axis="0 2 0"/></body></body></worldbody></mujoco>'
    )
    joint = parsed.bodies.roots[0].children[0].joint
    assert np.allclose(joint.axis, [0, 1, 0])


def test_joint_types_and_generated_names():
    parsed = parse(
        """
        <mujoco><worldbody>
          <body>
            <freejoint/>
            <body name="slider"><joint type="slide" axis="1 0 0"/></body>
            <body name="odd"><joint type="weird"/></body>
          </body>
        </worldbody></mujoco>
        """
    )
    root = parsed.bodies.roots[0]
    assert root.name == "body_0"
    assert root.joint.jtype == "floating"
    assert root.joint.name == "body_0_joint1"
    slider, odd = root.children
    assert slider.joint.jtype == "prismatic"
    assert slider.joint.name == "slider_joint1"
    assert odd.joint.jtype == "continuous"


def test_only_first_joint_is_kept_as_load_bearing():
    log = DiagnosticLog()
    parsed = parse(
        '<mujoco><worldbody><body name="a"><body name="b">'
        '<joint name="j1"/><joint name="j2" axis="1 0 0"/></body></body></worldbody></mujoco>',
        log,
    )
    body = parsed.bodies.roots[0].children[0]
    assert body.joint.name == "j1"
    assert [j.name for j in body.joints] == ["j1", "j2"]
    assert log.by_code("extra-joints")


def test_default_classes_and_childclass():
    parsed = parse(
        """
        <mujoco>
          <default>
            <joint axis="0 1 0" range="-1 1"/>
            <default class="visual">
              <geom group="1" contype="0" conaffinity="0" rgba="1 0 0 1"/>
            </default>
          </default>
          <worldbody>
            <body name="a">
              <body name="b" childclass="visual">
                <joint name="j"/>
                <geom type="box" size="0.1 0.1 0.1"/>
              </body>
              <geom class="visual" type="sphere" size="0.1" rgba="0 1 0 0.5"/>
            </body>
          </worldbody>
        </mujoco>
        """
    )
    a = parsed.bodies.roots[0]
    b = a.children[0]
    assert np.allclose(b.joint.axis, [0, 1, 0])
    assert b.joint.range == (-1.0, 1.0)
    assert b.shapes[0].group == 1
    assert np.allclose(b.shapes[0].rgba, [1, 0, 0, 1])
    # Element attributes override class values.
    assert np.allclose(a.shapes[0].rgba, [0, 1, 0, 0.5])


def test_unlimited_joint_drops_range():
    parsed = parse(
        '<mujoco><worldbody><body name="a"><body name="b">'
        '<joint name="j" limited="false" range="-1 1"/></body></body></worldbody></mujoco>'
    )
    assert parsed.bodies.roots[0].children[0].joint.range is None


def test_fromto_segment_pair():
    parsed = parse(
        '<mujoco><worldbody><body name="a">'
        '<geom type="capsule" fromto="0 0 0 0 0 0.4" size="0.02"/>'
        '<geom type="capsule" fromto="0 0 0" size="0.02"/>'
        "</body></worldbody></mujoco>"
    )
    good, bad = parsed.bodies.roots[0].shapes
    assert good.is_segment_pair
    assert np.allclose(good.fromto, [0, 0, 0, 0, 0, 0.4])
    assert not bad.is_segment_pair


def test_structural_failures_return_none_with_diagnostic():
    cases = {
        "<mujoco><worldbody>": "xml-syntax",
        "<robot name='r'/>": "missing-root",
        "<mujoco model='m'/>": "missing-worldbody",
    }
    for text, code in cases.items():
        log = DiagnosticLog()
        assert parse(text, log) is None
        assert log.has_errors
        assert log.by_code(code)


def test_is_mjcf_content():
    assert is_mjcf_content(ARM)
    assert not is_mjcf_content("<robot><mujoco/></robot>")
    assert not is_mjcf_content("not xml at all")
