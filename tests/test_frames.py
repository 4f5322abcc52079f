import math

import numpy as np
import pytest

from mjcf_scene.kinematics.frames import (
    euler_to_quat,
    matrix_to_quat,
    quat_between_vectors,
    quat_from_axis_angle,
    quat_to_matrix,
)


def _rodrigues(axis, a):
    k = np.asarray(axis, dtype=float)
    K = np.array([[0.0, -k[2], k[1]], [k[2], 0.0, -k[0]], [-k[1], k[0], 0.0]])
    return np.eye(3) + math.sin(a) * K + (1.0 - math.cos(a)) * (K @ K)


def rot_x(a):
    return _rodrigues((1, 0, 0), a)


def rot_y(a):
    return _rodrigues((0, 1, 0), a)


def rot_z(a):
    return _rodrigues((0, 0, 1), a)


def test_axis_angle_matches_elementary_rotations():
    for axis, rot in (((1, 0, 0), rot_x), ((0, 1, 0), rot_y), ((0, 0, 1), rot_z)):
        assert np.allclose(quat_to_matrix(quat_from_axis_angle(axis, 0.7)), rot(0.7))


def test_matrix_quat_roundtrip():
    R = rot_z(0.3) @ rot_y(-1.1) @ rot_x(2.9)
    assert np.allclose(quat_to_matrix(matrix_to_quat(R)), R)


def test_euler_sequences():
    a, b, c = 0.1, 0.2, 0.3
    # Rotating axes compose left to right, fixed axes right to left.
    assert np.allclose(quat_to_matrix(euler_to_quat([a, b, c], "xyz")), rot_x(a) @ rot_y(b) @ rot_z(c))
    assert np.allclose(quat_to_matrix(euler_to_quat([a, b, c], "XYZ")), rot_z(c) @ rot_y(b) @ rot_x(a))
    with pytest.raises(ValueError):
        euler_to_quat([a, b, c], "xy")


def test_quat_between_vectors():
    for target in ((1, 0, 0), (0, 0, -1), (0.3, -0.2, 0.9)):
        q = quat_between_vectors((0, 0, 1), target)
        expected = np.asarray(target, dtype=float) / np.linalg.norm(target)
        assert np.allclose(quat_to_matrix(q) @ [0, 0, 1], expected)
    assert math.isclose(np.linalg.norm(quat_between_vectors((1, 0, 0), (-1, 0, 0))), 1.0)
