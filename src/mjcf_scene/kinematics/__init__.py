from .frames import (
    IDENTITY_QUAT,
    euler_to_quat,
    matrix_to_quat,
    quat_from_axis_angle,
    quat_multiply,
    quat_to_matrix,
    transform_from_pos_quat,
)
from .joints import (
    Ball,
    Floating,
    JointHandle,
    JointLimit,
    Prismatic,
    Revolute,
    apply,
    apply_orientation,
    apply_pose,
    bind,
    reset,
    set_joint_value,
    world_axis,
)

__all__ = [
    "IDENTITY_QUAT",
    "euler_to_quat",
    "matrix_to_quat",
    "quat_from_axis_angle",
    "quat_multiply",
    "quat_to_matrix",
    "transform_from_pos_quat",
    "Revolute",
    "Prismatic",
    "Ball",
    "Floating",
    "JointLimit",
    "JointHandle",
    "bind",
    "apply",
    "apply_orientation",
    "apply_pose",
    "reset",
    "set_joint_value",
    "world_axis",
]
