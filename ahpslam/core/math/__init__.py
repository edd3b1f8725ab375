"""Math primitives for AHPSLAM."""

from .quaternions import (
    quat_normalize,
    quat_from_axis_angle,
    quat_to_matrix,
    quat_multiply,
    quat_conjugate,
    quat_rotate,
    quat_rotate_inverse,
    skew_symmetric,
)
from .frames import split_frame, event_from_frame, event_to_frame
from .jacobians import finite_difference_jacobian, check_jacobian, JacobianTester

__all__ = [
    "quat_normalize",
    "quat_from_axis_angle",
    "quat_to_matrix",
    "quat_multiply",
    "quat_conjugate",
    "quat_rotate",
    "quat_rotate_inverse",
    "skew_symmetric",
    "split_frame",
    "event_from_frame",
    "event_to_frame",
    "finite_difference_jacobian",
    "check_jacobian",
    "JacobianTester",
]
