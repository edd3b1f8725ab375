"""Quaternion operations for 3D rotations.

Quaternions are stored as [w, x, y, z]. Rotation Jacobians differentiate
the four quaternion components directly.
"""

import numpy as np
from typing import Tuple


def quat_normalize(q: np.ndarray) -> np.ndarray:
    """Normalize quaternion to unit length."""
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")

    norm = np.linalg.norm(q)
    if norm < 1e-12:
        raise ValueError("Cannot normalize zero quaternion")

    return q / norm


def quat_from_axis_angle(axis: np.ndarray, angle: float) -> np.ndarray:
    """Create quaternion from axis-angle representation.

    Args:
        axis: 3D vector giving the rotation axis (need not be unit length)
        angle: Rotation angle in radians

    Returns:
        Unit quaternion [w, x, y, z]
    """
    if axis.shape != (3,):
        raise ValueError(f"Axis must be 3-element vector, got shape {axis.shape}")

    axis_norm = np.linalg.norm(axis)
    if axis_norm < 1e-12:
        return np.array([1.0, 0.0, 0.0, 0.0])

    axis = axis / axis_norm
    half_angle = angle / 2
    sin_half = np.sin(half_angle)
    cos_half = np.cos(half_angle)

    return np.array([cos_half, sin_half * axis[0], sin_half * axis[1], sin_half * axis[2]])


def quat_to_matrix(q: np.ndarray) -> np.ndarray:
    """Convert quaternion to rotation matrix.

    Uses the homogeneous quadratic form, so the result is a rotation
    matrix only for unit quaternions. The quaternion is not normalized
    here: the rotation Jacobians below are derived from this exact form.

    Args:
        q: Quaternion [w, x, y, z]

    Returns:
        3x3 rotation matrix
    """
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")

    w, x, y, z = q
    ww, xx, yy, zz = w*w, x*x, y*y, z*z

    return np.array([
        [ww + xx - yy - zz, 2*(x*y - w*z), 2*(x*z + w*y)],
        [2*(x*y + w*z), ww - xx + yy - zz, 2*(y*z - w*x)],
        [2*(x*z - w*y), 2*(y*z + w*x), ww - xx - yy + zz]
    ])


def quat_multiply(q1: np.ndarray, q2: np.ndarray) -> np.ndarray:
    """Multiply two quaternions."""
    if q1.shape != (4,) or q2.shape != (4,):
        raise ValueError("Both quaternions must be 4-element vectors")

    w1, x1, y1, z1 = q1
    w2, x2, y2, z2 = q2

    return np.array([
        w1*w2 - x1*x2 - y1*y2 - z1*z2,
        w1*x2 + x1*w2 + y1*z2 - z1*y2,
        w1*y2 - x1*z2 + y1*w2 + z1*x2,
        w1*z2 + x1*y2 - y1*x2 + z1*w2
    ])


def quat_conjugate(q: np.ndarray) -> np.ndarray:
    """Return quaternion conjugate."""
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")

    return np.array([q[0], -q[1], -q[2], -q[3]])


def quat_conjugate_jacobian() -> np.ndarray:
    """Jacobian of the quaternion conjugate wrt the quaternion (4x4)."""
    return np.diag([1.0, -1.0, -1.0, -1.0])


def _check_rotation_args(q: np.ndarray, v: np.ndarray) -> None:
    if q.shape != (4,):
        raise ValueError(f"Quaternion must be 4-element vector, got shape {q.shape}")
    if v.shape != (3,):
        raise ValueError(f"Vector must be 3-element vector, got shape {v.shape}")


def quat_rotate(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by quaternion q: R(q) v."""
    _check_rotation_args(q, v)
    return quat_to_matrix(q) @ v


def quat_rotate_jacobians(q: np.ndarray, v: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Jacobians of R(q) v.

    With q = [a, u] and R(q) v = (a^2 - u.u) v + 2 (u.v) u + 2 a (u x v):

    Returns:
        Tuple of (VO_q, VO_v): 3x4 Jacobian wrt q, 3x3 Jacobian wrt v
    """
    _check_rotation_args(q, v)

    a = q[0]
    u = q[1:]

    VO_q = np.zeros((3, 4))
    VO_q[:, 0] = 2 * (a * v + np.cross(u, v))
    VO_q[:, 1:] = 2 * (
        np.dot(u, v) * np.eye(3) + np.outer(u, v) - np.outer(v, u) - a * skew_symmetric(v)
    )

    return VO_q, quat_to_matrix(q)


def quat_rotate_inverse(q: np.ndarray, v: np.ndarray) -> np.ndarray:
    """Rotate vector v by the inverse of quaternion q: R(q)^T v."""
    _check_rotation_args(q, v)
    return quat_to_matrix(q).T @ v


def quat_rotate_inverse_jacobians(q: np.ndarray, v: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Jacobians of R(q)^T v.

    Returns:
        Tuple of (VO_q, VO_v): 3x4 Jacobian wrt q, 3x3 Jacobian wrt v
    """
    _check_rotation_args(q, v)

    a = q[0]
    u = q[1:]

    VO_q = np.zeros((3, 4))
    VO_q[:, 0] = 2 * (a * v - np.cross(u, v))
    VO_q[:, 1:] = 2 * (
        np.dot(u, v) * np.eye(3) + np.outer(u, v) - np.outer(v, u) + a * skew_symmetric(v)
    )

    return VO_q, quat_to_matrix(q).T


def skew_symmetric(v: np.ndarray) -> np.ndarray:
    """Create skew-symmetric matrix from 3D vector."""
    if v.shape != (3,):
        raise ValueError(f"v must be 3-element vector, got shape {v.shape}")

    return np.array([
        [0, -v[2], v[1]],
        [v[2], 0, -v[0]],
        [-v[1], v[0], 0]
    ])
