"""Rigid frame transforms of 3D points.

A frame is a 7-element vector [t, q]: position t (3) and orientation
quaternion q = [w, x, y, z] (4). Jacobians wrt a frame have 7 columns,
ordered like the frame vector.
"""

import numpy as np
from typing import Tuple

from .quaternions import (
    quat_rotate,
    quat_rotate_jacobians,
    quat_rotate_inverse,
    quat_rotate_inverse_jacobians,
)

FRAME_SIZE = 7


def split_frame(F: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split frame vector into position and quaternion.

    The returned arrays are views into F.
    """
    if F.shape != (FRAME_SIZE,):
        raise ValueError(f"Frame must be 7-element vector, got shape {F.shape}")

    return F[:3], F[3:]


def event_from_frame(F: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Express a point given in frame F in the global frame: R(q) p + t."""
    t, q = split_frame(F)
    return quat_rotate(q, p) + t


def event_from_frame_jacobians(F: np.ndarray, p: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Jacobians of event_from_frame.

    Returns:
        Tuple of (PO_f, PO_p): 3x7 Jacobian wrt F, 3x3 Jacobian wrt p
    """
    t, q = split_frame(F)
    PO_q, PO_p = quat_rotate_jacobians(q, p)

    PO_f = np.zeros((3, FRAME_SIZE))
    PO_f[:, :3] = np.eye(3)
    PO_f[:, 3:] = PO_q

    return PO_f, PO_p


def event_to_frame(F: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Express a global point in frame F: R(q)^T (p - t)."""
    t, q = split_frame(F)
    return quat_rotate_inverse(q, p - t)


def event_to_frame_jacobians(F: np.ndarray, p: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Jacobians of event_to_frame.

    Returns:
        Tuple of (PF_f, PF_p): 3x7 Jacobian wrt F, 3x3 Jacobian wrt p
    """
    t, q = split_frame(F)
    PF_q, PF_p = quat_rotate_inverse_jacobians(q, p - t)

    PF_f = np.zeros((3, FRAME_SIZE))
    PF_f[:, :3] = -PF_p
    PF_f[:, 3:] = PF_q

    return PF_f, PF_p
