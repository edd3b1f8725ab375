"""Anchored Homogeneous Point (AHP) transforms and their Jacobians.

An AHP point is the 7-vector [p0, m, rho]: anchor p0 (3), direction m (3,
any length) and inverse depth rho >= 0. It describes the Euclidean point

    p = p0 + m / rho

and stays well defined for rho = 0, a point at infinity. Frames are
7-vectors [t, q] (see ``ahpslam.core.math.frames``); Jacobians wrt a
frame differentiate the quaternion components directly and have 7
columns.

Every transform comes as a value-only function and a ``*_with_jacobians``
function. The latter accept optional output buffers, which are filled in
place and returned. All functions are pure.

Reference: J. Sola et al., "Impact of landmark parametrization on
monocular EKF-SLAM with points and lines", IJCV 2012.
"""

import numpy as np
from typing import Optional, Tuple

from .checks import as_vector, output_buffer
from ..errors import InvalidStateError, DegenerateGeometryError
from ..math.frames import (
    FRAME_SIZE,
    split_frame,
    event_from_frame,
    event_from_frame_jacobians,
    event_to_frame,
    event_to_frame_jacobians,
)
from ..math.quaternions import (
    quat_rotate,
    quat_rotate_jacobians,
    quat_rotate_inverse,
    quat_rotate_inverse_jacobians,
)

AHP_SIZE = 7
MIN_NORM = 1e-12


def _as_ahp(ahp) -> np.ndarray:
    ahp = as_vector(ahp, AHP_SIZE, "AHP point")
    if ahp[6] < 0:
        raise InvalidStateError(f"Inverse depth must be non-negative, got {ahp[6]}")
    return ahp


def split_ahp(ahp: np.ndarray) -> Tuple[np.ndarray, np.ndarray, float]:
    """Split an AHP point into anchor, direction and inverse depth."""
    ahp = _as_ahp(ahp)
    return ahp[0:3], ahp[3:6], float(ahp[6])


def compose_ahp(p0: np.ndarray, m: np.ndarray, rho: float) -> np.ndarray:
    """Build an AHP point from anchor, direction and inverse depth."""
    return _as_ahp(np.concatenate([np.asarray(p0, dtype=float), np.asarray(m, dtype=float), [rho]]))


def from_frame(F: np.ndarray, ahpf: np.ndarray) -> np.ndarray:
    """Transform an AHP point expressed in frame F to the global frame.

    Args:
        F: Frame [t, q]
        ahpf: AHP point in F

    Returns:
        AHP point in the global frame
    """
    F = as_vector(F, FRAME_SIZE, "Frame")
    p0f, mf, rho = split_ahp(ahpf)
    _, q = split_frame(F)

    return np.concatenate([event_from_frame(F, p0f), quat_rotate(q, mf), [rho]])


def from_frame_with_jacobians(
    F: np.ndarray,
    ahpf: np.ndarray,
    AHP_f: Optional[np.ndarray] = None,
    AHP_ahpf: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """From-frame transform, with Jacobians.

    Args:
        F: Frame [t, q]
        ahpf: AHP point in F
        AHP_f: Optional 7x7 output buffer for the Jacobian wrt F
        AHP_ahpf: Optional 7x7 output buffer for the Jacobian wrt ahpf

    Returns:
        Tuple of (ahp, AHP_f, AHP_ahpf)
    """
    F = as_vector(F, FRAME_SIZE, "Frame")
    p0f, mf, rho = split_ahp(ahpf)
    _, q = split_frame(F)
    AHP_f = output_buffer(AHP_f, (AHP_SIZE, FRAME_SIZE), "AHP_f")
    AHP_ahpf = output_buffer(AHP_ahpf, (AHP_SIZE, AHP_SIZE), "AHP_ahpf")

    P0_f, P0_p0f = event_from_frame_jacobians(F, p0f)
    M_q, M_mf = quat_rotate_jacobians(q, mf)

    AHP_f[0:3, :] = P0_f
    AHP_f[3:6, 3:7] = M_q

    AHP_ahpf[0:3, 0:3] = P0_p0f
    AHP_ahpf[3:6, 3:6] = M_mf
    AHP_ahpf[6, 6] = 1.0

    ahp = np.concatenate([event_from_frame(F, p0f), M_mf @ mf, [rho]])
    return ahp, AHP_f, AHP_ahpf


def to_frame(F: np.ndarray, ahp: np.ndarray) -> np.ndarray:
    """Transform a global AHP point into frame F.

    Args:
        F: Frame [t, q]
        ahp: AHP point in the global frame

    Returns:
        AHP point in F
    """
    F = as_vector(F, FRAME_SIZE, "Frame")
    p0, m, rho = split_ahp(ahp)
    _, q = split_frame(F)

    return np.concatenate([event_to_frame(F, p0), quat_rotate_inverse(q, m), [rho]])


def to_frame_with_jacobians(
    F: np.ndarray,
    ahp: np.ndarray,
    AHPF_f: Optional[np.ndarray] = None,
    AHPF_ahp: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """To-frame transform, with Jacobians.

    Args:
        F: Frame [t, q]
        ahp: AHP point in the global frame
        AHPF_f: Optional 7x7 output buffer for the Jacobian wrt F
        AHPF_ahp: Optional 7x7 output buffer for the Jacobian wrt ahp

    Returns:
        Tuple of (ahpf, AHPF_f, AHPF_ahp)
    """
    F = as_vector(F, FRAME_SIZE, "Frame")
    p0, m, rho = split_ahp(ahp)
    _, q = split_frame(F)
    AHPF_f = output_buffer(AHPF_f, (AHP_SIZE, FRAME_SIZE), "AHPF_f")
    AHPF_ahp = output_buffer(AHPF_ahp, (AHP_SIZE, AHP_SIZE), "AHPF_ahp")

    P0F_f, P0F_p0 = event_to_frame_jacobians(F, p0)
    MF_q, MF_m = quat_rotate_inverse_jacobians(q, m)

    AHPF_f[0:3, :] = P0F_f
    AHPF_f[3:6, 3:7] = MF_q

    AHPF_ahp[0:3, 0:3] = P0F_p0
    AHPF_ahp[3:6, 3:6] = MF_m
    AHPF_ahp[6, 6] = 1.0

    ahpf = np.concatenate([event_to_frame(F, p0), MF_m @ m, [rho]])
    return ahpf, AHPF_f, AHPF_ahp


def ahp_to_euclidean(ahp: np.ndarray) -> np.ndarray:
    """Reparametrize an AHP point to Euclidean: p0 + m / rho.

    Raises:
        InvalidStateError: if rho is not strictly positive
    """
    p0, m, rho = split_ahp(ahp)
    if rho <= 0:
        raise InvalidStateError("Cannot reparametrize a point at infinity (rho = 0) to Euclidean")

    return p0 + m / rho


def ahp_to_euclidean_with_jacobian(
    ahp: np.ndarray,
    EUC_ahp: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Reparametrize to Euclidean, with the 3x7 Jacobian [I, I/rho, -m/rho^2]."""
    p0, m, rho = split_ahp(ahp)
    if rho <= 0:
        raise InvalidStateError("Cannot reparametrize a point at infinity (rho = 0) to Euclidean")
    EUC_ahp = output_buffer(EUC_ahp, (3, AHP_SIZE), "EUC_ahp")

    EUC_ahp[:, 0:3] = np.eye(3)
    EUC_ahp[:, 3:6] = np.eye(3) / rho
    EUC_ahp[:, 6] = -m / (rho * rho)

    return p0 + m / rho, EUC_ahp


def _bearing_vector(s: np.ndarray, ahp: np.ndarray, min_norm: float):
    s = as_vector(s, FRAME_SIZE, "Sensor frame")
    p0, m, rho = split_ahp(ahp)
    t, q = split_frame(s)

    w = m - (t - p0) * rho
    v = quat_rotate_inverse(q, w)
    norm_v = np.linalg.norm(v)
    if norm_v < min_norm:
        raise DegenerateGeometryError(
            f"Landmark direction in sensor frame is degenerate (norm {norm_v:.3e})"
        )

    return p0, rho, t, q, w, v, norm_v


def to_bearing_only_frame(s: np.ndarray, ahp: np.ndarray, min_norm: float = MIN_NORM) -> np.ndarray:
    """Bring an AHP landmark to a bearing-only sensor frame.

    Computes v = R(q)^T (m - (t - p0) rho), a vector in sensor frame
    pointing to the landmark. Range information is lost.

    Args:
        s: Sensor frame [t, q]
        ahp: AHP landmark in the global frame
        min_norm: Smallest acceptable norm of v

    Raises:
        DegenerateGeometryError: if v is numerically zero
    """
    *_, v, _ = _bearing_vector(s, ahp, min_norm)
    return v


def to_bearing_only_frame_with_distance(
    s: np.ndarray,
    ahp: np.ndarray,
    min_norm: float = MIN_NORM
) -> Tuple[np.ndarray, float]:
    """Bearing-only projection, also recovering the inverse distance.

    The inverse distance from sensor to landmark is rho / |v|.

    Returns:
        Tuple of (v, inv_dist)
    """
    _, rho, _, _, _, v, norm_v = _bearing_vector(s, ahp, min_norm)
    return v, rho / norm_v


def to_bearing_only_frame_with_jacobians(
    s: np.ndarray,
    ahp: np.ndarray,
    V_s: Optional[np.ndarray] = None,
    V_ahp: Optional[np.ndarray] = None,
    min_norm: float = MIN_NORM
) -> Tuple[np.ndarray, float, np.ndarray, np.ndarray]:
    """Bearing-only projection with inverse distance and Jacobians of v.

    Args:
        s: Sensor frame [t, q]
        ahp: AHP landmark in the global frame
        V_s: Optional 3x7 output buffer for the Jacobian of v wrt s
        V_ahp: Optional 3x7 output buffer for the Jacobian of v wrt ahp
        min_norm: Smallest acceptable norm of v

    Returns:
        Tuple of (v, inv_dist, V_s, V_ahp)
    """
    p0, rho, t, q, w, v, norm_v = _bearing_vector(s, ahp, min_norm)
    V_s = output_buffer(V_s, (3, FRAME_SIZE), "V_s")
    V_ahp = output_buffer(V_ahp, (3, AHP_SIZE), "V_ahp")

    V_q, V_w = quat_rotate_inverse_jacobians(q, w)

    # w = m - (t - p0) rho
    V_s[:, 0:3] = -rho * V_w
    V_s[:, 3:7] = V_q

    V_ahp[:, 0:3] = rho * V_w
    V_ahp[:, 3:6] = V_w
    V_ahp[:, 6] = V_w @ (p0 - t)

    return v, rho / norm_v, V_s, V_ahp


def _retro_projection_args(s, v, rho: float, min_norm: float):
    s = as_vector(s, FRAME_SIZE, "Sensor frame")
    v = as_vector(v, 3, "Direction")
    if not np.isfinite(rho) or rho < 0:
        raise InvalidStateError(f"Inverse depth prior must be finite and non-negative, got {rho}")

    norm_v = np.linalg.norm(v)
    if norm_v < min_norm:
        raise InvalidStateError("Observed direction is zero and has no bearing")

    return s, v, float(rho), norm_v


def from_bearing_only_frame(
    s: np.ndarray,
    v: np.ndarray,
    rho: float,
    min_norm: float = MIN_NORM
) -> np.ndarray:
    """Build an AHP landmark from a bearing-only retro-projection.

    Inverse of to_bearing_only_frame: ahp = [t, R(q) v, rho |v|], so that
    rho is exactly the inverse distance. rho = 0 initializes a point at
    infinity.

    Args:
        s: Sensor frame [t, q]
        v: Retro-projected direction in sensor frame
        rho: Inverse-distance prior

    Raises:
        InvalidStateError: if v is zero or rho is negative
    """
    s, v, rho, norm_v = _retro_projection_args(s, v, rho, min_norm)
    t, q = split_frame(s)

    return np.concatenate([t, quat_rotate(q, v), [rho * norm_v]])


def from_bearing_only_frame_with_jacobians(
    s: np.ndarray,
    v: np.ndarray,
    rho: float,
    AHP_s: Optional[np.ndarray] = None,
    AHP_v: Optional[np.ndarray] = None,
    AHP_rho: Optional[np.ndarray] = None,
    min_norm: float = MIN_NORM
) -> Tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Bearing-only retro-projection, with Jacobians.

    Returns:
        Tuple of (ahp, AHP_s 7x7, AHP_v 7x3, AHP_rho 7x1)
    """
    s, v, rho, norm_v = _retro_projection_args(s, v, rho, min_norm)
    t, q = split_frame(s)
    AHP_s = output_buffer(AHP_s, (AHP_SIZE, FRAME_SIZE), "AHP_s")
    AHP_v = output_buffer(AHP_v, (AHP_SIZE, 3), "AHP_v")
    AHP_rho = output_buffer(AHP_rho, (AHP_SIZE, 1), "AHP_rho")

    M_q, M_v = quat_rotate_jacobians(q, v)

    AHP_s[0:3, 0:3] = np.eye(3)
    AHP_s[3:6, 3:7] = M_q

    AHP_v[3:6, :] = M_v
    AHP_v[6, :] = rho * v / norm_v

    AHP_rho[6, 0] = norm_v

    ahp = np.concatenate([t, M_v @ v, [rho * norm_v]])
    return ahp, AHP_s, AHP_v, AHP_rho


def linearity_index(
    sensor_position: np.ndarray,
    ahp: np.ndarray,
    sigma_rho: float,
    min_norm: float = MIN_NORM
) -> float:
    """Linearity index of the inverse-depth to Euclidean conversion.

    L = 4 |m| (sigma_rho / rho^2) |cos a| / d, where d is the distance from the
    sensor to the point and a is the angle between m and the
    sensor-to-point ray (Civera et al., IEEE T-RO 2008). Small values mean
    a Euclidean parametrization would be nearly as linear. The anchor
    distance is |m| / rho, so the index does not change when m and rho
    are scaled together.

    Raises:
        InvalidStateError: if rho is not strictly positive or sigma_rho is negative
        DegenerateGeometryError: if the sensor is at the point or m is zero
    """
    sensor_position = as_vector(sensor_position, 3, "Sensor position")
    p0, m, rho = split_ahp(ahp)
    if rho <= 0:
        raise InvalidStateError("Linearity index is undefined for a point at infinity")
    if sigma_rho < 0:
        raise InvalidStateError(f"sigma_rho must be non-negative, got {sigma_rho}")

    ray = p0 + m / rho - sensor_position
    d = np.linalg.norm(ray)
    norm_m = np.linalg.norm(m)
    if d < min_norm or norm_m < min_norm:
        raise DegenerateGeometryError("Linearity index needs a non-zero ray and direction")

    cos_a = np.dot(m, ray) / (norm_m * d)
    sigma_depth = norm_m * sigma_rho / (rho * rho)
    return float(4.0 * sigma_depth * abs(cos_a) / d)
