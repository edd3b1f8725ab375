"""Euclidean 3D point landmark transforms."""

import numpy as np
from typing import Optional, Tuple

from .checks import as_vector, output_buffer
from ..math.frames import (
    FRAME_SIZE,
    event_from_frame,
    event_from_frame_jacobians,
    event_to_frame,
    event_to_frame_jacobians,
)

EUC_SIZE = 3


def from_frame(F: np.ndarray, pf: np.ndarray) -> np.ndarray:
    """Transform a point expressed in frame F to the global frame."""
    F = as_vector(F, FRAME_SIZE, "Frame")
    pf = as_vector(pf, EUC_SIZE, "Euclidean point")
    return event_from_frame(F, pf)


def from_frame_with_jacobians(
    F: np.ndarray,
    pf: np.ndarray,
    P_f: Optional[np.ndarray] = None,
    P_pf: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """From-frame transform, with the 3x7 and 3x3 Jacobians."""
    F = as_vector(F, FRAME_SIZE, "Frame")
    pf = as_vector(pf, EUC_SIZE, "Euclidean point")
    P_f = output_buffer(P_f, (EUC_SIZE, FRAME_SIZE), "P_f")
    P_pf = output_buffer(P_pf, (EUC_SIZE, EUC_SIZE), "P_pf")

    P_f[...], P_pf[...] = event_from_frame_jacobians(F, pf)
    return event_from_frame(F, pf), P_f, P_pf


def to_frame(F: np.ndarray, p: np.ndarray) -> np.ndarray:
    """Transform a global point into frame F."""
    F = as_vector(F, FRAME_SIZE, "Frame")
    p = as_vector(p, EUC_SIZE, "Euclidean point")
    return event_to_frame(F, p)


def to_frame_with_jacobians(
    F: np.ndarray,
    p: np.ndarray,
    PF_f: Optional[np.ndarray] = None,
    PF_p: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """To-frame transform, with the 3x7 and 3x3 Jacobians."""
    F = as_vector(F, FRAME_SIZE, "Frame")
    p = as_vector(p, EUC_SIZE, "Euclidean point")
    PF_f = output_buffer(PF_f, (EUC_SIZE, FRAME_SIZE), "PF_f")
    PF_p = output_buffer(PF_p, (EUC_SIZE, EUC_SIZE), "PF_p")

    PF_f[...], PF_p[...] = event_to_frame_jacobians(F, p)
    return event_to_frame(F, p), PF_f, PF_p


def euclidean_to_euclidean(p: np.ndarray) -> np.ndarray:
    """Identity reparametrization."""
    return as_vector(p, EUC_SIZE, "Euclidean point").copy()


def euclidean_to_euclidean_with_jacobian(
    p: np.ndarray,
    EUC_p: Optional[np.ndarray] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """Identity reparametrization, with its 3x3 identity Jacobian."""
    EUC_p = output_buffer(EUC_p, (EUC_SIZE, EUC_SIZE), "EUC_p")
    EUC_p[...] = np.eye(EUC_SIZE)
    return euclidean_to_euclidean(p), EUC_p
