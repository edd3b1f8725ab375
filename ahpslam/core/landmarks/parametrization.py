"""Closed set of landmark parametrizations, dispatched by type tag."""

import numpy as np
from enum import Enum
from typing import Tuple

from . import ahp, euclidean


class LandmarkType(Enum):
    """Landmark parametrization variants."""
    AHP = "ahp"
    EUCLIDEAN = "euclidean"


_SIZES = {
    LandmarkType.AHP: ahp.AHP_SIZE,
    LandmarkType.EUCLIDEAN: euclidean.EUC_SIZE,
}


def _landmark_type(kind) -> LandmarkType:
    try:
        return LandmarkType(kind)
    except ValueError:
        raise ValueError(f"Unknown landmark type: {kind}") from None


def landmark_size(kind) -> int:
    """Number of state scalars occupied by a landmark of this type."""
    return _SIZES[_landmark_type(kind)]


def landmark_to_euclidean(kind, x: np.ndarray) -> np.ndarray:
    """Euclidean position of a landmark state of the given type."""
    kind = _landmark_type(kind)

    if kind == LandmarkType.AHP:
        return ahp.ahp_to_euclidean(x)
    elif kind == LandmarkType.EUCLIDEAN:
        return euclidean.euclidean_to_euclidean(x)
    else:
        raise ValueError(f"Unknown landmark type: {kind}")


def landmark_to_euclidean_with_jacobian(kind, x: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Euclidean position and its 3xN Jacobian wrt the landmark state."""
    kind = _landmark_type(kind)

    if kind == LandmarkType.AHP:
        return ahp.ahp_to_euclidean_with_jacobian(x)
    elif kind == LandmarkType.EUCLIDEAN:
        return euclidean.euclidean_to_euclidean_with_jacobian(x)
    else:
        raise ValueError(f"Unknown landmark type: {kind}")


def landmark_from_frame(kind, F: np.ndarray, xf: np.ndarray) -> np.ndarray:
    """Transform a landmark state expressed in frame F to the global frame."""
    kind = _landmark_type(kind)

    if kind == LandmarkType.AHP:
        return ahp.from_frame(F, xf)
    elif kind == LandmarkType.EUCLIDEAN:
        return euclidean.from_frame(F, xf)
    else:
        raise ValueError(f"Unknown landmark type: {kind}")


def landmark_to_frame(kind, F: np.ndarray, x: np.ndarray) -> np.ndarray:
    """Transform a global landmark state into frame F."""
    kind = _landmark_type(kind)

    if kind == LandmarkType.AHP:
        return ahp.to_frame(F, x)
    elif kind == LandmarkType.EUCLIDEAN:
        return euclidean.to_frame(F, x)
    else:
        raise ValueError(f"Unknown landmark type: {kind}")
