"""Input and output buffer validation shared by the landmark transforms."""

import numpy as np
from typing import Optional, Tuple

from ..errors import InvalidStateError, ShapeMismatchError
from ..models.frame import Frame


def as_vector(x, size: int, name: str) -> np.ndarray:
    """View x as a finite float vector of the given size.

    Float arrays are returned as-is, so views into a state vector stay views.
    A Frame model is converted to its [t, q] vector.
    """
    if isinstance(x, Frame):
        x = x.to_numpy()
    x = np.asarray(x, dtype=float)
    if x.shape != (size,):
        raise InvalidStateError(f"{name} must be {size}-element vector, got shape {x.shape}")
    if not np.all(np.isfinite(x)):
        raise InvalidStateError(f"{name} contains non-finite values")
    return x


def output_buffer(out: Optional[np.ndarray], shape: Tuple[int, int], name: str) -> np.ndarray:
    """Return a zeroed Jacobian buffer, allocating it if not provided."""
    if out is None:
        return np.zeros(shape)
    if out.shape != shape:
        raise ShapeMismatchError(f"{name} must have shape {shape}, got {out.shape}")
    if not np.issubdtype(out.dtype, np.floating):
        raise ShapeMismatchError(f"{name} must be a floating-point array, got dtype {out.dtype}")
    out[...] = 0.0
    return out
