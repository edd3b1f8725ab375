"""Joint state vector and covariance shared by the map's landmarks."""

import logging
import numpy as np
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class StateView:
    """Handle to a contiguous slice of the joint state.

    Holds only an offset and a size; the storage belongs to MapState.
    """

    offset: int
    size: int

    def __post_init__(self):
        """Validate the slice bounds."""
        if self.offset < 0:
            raise ValueError(f"StateView offset must be non-negative, got {self.offset}")
        if self.size <= 0:
            raise ValueError(f"StateView size must be positive, got {self.size}")

    @property
    def end(self) -> int:
        """One past the last index of the view."""
        return self.offset + self.size

    def slice(self) -> slice:
        """Slice selecting the view in the joint state."""
        return slice(self.offset, self.end)

    def indices(self) -> np.ndarray:
        """Indices of the view in the joint state."""
        return np.arange(self.offset, self.end)


class MapState:
    """Joint mean and covariance with slot allocation.

    Landmarks reserve contiguous slots and read or write them through
    numpy views. Not thread-safe: the caller serializes access.
    """

    def __init__(self, capacity: int):
        """Initialize an empty map state.

        Args:
            capacity: Total number of scalars the joint state can hold
        """
        if capacity <= 0:
            raise ValueError(f"Map capacity must be positive, got {capacity}")

        self.capacity = capacity
        self.x = np.zeros(capacity)
        self.P = np.zeros((capacity, capacity))
        self._used = np.zeros(capacity, dtype=bool)
        self.logger = logging.getLogger(__name__)

    def used_size(self) -> int:
        """Number of reserved scalars."""
        return int(np.count_nonzero(self._used))

    def free_size(self) -> int:
        """Number of unreserved scalars."""
        return self.capacity - self.used_size()

    def reserve(self, size: int) -> StateView:
        """Reserve the first free contiguous slot of the given size.

        Raises:
            ValueError: if no contiguous slot is large enough
        """
        if size <= 0:
            raise ValueError(f"Reserved size must be positive, got {size}")

        run = 0
        for i in range(self.capacity):
            run = 0 if self._used[i] else run + 1
            if run == size:
                view = StateView(offset=i - size + 1, size=size)
                self._used[view.slice()] = True
                self.logger.debug(f"Reserved state slot [{view.offset}, {view.end})")
                return view

        raise ValueError(
            f"No free slot of size {size} in map state ({self.free_size()} of {self.capacity} free)"
        )

    def release(self, view: StateView) -> None:
        """Release a slot and clear its mean and covariance rows and columns."""
        self._check_view(view)
        if not np.all(self._used[view.slice()]):
            raise ValueError(f"State slot [{view.offset}, {view.end}) is not reserved")

        s = view.slice()
        self._used[s] = False
        self.x[s] = 0.0
        self.P[s, :] = 0.0
        self.P[:, s] = 0.0
        self.logger.debug(f"Released state slot [{view.offset}, {view.end})")

    def is_reserved(self, view: StateView) -> bool:
        """Check whether the whole slot is currently reserved."""
        self._check_view(view)
        return bool(np.all(self._used[view.slice()]))

    def used_indices(self) -> np.ndarray:
        """Indices of all reserved scalars, in state order."""
        return np.flatnonzero(self._used)

    def x_view(self, view: StateView) -> np.ndarray:
        """Mean of a slot, as a view into the joint state."""
        self._check_view(view)
        return self.x[view.slice()]

    def P_block(self, row: StateView, col: Optional[StateView] = None) -> np.ndarray:
        """Covariance block between two slots, as a view."""
        col = row if col is None else col
        self._check_view(row)
        self._check_view(col)
        return self.P[row.slice(), col.slice()]

    def set_block(self, view: StateView, mean: np.ndarray, cov: np.ndarray) -> None:
        """Write mean and covariance of a slot, leaving cross-covariances untouched."""
        self._check_view(view)
        mean = np.asarray(mean, dtype=float)
        cov = np.asarray(cov, dtype=float)
        if mean.shape != (view.size,):
            raise ValueError(f"Mean must have shape ({view.size},), got {mean.shape}")
        if cov.shape != (view.size, view.size):
            raise ValueError(f"Covariance must have shape ({view.size}, {view.size}), got {cov.shape}")

        self.x[view.slice()] = mean
        self.P[view.slice(), view.slice()] = cov

    def cross_covariance(self, view: StateView, exclude: Optional[List[StateView]] = None) -> np.ndarray:
        """Covariance between a slot and every reserved scalar (N x size)."""
        self._check_view(view)
        mask = self._used.copy()
        for other in exclude or []:
            mask[other.slice()] = False
        return self.P[np.flatnonzero(mask)][:, view.slice()]

    def _check_view(self, view: StateView) -> None:
        if view.end > self.capacity:
            raise ValueError(
                f"State slot [{view.offset}, {view.end}) exceeds map capacity {self.capacity}"
            )
