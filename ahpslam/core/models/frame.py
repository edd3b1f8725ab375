"""Frame model: a rigid pose [t, q]."""

from typing import List
import numpy as np
from pydantic import BaseModel, Field, field_validator

from ..math.frames import FRAME_SIZE
from ..math.quaternions import quat_from_axis_angle, quat_normalize


class Frame(BaseModel):
    """Rigid-body pose with position and unit orientation quaternion.

    - t: Position [x, y, z]
    - q: Orientation quaternion [w, x, y, z], normalized on validation

    Landmark transforms accept a Frame directly or the 7-vector from
    to_numpy(); inside a filter that vector is usually a view into the
    joint state instead.
    """

    t: List[float] = Field(
        default_factory=lambda: [0.0, 0.0, 0.0],
        description="Position [x, y, z]",
        min_length=3,
        max_length=3
    )
    q: List[float] = Field(
        default_factory=lambda: [1.0, 0.0, 0.0, 0.0],
        description="Orientation quaternion [w, x, y, z]",
        min_length=4,
        max_length=4
    )

    @field_validator('t')
    @classmethod
    def validate_t(cls, v):
        if len(v) != 3:
            raise ValueError("t must have exactly 3 elements")
        if not np.all(np.isfinite(v)):
            raise ValueError("t must be finite")
        return v

    @field_validator('q')
    @classmethod
    def validate_q(cls, v):
        if len(v) != 4:
            raise ValueError("q must have exactly 4 elements")
        if not np.all(np.isfinite(v)):
            raise ValueError("q must be finite")
        return quat_normalize(np.array(v, dtype=float)).tolist()

    @classmethod
    def identity(cls) -> "Frame":
        """Frame at the origin with no rotation."""
        return cls()

    @classmethod
    def from_axis_angle(cls, t, axis, angle: float) -> "Frame":
        """Build a frame from a position and an axis-angle rotation."""
        q = quat_from_axis_angle(np.asarray(axis, dtype=float), angle)
        return cls(t=list(map(float, t)), q=q.tolist())

    @classmethod
    def from_numpy(cls, F: np.ndarray) -> "Frame":
        """Build a frame from a 7-element vector [t, q]."""
        F = np.asarray(F, dtype=float)
        if F.shape != (FRAME_SIZE,):
            raise ValueError(f"Frame vector must have 7 elements, got shape {F.shape}")
        return cls(t=F[:3].tolist(), q=F[3:].tolist())

    def to_numpy(self) -> np.ndarray:
        """Convert to a 7-element vector [t, q]."""
        return np.array(self.t + self.q)

    def get_position(self) -> np.ndarray:
        """Get position as numpy array."""
        return np.array(self.t)

    def get_quaternion(self) -> np.ndarray:
        """Get orientation quaternion as numpy array."""
        return np.array(self.q)
