"""AHPSLAM - Anchored Homogeneous Point landmarks for EKF-SLAM

Frame transforms, Euclidean reparametrization and bearing-only
projection of AHP landmarks, with analytic Jacobians.
"""

__version__ = "0.1.0"

# Errors
from .core.errors import (
    AHPError,
    InvalidStateError,
    DegenerateGeometryError,
    ShapeMismatchError,
)

# Models
from .core.models.frame import Frame
from .core.models.settings import AHPSettings

# Landmarks
from .core.landmarks.landmark import AHPLandmark, EuclideanLandmark
from .core.landmarks.parametrization import LandmarkType, landmark_size

# Map
from .core.map.state import MapState, StateView
from .core.map.reparametrize import reparametrize_to_euclidean, needs_reparametrization

__all__ = [
    # Version
    "__version__",
    # Errors
    "AHPError",
    "InvalidStateError",
    "DegenerateGeometryError",
    "ShapeMismatchError",
    # Models
    "Frame",
    "AHPSettings",
    # Landmarks
    "AHPLandmark",
    "EuclideanLandmark",
    "LandmarkType",
    "landmark_size",
    # Map
    "MapState",
    "StateView",
    "reparametrize_to_euclidean",
    "needs_reparametrization",
]
