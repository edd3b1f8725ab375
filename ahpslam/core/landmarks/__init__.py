"""Landmark parametrizations and the landmark state wrapper."""

from .ahp import (
    AHP_SIZE,
    from_frame,
    from_frame_with_jacobians,
    to_frame,
    to_frame_with_jacobians,
    ahp_to_euclidean,
    ahp_to_euclidean_with_jacobian,
    to_bearing_only_frame,
    to_bearing_only_frame_with_distance,
    to_bearing_only_frame_with_jacobians,
    from_bearing_only_frame,
    from_bearing_only_frame_with_jacobians,
    linearity_index,
)
from .parametrization import LandmarkType, landmark_size, landmark_to_euclidean
from .landmark import Landmark, AHPLandmark, EuclideanLandmark

__all__ = [
    "AHP_SIZE",
    "from_frame",
    "from_frame_with_jacobians",
    "to_frame",
    "to_frame_with_jacobians",
    "ahp_to_euclidean",
    "ahp_to_euclidean_with_jacobian",
    "to_bearing_only_frame",
    "to_bearing_only_frame_with_distance",
    "to_bearing_only_frame_with_jacobians",
    "from_bearing_only_frame",
    "from_bearing_only_frame_with_jacobians",
    "linearity_index",
    "LandmarkType",
    "landmark_size",
    "landmark_to_euclidean",
    "Landmark",
    "AHPLandmark",
    "EuclideanLandmark",
]
