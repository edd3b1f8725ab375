"""Landmarks bound to a slot of the map's joint state."""

import logging
import uuid
import numpy as np
from typing import Optional, Tuple

from . import ahp
from .parametrization import (
    LandmarkType,
    landmark_size,
    landmark_to_euclidean,
    landmark_to_euclidean_with_jacobian,
    landmark_from_frame,
    landmark_to_frame,
)
from ..errors import InvalidStateError
from ..map.state import MapState, StateView
from ..models.settings import AHPSettings


class Landmark:
    """Landmark whose state lives in a MapState slot.

    The landmark keeps a StateView handle and a back-reference to the map;
    it never copies the state. The `kind` tag selects the parametrization.
    """

    kind: LandmarkType

    def __init__(
        self,
        map_state: MapState,
        view: Optional[StateView] = None,
        landmark_id: Optional[str] = None
    ):
        """Bind a landmark to a map slot, reserving one if none is given.

        Args:
            map_state: Map owning the joint state
            view: Slot already reserved in map_state (None to reserve a new one)
            landmark_id: Identifier (generated if not provided)
        """
        self.map_state = map_state
        self.id = landmark_id or f"lmk_{uuid.uuid4().hex[:8]}"
        self.logger = logging.getLogger(__name__)

        if view is None:
            view = map_state.reserve(self.size())
        elif view.size != self.size():
            raise ValueError(
                f"{self.kind.value} landmark needs a slot of size {self.size()}, got {view.size}"
            )
        elif not map_state.is_reserved(view):
            raise ValueError(
                f"State slot [{view.offset}, {view.end}) is not reserved in the map"
            )
        self.view: Optional[StateView] = view

    @classmethod
    def size(cls) -> int:
        """Number of state scalars occupied by this landmark type."""
        return landmark_size(cls.kind)

    def is_active(self) -> bool:
        """Check whether the landmark still owns its map slot."""
        return self.view is not None

    @property
    def state(self) -> np.ndarray:
        """Landmark mean, as a live view into the joint state."""
        return self.map_state.x_view(self._active_view())

    @property
    def covariance(self) -> np.ndarray:
        """Landmark covariance block, as a live view into the joint covariance."""
        return self.map_state.P_block(self._active_view())

    def to_euclidean(self) -> np.ndarray:
        """Euclidean position of the landmark."""
        return landmark_to_euclidean(self.kind, self.state)

    def to_euclidean_with_jacobian(self) -> Tuple[np.ndarray, np.ndarray]:
        """Euclidean position and its Jacobian wrt the landmark state."""
        return landmark_to_euclidean_with_jacobian(self.kind, self.state)

    def from_frame(self, F: np.ndarray) -> np.ndarray:
        """Global state of this landmark, taking its state as expressed in F."""
        return landmark_from_frame(self.kind, F, self.state)

    def to_frame(self, F: np.ndarray) -> np.ndarray:
        """State of this landmark expressed in frame F."""
        return landmark_to_frame(self.kind, F, self.state)

    def release(self) -> None:
        """Give the slot back to the map."""
        view = self._active_view()
        self.map_state.release(view)
        self.view = None
        self.logger.info(f"Landmark {self.id} released slot [{view.offset}, {view.end})")

    def _active_view(self) -> StateView:
        if self.view is None:
            raise InvalidStateError(f"Landmark {self.id} has been released from the map")
        return self.view


class EuclideanLandmark(Landmark):
    """Landmark parametrized as a Euclidean 3D point."""

    kind = LandmarkType.EUCLIDEAN
    SIZE = 3


class AHPLandmark(Landmark):
    """Landmark parametrized as an anchored homogeneous point [p0, m, rho]."""

    kind = LandmarkType.AHP
    SIZE = ahp.AHP_SIZE

    def from_frame_with_jacobians(self, F: np.ndarray):
        """From-frame transform of this landmark's state, with Jacobians.

        Returns:
            Tuple of (ahp, AHP_f, AHP_ahpf)
        """
        return ahp.from_frame_with_jacobians(F, self.state)

    def to_frame_with_jacobians(self, F: np.ndarray):
        """To-frame transform of this landmark's state, with Jacobians.

        Returns:
            Tuple of (ahpf, AHPF_f, AHPF_ahp)
        """
        return ahp.to_frame_with_jacobians(F, self.state)

    def to_bearing_only_frame(self, s: np.ndarray, min_norm: float = ahp.MIN_NORM) -> np.ndarray:
        """Direction to the landmark in sensor frame s, without range."""
        return ahp.to_bearing_only_frame(s, self.state, min_norm=min_norm)

    def to_bearing_only_frame_with_distance(self, s: np.ndarray, min_norm: float = ahp.MIN_NORM):
        """Direction to the landmark in sensor frame s and inverse distance."""
        return ahp.to_bearing_only_frame_with_distance(s, self.state, min_norm=min_norm)

    def to_bearing_only_frame_with_jacobians(self, s: np.ndarray, min_norm: float = ahp.MIN_NORM):
        """Bearing-only projection with inverse distance and Jacobians.

        Returns:
            Tuple of (v, inv_dist, V_s, V_ahp)
        """
        return ahp.to_bearing_only_frame_with_jacobians(s, self.state, min_norm=min_norm)

    def linearity_index(self, sensor_position: np.ndarray, min_norm: float = ahp.MIN_NORM) -> float:
        """Linearity index seen from a sensor position, using this landmark's rho variance."""
        sigma_rho = float(np.sqrt(max(self.covariance[6, 6], 0.0)))
        return ahp.linearity_index(sensor_position, self.state, sigma_rho, min_norm=min_norm)

    @staticmethod
    def from_bearing_only_frame(s: np.ndarray, v: np.ndarray, rho: float) -> np.ndarray:
        """AHP state from a bearing-only retro-projection."""
        return ahp.from_bearing_only_frame(s, v, rho)

    @staticmethod
    def from_bearing_only_frame_with_jacobians(s: np.ndarray, v: np.ndarray, rho: float):
        """AHP state from a bearing-only retro-projection, with Jacobians.

        Returns:
            Tuple of (ahp, AHP_s, AHP_v, AHP_rho)
        """
        return ahp.from_bearing_only_frame_with_jacobians(s, v, rho)

    @classmethod
    def initialize(
        cls,
        map_state: MapState,
        s: Optional[np.ndarray],
        v: np.ndarray,
        rho: Optional[float] = None,
        sigma_rho: Optional[float] = None,
        v_cov: Optional[np.ndarray] = None,
        sensor_cov: Optional[np.ndarray] = None,
        sensor_view: Optional[StateView] = None,
        landmark_id: Optional[str] = None,
        settings: Optional[AHPSettings] = None
    ) -> "AHPLandmark":
        """Create a landmark from a first bearing-only observation.

        The new covariance is J_s P_s J_s^T + J_v V J_v^T + J_rho sigma_rho^2 J_rho^T.
        When the sensor frame is part of the map (sensor_view), its mean,
        covariance and cross-covariances are taken from the map, and the
        landmark is correlated with every other reserved slot through J_s.

        Args:
            map_state: Map receiving the landmark
            s: Sensor frame [t, q] (ignored when sensor_view is given)
            v: Observed direction in sensor frame
            rho: Inverse-distance prior (settings.default_rho_prior if None)
            sigma_rho: Standard deviation of the prior (settings.default_sigma_rho if None)
            v_cov: 3x3 covariance of the observed direction (zero if None)
            sensor_cov: 7x7 covariance of s when it is not in the map
            sensor_view: Slot of the sensor frame in the map
            landmark_id: Identifier (generated if not provided)
            settings: Priors and tolerances (defaults if None)

        Raises:
            ValueError: if both sensor_cov and sensor_view are given, or on bad shapes
        """
        settings = settings or AHPSettings()
        rho = settings.default_rho_prior if rho is None else rho
        sigma_rho = settings.default_sigma_rho if sigma_rho is None else sigma_rho

        if sigma_rho < 0:
            raise InvalidStateError(f"sigma_rho must be non-negative, got {sigma_rho}")
        v_cov = np.zeros((3, 3)) if v_cov is None else np.asarray(v_cov, dtype=float)
        if v_cov.shape != (3, 3):
            raise ValueError(f"v_cov must be 3x3, got shape {v_cov.shape}")

        if sensor_view is not None:
            if sensor_cov is not None:
                raise ValueError("Pass either sensor_cov or sensor_view, not both")
            s = map_state.x_view(sensor_view)
            sensor_cov = map_state.P_block(sensor_view)
        elif sensor_cov is None:
            sensor_cov = np.zeros((7, 7))
        sensor_cov = np.asarray(sensor_cov, dtype=float)
        if sensor_cov.shape != (7, 7):
            raise ValueError(f"sensor_cov must be 7x7, got shape {sensor_cov.shape}")

        state, AHP_s, AHP_v, AHP_rho = ahp.from_bearing_only_frame_with_jacobians(
            s, v, rho, min_norm=settings.min_norm
        )
        cov = (
            AHP_s @ sensor_cov @ AHP_s.T
            + AHP_v @ v_cov @ AHP_v.T
            + sigma_rho ** 2 * (AHP_rho @ AHP_rho.T)
        )

        # Indices correlated with the sensor, read before the new slot is reserved
        others = map_state.used_indices()

        landmark = cls(map_state, landmark_id=landmark_id)
        map_state.set_block(landmark.view, state, cov)

        if sensor_view is not None and len(others) > 0:
            P_rs = map_state.P[others][:, sensor_view.slice()]
            P_rl = P_rs @ AHP_s.T
            map_state.P[np.ix_(others, landmark.view.indices())] = P_rl
            map_state.P[np.ix_(landmark.view.indices(), others)] = P_rl.T

        landmark.logger.info(
            f"Initialized AHP landmark {landmark.id} at slot [{landmark.view.offset}, "
            f"{landmark.view.end}) with rho={state[6]:.4f}"
        )
        return landmark
