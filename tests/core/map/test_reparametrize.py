"""Tests for AHP to Euclidean reparametrization inside the map."""

import numpy as np
import pytest

from ahpslam.core.errors import DegenerateGeometryError, InvalidStateError
from ahpslam.core.landmarks.ahp import ahp_to_euclidean_with_jacobian
from ahpslam.core.landmarks.landmark import AHPLandmark, EuclideanLandmark
from ahpslam.core.map.reparametrize import needs_reparametrization, reparametrize_to_euclidean
from ahpslam.core.map.state import MapState
from ahpslam.core.models.settings import AHPSettings


@pytest.fixture
def map_state():
    return MapState(capacity=40)


def _ahp_landmark(map_state, state, cov):
    lmk = AHPLandmark(map_state)
    map_state.set_block(lmk.view, np.asarray(state, dtype=float), cov)
    return lmk


class TestNeedsReparametrization:
    """Test the linearity-based decision."""

    def test_converged_landmark(self, map_state):
        """Test a landmark with small rho variance qualifies."""
        cov = np.zeros((7, 7))
        cov[6, 6] = 1e-6
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.2], cov)

        assert needs_reparametrization(lmk, np.zeros(3), AHPSettings())

    def test_uncertain_landmark(self, map_state):
        """Test a landmark with large rho variance does not qualify."""
        cov = np.zeros((7, 7))
        cov[6, 6] = 0.25
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.2], cov)

        assert not needs_reparametrization(lmk, np.zeros(3), AHPSettings())

    def test_threshold_from_settings(self, map_state):
        """Test the threshold is read from the settings."""
        cov = np.zeros((7, 7))
        cov[6, 6] = 0.01 ** 2
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.2], cov)

        # Linearity index is 0.2 here
        assert not needs_reparametrization(lmk, np.zeros(3), AHPSettings(linearity_threshold=0.1))
        assert needs_reparametrization(lmk, np.zeros(3), AHPSettings(linearity_threshold=0.3))

    def test_point_at_infinity(self, map_state):
        """Test points at infinity never qualify."""
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.0], np.zeros((7, 7)))

        assert not needs_reparametrization(lmk, np.zeros(3), AHPSettings(linearity_threshold=1e6))

    def test_min_norm_from_settings(self, map_state):
        """Test the degeneracy tolerance is read from the settings."""
        cov = np.zeros((7, 7))
        cov[6, 6] = 1e-6
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.2], cov)
        # Sensor 1e-9 away from the point at (0, 0, 5)
        sensor = np.array([0.0, 0.0, 5.0 + 1e-9])

        with pytest.raises(DegenerateGeometryError):
            needs_reparametrization(lmk, sensor, AHPSettings(min_norm=1e-6))
        needs_reparametrization(lmk, sensor, AHPSettings())


class TestReparametrizeToEuclidean:
    """Test replacing an AHP landmark by a Euclidean one."""

    def test_mean_and_covariance(self, map_state):
        """Test mean p0 + m / rho and covariance J P J^T."""
        state = np.array([1.0, 0.0, 0.0, 0.0, 0.5, 1.0, 0.25])
        cov = np.diag([1e-4, 1e-4, 1e-4, 1e-3, 1e-3, 1e-3, 1e-4])
        lmk = _ahp_landmark(map_state, state, cov)

        euc = reparametrize_to_euclidean(lmk)

        p, J = ahp_to_euclidean_with_jacobian(state)
        assert isinstance(euc, EuclideanLandmark)
        assert euc.id == lmk.id
        np.testing.assert_allclose(euc.state, p)
        np.testing.assert_allclose(euc.covariance, J @ cov @ J.T)

    def test_slot_is_released(self, map_state):
        """Test the AHP slot is given back and the old landmark deactivated."""
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.5], 1e-3 * np.eye(7))

        reparametrize_to_euclidean(lmk)

        assert not lmk.is_active()
        assert map_state.used_size() == 3

    def test_cross_covariances(self, map_state):
        """Test cross-covariances with other slots become P_r J^T."""
        other = EuclideanLandmark(map_state)
        map_state.set_block(other.view, np.ones(3), np.eye(3))
        state = np.array([0.0, 1.0, 0.0, 0.3, 0.0, 1.0, 0.4])
        lmk = _ahp_landmark(map_state, state, 1e-2 * np.eye(7))
        P_ol = 1e-3 * np.arange(21, dtype=float).reshape(3, 7)
        map_state.P[np.ix_(other.view.indices(), lmk.view.indices())] = P_ol
        map_state.P[np.ix_(lmk.view.indices(), other.view.indices())] = P_ol.T

        euc = reparametrize_to_euclidean(lmk)

        _, J = ahp_to_euclidean_with_jacobian(state)
        np.testing.assert_allclose(map_state.P_block(other.view, euc.view), P_ol @ J.T)
        np.testing.assert_allclose(map_state.P_block(euc.view, other.view), J @ P_ol.T)
        np.testing.assert_array_equal(map_state.P_block(other.view), np.eye(3))

    def test_point_at_infinity_rejected(self, map_state):
        """Test points at infinity cannot be reparametrized and stay in the map."""
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.0], np.eye(7))

        with pytest.raises(InvalidStateError):
            reparametrize_to_euclidean(lmk)

        assert lmk.is_active()
        assert map_state.used_size() == 7

    def test_released_landmark_rejected(self, map_state):
        """Test a released landmark cannot be reparametrized."""
        lmk = _ahp_landmark(map_state, [0, 0, 0, 0, 0, 1, 0.5], np.eye(7))
        lmk.release()

        with pytest.raises(InvalidStateError):
            reparametrize_to_euclidean(lmk)
