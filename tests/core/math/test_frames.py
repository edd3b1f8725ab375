"""Tests for rigid frame point transforms."""

import numpy as np
import pytest
from ahpslam.core.math.frames import (
    event_from_frame,
    event_from_frame_jacobians,
    event_to_frame,
    event_to_frame_jacobians,
    split_frame,
)
from ahpslam.core.math.jacobians import JacobianTester, check_jacobian
from ahpslam.core.math.quaternions import quat_from_axis_angle


@pytest.fixture
def frame():
    """Frame translated by (1, 2, 3) and rotated 90 degrees about Z."""
    q = quat_from_axis_angle(np.array([0.0, 0.0, 1.0]), np.pi / 2)
    return np.concatenate([[1.0, 2.0, 3.0], q])


class TestFrames:
    """Test frame transforms."""

    def test_split_frame_returns_views(self, frame):
        """Test split_frame does not copy."""
        t, q = split_frame(frame)
        t[0] = 10.0
        assert frame[0] == 10.0
        assert q.shape == (4,)

    def test_split_frame_wrong_size(self):
        """Test split_frame rejects wrong size."""
        with pytest.raises(ValueError):
            split_frame(np.zeros(6))

    def test_event_from_frame(self, frame):
        """Test a point on the local X axis maps to the global Y axis."""
        p = event_from_frame(frame, np.array([1.0, 0.0, 0.0]))
        np.testing.assert_allclose(p, [1.0, 3.0, 3.0], atol=1e-12)

    def test_event_round_trip(self, frame):
        """Test to-frame undoes from-frame."""
        p = np.array([0.3, -4.0, 2.5])
        np.testing.assert_allclose(event_to_frame(frame, event_from_frame(frame, p)), p, atol=1e-12)

    def test_event_from_frame_jacobians(self):
        """Test from-frame Jacobians against finite differences."""
        rng = np.random.default_rng(3)
        F = JacobianTester.random_frame(rng)
        p = rng.standard_normal(3)

        ok_f, _, _ = check_jacobian(
            lambda x: event_from_frame(x, p), lambda x: event_from_frame_jacobians(x, p)[0], F
        )
        ok_p, _, _ = check_jacobian(
            lambda x: event_from_frame(F, x), lambda x: event_from_frame_jacobians(F, x)[1], p
        )
        assert ok_f and ok_p

    def test_event_to_frame_jacobians(self):
        """Test to-frame Jacobians against finite differences."""
        rng = np.random.default_rng(4)
        F = JacobianTester.random_frame(rng)
        p = rng.standard_normal(3)

        ok_f, _, _ = check_jacobian(
            lambda x: event_to_frame(x, p), lambda x: event_to_frame_jacobians(x, p)[0], F
        )
        ok_p, _, _ = check_jacobian(
            lambda x: event_to_frame(F, x), lambda x: event_to_frame_jacobians(F, x)[1], p
        )
        assert ok_f and ok_p
