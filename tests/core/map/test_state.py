"""Tests for the joint map state."""

import numpy as np
import pytest

from ahpslam.core.map.state import MapState, StateView


class TestStateView:
    """Test state view handles."""

    def test_bounds(self):
        """Test end, slice and indices."""
        view = StateView(offset=4, size=3)

        assert view.end == 7
        assert view.slice() == slice(4, 7)
        np.testing.assert_array_equal(view.indices(), [4, 5, 6])

    def test_invalid(self):
        """Test negative offsets and empty views are rejected."""
        with pytest.raises(ValueError):
            StateView(offset=-1, size=3)
        with pytest.raises(ValueError):
            StateView(offset=0, size=0)

    def test_hashable(self):
        """Test views can key dictionaries."""
        assert {StateView(0, 7): "a"}[StateView(0, 7)] == "a"


class TestMapState:
    """Test slot allocation and block access."""

    def test_empty(self):
        """Test a new map is zeroed and free."""
        m = MapState(capacity=10)

        assert m.x.shape == (10,)
        assert m.P.shape == (10, 10)
        assert m.used_size() == 0
        assert m.free_size() == 10

    def test_invalid_capacity(self):
        """Test non-positive capacity is rejected."""
        with pytest.raises(ValueError):
            MapState(capacity=0)

    def test_reserve_is_contiguous_first_fit(self):
        """Test reservations are packed from the start."""
        m = MapState(capacity=20)

        a = m.reserve(7)
        b = m.reserve(3)

        assert (a.offset, a.size) == (0, 7)
        assert (b.offset, b.size) == (7, 3)
        assert m.used_size() == 10
        np.testing.assert_array_equal(m.used_indices(), np.arange(10))

    def test_reserve_reuses_released_gap(self):
        """Test a released slot is reused when it fits."""
        m = MapState(capacity=20)
        a = m.reserve(7)
        m.reserve(3)

        m.release(a)
        c = m.reserve(3)
        d = m.reserve(7)

        assert c.offset == 0
        assert d.offset == 10

    def test_reserve_full(self):
        """Test reservation fails when no contiguous slot fits."""
        m = MapState(capacity=10)
        m.reserve(7)

        with pytest.raises(ValueError, match="No free slot"):
            m.reserve(7)

    def test_release_clears_slot(self):
        """Test release zeroes mean and covariance rows and columns."""
        m = MapState(capacity=10)
        a = m.reserve(3)
        b = m.reserve(3)
        m.x[:6] = 1.0
        m.P[:6, :6] = 1.0

        m.release(a)

        np.testing.assert_array_equal(m.x[:3], 0.0)
        np.testing.assert_array_equal(m.P[:3, :], 0.0)
        np.testing.assert_array_equal(m.P[:, :3], 0.0)
        np.testing.assert_array_equal(m.P_block(b), np.ones((3, 3)))
        assert not m.is_reserved(a)
        assert m.is_reserved(b)

    def test_release_unreserved(self):
        """Test releasing a free slot raises."""
        m = MapState(capacity=10)

        with pytest.raises(ValueError, match="not reserved"):
            m.release(StateView(0, 3))

    def test_views_share_memory(self):
        """Test mean and covariance accessors return views."""
        m = MapState(capacity=10)
        a = m.reserve(3)
        b = m.reserve(7)

        m.x_view(a)[:] = [1.0, 2.0, 3.0]
        m.P_block(a, b)[0, 0] = 5.0

        np.testing.assert_array_equal(m.x[:3], [1.0, 2.0, 3.0])
        assert m.P[0, 3] == 5.0

    def test_view_outside_capacity(self):
        """Test views beyond the capacity are rejected."""
        m = MapState(capacity=5)

        with pytest.raises(ValueError, match="exceeds map capacity"):
            m.x_view(StateView(3, 3))

    def test_set_block(self):
        """Test set_block writes mean and covariance but keeps cross terms."""
        m = MapState(capacity=10)
        a = m.reserve(3)
        b = m.reserve(3)
        m.P[np.ix_(a.indices(), b.indices())] = 0.5

        m.set_block(b, np.ones(3), 2.0 * np.eye(3))

        np.testing.assert_array_equal(m.x_view(b), np.ones(3))
        np.testing.assert_array_equal(m.P_block(b), 2.0 * np.eye(3))
        np.testing.assert_array_equal(m.P_block(a, b), 0.5 * np.ones((3, 3)))

    def test_set_block_shape(self):
        """Test set_block rejects mismatched shapes."""
        m = MapState(capacity=10)
        a = m.reserve(3)

        with pytest.raises(ValueError):
            m.set_block(a, np.ones(4), np.eye(3))
        with pytest.raises(ValueError):
            m.set_block(a, np.ones(3), np.eye(4))

    def test_cross_covariance(self):
        """Test cross-covariance rows follow reserved indices."""
        m = MapState(capacity=12)
        a = m.reserve(3)
        b = m.reserve(7)
        m.P[np.ix_(b.indices(), a.indices())] = 0.1

        full = m.cross_covariance(a)
        others = m.cross_covariance(a, exclude=[a])

        assert full.shape == (10, 3)
        assert others.shape == (7, 3)
        np.testing.assert_array_equal(others, 0.1 * np.ones((7, 3)))
