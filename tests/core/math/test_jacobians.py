"""Tests for Jacobian checking utilities."""

import numpy as np
import pytest

from ahpslam.core.math.jacobians import (
    finite_difference_jacobian,
    check_jacobian,
    JacobianTester,
)


class TestJacobians:
    """Test Jacobian computation utilities."""

    def test_finite_difference_linear(self):
        """Test finite difference for linear function."""
        A = np.array([[1, 2], [3, 4], [5, 6]])

        J = finite_difference_jacobian(lambda x: A @ x, np.array([1.0, 2.0]))

        np.testing.assert_allclose(J, A, atol=1e-6)

    def test_finite_difference_methods(self):
        """Test central differences are the most accurate scheme."""
        def func(x):
            return np.array([x[0]**3 + x[1]])

        x = np.array([2.0, 3.0])
        J_exact = np.array([[12.0, 1.0]])

        errors = {
            method: np.max(np.abs(finite_difference_jacobian(func, x, h=1e-4, method=method) - J_exact))
            for method in ("forward", "backward", "central")
        }

        assert errors["central"] < errors["forward"]
        assert errors["central"] < errors["backward"]

    def test_finite_difference_scalar_function(self):
        """Test finite difference for scalar function."""
        J = finite_difference_jacobian(lambda x: x[0]**3, np.array([2.0]))
        np.testing.assert_allclose(J, [[12.0]], atol=1e-6)

    def test_check_jacobian_correct(self):
        """Test Jacobian checker with correct implementation."""
        def func(x):
            return np.array([x[0]**2, x[0]*x[1]])

        def jacobian(x):
            return np.array([[2*x[0], 0], [x[1], x[0]]])

        is_correct, max_error, _ = check_jacobian(func, jacobian, np.array([1.5, 2.5]))

        assert is_correct
        assert max_error < 1e-6

    def test_check_jacobian_incorrect(self):
        """Test Jacobian checker with incorrect implementation."""
        is_correct, max_error, _ = check_jacobian(
            lambda x: np.array([x[0]**2]),
            lambda x: np.array([[x[0]]]),
            np.array([2.0])
        )

        assert not is_correct
        assert max_error > 1e-3

    def test_check_jacobian_shape_mismatch(self):
        """Test analytic Jacobian of wrong shape is reported."""
        with pytest.raises(ValueError):
            check_jacobian(lambda x: x, lambda x: np.eye(3), np.zeros(2))

    def test_jacobian_tester_class(self):
        """Test JacobianTester over several points."""
        def func(x):
            return np.array([x[0]**2, x[0]*x[1], x[1]**3])

        def jacobian(x):
            return np.array([[2*x[0], 0], [x[1], x[0]], [0, 3*x[1]**2]])

        tester = JacobianTester()
        points = tester.generate_random_test_points(n_dims=2, n_points=5, seed=42)

        assert tester.test_jacobian(func, jacobian, points)

    def test_random_frame_and_ahp(self):
        """Test random operating points are valid."""
        rng = np.random.default_rng(0)
        F = JacobianTester.random_frame(rng)
        a = JacobianTester.random_ahp(rng)

        assert F.shape == (7,)
        assert abs(np.linalg.norm(F[3:]) - 1.0) < 1e-12
        assert a.shape == (7,)
        assert 0.1 <= a[6] <= 1.0

    def test_invalid_finite_difference_method(self):
        """Test error handling for invalid finite difference method."""
        with pytest.raises(ValueError):
            finite_difference_jacobian(lambda x: x**2, np.array([1.0]), method="invalid")
