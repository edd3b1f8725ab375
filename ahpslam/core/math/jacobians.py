"""Numerical Jacobian utilities for checking analytic derivatives."""

import logging
import numpy as np
from typing import Callable, List, Optional, Tuple

from .quaternions import quat_normalize

logger = logging.getLogger(__name__)


# Step offsets (lower, upper) in units of h
_SCHEMES = {
    "forward": (0.0, 1.0),
    "backward": (-1.0, 0.0),
    "central": (-1.0, 1.0),
}


def finite_difference_jacobian(
    func: Callable[[np.ndarray], np.ndarray],
    x: np.ndarray,
    h: float = 1e-6,
    method: str = "central"
) -> np.ndarray:
    """Numerical Jacobian of func at x, one column per input component.

    Args:
        func: Vector function of a vector
        x: Operating point
        h: Step size
        method: "forward", "backward" or "central"

    Returns:
        Matrix J with J[i, j] = d func_i / d x_j
    """
    if method not in _SCHEMES:
        raise ValueError(f"Unknown finite difference method: {method}")
    lo, hi = _SCHEMES[method]

    x = np.atleast_1d(np.asarray(x, dtype=float))
    f0 = np.atleast_1d(func(x))
    J = np.zeros((len(f0), len(x)))

    def evaluate(j: int, offset: float) -> np.ndarray:
        if offset == 0.0:
            return f0
        x_step = x.copy()
        x_step[j] += offset * h
        return np.atleast_1d(func(x_step))

    for j in range(len(x)):
        J[:, j] = (evaluate(j, hi) - evaluate(j, lo)) / ((hi - lo) * h)

    return J


def check_jacobian(
    func: Callable[[np.ndarray], np.ndarray],
    jacobian_func: Callable[[np.ndarray], np.ndarray],
    x: np.ndarray,
    h: float = 1e-6,
    atol: float = 1e-7,
    rtol: float = 1e-5
) -> Tuple[bool, float, np.ndarray]:
    """Check analytic Jacobian against central finite differences.

    Args:
        func: Function whose derivative is checked
        jacobian_func: Function that computes the analytic Jacobian
        x: Operating point
        h: Step size for finite differences
        atol: Absolute tolerance
        rtol: Relative tolerance

    Returns:
        Tuple of (is_correct, max_relative_error, error_matrix)
    """
    x = np.asarray(x, dtype=float)
    J_analytic = np.atleast_2d(jacobian_func(x))
    J_numeric = finite_difference_jacobian(func, x, h)

    if J_analytic.shape != J_numeric.shape:
        raise ValueError(
            f"Analytic Jacobian shape {J_analytic.shape} != numeric shape {J_numeric.shape}"
        )

    error = np.abs(J_analytic - J_numeric)
    scale = max(np.max(np.abs(J_numeric)), 1.0)
    max_rel_error = float(np.max(error) / scale)

    is_correct = np.allclose(J_analytic, J_numeric, atol=atol + rtol * scale, rtol=rtol)

    return is_correct, max_rel_error, error


class JacobianTester:
    """Checks analytic Jacobians at many operating points."""

    def __init__(self, atol: float = 1e-7, rtol: float = 1e-5, h: float = 1e-6):
        """Initialize tester with tolerances and finite difference step."""
        self.atol = atol
        self.rtol = rtol
        self.h = h

    def test_jacobian(
        self,
        func: Callable[[np.ndarray], np.ndarray],
        jacobian_func: Callable[[np.ndarray], np.ndarray],
        test_points: List[np.ndarray]
    ) -> bool:
        """Test Jacobian at multiple points.

        Returns:
            True if the Jacobian matches at all points
        """
        all_passed = True

        for i, x in enumerate(test_points):
            is_correct, max_error, _ = check_jacobian(
                func, jacobian_func, x, h=self.h, atol=self.atol, rtol=self.rtol
            )
            logger.debug(
                f"Test point {i}: {'PASS' if is_correct else 'FAIL'}, max error: {max_error:.2e}"
            )
            all_passed = all_passed and is_correct

        return all_passed

    @staticmethod
    def random_frame(rng: np.random.Generator, scale: float = 1.0) -> np.ndarray:
        """Random frame [t, q] with a unit quaternion."""
        t = scale * rng.standard_normal(3)
        q = quat_normalize(rng.standard_normal(4))
        return np.concatenate([t, q])

    @staticmethod
    def random_ahp(rng: np.random.Generator, scale: float = 1.0) -> np.ndarray:
        """Random AHP point [p0, m, rho] with rho in [0.1, 1]."""
        p0 = scale * rng.standard_normal(3)
        m = rng.standard_normal(3)
        rho = rng.uniform(0.1, 1.0)
        return np.concatenate([p0, m, [rho]])

    def generate_random_test_points(
        self,
        n_dims: int,
        n_points: int = 10,
        scale: float = 1.0,
        seed: Optional[int] = None
    ) -> List[np.ndarray]:
        """Generate random unstructured test points."""
        rng = np.random.default_rng(seed)
        return [scale * rng.standard_normal(n_dims) for _ in range(n_points)]
