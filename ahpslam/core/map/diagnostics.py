"""Consistency diagnostics for the joint covariance."""

import numpy as np
from typing import Any, Dict, List, Optional
from scipy.linalg import eigvalsh

from .state import MapState, StateView


class CovarianceDiagnostics:
    """Checks the reserved part of a map covariance."""

    def __init__(self, symmetry_tolerance: float = 1e-9, eigenvalue_tolerance: float = 1e-9):
        """Initialize diagnostics with tolerances."""
        self.symmetry_tolerance = symmetry_tolerance
        self.eigenvalue_tolerance = eigenvalue_tolerance

    def analyze(
        self,
        map_state: MapState,
        views: Optional[Dict[str, StateView]] = None
    ) -> Dict[str, Any]:
        """Compute diagnostics of the reserved covariance.

        Args:
            map_state: Map to analyze
            views: Optional named slots for per-slot standard deviations

        Returns:
            Dictionary with symmetry error, eigenvalue range and sigmas
        """
        diagnostics: Dict[str, Any] = {}

        indices = map_state.used_indices()
        P = map_state.P[np.ix_(indices, indices)]

        diagnostics["size"] = int(len(indices))
        if len(indices) == 0:
            diagnostics["symmetry_error"] = 0.0
            diagnostics["min_eigenvalue"] = 0.0
            diagnostics["max_eigenvalue"] = 0.0
        else:
            diagnostics["symmetry_error"] = float(np.max(np.abs(P - P.T)))
            eigenvalues = eigvalsh(0.5 * (P + P.T))
            diagnostics["min_eigenvalue"] = float(eigenvalues[0])
            diagnostics["max_eigenvalue"] = float(eigenvalues[-1])

        diagnostics["sigmas"] = self._slot_sigmas(map_state, views or {})

        return diagnostics

    def is_consistent(self, diagnostics: Dict[str, Any]) -> bool:
        """Check symmetry and positive semi-definiteness."""
        scale = max(abs(diagnostics["max_eigenvalue"]), 1.0)
        return (
            diagnostics["symmetry_error"] <= self.symmetry_tolerance * scale
            and diagnostics["min_eigenvalue"] >= -self.eigenvalue_tolerance * scale
        )

    def _slot_sigmas(
        self,
        map_state: MapState,
        views: Dict[str, StateView]
    ) -> Dict[str, List[float]]:
        """Standard deviations of each named slot."""
        sigmas = {}
        for name, view in views.items():
            block = map_state.P_block(view)
            sigmas[name] = np.sqrt(np.maximum(np.diag(block), 0)).tolist()
        return sigmas
