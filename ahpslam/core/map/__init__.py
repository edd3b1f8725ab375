"""Joint map state and covariance tools."""

from .state import MapState, StateView
from .diagnostics import CovarianceDiagnostics

__all__ = [
    "MapState",
    "StateView",
    "CovarianceDiagnostics",
]
