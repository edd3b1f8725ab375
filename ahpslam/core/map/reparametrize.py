"""Conversion of AHP landmarks to Euclidean points inside the map."""

import logging
import numpy as np

from ..errors import InvalidStateError
from ..landmarks.landmark import AHPLandmark, EuclideanLandmark
from ..models.settings import AHPSettings

logger = logging.getLogger(__name__)


def needs_reparametrization(
    landmark: AHPLandmark,
    sensor_position: np.ndarray,
    settings: AHPSettings
) -> bool:
    """Check whether the landmark is linear enough to become Euclidean.

    Points at infinity never qualify. The caller decides whether to act.
    """
    if landmark.state[6] <= 0:
        return False
    index = landmark.linearity_index(sensor_position, min_norm=settings.min_norm)
    return index < settings.linearity_threshold


def reparametrize_to_euclidean(landmark: AHPLandmark) -> EuclideanLandmark:
    """Replace an AHP landmark by a Euclidean one in the same map.

    Mean p = p0 + m / rho, covariance J P J^T and cross-covariances
    P_r J^T, with J the 3x7 Jacobian of the conversion. The AHP slot is
    released and the returned landmark keeps the same id.

    Raises:
        InvalidStateError: if the landmark is a point at infinity
    """
    map_state = landmark.map_state
    old_view = landmark.view
    if old_view is None:
        raise InvalidStateError(f"Landmark {landmark.id} has been released from the map")

    p, EUC_ahp = landmark.to_euclidean_with_jacobian()
    cov = EUC_ahp @ landmark.covariance @ EUC_ahp.T

    others = np.setdiff1d(map_state.used_indices(), old_view.indices())
    P_rl = map_state.cross_covariance(old_view, exclude=[old_view]) @ EUC_ahp.T

    landmark.release()
    euclidean = EuclideanLandmark(map_state, landmark_id=landmark.id)
    map_state.set_block(euclidean.view, p, cov)

    if len(others) > 0:
        new_indices = euclidean.view.indices()
        map_state.P[np.ix_(others, new_indices)] = P_rl
        map_state.P[np.ix_(new_indices, others)] = P_rl.T

    logger.info(
        f"Reparametrized landmark {landmark.id} from AHP [{old_view.offset}, {old_view.end}) "
        f"to Euclidean [{euclidean.view.offset}, {euclidean.view.end})"
    )
    return euclidean
