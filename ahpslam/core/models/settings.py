"""Settings for landmark initialization and reparametrization."""

from pydantic import BaseModel, Field


class AHPSettings(BaseModel):
    """Tolerances and priors used by the map-level landmark helpers."""

    min_norm: float = Field(
        default=1e-12,
        gt=0,
        description="Norm below which a direction is treated as degenerate"
    )
    linearity_threshold: float = Field(
        default=0.1,
        gt=0,
        description="Linearity index below which an AHP landmark may become Euclidean"
    )
    default_rho_prior: float = Field(
        default=0.0,
        ge=0,
        description="Inverse-depth prior for bearing-only initialization"
    )
    default_sigma_rho: float = Field(
        default=0.5,
        gt=0,
        description="Standard deviation of the inverse-depth prior"
    )
