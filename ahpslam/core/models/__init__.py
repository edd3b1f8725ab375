"""Data models for AHPSLAM."""

from .frame import Frame
from .settings import AHPSettings

__all__ = [
    "Frame",
    "AHPSettings",
]
