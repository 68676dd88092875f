"""Least-squares GNSS position/velocity/time package."""

from gnss_pvt.config import PvtConfig, SimConfig

__all__ = [
    "PvtConfig",
    "SimConfig",
    "sat",
    "meas",
    "receiver",
    "timing",
    "utils",
]
