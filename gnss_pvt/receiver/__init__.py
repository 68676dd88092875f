"""Receiver algorithms."""

from gnss_pvt.receiver.dop import compute_dops
from gnss_pvt.receiver.ls_pvt import LsPvt, VisibleSatellites
from gnss_pvt.receiver.solver import (
    Covariance,
    NormalCovariance,
    SingularCovariance,
    Solution,
    wls_solve,
)

__all__ = [
    "Covariance",
    "LsPvt",
    "NormalCovariance",
    "SingularCovariance",
    "Solution",
    "VisibleSatellites",
    "compute_dops",
    "wls_solve",
]
