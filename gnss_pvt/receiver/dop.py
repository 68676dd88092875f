"""Dilution of precision from the least-squares covariance."""

from __future__ import annotations

import numpy as np

from gnss_pvt.models import DopMetrics
from gnss_pvt.receiver.solver import Covariance, SingularCovariance
from gnss_pvt.utils.wgs84 import ecef_to_enu_matrix


def compute_dops(covariance: Covariance, lat_deg: float, lon_deg: float) -> DopMetrics:
    """Rotate the ECEF position covariance into ENU at (lat, lon) and derive DOPs.

    GDOP is taken from the trace of the rotated position block, so it equals
    PDOP. A singular covariance, or any non-finite result, yields
    ``DopMetrics.unavailable()``.
    """

    if isinstance(covariance, SingularCovariance):
        return DopMetrics.unavailable()

    q = np.asarray(covariance.matrix, dtype=float)
    rot = ecef_to_enu_matrix(lat_deg, lon_deg)
    with np.errstate(invalid="raise", over="raise"):
        try:
            q_enu = rot @ q[:3, :3] @ rot.T
            dop = DopMetrics(
                gdop=float(np.sqrt(np.trace(q_enu))),
                pdop=float(np.sqrt(q_enu[0, 0] + q_enu[1, 1] + q_enu[2, 2])),
                hdop=float(np.sqrt(q_enu[0, 0] + q_enu[1, 1])),
                vdop=float(np.sqrt(q_enu[2, 2])),
                tdop=float(np.sqrt(q[3, 3])),
            )
        except FloatingPointError:
            return DopMetrics.unavailable()
    if not np.all(np.isfinite([dop.gdop, dop.pdop, dop.hdop, dop.vdop, dop.tdop])):
        return DopMetrics.unavailable()
    return dop
