"""Topocentric geometry for GNSS line-of-sight vectors."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from gnss_pvt.utils.wgs84 import enu_from_ecef_delta, togeod


@dataclass(frozen=True)
class Topocentric:
    """Direction and length of a vector seen from a point on the Earth."""

    az_deg: float
    elev_deg: float
    range_m: float


def topocent(origin_ecef_m: np.ndarray, delta_ecef_m: np.ndarray) -> Topocentric:
    """Transform ``delta_ecef_m`` into the topocentric frame with origin ``origin_ecef_m``.

    Azimuth is measured clockwise from north in [0, 360) degrees, elevation
    above the local horizontal. A vector with no horizontal component points
    straight up: azimuth 0, elevation 90.
    """

    lat_deg, lon_deg, _ = togeod(*np.asarray(origin_ecef_m, dtype=float)[:3])
    delta = np.asarray(delta_ecef_m, dtype=float)
    east, north, up = enu_from_ecef_delta(delta, lat_deg, lon_deg)
    horiz = float(np.hypot(east, north))
    if horiz < 1e-20:
        az = 0.0
        elev = 90.0
    else:
        az = float(np.rad2deg(np.arctan2(east, north)))
        elev = float(np.rad2deg(np.arctan2(up, horiz)))
    if az < 0.0:
        az += 360.0
    return Topocentric(az_deg=az, elev_deg=elev, range_m=float(np.linalg.norm(delta)))


def elev_az_from_rx_sv(pos_rx: np.ndarray, pos_sv: np.ndarray) -> tuple[float, float]:
    """Compute elevation and azimuth (deg) from receiver to satellite."""

    topo = topocent(pos_rx, np.asarray(pos_sv, dtype=float) - np.asarray(pos_rx, dtype=float))
    return topo.elev_deg, topo.az_deg
