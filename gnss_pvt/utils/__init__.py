"""Geometry and logging utilities for the PVT core.

NOTE: Keep this package lightweight.
Avoid importing heavy/optional dependencies (matplotlib, ...) at import time.
"""

from gnss_pvt.utils.angles import Topocentric, elev_az_from_rx_sv, topocent
from gnss_pvt.utils.logging import get_logger
from gnss_pvt.utils.rotation import earth_rotation_matrix, rotate_satellite
from gnss_pvt.utils.wgs84 import (
    ELLIPSOIDS,
    Ellipsoid,
    EllipsoidModel,
    GeodeticIteration,
    ecef_to_enu_matrix,
    ecef_to_lla,
    enu_from_ecef_delta,
    lla_to_ecef,
    togeod,
)

__all__ = [
    "ELLIPSOIDS",
    "Ellipsoid",
    "EllipsoidModel",
    "GeodeticIteration",
    "Topocentric",
    "earth_rotation_matrix",
    "ecef_to_enu_matrix",
    "ecef_to_lla",
    "elev_az_from_rx_sv",
    "enu_from_ecef_delta",
    "get_logger",
    "lla_to_ecef",
    "rotate_satellite",
    "togeod",
]
