"""Earth rotation correction of satellite positions."""

from __future__ import annotations

import numpy as np

from gnss_pvt.utils.constants import OMEGA_EARTH_DOT


def earth_rotation_matrix(travel_time_s: float) -> np.ndarray:
    """Rotation about the ECEF Z axis by the angle the Earth turns in ``travel_time_s``."""

    omega_tau = OMEGA_EARTH_DOT * travel_time_s
    cos_a = np.cos(omega_tau)
    sin_a = np.sin(omega_tau)
    return np.array(
        [
            [cos_a, sin_a, 0.0],
            [-sin_a, cos_a, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def rotate_satellite(travel_time_s: float, sat_pos_ecef_m: np.ndarray) -> np.ndarray:
    """Return the satellite ECEF position rotated for Earth rotation during signal travel.

    Args:
        travel_time_s: Signal travel time in seconds.
        sat_pos_ecef_m: Satellite ECEF position at transmit time (x, y, z).

    Returns:
        Satellite position expressed in the ECEF frame at receive time.
    """

    return earth_rotation_matrix(travel_time_s) @ np.asarray(sat_pos_ecef_m, dtype=float)
