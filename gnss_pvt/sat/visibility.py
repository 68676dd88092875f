"""Satellite visibility filtering utilities."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from gnss_pvt.models import Ephemeris
from gnss_pvt.utils.angles import elev_az_from_rx_sv


def visible_ephemerides(
    receiver_ecef_m: np.ndarray,
    ephemerides: Iterable[Ephemeris],
    t_s: float,
    elevation_mask_deg: float = 10.0,
) -> dict[int, Ephemeris]:
    """Return ephemerides of satellites above the elevation mask at ``t_s``, keyed by id."""

    visible: dict[int, Ephemeris] = {}
    for eph in ephemerides:
        elev_deg, _ = elev_az_from_rx_sv(receiver_ecef_m, eph.ecef_position(t_s))
        if elev_deg >= elevation_mask_deg:
            visible[eph.sv_id] = eph
    return visible
