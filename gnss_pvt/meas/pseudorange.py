"""Pseudorange models and a synthetic observation source."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

import numpy as np

from gnss_pvt.models import Ephemeris, Observation
from gnss_pvt.sat.visibility import visible_ephemerides
from gnss_pvt.utils.constants import SPEED_OF_LIGHT_MPS
from gnss_pvt.utils.rotation import rotate_satellite


def geometric_range_m(receiver_ecef_m: np.ndarray, sv_ecef_m: np.ndarray) -> float:
    """Compute geometric range between receiver and satellite."""

    return float(np.linalg.norm(np.asarray(sv_ecef_m) - np.asarray(receiver_ecef_m)))


def pseudorange_m(
    receiver_ecef_m: np.ndarray,
    receiver_clk_bias_m: float,
    ephemeris: Ephemeris,
    rx_time_s: float,
    iterations: int = 8,
) -> float:
    """Noise-free pseudorange received at ``rx_time_s``.

    Solves for the transmit time, applies the satellite clock and relativistic
    terms, and rotates the satellite for Earth rotation during travel.
    """

    rx = np.asarray(receiver_ecef_m, dtype=float)
    pr = 0.075 * SPEED_OF_LIGHT_MPS
    for _ in range(iterations):
        tx_time = rx_time_s - pr / SPEED_OF_LIGHT_MPS
        sv_clock_bias_s = ephemeris.clock_drift(tx_time) + ephemeris.relativistic_correction(tx_time)
        sat = np.asarray(ephemeris.ecef_position(tx_time - sv_clock_bias_s), dtype=float)
        travel_time = geometric_range_m(rx, sat) / SPEED_OF_LIGHT_MPS
        pr = (
            geometric_range_m(rx, rotate_satellite(travel_time, sat))
            + receiver_clk_bias_m
            - sv_clock_bias_s * SPEED_OF_LIGHT_MPS
        )
    return float(pr)


@dataclass
class SyntheticObservationSource:
    """Generate per-epoch observations of a static receiver."""

    ephemerides: Iterable[Ephemeris]
    receiver_ecef_m: np.ndarray
    receiver_clk_bias_m: float = 0.0
    elevation_mask_deg: float = 10.0
    sigma_pr_m: float = 0.0
    cn0_dbhz: float = 45.0
    rng: np.random.Generator = field(default_factory=np.random.default_rng)

    def __post_init__(self) -> None:
        self.ephemerides = list(self.ephemerides)
        self.receiver_ecef_m = np.asarray(self.receiver_ecef_m, dtype=float)

    def visible(self, t_s: float) -> dict[int, Ephemeris]:
        return visible_ephemerides(
            self.receiver_ecef_m,
            self.ephemerides,
            t_s,
            elevation_mask_deg=self.elevation_mask_deg,
        )

    def get_observations(self, t_s: float) -> dict[int, Observation]:
        """Return observations of the visible satellites keyed by satellite id."""

        observations: dict[int, Observation] = {}
        for sv_id, eph in sorted(self.visible(t_s).items()):
            pr = pseudorange_m(self.receiver_ecef_m, self.receiver_clk_bias_m, eph, t_s)
            if self.sigma_pr_m > 0.0:
                pr += float(self.rng.normal(0.0, self.sigma_pr_m))
            observations[sv_id] = Observation(pseudorange_m=pr, cn0_dbhz=self.cn0_dbhz)
        return observations
