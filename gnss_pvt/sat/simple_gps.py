"""Simplified Keplerian constellation producing broadcast-style ephemerides."""

from __future__ import annotations

from dataclasses import dataclass
from math import ceil

import numpy as np

from gnss_pvt.models import Ephemeris
from gnss_pvt.utils.constants import OMEGA_EARTH_DOT

MU_EARTH = 3.986004418e14
# Relativistic clock correction constant F = -2 sqrt(mu) / c^2 [s/m^(1/2)].
RELATIVISTIC_F = -4.442807633e-10


@dataclass(frozen=True)
class SimpleGpsConfig:
    """Configuration for the simplified constellation."""

    num_sats: int = 24
    num_planes: int = 6
    radius_m: float = 29_600_000.0
    inclination_deg: float = 56.0
    eccentricity: float = 0.0
    week_number: int = 1200
    seed: int | None = 0
    clock_bias_sigma_s: float = 50e-9
    clock_drift_sigma_sps: float = 1e-10
    enable_clock: bool = True


def _rot_z(angle_rad: float) -> np.ndarray:
    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    return np.array(
        [
            [cos_a, -sin_a, 0.0],
            [sin_a, cos_a, 0.0],
            [0.0, 0.0, 1.0],
        ],
        dtype=float,
    )


def _rot_x(angle_rad: float) -> np.ndarray:
    cos_a = np.cos(angle_rad)
    sin_a = np.sin(angle_rad)
    return np.array(
        [
            [1.0, 0.0, 0.0],
            [0.0, cos_a, -sin_a],
            [0.0, sin_a, cos_a],
        ],
        dtype=float,
    )


def eccentric_anomaly(mean_anomaly_rad: float, eccentricity: float, iterations: int = 10) -> float:
    """Solve Kepler's equation M = E - e sin(E) by fixed-point iteration."""

    ecc_anom = mean_anomaly_rad
    for _ in range(iterations):
        ecc_anom = mean_anomaly_rad + eccentricity * np.sin(ecc_anom)
    return float(ecc_anom)


@dataclass(frozen=True)
class CircularOrbitEphemeris(Ephemeris):
    """Ephemeris of one satellite on a (near) circular Keplerian orbit.

    Times are seconds of the week; the clock polynomial is referenced to t=0.
    """

    sv_id: int
    week_number: int
    radius_m: float
    eccentricity: float
    inclination_rad: float
    raan_rad: float
    mean_anomaly0_rad: float
    af0_s: float = 0.0
    af1_sps: float = 0.0

    @property
    def mean_motion(self) -> float:
        return float(np.sqrt(MU_EARTH / self.radius_m**3))

    def _eccentric_anomaly(self, t_s: float) -> float:
        return eccentric_anomaly(self.mean_motion * t_s + self.mean_anomaly0_rad, self.eccentricity)

    def clock_drift(self, transmit_time_s: float) -> float:
        return self.af0_s + self.af1_sps * transmit_time_s

    def relativistic_correction(self, transmit_time_s: float) -> float:
        ecc_anom = self._eccentric_anomaly(transmit_time_s)
        return RELATIVISTIC_F * self.eccentricity * np.sqrt(self.radius_m) * np.sin(ecc_anom)

    def ecef_position(self, transmit_time_s: float) -> np.ndarray:
        ecc_anom = self._eccentric_anomaly(transmit_time_s)
        e = self.eccentricity
        r_orb = np.array(
            [
                self.radius_m * (np.cos(ecc_anom) - e),
                self.radius_m * np.sqrt(1.0 - e * e) * np.sin(ecc_anom),
                0.0,
            ],
            dtype=float,
        )
        r_eci = _rot_z(self.raan_rad) @ _rot_x(self.inclination_rad) @ r_orb
        return _rot_z(-OMEGA_EARTH_DOT * transmit_time_s) @ r_eci


class SimpleGpsConstellation:
    """Deterministic constellation of evenly phased orbital planes."""

    def __init__(self, config: SimpleGpsConfig | None = None) -> None:
        self.config = config or SimpleGpsConfig()
        self._rng = np.random.default_rng(self.config.seed)
        num_sats = self.config.num_sats
        num_planes = max(1, min(self.config.num_planes, num_sats))
        plane_raan = np.linspace(0.0, 2.0 * np.pi, num_planes, endpoint=False)
        plane_offsets = self._rng.uniform(0.0, 2.0 * np.pi, size=num_planes)
        sats_per_plane = ceil(num_sats / num_planes)

        if self.config.enable_clock:
            clk_bias = self._rng.normal(0.0, self.config.clock_bias_sigma_s, size=num_sats)
            clk_drift = self._rng.normal(0.0, self.config.clock_drift_sigma_sps, size=num_sats)
        else:
            clk_bias = np.zeros(num_sats)
            clk_drift = np.zeros(num_sats)

        self.ephemerides: list[CircularOrbitEphemeris] = []
        for idx in range(num_sats):
            plane = idx % num_planes
            self.ephemerides.append(
                CircularOrbitEphemeris(
                    sv_id=idx + 1,
                    week_number=self.config.week_number,
                    radius_m=self.config.radius_m,
                    eccentricity=self.config.eccentricity,
                    inclination_rad=float(np.deg2rad(self.config.inclination_deg)),
                    raan_rad=float(plane_raan[plane]),
                    mean_anomaly0_rad=float(
                        2.0 * np.pi * (idx // num_planes) / sats_per_plane + plane_offsets[plane]
                    ),
                    af0_s=float(clk_bias[idx]),
                    af1_sps=float(clk_drift[idx]),
                )
            )

    def ephemeris_map(self) -> dict[int, CircularOrbitEphemeris]:
        """Return ephemerides keyed by satellite id."""

        return {eph.sv_id: eph for eph in self.ephemerides}
