"""Configuration objects for the PVT core."""

from __future__ import annotations

from dataclasses import dataclass

from gnss_pvt.utils.wgs84 import EllipsoidModel


@dataclass(frozen=True)
class PvtConfig:
    """Tuning constants for the least-squares PVT pipeline."""

    max_iterations: int = 10
    convergence_tol_m: float = 1e-4
    min_valid_observations: int = 4
    max_height_m: float = 50_000.0
    averaging_depth: int = 1
    ellipsoid: EllipsoidModel = EllipsoidModel.WGS84


@dataclass(frozen=True)
class SimConfig:
    """Static-receiver demo defaults."""

    rng_seed: int = 42
    t0_s: float = 345_600.0
    dt: float = 1.0
    num_epochs: int = 60
    rx_lat_deg: float = 41.275
    rx_lon_deg: float = 1.987
    rx_alt_m: float = 80.0
    rx_clk_bias_m: float = 1_500.0
    elev_mask_deg: float = 10.0
    sigma_pr_m: float = 2.0
    n_channels: int = 12
