"""Iterative weighted least-squares position/clock solver."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Union

import numpy as np

from gnss_pvt.utils.angles import topocent
from gnss_pvt.utils.constants import SPEED_OF_LIGHT_MPS
from gnss_pvt.utils.rotation import rotate_satellite

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NormalCovariance:
    """Inverse of the normal-equations matrix of the final iteration."""

    matrix: np.ndarray


@dataclass(frozen=True)
class SingularCovariance:
    """Normal equations could not be inverted; uncertainty is unavailable."""

    @property
    def matrix(self) -> np.ndarray:
        return np.zeros((4, 4), dtype=float)


Covariance = Union[NormalCovariance, SingularCovariance]


@dataclass(frozen=True)
class Solution:
    """Receiver ECEF position and clock bias (m) with diagnostics.

    ``az_deg``, ``elev_deg`` and ``range_m`` hold the topocentric geometry of
    each input row evaluated on the last iteration.
    """

    position: np.ndarray
    covariance: Covariance
    iterations: int
    az_deg: np.ndarray = field(default_factory=lambda: np.zeros(0))
    elev_deg: np.ndarray = field(default_factory=lambda: np.zeros(0))
    range_m: np.ndarray = field(default_factory=lambda: np.zeros(0))

    @property
    def pos_ecef_m(self) -> np.ndarray:
        return self.position[:3]

    @property
    def clk_bias_m(self) -> float:
        return float(self.position[3])


def _invert_normal(design: np.ndarray) -> Covariance:
    normal = design.T @ design
    if np.linalg.matrix_rank(normal) < normal.shape[0]:
        return SingularCovariance()
    try:
        return NormalCovariance(matrix=np.linalg.inv(normal))
    except np.linalg.LinAlgError:
        return SingularCovariance()


def wls_solve(
    sat_pos_ecef_m: np.ndarray,
    obs_m: np.ndarray,
    weights: np.ndarray,
    max_iter: int = 10,
    tol_m: float = 1e-4,
) -> Solution:
    """Estimate receiver position and clock bias from corrected pseudoranges.

    The covariance is inv((W A)^T (W A)) of the final design matrix. It equals
    inv(A^T A) when every row carries weight 1, and keeps zero-weight rows
    (placeholders for unusable observations) out of the uncertainty.

    Args:
        sat_pos_ecef_m: Satellite positions at transmit time, shape (3, N).
        obs_m: Pseudoranges corrected for the satellite clock, shape (N,).
        weights: Diagonal weight matrix, shape (N, N).
        max_iter: Iteration cap.
        tol_m: Stop once the norm of the state update drops below this.

    Returns:
        Solution with the (x, y, z, clock bias) state in meters. Results are
        only meaningful for four or more usable rows.
    """

    sat_pos = np.asarray(sat_pos_ecef_m, dtype=float)
    obs = np.asarray(obs_m, dtype=float)
    w = np.asarray(weights, dtype=float)
    num_sats = sat_pos.shape[1]

    pos = np.zeros(4, dtype=float)
    design = np.zeros((num_sats, 4), dtype=float)
    omc = np.zeros(num_sats, dtype=float)
    az = np.zeros(num_sats, dtype=float)
    elev = np.zeros(num_sats, dtype=float)
    dist = np.zeros(num_sats, dtype=float)

    iterations = 0
    for iteration in range(max_iter):
        iterations = iteration + 1
        for i in range(num_sats):
            if iteration == 0:
                rot_x = sat_pos[:, i]
            else:
                travel_time = float(np.linalg.norm(sat_pos[:, i] - pos[:3])) / SPEED_OF_LIGHT_MPS
                rot_x = rotate_satellite(travel_time, sat_pos[:, i])
                topo = topocent(pos[:3], rot_x - pos[:3])
                az[i] = topo.az_deg
                elev[i] = topo.elev_deg
                dist[i] = topo.range_m

            omc[i] = obs[i] - float(np.linalg.norm(rot_x - pos[:3])) - pos[3]
            design[i, :3] = -(rot_x - pos[:3]) / obs[i]
            design[i, 3] = 1.0

        delta, *_ = np.linalg.lstsq(w @ design, w @ omc, rcond=None)
        pos = pos + delta
        if np.linalg.norm(delta) < tol_m:
            break

    logger.debug("Least squares finished after %d iterations: %s", iterations, pos)
    return Solution(
        position=pos,
        covariance=_invert_normal(w @ design),
        iterations=iterations,
        az_deg=az,
        elev_deg=elev,
        range_m=dist,
    )
