"""Per-epoch least-squares PVT orchestration.

Runtime-facing driver that:
  * evaluates each satellite at its clock-corrected transmit time
  * assembles the satellite-position matrix, observation vector and weights
  * runs the least-squares solver and rejects erratic (too high) fixes
  * computes DOPs, appends the binary dump and drives the moving average

An ``LsPvt`` instance owns mutable cross-epoch state (moving-average history,
dump file, last-solution fields) that is updated in place, so it must be
driven by a single caller, one epoch at a time.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from types import TracebackType
from typing import Mapping

import numpy as np

from gnss_pvt.config import PvtConfig
from gnss_pvt.logger import PvtDumpWriter
from gnss_pvt.models import DopMetrics, Ephemeris, GeodeticPosition, Observation, UtcModel
from gnss_pvt.receiver.dop import compute_dops
from gnss_pvt.receiver.solver import Solution, wls_solve
from gnss_pvt.timing.gst import LeapSecondUtcModel, galileo_system_time, utc_calendar_time
from gnss_pvt.utils.constants import SPEED_OF_LIGHT_MPS
from gnss_pvt.utils.wgs84 import ecef_to_lla

logger = logging.getLogger(__name__)


@dataclass
class VisibleSatellites:
    """Per-channel geometry of the satellites used in the last epoch."""

    sv_ids: np.ndarray
    az_deg: np.ndarray
    elev_deg: np.ndarray
    range_m: np.ndarray
    cn0_dbhz: np.ndarray

    @classmethod
    def empty(cls, n_channels: int) -> VisibleSatellites:
        return cls(
            sv_ids=np.zeros(n_channels, dtype=int),
            az_deg=np.zeros(n_channels, dtype=float),
            elev_deg=np.zeros(n_channels, dtype=float),
            range_m=np.zeros(n_channels, dtype=float),
            cn0_dbhz=np.zeros(n_channels, dtype=float),
        )


class LsPvt:
    """Least-squares PVT solver session."""

    def __init__(
        self,
        n_channels: int,
        dump_filename: str | Path = "./pvt.dat",
        dump_enabled: bool = False,
        config: PvtConfig | None = None,
        utc_model: UtcModel | None = None,
    ) -> None:
        if n_channels < 1:
            raise ValueError("At least one channel is required.")
        self.n_channels = int(n_channels)
        self.config = config or PvtConfig()
        if self.config.averaging_depth < 1:
            raise ValueError("Averaging depth must be at least 1.")
        self.utc_model = utc_model or LeapSecondUtcModel()
        self.dump_filename = Path(dump_filename)
        self.dump_enabled = bool(dump_enabled)
        self._dump: PvtDumpWriter | None = PvtDumpWriter(self.dump_filename) if self.dump_enabled else None
        self._history: deque[GeodeticPosition] = deque(maxlen=self.config.averaging_depth)

        # Last-epoch results.
        self.valid_position = False
        self.averaging_enabled = False
        self.valid_observations = 0
        self.position = np.zeros(4, dtype=float)
        self.geodetic = GeodeticPosition(0.0, 0.0, 0.0)
        self.averaged = GeodeticPosition(0.0, 0.0, 0.0)
        self.dop = DopMetrics.unavailable()
        self.utc_time: datetime | None = None
        self.visible = VisibleSatellites.empty(self.n_channels)
        self.last_solution: Solution | None = None

    @property
    def averaging_depth(self) -> int:
        return int(self._history.maxlen or 0)

    @property
    def history(self) -> list[GeodeticPosition]:
        """Buffered raw fixes, oldest first."""

        return list(self._history)

    @property
    def pos_ecef_m(self) -> np.ndarray:
        return self.position[:3]

    @property
    def clk_bias_m(self) -> float:
        return float(self.position[3])

    def set_averaging_depth(self, depth: int) -> None:
        """Resize the moving-average window, keeping the most recent fixes."""

        if depth < 1:
            raise ValueError("Averaging depth must be at least 1.")
        self._history = deque(self._history, maxlen=int(depth))

    def attempt_fix(
        self,
        observations: Mapping[int, Observation],
        ephemerides: Mapping[int, Ephemeris],
        epoch_time_s: float,
        averaging_enabled: bool = False,
    ) -> bool:
        """Try to compute a fix for one epoch.

        Args:
            observations: Pseudorange observations keyed by satellite id.
            ephemerides: Ephemeris models keyed by satellite id.
            epoch_time_s: Receive time (time of week, seconds).
            averaging_enabled: Smooth the geodetic fix with the moving average.

        Returns:
            True when the (averaged, if requested) fix is usable.
        """

        self.averaging_enabled = bool(averaging_enabled)
        self.valid_position = False

        sv_ids = sorted(observations)
        num_obs = len(sv_ids)
        if num_obs > self.n_channels:
            logger.warning(
                "%d observations exceed the %d configured channels; visibility is truncated",
                num_obs,
                self.n_channels,
            )

        weights = np.eye(num_obs)
        obs = np.zeros(num_obs, dtype=float)
        sat_pos = np.zeros((3, num_obs), dtype=float)
        self.visible = VisibleSatellites.empty(self.n_channels)

        valid_rows: list[int] = []
        last_ephemeris: Ephemeris | None = None
        for row, sv_id in enumerate(sv_ids):
            observation = observations[sv_id]
            ephemeris = ephemerides.get(sv_id)
            if ephemeris is None:
                weights[row, row] = 0.0
                # Placeholder keeps the solver's range normalization finite.
                obs[row] = 1.0
                logger.debug("No ephemeris data for SV %s", sv_id)
                continue

            tx_time = epoch_time_s - observation.pseudorange_m / SPEED_OF_LIGHT_MPS
            sv_clock_bias_s = ephemeris.clock_drift(tx_time) + ephemeris.relativistic_correction(tx_time)
            tx_time_corrected = tx_time - sv_clock_bias_s
            sv_pos = np.asarray(ephemeris.ecef_position(tx_time_corrected), dtype=float)
            corrected_pr = observation.pseudorange_m + sv_clock_bias_s * SPEED_OF_LIGHT_MPS
            if not (np.isfinite(corrected_pr) and np.all(np.isfinite(sv_pos))):
                weights[row, row] = 0.0
                obs[row] = 1.0
                logger.debug("Non-finite pseudorange or position for SV %s, row excluded", sv_id)
                continue

            weights[row, row] = 1.0
            sat_pos[:, row] = sv_pos
            obs[row] = corrected_pr

            slot = len(valid_rows)
            if slot < self.n_channels:
                self.visible.sv_ids[slot] = ephemeris.sv_id
                self.visible.cn0_dbhz[slot] = observation.cn0_dbhz
            valid_rows.append(row)
            last_ephemeris = ephemeris
            logger.debug(
                "ECEF satellite SV ID=%s X=%.3f [m] Y=%.3f [m] Z=%.3f [m] PR_obs=%.3f [m]",
                ephemeris.sv_id,
                sat_pos[0, row],
                sat_pos[1, row],
                sat_pos[2, row],
                obs[row],
            )

        self.valid_observations = len(valid_rows)
        logger.debug("PVT: valid observations=%d", self.valid_observations)
        if last_ephemeris is not None:
            self._update_utc_time(last_ephemeris.week_number, epoch_time_s)

        if self.valid_observations < self.config.min_valid_observations:
            self.dop = DopMetrics.unavailable()
            return False

        try:
            solution = wls_solve(
                sat_pos,
                obs,
                weights,
                max_iter=self.config.max_iterations,
                tol_m=self.config.convergence_tol_m,
            )
        except np.linalg.LinAlgError as exc:
            logger.warning("Least squares solution failed at TOW=%s: %s", epoch_time_s, exc)
            self.dop = DopMetrics.unavailable()
            return False
        self.last_solution = solution
        self.position = solution.position.copy()
        for slot, row in enumerate(valid_rows[: self.n_channels]):
            self.visible.az_deg[slot] = solution.az_deg[row]
            self.visible.elev_deg[slot] = solution.elev_deg[row]
            self.visible.range_m[slot] = solution.range_m[row]
        logger.debug("Position at TOW=%s in ECEF (X,Y,Z) = %s", epoch_time_s, self.position)

        lat_deg, lon_deg, height_m = ecef_to_lla(*self.position[:3], model=self.config.ellipsoid)
        self.geodetic = GeodeticPosition(lat_deg, lon_deg, height_m)
        if height_m > self.config.max_height_m:
            logger.warning("Erratic PVT solution rejected: height %.1f m", height_m)
            self.dop = DopMetrics.unavailable()
            return False
        logger.debug(
            "Position at %s is Lat = %.9f [deg], Long = %.9f [deg], Height= %.3f [m]",
            self.utc_time,
            lat_deg,
            lon_deg,
            height_m,
        )

        self.dop = compute_dops(solution.covariance, lat_deg, lon_deg)

        if self._dump is not None:
            self._dump.write(epoch_time_s, self.position, lat_deg, lon_deg, height_m)

        if not averaging_enabled:
            self.valid_position = True
            return True
        return self._update_average()

    def _update_average(self) -> bool:
        self._history.append(self.geodetic)
        if len(self._history) < self.averaging_depth:
            self.averaged = self.geodetic
            return False
        mean = np.mean([fix.as_array() for fix in self._history], axis=0)
        self.averaged = GeodeticPosition(float(mean[0]), float(mean[1]), float(mean[2]))
        self.valid_position = True
        return True

    def _update_utc_time(self, week_number: int, epoch_time_s: float) -> None:
        gst = galileo_system_time(week_number, epoch_time_s)
        utc = self.utc_model.system_time_to_utc(gst, week_number)
        self.utc_time = utc_calendar_time(utc)

    def close(self) -> None:
        """Close the dump file; safe to call more than once."""

        if self._dump is not None:
            self._dump.close()

    def __enter__(self) -> LsPvt:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
