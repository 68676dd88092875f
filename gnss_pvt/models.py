"""Core data models and collaborator interfaces for the PVT core."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class Observation:
    """Pseudorange observation of one tracking channel at a given epoch."""

    pseudorange_m: float
    cn0_dbhz: float


@dataclass(frozen=True)
class GeodeticPosition:
    """Geodetic latitude/longitude (deg) and height above the ellipsoid (m)."""

    lat_deg: float
    lon_deg: float
    height_m: float

    def as_array(self) -> np.ndarray:
        return np.array([self.lat_deg, self.lon_deg, self.height_m], dtype=float)


@dataclass(frozen=True)
class DopMetrics:
    """Dilution of precision metrics; -1 everywhere means not computable."""

    gdop: float
    pdop: float
    hdop: float
    vdop: float
    tdop: float

    @classmethod
    def unavailable(cls) -> DopMetrics:
        return cls(gdop=-1.0, pdop=-1.0, hdop=-1.0, vdop=-1.0, tdop=-1.0)

    @property
    def available(self) -> bool:
        return self.gdop >= 0.0


class Ephemeris(ABC):
    """Broadcast ephemeris model of one satellite."""

    sv_id: int
    week_number: int

    @abstractmethod
    def clock_drift(self, transmit_time_s: float) -> float:
        """Satellite clock correction (s) from the broadcast polynomial."""

    @abstractmethod
    def relativistic_correction(self, transmit_time_s: float) -> float:
        """Relativistic clock correction term (s)."""

    @abstractmethod
    def ecef_position(self, transmit_time_s: float) -> np.ndarray:
        """Satellite ECEF position (m) at the given transmit time."""


class UtcModel(ABC):
    """Interface for system-time to UTC conversion."""

    @abstractmethod
    def system_time_to_utc(self, system_time_s: float, week_number: int) -> float:
        """Return UTC seconds counted from the system time origin."""
