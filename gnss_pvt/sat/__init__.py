"""Satellite models."""

from gnss_pvt.sat.simple_gps import CircularOrbitEphemeris, SimpleGpsConfig, SimpleGpsConstellation
from gnss_pvt.sat.visibility import visible_ephemerides

__all__ = [
    "CircularOrbitEphemeris",
    "SimpleGpsConfig",
    "SimpleGpsConstellation",
    "visible_ephemerides",
]
