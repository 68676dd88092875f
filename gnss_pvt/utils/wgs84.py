"""Reference ellipsoids and ECEF/geodetic coordinate utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import IntEnum

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Ellipsoid:
    """Reference ellipsoid constants (defaults to WGS-84)."""

    a: float = 6_378_137.0
    f: float = 1.0 / 298.257223563

    @property
    def b(self) -> float:
        return self.a * (1.0 - self.f)

    @property
    def e2(self) -> float:
        return self.f * (2.0 - self.f)

    @property
    def ep2(self) -> float:
        b = self.b
        return (self.a**2 - b**2) / b**2

    @property
    def inv_f(self) -> float:
        return 1.0 / self.f if self.f > 0.0 else 0.0


class EllipsoidModel(IntEnum):
    """Selectable reference ellipsoids."""

    INTERNATIONAL_1924 = 0
    INTERNATIONAL_1967 = 1
    WGS72 = 2
    GRS80 = 3
    WGS84 = 4


ELLIPSOIDS: dict[EllipsoidModel, Ellipsoid] = {
    EllipsoidModel.INTERNATIONAL_1924: Ellipsoid(a=6_378_388.0, f=1.0 / 297.0),
    EllipsoidModel.INTERNATIONAL_1967: Ellipsoid(a=6_378_160.0, f=1.0 / 298.247),
    EllipsoidModel.WGS72: Ellipsoid(a=6_378_135.0, f=1.0 / 298.26),
    EllipsoidModel.GRS80: Ellipsoid(a=6_378_137.0, f=1.0 / 298.257222101),
    EllipsoidModel.WGS84: Ellipsoid(a=6_378_137.0, f=1.0 / 298.257223563),
}

ELLIPSOID = ELLIPSOIDS[EllipsoidModel.WGS84]


@dataclass(frozen=True)
class GeodeticIteration:
    """Convergence policy of an iterative ECEF to geodetic conversion."""

    tol: float
    max_iter: int


# Height refinement: stop when the height update is below 1e-12 m.
HEIGHT_ITERATION = GeodeticIteration(tol=1e-12, max_iter=100)
# Residual form: stop when the squared P/Z residual norm is below 1e-10.
RESIDUAL_ITERATION = GeodeticIteration(tol=1e-10, max_iter=10)


def lla_to_ecef(
    lat_deg: float,
    lon_deg: float,
    alt_m: float,
    ellipsoid: Ellipsoid = ELLIPSOID,
) -> np.ndarray:
    """Convert geodetic latitude/longitude/altitude to ECEF.

    Args:
        lat_deg: Latitude in degrees.
        lon_deg: Longitude in degrees.
        alt_m: Altitude above the ellipsoid in meters.
        ellipsoid: Reference ellipsoid.

    Returns:
        ECEF position (x, y, z) in meters.
    """

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    cos_lon = np.cos(lon)
    sin_lon = np.sin(lon)

    n = ellipsoid.a / np.sqrt(1.0 - ellipsoid.e2 * sin_lat**2)
    x = (n + alt_m) * cos_lat * cos_lon
    y = (n + alt_m) * cos_lat * sin_lon
    z = (n * (1.0 - ellipsoid.e2) + alt_m) * sin_lat
    return np.array([x, y, z], dtype=float)


def ecef_to_lla(
    x_m: float,
    y_m: float,
    z_m: float,
    model: EllipsoidModel = EllipsoidModel.WGS84,
    iteration: GeodeticIteration = HEIGHT_ITERATION,
) -> tuple[float, float, float]:
    """Convert ECEF to geodetic latitude/longitude/height on a selected ellipsoid.

    Longitude comes straight from atan2(y, x). Latitude and height are refined
    together by re-evaluating the prime-vertical radius of curvature until the
    height update drops below ``iteration.tol``. When the iteration cap is hit
    a warning is logged and the last estimate is returned.

    Returns:
        (lat_deg, lon_deg, height_m)
    """

    ellipsoid = ELLIPSOIDS[EllipsoidModel(model)]
    f = ellipsoid.f
    lon = np.arctan2(y_m, x_m)
    p = float(np.hypot(x_m, y_m))

    if p == 0.0:
        lat = np.pi / 2.0 if z_m >= 0.0 else -np.pi / 2.0
        return (float(np.rad2deg(lat)), float(np.rad2deg(lon)), abs(z_m) - ellipsoid.b)

    ex2 = (2.0 - f) * f / ((1.0 - f) * (1.0 - f))
    c = ellipsoid.a * np.sqrt(1.0 + ex2)
    lat = np.arctan(z_m / (p * (1.0 - (2.0 - f) * f)))

    height = 0.1
    for iterations in range(1, iteration.max_iter + 1):
        old_height = height
        n = c / np.sqrt(1.0 + ex2 * np.cos(lat) ** 2)
        lat = np.arctan(z_m / (p * (1.0 - (2.0 - f) * f * n / (n + height))))
        height = p / np.cos(lat) - n
        if abs(height - old_height) <= iteration.tol:
            break
    else:
        logger.warning(
            "Failed to approximate height with desired precision after %d iterations, h - old_h = %g",
            iterations,
            height - old_height,
        )

    return (float(np.rad2deg(lat)), float(np.rad2deg(lon)), float(height))


def togeod(
    x_m: float,
    y_m: float,
    z_m: float,
    a_m: float = ELLIPSOID.a,
    finv: float = ELLIPSOID.inv_f,
    iteration: GeodeticIteration = RESIDUAL_ITERATION,
) -> tuple[float, float, float]:
    """Geodetic latitude/longitude/height from ECEF on an (a, 1/f) ellipsoid.

    Iterates on the residuals of the distance from the spin axis and of Z.
    Longitude is returned in [0, 360) degrees.

    Returns:
        (lat_deg, lon_deg, height_m)
    """

    esq = 0.0 if finv < 1e-20 else (2.0 - 1.0 / finv) / finv

    p = float(np.hypot(x_m, y_m))
    lon_deg = float(np.rad2deg(np.arctan2(y_m, x_m))) if p > 1e-20 else 0.0
    if lon_deg < 0.0:
        lon_deg += 360.0

    r = float(np.sqrt(p * p + z_m * z_m))
    sin_lat = z_m / r if r > 1e-20 else 0.0
    lat = float(np.arcsin(sin_lat))
    if r < 1e-20:
        return (float(np.rad2deg(lat)), lon_deg, 0.0)

    height = r - a_m * (1.0 - sin_lat * sin_lat / finv) if finv > 0.0 else r - a_m
    one_esq = 1.0 - esq
    for _ in range(iteration.max_iter):
        sin_lat = np.sin(lat)
        cos_lat = np.cos(lat)
        n_lat = a_m / np.sqrt(1.0 - esq * sin_lat * sin_lat)
        d_p = p - (n_lat + height) * cos_lat
        d_z = z_m - (n_lat * one_esq + height) * sin_lat
        height += sin_lat * d_z + cos_lat * d_p
        lat += (cos_lat * d_z - sin_lat * d_p) / (n_lat + height)
        if d_p * d_p + d_z * d_z < iteration.tol:
            break
    else:
        logger.warning(
            "The computation of geodetic coordinates did not converge after %d iterations",
            iteration.max_iter,
        )

    return (float(np.rad2deg(lat)), lon_deg, float(height))


def ecef_to_enu_matrix(lat_deg: float, lon_deg: float) -> np.ndarray:
    """Return rotation matrix from ECEF to ENU at given geodetic coordinates."""

    lat = np.deg2rad(lat_deg)
    lon = np.deg2rad(lon_deg)
    sin_lat = np.sin(lat)
    cos_lat = np.cos(lat)
    sin_lon = np.sin(lon)
    cos_lon = np.cos(lon)

    return np.array(
        [
            [-sin_lon, cos_lon, 0.0],
            [-sin_lat * cos_lon, -sin_lat * sin_lon, cos_lat],
            [cos_lat * cos_lon, cos_lat * sin_lon, sin_lat],
        ],
        dtype=float,
    )


def enu_from_ecef_delta(
    delta_ecef_m: np.ndarray, lat_deg: float, lon_deg: float
) -> np.ndarray:
    """Convert delta ECEF to ENU at given geodetic coordinates."""

    rot = ecef_to_enu_matrix(lat_deg, lon_deg)
    return rot @ np.asarray(delta_ecef_m, dtype=float)
