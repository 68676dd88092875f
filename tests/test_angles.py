import numpy as np
import pytest

from gnss_pvt.utils.angles import elev_az_from_rx_sv, topocent
from gnss_pvt.utils.wgs84 import ecef_to_enu_matrix, lla_to_ecef


def test_topocent_straight_up_at_equator_is_exactly_overhead() -> None:
    origin = lla_to_ecef(0.0, 0.0, 0.0)
    topo = topocent(origin, np.array([20_000_000.0, 0.0, 0.0]))

    assert topo.elev_deg == 90.0
    assert topo.az_deg == 0.0
    assert topo.range_m == pytest.approx(20_000_000.0)


@pytest.mark.parametrize("lat_deg, lon_deg", [(41.275, 1.987), (-33.9, 151.2), (60.0, -150.0)])
def test_topocent_along_ellipsoid_normal_is_overhead(lat_deg: float, lon_deg: float) -> None:
    origin = lla_to_ecef(lat_deg, lon_deg, 50.0)
    up = ecef_to_enu_matrix(lat_deg, lon_deg)[2]
    topo = topocent(origin, 1_000.0 * up)

    assert topo.elev_deg == pytest.approx(90.0, abs=1e-7)
    assert topo.range_m == pytest.approx(1_000.0)


def test_topocent_cardinal_directions() -> None:
    lat_deg, lon_deg = 45.0, 10.0
    origin = lla_to_ecef(lat_deg, lon_deg, 0.0)
    east, north, _ = ecef_to_enu_matrix(lat_deg, lon_deg)

    north_topo = topocent(origin, 500.0 * north)
    east_topo = topocent(origin, 500.0 * east)
    west_topo = topocent(origin, -500.0 * east)

    assert north_topo.az_deg == pytest.approx(0.0, abs=1e-7) or north_topo.az_deg == pytest.approx(360.0)
    assert north_topo.elev_deg == pytest.approx(0.0, abs=1e-7)
    assert east_topo.az_deg == pytest.approx(90.0)
    assert west_topo.az_deg == pytest.approx(270.0)


def test_elevation_overhead() -> None:
    pos_rx = lla_to_ecef(0.0, 0.0, 0.0)
    pos_sv = lla_to_ecef(0.0, 0.0, 20_200_000.0)

    elev_deg, az_deg = elev_az_from_rx_sv(pos_rx, pos_sv)

    assert elev_deg > 89.9
    assert 0.0 <= az_deg < 360.0
