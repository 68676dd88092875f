import numpy as np
import pytest

from gnss_pvt.sat.simple_gps import SimpleGpsConfig, SimpleGpsConstellation, eccentric_anomaly
from gnss_pvt.sat.visibility import visible_ephemerides


def test_simple_gps_positions_are_finite_and_on_orbit() -> None:
    constellation = SimpleGpsConstellation(SimpleGpsConfig(num_sats=24, seed=42))
    assert len(constellation.ephemerides) == 24
    speeds = []
    for eph in constellation.ephemerides:
        pos = eph.ecef_position(100.0)
        assert np.all(np.isfinite(pos))
        assert np.linalg.norm(pos) == pytest.approx(29_600_000.0, rel=1e-9)
        speeds.append(float(np.linalg.norm(eph.ecef_position(101.0) - pos)))
    assert all(2_500.0 < speed < 4_500.0 for speed in speeds)


def test_simple_gps_visibility_mask() -> None:
    receiver_ecef = np.array([6_378_137.0, 0.0, 0.0])
    constellation = SimpleGpsConstellation(SimpleGpsConfig(num_sats=24, seed=7))
    visible = visible_ephemerides(receiver_ecef, constellation.ephemerides, 0.0, elevation_mask_deg=10.0)
    assert 4 <= len(visible) <= 14
    assert all(sv_id == eph.sv_id for sv_id, eph in visible.items())


def test_simple_gps_seed_repeatability() -> None:
    constellation_a = SimpleGpsConstellation(SimpleGpsConfig(num_sats=12, seed=123))
    constellation_b = SimpleGpsConstellation(SimpleGpsConfig(num_sats=12, seed=123))
    assert constellation_a.ephemerides == constellation_b.ephemerides


def test_clock_model_and_relativistic_term() -> None:
    circular = SimpleGpsConstellation(SimpleGpsConfig(seed=1)).ephemerides[0]
    eccentric = SimpleGpsConstellation(SimpleGpsConfig(seed=1, eccentricity=0.02)).ephemerides[0]

    assert circular.relativistic_correction(1_000.0) == 0.0
    assert 0.0 < abs(eccentric.relativistic_correction(1_000.0)) < 1e-7
    assert circular.clock_drift(10.0) == pytest.approx(circular.af0_s + 10.0 * circular.af1_sps)


def test_eccentric_anomaly_solves_kepler() -> None:
    mean_anomaly = 1.2
    ecc_anom = eccentric_anomaly(mean_anomaly, 0.05)
    assert ecc_anom - 0.05 * np.sin(ecc_anom) == pytest.approx(mean_anomaly, abs=1e-12)
