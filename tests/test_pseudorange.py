import numpy as np
import pytest

from gnss_pvt.meas.pseudorange import SyntheticObservationSource, geometric_range_m, pseudorange_m
from gnss_pvt.sat.simple_gps import CircularOrbitEphemeris, SimpleGpsConfig, SimpleGpsConstellation
from gnss_pvt.utils.constants import SPEED_OF_LIGHT_MPS
from gnss_pvt.utils.wgs84 import lla_to_ecef


def test_geometric_range() -> None:
    receiver = np.array([0.0, 0.0, 0.0])
    sv_pos = np.array([3.0e7, 4.0e7, 0.0])
    assert np.isclose(geometric_range_m(receiver, sv_pos), 5.0e7)


def test_pseudorange_includes_clock_terms() -> None:
    receiver = lla_to_ecef(0.0, 0.0, 0.0)
    eph = CircularOrbitEphemeris(
        sv_id=1,
        week_number=1200,
        radius_m=26_560_000.0,
        eccentricity=0.0,
        inclination_rad=0.0,
        raan_rad=0.0,
        mean_anomaly0_rad=0.0,
    )
    biased = CircularOrbitEphemeris(
        sv_id=1,
        week_number=1200,
        radius_m=26_560_000.0,
        eccentricity=0.0,
        inclination_rad=0.0,
        raan_rad=0.0,
        mean_anomaly0_rad=0.0,
        af0_s=1.0e-6,
    )

    clean = pseudorange_m(receiver, 0.0, eph, 0.1)
    assert clean == pytest.approx(26_560_000.0 - 6_378_137.0, abs=200.0)
    assert pseudorange_m(receiver, 100.0, eph, 0.1) == pytest.approx(clean + 100.0, abs=1e-3)
    assert pseudorange_m(receiver, 0.0, biased, 0.1) == pytest.approx(
        clean - 1.0e-6 * SPEED_OF_LIGHT_MPS, abs=1.0
    )


def test_synthetic_source_is_seed_repeatable() -> None:
    constellation = SimpleGpsConstellation(SimpleGpsConfig(seed=3))
    receiver = lla_to_ecef(41.275, 1.987, 80.0)

    def _source(seed: int) -> SyntheticObservationSource:
        return SyntheticObservationSource(
            ephemerides=constellation.ephemerides,
            receiver_ecef_m=receiver,
            receiver_clk_bias_m=10.0,
            sigma_pr_m=2.0,
            rng=np.random.default_rng(seed),
        )

    first = _source(11).get_observations(1_000.0)
    second = _source(11).get_observations(1_000.0)
    other = _source(12).get_observations(1_000.0)

    assert first == second
    assert set(first) == set(other)
    assert first != other
    assert set(first) == set(_source(11).visible(1_000.0))
    assert all(obs.cn0_dbhz == 45.0 for obs in first.values())
