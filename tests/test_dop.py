import numpy as np
import pytest

from gnss_pvt.models import DopMetrics
from gnss_pvt.receiver.dop import compute_dops
from gnss_pvt.receiver.solver import NormalCovariance, SingularCovariance
from gnss_pvt.utils.wgs84 import ecef_to_enu_matrix


def test_identity_covariance_is_rotation_invariant() -> None:
    dop = compute_dops(NormalCovariance(np.eye(4)), 41.275, 1.987)

    assert dop.gdop == pytest.approx(np.sqrt(3.0))
    assert dop.pdop == pytest.approx(np.sqrt(3.0))
    assert dop.hdop == pytest.approx(np.sqrt(2.0))
    assert dop.vdop == pytest.approx(1.0)
    assert dop.tdop == pytest.approx(1.0)
    assert dop.available


def test_vertical_variance_maps_to_vdop() -> None:
    lat_deg, lon_deg = -20.0, 135.0
    rot = ecef_to_enu_matrix(lat_deg, lon_deg)
    q_enu = np.diag([1.0, 4.0, 9.0])
    covariance = np.zeros((4, 4))
    covariance[:3, :3] = rot.T @ q_enu @ rot
    covariance[3, 3] = 2.25

    dop = compute_dops(NormalCovariance(covariance), lat_deg, lon_deg)

    assert dop.hdop == pytest.approx(np.sqrt(5.0))
    assert dop.vdop == pytest.approx(3.0)
    assert dop.pdop == pytest.approx(np.sqrt(14.0))
    assert dop.tdop == pytest.approx(1.5)


def test_singular_covariance_is_not_zero_uncertainty() -> None:
    dop = compute_dops(SingularCovariance(), 0.0, 0.0)

    assert dop == DopMetrics.unavailable()
    assert not dop.available


def test_negative_variance_yields_unavailable() -> None:
    covariance = np.eye(4)
    covariance[3, 3] = -1.0

    assert compute_dops(NormalCovariance(covariance), 0.0, 0.0) == DopMetrics.unavailable()
