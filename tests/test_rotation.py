import numpy as np
import pytest

from gnss_pvt.utils.constants import OMEGA_EARTH_DOT
from gnss_pvt.utils.rotation import rotate_satellite

SAT_POS = np.array([15_600_000.0, -7_540_000.0, 20_140_000.0])


def test_zero_travel_time_is_identity() -> None:
    assert np.array_equal(rotate_satellite(0.0, SAT_POS), SAT_POS)


def test_rotation_preserves_magnitude_and_z() -> None:
    rotated = rotate_satellite(0.075, SAT_POS)

    assert np.linalg.norm(rotated) == pytest.approx(np.linalg.norm(SAT_POS), rel=1e-14)
    assert rotated[2] == SAT_POS[2]
    assert np.hypot(*rotated[:2]) == pytest.approx(np.hypot(*SAT_POS[:2]), rel=1e-14)


def test_rotation_angle_matches_earth_rate() -> None:
    travel_time = 0.08
    rotated = rotate_satellite(travel_time, SAT_POS)
    angle_before = np.arctan2(SAT_POS[1], SAT_POS[0])
    angle_after = np.arctan2(rotated[1], rotated[0])

    # The satellite is moved back against the Earth's rotation.
    assert angle_before - angle_after == pytest.approx(OMEGA_EARTH_DOT * travel_time, rel=1e-9)
