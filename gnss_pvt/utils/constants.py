"""Physical constants shared by the PVT core."""

SPEED_OF_LIGHT_MPS = 299_792_458.0
# Galileo ICD value of the Earth rotation rate.
OMEGA_EARTH_DOT = 7.2921151467e-5
SECONDS_PER_WEEK = 604_800.0
