"""Measurement models."""

from gnss_pvt.meas.pseudorange import SyntheticObservationSource, geometric_range_m, pseudorange_m

__all__ = [
    "SyntheticObservationSource",
    "geometric_range_m",
    "pseudorange_m",
]
