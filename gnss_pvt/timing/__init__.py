"""System time handling."""

from gnss_pvt.timing.gst import (
    GST_EPOCH,
    LeapSecondUtcModel,
    galileo_system_time,
    utc_calendar_time,
)

__all__ = [
    "GST_EPOCH",
    "LeapSecondUtcModel",
    "galileo_system_time",
    "utc_calendar_time",
]
