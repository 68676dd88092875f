"""Galileo System Time helpers and a leap-second UTC model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from gnss_pvt.models import UtcModel
from gnss_pvt.utils.constants import SECONDS_PER_WEEK

# 22 August 1999 00:00, start of the Galileo System Time week count.
GST_EPOCH = datetime(1999, 8, 22)


def galileo_system_time(week_number: int, tow_s: float) -> float:
    """Seconds of Galileo System Time since the GST epoch."""

    return week_number * SECONDS_PER_WEEK + tow_s


def utc_calendar_time(utc_s: float) -> datetime:
    """Map UTC seconds counted from the GST epoch onto a calendar instant."""

    return GST_EPOCH + timedelta(seconds=utc_s)


@dataclass(frozen=True)
class LeapSecondUtcModel(UtcModel):
    """UTC conversion with a constant system-time minus UTC offset."""

    delta_t_ls_s: float = 18.0

    def system_time_to_utc(self, system_time_s: float, week_number: int) -> float:
        return system_time_s - self.delta_t_ls_s
