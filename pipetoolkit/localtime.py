"""Lock-free conversion of Unix timestamps to broken-down local time."""

from __future__ import annotations

import time
from dataclasses import dataclass

__all__ = [
    "BrokenDownTime",
    "is_leap_year",
    "local_time_init",
    "get_daylight_active",
    "no_locks_localtime",
]

_SECS_MIN = 60
_SECS_HOUR = 3600
_SECS_DAY = 3600 * 24
_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


@dataclass(frozen=True)
class BrokenDownTime:
    """Calendar fields with C ``struct tm`` meaning.

    ``tm_year`` counts from 1900, ``tm_mon`` and ``tm_yday`` from 0,
    ``tm_wday`` from Sunday = 0.
    """

    tm_sec: int
    tm_min: int
    tm_hour: int
    tm_mday: int
    tm_mon: int
    tm_year: int
    tm_wday: int
    tm_yday: int
    tm_isdst: int
    tm_gmtoff: int


class _ZoneState:
    """Timezone offset (seconds west of UTC) and daylight flag captured at init."""

    def __init__(self) -> None:
        self.timezone = 0
        self.daylight = 0


_state = _ZoneState()


def is_leap_year(year: int) -> bool:
    """Gregorian leap-year rule."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def local_time_init() -> None:
    """Capture the process timezone and current daylight-saving state."""
    tzset = getattr(time, "tzset", None)
    if tzset is not None:
        tzset()
    _state.timezone = time.timezone
    _state.daylight = time.localtime().tm_isdst


def get_daylight_active() -> int:
    """Daylight flag captured by :func:`local_time_init` (0 before it runs)."""
    return _state.daylight


def no_locks_localtime(t: float) -> BrokenDownTime:
    """Break ``t`` down using the captured zone; meant for dates from 1970 on."""
    daylight = get_daylight_active()
    t = int(t) - _state.timezone + _SECS_HOUR * daylight
    days, seconds = divmod(t, _SECS_DAY)

    hour, rest = divmod(seconds, _SECS_HOUR)
    minute, second = divmod(rest, _SECS_MIN)
    # 1 Jan 1970 was a Thursday.
    wday = (days + 4) % 7

    year = 1970
    while days >= (year_len := 365 + is_leap_year(year)):
        days -= year_len
        year += 1
    yday = days

    month = 0
    for month, month_len in enumerate(_MONTH_DAYS):
        if month == 1:
            month_len += is_leap_year(year)
        if days < month_len:
            break
        days -= month_len

    return BrokenDownTime(
        tm_sec=second,
        tm_min=minute,
        tm_hour=hour,
        tm_mday=days + 1,
        tm_mon=month,
        tm_year=year - 1900,
        tm_wday=wday,
        tm_yday=yday,
        tm_isdst=daylight,
        tm_gmtoff=-_state.timezone,
    )