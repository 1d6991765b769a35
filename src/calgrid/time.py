# SPDX-License-Identifier: MIT

from typing import cast

import pendulum

DATE_STORAGE_FORMAT = "YYYY-MM-DD"
TIME_STORAGE_FORMAT = "HH:mm:ss"


def now_in_tz(tz: str) -> pendulum.DateTime:
    return pendulum.now(tz)


def today_str(tz: str) -> str:
    return now_in_tz(tz).format(DATE_STORAGE_FORMAT)


def datetime_from_str(datetime: str, tz: str = "UTC") -> pendulum.DateTime:
    """Parse an ISO string; naive values are read in ``tz``."""
    return cast(pendulum.DateTime, pendulum.parse(datetime, tz=tz))


def seconds_since_midnight(datetime: pendulum.DateTime) -> int:
    """Wall-clock seconds of the day, independent of the UTC offset."""
    return datetime.hour * 3600 + datetime.minute * 60 + datetime.second


def last_day(
    start: pendulum.DateTime, end: pendulum.DateTime, tz: str
) -> pendulum.DateTime:
    """
    Midnight of the last calendar day an interval occupies in ``tz``.

    An interval ending exactly at midnight does not occupy the day it ends on.
    """
    end_local = end.in_tz(tz)
    if end > start and end_local == end_local.start_of("day"):
        end_local = end_local.subtract(days=1)
    start_day = start.in_tz(tz).start_of("day")
    last = end_local.start_of("day")
    if last < start_day:
        return start_day
    return last


def days_between(start: pendulum.DateTime, end: pendulum.DateTime) -> int:
    """Whole calendar days from the date of ``start`` to the date of ``end``."""
    return end.date().toordinal() - start.date().toordinal()
