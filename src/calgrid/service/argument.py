# SPDX-License-Identifier: MIT

import datetime
import re
from typing import Optional

import pendulum
from pendulum.tz.exceptions import InvalidTimezone

from calgrid.error import CalendarConfigurationError
from calgrid.model.calendar_render import Pager
from calgrid.model.granularity_type import GRANULARITIES, GranularityType
from calgrid.model.visible_range import VisibleRange
from calgrid.service.week import week_start
from calgrid.time import today_str

_YEAR_PATTERN = re.compile(r"^(\d{4})$")
_MONTH_PATTERN = re.compile(r"^(\d{4})-?(\d{2})$")
_WEEK_PATTERN = re.compile(r"^(\d{4})-?W?(\d{2})$")
_DAY_PATTERN = re.compile(r"^(\d{4})-?(\d{2})-?(\d{2})$")


def _invalid(value: str, granularity: str) -> CalendarConfigurationError:
    return CalendarConfigurationError(
        f"'{value}' is not a valid {granularity} date argument"
    )


def check_timezone(timezone: str) -> None:
    """Raise CalendarConfigurationError unless ``timezone`` is "local" or a known zone."""
    if timezone == "local":
        return
    try:
        pendulum.timezone(timezone)
    except (InvalidTimezone, ValueError) as error:
        raise CalendarConfigurationError(f"Unknown timezone '{timezone}'") from error


def _range_start(
    value: str, granularity: GranularityType, timezone: str, first_day: int
) -> pendulum.DateTime:
    if granularity == "year":
        match = _YEAR_PATTERN.match(value)
        if match is None:
            raise _invalid(value, granularity)
        return pendulum.datetime(int(match.group(1)), 1, 1, tz=timezone)

    if granularity == "month":
        match = _MONTH_PATTERN.match(value)
        if match is None or not 1 <= int(match.group(2)) <= 12:
            raise _invalid(value, granularity)
        return pendulum.datetime(
            int(match.group(1)), int(match.group(2)), 1, tz=timezone
        )

    if granularity == "week":
        match = _WEEK_PATTERN.match(value)
        if match is None:
            raise _invalid(value, granularity)
        try:
            monday = datetime.date.fromisocalendar(
                int(match.group(1)), int(match.group(2)), 1
            )
        except ValueError as error:
            raise _invalid(value, granularity) from error
        return week_start(
            pendulum.datetime(monday.year, monday.month, monday.day, tz=timezone),
            first_day,
        )

    match = _DAY_PATTERN.match(value)
    if match is None:
        raise _invalid(value, granularity)
    try:
        return pendulum.datetime(
            int(match.group(1)), int(match.group(2)), int(match.group(3)), tz=timezone
        )
    except ValueError as error:
        raise _invalid(value, granularity) from error


def parse_date_argument(
    value: Optional[str],
    granularity: str,
    timezone: str = "UTC",
    first_day: int = 0,
    today: Optional[str] = None,
) -> VisibleRange:
    """
    Resolve a date argument into the visible range it denotes.

    Args:
        value: YYYY, YYYY-MM (or YYYYMM), YYYYWW (or YYYY-Www) or YYYY-MM-DD
        granularity: "day", "week", "month" or "year"
        timezone: Display timezone
        first_day: First day of the week (Sunday = 0), used for week ranges
        today: Today as YYYY-MM-DD, defaults to the current date in ``timezone``

    Returns:
        The inclusive range from midnight of the first day to the last second
        of the last day

    Raises:
        CalendarConfigurationError: When the argument is missing or malformed
    """
    if granularity not in GRANULARITIES:
        raise CalendarConfigurationError(f"Unknown calendar granularity '{granularity}'")
    if value is None or value.strip() == "":
        raise CalendarConfigurationError("No calendar date argument value was provided")
    check_timezone(timezone)

    start = _range_start(value.strip(), granularity, timezone, first_day)  # type: ignore[arg-type]
    if granularity == "year":
        end = start.end_of("year")
    elif granularity == "month":
        end = start.end_of("month")
    elif granularity == "week":
        end = start.add(days=6).end_of("day")
    else:
        end = start.end_of("day")

    return {
        "min": start,
        "max": end,
        "granularity": granularity,  # type: ignore[typeddict-item]
        "timezone": timezone,
        "today": today if today is not None else today_str(timezone),
    }


def format_date_argument(day: pendulum.DateTime, granularity: str) -> str:
    """Format the date argument selecting the ``granularity`` period of ``day``."""
    if granularity == "year":
        return day.format("YYYY")
    if granularity == "month":
        return day.format("YYYY-MM")
    if granularity == "week":
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}{iso_week:02d}"
    return day.format("YYYY-MM-DD")


def current_date_argument(granularity: str, timezone: str) -> str:
    check_timezone(timezone)
    return format_date_argument(pendulum.now(timezone), granularity)


def pager_arguments(visible_range: VisibleRange, first_day: int = 0) -> Pager:
    """Date arguments of the periods before and after the visible one."""
    granularity = visible_range["granularity"]
    anchor = visible_range["min"]
    if granularity == "year":
        previous, following = anchor.subtract(years=1), anchor.add(years=1)
    elif granularity == "month":
        previous, following = anchor.subtract(months=1), anchor.add(months=1)
    elif granularity == "week":
        # ISO weeks are numbered by their Monday
        anchor = anchor.add(days=(1 - first_day) % 7)
        previous, following = anchor.subtract(weeks=1), anchor.add(weeks=1)
    else:
        previous, following = anchor.subtract(days=1), anchor.add(days=1)

    return {
        "previous": format_date_argument(previous, granularity),
        "next": format_date_argument(following, granularity),
    }
