# SPDX-License-Identifier: MIT

import pendulum

from calgrid.model.grid_cell import GridCell

# Sunday = 0, matching the first-day-of-week setting
UNTRANSLATED_DAYS = [
    "sunday",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
]

FULL_NAME_SIZE = 99


def week_days_ordered(first_day: int) -> list[int]:
    """Weekday numbers (Sunday = 0) rotated to start at ``first_day``."""
    return [(first_day + offset) % 7 for offset in range(7)]


def week_start(day: pendulum.DateTime, first_day: int) -> pendulum.DateTime:
    """Midnight of the first day of the displayed week containing ``day``."""
    # pendulum's day_of_week: Monday = 0 ... Sunday = 6
    sunday_based = (day.day_of_week + 1) % 7
    return day.start_of("day").subtract(days=(7 + sunday_based - first_day) % 7)


def week_column(day: pendulum.DateTime, first_day: int) -> int:
    """Position (0-6) of ``day`` in a week starting at ``first_day``."""
    sunday_based = (day.day_of_week + 1) % 7
    return (7 + sunday_based - first_day) % 7


def week_header(
    first_day: int,
    name_size: int = 3,
    mini: bool = False,
    show_week_numbers: bool = False,
) -> list[GridCell]:
    """
    Build the row of day names shown above the grid.

    Args:
        first_day: First day of the week (Sunday = 0)
        name_size: Letters to show, or 99 for the full name
        mini: Mini calendars default to one letter
        show_week_numbers: Whether to add the week number column

    Returns:
        List of header cells in display order
    """
    length = name_size if name_size > 0 else (1 if mini else 3)
    row: list[GridCell] = []
    if show_week_numbers:
        row.append(
            {
                "id": "header-week",
                "content": [],
                "more": None,
                "colspan": 1,
                "rowspan": 1,
                "classes": ["days", "week"],
                "date": None,
                "row_kind": "header",
                "column": -1,
                "header": "Week",
            }
        )
    for column, weekday in enumerate(week_days_ordered(first_day)):
        full_name = UNTRANSLATED_DAYS[weekday].capitalize()
        label = full_name if length == FULL_NAME_SIZE else full_name[:length]
        row.append(
            {
                "id": f"header-{UNTRANSLATED_DAYS[weekday]}",
                "content": [],
                "more": None,
                "colspan": 1,
                "rowspan": 1,
                "classes": ["days", UNTRANSLATED_DAYS[weekday]],
                "date": None,
                "row_kind": "header",
                "column": column,
                "header": label,
            }
        )
    return row


def date_week(date: str, first_day: int) -> int:
    """
    Week number of a YYYY-MM-DD date.

    ISO-8601 weeks are used when Monday is the first day. For any other first
    day the count follows the calendar year: a year starting inside ISO week
    52/53 pushes every week forward by one.
    """
    year = int(date[:4])
    day = pendulum.datetime(year, int(date[5:7]), int(date[8:10]), 12, tz="UTC")
    iso_year, week, _ = day.isocalendar()
    if first_day == 1:
        return week

    year_week = pendulum.datetime(year, 1, 1, 12, tz="UTC").isocalendar()[1]

    # Drop the leap week when the date already belongs to next ISO year
    if iso_year > year:
        week = day.subtract(days=7).isocalendar()[1] + 1
    elif iso_year < year:
        week = 0

    if year_week != 1:
        week += 1

    return week


def is_past_month(month: int, current_month: int) -> bool:
    """Whether ``month`` precedes the visible month, wrapping December."""
    if current_month == 1 and month == 12:
        return True
    if current_month == 12 and month == 1:
        return False
    return month < current_month


def is_future_month(month: int, current_month: int) -> bool:
    """Whether ``month`` follows the visible month, wrapping January."""
    if current_month == 12 and month == 1:
        return True
    if current_month == 1 and month == 12:
        return False
    return month > current_month


def day_state_classes(
    date: str,
    today: str,
    month: int,
    current_month: int,
    in_month: bool = True,
) -> list[str]:
    classes = []
    if date == today and in_month:
        classes.append("today")
    if date < today:
        classes.append("past")
    if date > today:
        classes.append("future")
    if is_past_month(month, current_month):
        classes.append("past-month")
    if is_future_month(month, current_month):
        classes.append("future-month")
    return classes
