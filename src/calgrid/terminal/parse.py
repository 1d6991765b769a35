# SPDX-License-Identifier: MIT

import re
from typing import Optional

import pendulum
import typer

from calgrid.model.style_options import MaxItemsBehavior
from calgrid.service.bucket import groupby_times, normalize_group_time


def parse_timezone(timezone: Optional[str]) -> Optional[str]:
    if timezone is None:
        return None
    if timezone == "local":
        return timezone
    try:
        pendulum.timezone(timezone)
    except Exception as e:
        raise typer.BadParameter(f"Unknown timezone: {timezone} ({e})")
    return timezone


def parse_first_day(first_day: Optional[str]) -> Optional[int]:
    """
    Parse a first day of the week given as a number (Sunday = 0) or a name.

    Names may be abbreviated to their first three letters.
    """
    if first_day is None:
        return None
    if re.match(r"^[0-6]$", first_day):
        return int(first_day)
    names = ["sun", "mon", "tue", "wed", "thu", "fri", "sat"]
    prefix = first_day.strip().lower()[:3]
    if prefix in names:
        return names.index(prefix)
    raise typer.BadParameter(
        f"First day must be 0-6 or a day name like 'monday', got {first_day}"
    )


def parse_max_items_behavior(behavior: Optional[str]) -> Optional[MaxItemsBehavior]:
    if behavior is None:
        return None
    if behavior == "more" or behavior == "hide":
        return behavior
    raise typer.BadParameter(f"Behavior must be 'more' or 'hide', got {behavior}")


def parse_group_by(group_by: Optional[str]) -> Optional[list[str]]:
    """
    Parse a group-by value: a preset ("hour", "half", "none") or a comma
    separated list of HH:MM(:SS) boundaries.
    """
    if group_by is None:
        return None
    if group_by in ("hour", "half"):
        return groupby_times(group_by)
    if group_by == "none":
        return []
    boundaries = []
    for boundary in group_by.split(","):
        normalized = normalize_group_time(boundary)
        if normalized is None:
            raise typer.BadParameter(f"Invalid group-by time: {boundary.strip()}")
        boundaries.append(normalized["label"])
    return boundaries
