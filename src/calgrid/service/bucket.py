# SPDX-License-Identifier: MIT

import re
from typing import Optional, TypedDict

import pendulum

from calgrid.time import TIME_STORAGE_FORMAT, seconds_since_midnight

_GROUP_TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})(?::(\d{2}))?$")


class NormalizedGroupTime(TypedDict):
    label: str
    seconds: int


def groupby_times(preset: Optional[str]) -> list[str]:
    """
    Expand a group-by preset into its list of bucket boundaries.

    Args:
        preset: "hour", "half", or anything else for no grouping

    Returns:
        List of HH:MM:SS boundaries in ascending order
    """
    times: list[str] = []
    if preset == "hour":
        for hour in range(24):
            times.append(f"{hour:02d}:00:00")
    elif preset == "half":
        for hour in range(24):
            times.append(f"{hour:02d}:00:00")
            times.append(f"{hour:02d}:30:00")
    return times


def parse_custom_groupby_times(custom: Optional[str]) -> list[str]:
    """Split a comma separated list of boundaries, dropping blanks."""
    if custom is None:
        return []
    return [group.strip() for group in custom.split(",") if group.strip() != ""]


def normalize_group_time(group: str) -> Optional[NormalizedGroupTime]:
    """
    Normalize a grouping boundary into seconds since midnight.

    HH:MM is accepted and padded to HH:MM:SS. Anything that is not a valid
    wall-clock time of day yields None.
    """
    match = _GROUP_TIME_PATTERN.match(group.strip())
    if match is None:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    second = int(match.group(3)) if match.group(3) is not None else 0
    if hour > 23 or minute > 59 or second > 59:
        return None

    return {
        "label": f"{hour:02d}:{minute:02d}:{second:02d}",
        "seconds": hour * 3600 + minute * 60 + second,
    }


def normalize_group_times(groups: list[str]) -> list[NormalizedGroupTime]:
    """Normalize, drop invalid boundaries and sort chronologically."""
    normalized = []
    for group in groups:
        candidate = normalize_group_time(group)
        if candidate is not None:
            normalized.append(candidate)
    normalized.sort(key=lambda candidate: candidate["seconds"])
    return normalized


def bucket_floor(
    instant: pendulum.DateTime, boundaries: list[str], timezone: str
) -> str:
    """
    Return the bucket label (HH:MM:SS) an instant falls into.

    The instant is converted to wall-clock time in the display timezone and
    compared as seconds since midnight, so two instants with the same local
    time share a bucket even across a daylight-saving transition.

    Args:
        instant: The event start
        boundaries: Configured bucket boundaries, any order, may be malformed
        timezone: Display timezone

    Returns:
        The last boundary not later than the wall-clock time, the first
        boundary when the time precedes all of them, or the exact wall-clock
        time when no valid boundary is configured
    """
    local = instant.in_tz(timezone)
    exact = local.format(TIME_STORAGE_FORMAT)
    if not boundaries:
        return exact

    normalized = normalize_group_times(boundaries)
    if not normalized:
        return exact

    current_seconds = seconds_since_midnight(local)
    bucket = normalized[0]["label"]
    for candidate in normalized:
        if candidate["seconds"] > current_seconds:
            break
        bucket = candidate["label"]

    return bucket
