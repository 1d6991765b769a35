# SPDX-License-Identifier: MIT

from typing import Callable, Optional, Protocol

import pendulum

from calgrid.model.entity_id import EntityId
from calgrid.model.granularity_type import TimeGranularityType
from calgrid.model.occurrence import EventOccurrence
from calgrid.model.raw_record import DateFieldValue, RawRecord
from calgrid.model.visible_range import VisibleRange
from calgrid.time import (
    DATE_STORAGE_FORMAT,
    TIME_STORAGE_FORMAT,
    last_day,
)

DATE_ID_NAMESPACE = "calendar"

type DayItems = dict[str, dict[str, list[EventOccurrence]]]


class OccurrenceSource(Protocol):
    """Expands a recurring record into concrete occurrences."""

    def get_occurrences(
        self, range_start: pendulum.DateTime, range_end: pendulum.DateTime
    ) -> list[DateFieldValue]: ...


class ListOccurrenceSource:
    """Occurrence source over an already expanded list of intervals."""

    def __init__(self, occurrences: list[DateFieldValue]) -> None:
        self._occurrences = occurrences

    def get_occurrences(
        self, range_start: pendulum.DateTime, range_end: pendulum.DateTime
    ) -> list[DateFieldValue]:
        matching = []
        for occurrence in self._occurrences:
            start = occurrence["start"]
            if start is None:
                continue
            end = occurrence["end"] if occurrence["end"] is not None else start
            if start <= range_end and end >= range_start:
                matching.append(occurrence)
        matching.sort(key=lambda occurrence: occurrence["start"])  # type: ignore[arg-type, return-value]
        return matching


class RenderedIds:
    """Entity ids already emitted during one render pass."""

    def __init__(self) -> None:
        self._ids: set[EntityId] = set()

    def is_entity_already_rendered(self, entity_id: EntityId) -> bool:
        """Return False the first time an id is seen and True afterwards."""
        if entity_id in self._ids:
            return True
        self._ids.add(entity_id)
        return False


def _max_increment_value(increment: int) -> int:
    increment = max(1, increment)
    return 59 - (59 % increment)


def date_is_all_day(
    start: Optional[pendulum.DateTime],
    end: Optional[pendulum.DateTime],
    granularity: TimeGranularityType = "second",
    increment: int = 1,
) -> bool:
    """
    Check whether a wall-clock interval covers a whole day.

    The end may sit on the last increment of the day (e.g. 23:55 with a five
    minute increment) or on 23:59:59, or on midnight.

    Args:
        start: Start of the interval in the display timezone
        end: End of the interval in the display timezone
        granularity: "second", "minute" or "hour"
        increment: The increment the date widget rounds to

    Returns:
        True if the interval covers the entire day
    """
    if start is None or end is None:
        return False
    if granularity not in ("second", "minute", "hour"):
        return False

    max_seconds = _max_increment_value(increment)
    max_minutes = _max_increment_value(increment)

    start_is_midnight = start.hour == 0 and start.minute == 0 and start.second == 0
    end_is_midnight = end.hour == 0 and end.minute == 0 and end.second == 0

    if granularity == "second":
        min_match = start_is_midnight
        max_match = end_is_midnight or (
            end.hour == 23
            and end.minute in (max_minutes, 59)
            and end.second in (max_seconds, 59)
        )
    elif granularity == "minute":
        min_match = start.hour == 0 and start.minute == 0
        max_match = (
            end_is_midnight
            or (end.hour == 23 and end.minute in (max_minutes, 59))
            or (start.hour == 0 and end.hour == 0 and end.minute == 0)
        )
    else:
        min_match = start.hour == 0
        max_match = end_is_midnight or end.hour == 23 or end.hour == 0

    return min_match and max_match


def occurrence_from_record(
    record: RawRecord,
    start: pendulum.DateTime,
    end: pendulum.DateTime,
    delta: int,
    namespace: str = DATE_ID_NAMESPACE,
) -> EventOccurrence:
    """Build the unsplit occurrence for one date field value of a record."""
    date_id = f"{namespace}.{record['id']}.{record['field_name']}.{delta}"
    return {
        "entity_id": record["id"],
        "entity_type": record["entity_type"],
        "title": record["title"],
        "color": record["color"],
        "start": start,
        "end": end,
        "calendar_start": start,
        "calendar_end": end,
        "timezone": record["timezone"],
        "all_day": False,
        "is_multi_day": False,
        "continuation": False,
        "continues": False,
        "date_id": date_id,
        "occurrence_key": date_id,
        "rendered_fields": record.get("rendered_fields", {}),
        "stripe_labels": record.get("stripe_labels", []),
        "stripe_colors": record.get("stripe_colors", []),
    }


def build_rows_for_days(
    event: EventOccurrence,
    visible_range: VisibleRange,
    granularity: TimeGranularityType = "second",
    increment: int = 1,
) -> list[EventOccurrence]:
    """
    Build one occurrence per day covered by a single (start, end) pair.

    The walk is clamped to the visible range and every fragment holds the
    intersection of the event with its day in the display timezone.
    """
    tz = visible_range["timezone"]
    start = event["start"].in_tz(tz)
    end = event["end"].in_tz(tz)
    if end < start:
        end = start

    first = max(start, visible_range["min"].in_tz(tz))
    final = min(end, visible_range["max"].in_tz(tz))
    if first > final:
        return []

    day = first.start_of("day")
    stop = last_day(first, final, tz)
    is_multi_day = stop > day

    rows: list[EventOccurrence] = []
    position = 0
    while day <= stop:
        day_end = day.end_of("day")
        calendar_start = max(start, day)
        calendar_end = min(end, day_end)

        # Point events keep their single instant, anything else needs a
        # non-empty intersection with the day
        if calendar_end > calendar_start or (
            calendar_end == calendar_start and start == end
        ):
            fragment = EventOccurrence(**event)
            fragment["start"] = start
            fragment["end"] = end
            fragment["calendar_start"] = calendar_start
            fragment["calendar_end"] = calendar_end
            fragment["timezone"] = tz
            fragment["all_day"] = date_is_all_day(
                calendar_start, calendar_end, granularity, increment
            )
            fragment["is_multi_day"] = is_multi_day
            fragment["continuation"] = start < day
            fragment["continues"] = end > day_end
            fragment["date_id"] = f"{event['date_id']}.{position}"
            rows.append(fragment)

        day = day.add(days=1)
        position += 1

    return rows


def split_by_day(
    event: EventOccurrence,
    visible_range: VisibleRange,
    source: Optional[OccurrenceSource] = None,
    granularity: TimeGranularityType = "second",
    increment: int = 1,
) -> list[EventOccurrence]:
    """
    Split an event into per-day occurrences inside the visible range.

    Args:
        event: The unsplit occurrence of one date field value
        visible_range: The range being rendered
        source: Recurrence expansion for recurring records
        granularity: Resolution used for the all-day check
        increment: Increment used for the all-day check

    Returns:
        Occurrences ordered by day ascending
    """
    if source is None:
        return build_rows_for_days(event, visible_range, granularity, increment)

    rows: list[EventOccurrence] = []
    occurrences = source.get_occurrences(visible_range["min"], visible_range["max"])
    for index, occurrence in enumerate(occurrences):
        if occurrence["start"] is None:
            continue
        recurring = EventOccurrence(**event)
        recurring["start"] = occurrence["start"]
        recurring["end"] = (
            occurrence["end"] if occurrence["end"] is not None else occurrence["start"]
        )
        recurring["occurrence_key"] = f"{event['occurrence_key']}:{index}"
        rows.extend(
            build_rows_for_days(recurring, visible_range, granularity, increment)
        )

    rows.sort(key=lambda row: row["calendar_start"])
    return rows


def record_occurrence_source(record: RawRecord) -> Optional[OccurrenceSource]:
    occurrences = record.get("occurrences")
    if not occurrences:
        return None
    return ListOccurrenceSource(occurrences)


def collect_occurrences(
    records: list[RawRecord],
    visible_range: VisibleRange,
    rendered_ids: RenderedIds,
    recurrence: Callable[
        [RawRecord], Optional[OccurrenceSource]
    ] = record_occurrence_source,
    granularity: TimeGranularityType = "second",
    increment: int = 1,
) -> list[EventOccurrence]:
    """
    Turn raw records into per-day occurrences for one render pass.

    Records already rendered in this pass and date values without a start
    are skipped. A recurring record is expanded once through its occurrence
    source instead of once per date value.
    """
    occurrences: list[EventOccurrence] = []
    for record in records:
        if rendered_ids.is_entity_already_rendered(record["id"]):
            continue

        source = recurrence(record)
        if source is not None:
            # One expansion under delta 0 covers every date value
            anchor = visible_range["min"]
            event = occurrence_from_record(record, anchor, anchor, 0)
            occurrences.extend(
                split_by_day(event, visible_range, source, granularity, increment)
            )
            continue

        for delta, value in enumerate(record["dates"]):
            if value["start"] is None:
                continue
            end = value["end"] if value["end"] is not None else value["start"]
            event = occurrence_from_record(record, value["start"], end, delta)
            occurrences.extend(
                split_by_day(event, visible_range, None, granularity, increment)
            )

    return occurrences


def group_by_day(occurrences: list[EventOccurrence]) -> DayItems:
    """
    Group occurrences by the date and wall-clock time of their day start.

    Returns:
        Dictionary mapping YYYY-MM-DD to a dictionary mapping HH:mm:ss to the
        occurrences starting then, both levels in ascending key order
    """
    items: DayItems = {}
    for occurrence in occurrences:
        calendar_start = occurrence["calendar_start"].in_tz(occurrence["timezone"])
        date_key = calendar_start.format(DATE_STORAGE_FORMAT)
        time_key = calendar_start.format(TIME_STORAGE_FORMAT)
        items.setdefault(date_key, {}).setdefault(time_key, []).append(occurrence)

    return {
        date_key: dict(sorted(items[date_key].items()))
        for date_key in sorted(items.keys())
    }
