# tests/test_split.py
import pendulum

from calgrid.service.argument import parse_date_argument
from calgrid.service.split import (
    ListOccurrenceSource,
    RenderedIds,
    collect_occurrences,
    date_is_all_day,
    group_by_day,
    occurrence_from_record,
    split_by_day,
)

APRIL = parse_date_argument("2025-04", "month", "UTC", 0, today="2025-04-10")


def _event(make_record, start, end, record_id="1"):
    record = make_record(record_id, start, end)
    value = record["dates"][0]
    return occurrence_from_record(record, value["start"], value["end"], 0)


def _dates(fragments):
    return [fragment["calendar_start"].format("YYYY-MM-DD") for fragment in fragments]


def test_six_day_event_splits_into_six_fragments(make_record):
    event = _event(make_record, "2025-04-03T09:00:00", "2025-04-08T17:00:00")

    fragments = split_by_day(event, APRIL)

    assert _dates(fragments) == [
        "2025-04-03",
        "2025-04-04",
        "2025-04-05",
        "2025-04-06",
        "2025-04-07",
        "2025-04-08",
    ]
    assert all(fragment["is_multi_day"] for fragment in fragments)
    assert fragments[0]["continuation"] is False
    assert fragments[0]["continues"] is True
    assert fragments[-1]["continuation"] is True
    assert fragments[-1]["continues"] is False
    assert fragments[1]["calendar_start"] == pendulum.datetime(2025, 4, 4, tz="UTC")
    assert fragments[-1]["calendar_end"] == pendulum.datetime(2025, 4, 8, 17, tz="UTC")


def test_fragments_are_clamped_to_visible_range(make_record):
    event = _event(make_record, "2025-03-30T10:00:00", "2025-04-02T10:00:00")

    fragments = split_by_day(event, APRIL)

    assert _dates(fragments) == ["2025-04-01", "2025-04-02"]
    assert fragments[0]["continuation"] is True
    # true instants are kept
    assert fragments[0]["start"] == pendulum.datetime(2025, 3, 30, 10, tz="UTC")


def test_event_outside_range_yields_nothing(make_record):
    event = _event(make_record, "2025-05-03T10:00:00", "2025-05-03T11:00:00")
    assert split_by_day(event, APRIL) == []


def test_midnight_end_does_not_occupy_next_day(make_record):
    event = _event(make_record, "2025-04-03T00:00:00", "2025-04-05T00:00:00")

    fragments = split_by_day(event, APRIL)

    assert _dates(fragments) == ["2025-04-03", "2025-04-04"]
    assert all(fragment["all_day"] for fragment in fragments)


def test_point_event_yields_one_fragment(make_record):
    event = _event(make_record, "2025-04-10T12:00:00", "2025-04-10T12:00:00")

    fragments = split_by_day(event, APRIL)

    assert len(fragments) == 1
    assert fragments[0]["is_multi_day"] is False
    assert fragments[0]["all_day"] is False


def test_date_id_carries_field_delta_and_position(make_record):
    event = _event(make_record, "2025-04-03T09:00:00", "2025-04-04T10:00:00", "42")

    fragments = split_by_day(event, APRIL)

    assert [fragment["date_id"] for fragment in fragments] == [
        "calendar.42.date.0.0",
        "calendar.42.date.0.1",
    ]
    assert fragments[0]["occurrence_key"] == "calendar.42.date.0"


def test_recurrence_expands_each_occurrence(make_record):
    record = make_record(
        "7",
        "2025-04-01T09:00:00",
        "2025-04-01T10:00:00",
        occurrences=[
            ("2025-04-01T09:00:00", "2025-04-01T10:00:00"),
            ("2025-04-08T09:00:00", "2025-04-08T10:00:00"),
            ("2025-05-06T09:00:00", "2025-05-06T10:00:00"),
        ],
    )

    fragments = collect_occurrences([record], APRIL, RenderedIds())

    assert _dates(fragments) == ["2025-04-01", "2025-04-08"]
    assert [fragment["occurrence_key"] for fragment in fragments] == [
        "calendar.7.date.0:0",
        "calendar.7.date.0:1",
    ]


def test_recurrence_expands_once_per_record(make_record):
    record = make_record(
        "7",
        "2025-04-01T09:00:00",
        "2025-04-01T10:00:00",
        occurrences=[("2025-04-02T09:00:00", "2025-04-02T10:00:00")],
    )
    record["dates"].append(dict(record["dates"][0]))

    fragments = collect_occurrences([record], APRIL, RenderedIds())

    assert _dates(fragments) == ["2025-04-02"]
    assert fragments[0]["occurrence_key"] == "calendar.7.date.0:0"


def test_recurrence_without_date_values(make_record):
    record = make_record(
        "7",
        None,
        occurrences=[("2025-04-02T09:00:00", "2025-04-02T10:00:00")],
    )
    record["dates"] = []

    fragments = collect_occurrences([record], APRIL, RenderedIds())

    assert _dates(fragments) == ["2025-04-02"]
    assert fragments[0]["start"] == pendulum.datetime(2025, 4, 2, 9, tz="UTC")


def test_list_occurrence_source_filters_and_sorts():
    later = {
        "start": pendulum.datetime(2025, 4, 20, tz="UTC"),
        "end": pendulum.datetime(2025, 4, 21, tz="UTC"),
    }
    earlier = {
        "start": pendulum.datetime(2025, 4, 2, tz="UTC"),
        "end": None,
    }
    outside = {
        "start": pendulum.datetime(2025, 6, 2, tz="UTC"),
        "end": None,
    }
    source = ListOccurrenceSource([later, outside, earlier])

    assert source.get_occurrences(APRIL["min"], APRIL["max"]) == [earlier, later]


def test_already_rendered_entities_are_skipped(make_record):
    first = make_record("1", "2025-04-03T09:00:00", "2025-04-03T10:00:00")
    duplicate = make_record("1", "2025-04-05T09:00:00", "2025-04-05T10:00:00")
    other = make_record("2", "2025-04-04T09:00:00", "2025-04-04T10:00:00")

    fragments = collect_occurrences([first, duplicate, other], APRIL, RenderedIds())

    assert _dates(fragments) == ["2025-04-03", "2025-04-04"]


def test_rendered_ids():
    rendered_ids = RenderedIds()
    assert rendered_ids.is_entity_already_rendered("a") is False
    assert rendered_ids.is_entity_already_rendered("a") is True
    assert rendered_ids.is_entity_already_rendered("b") is False


def test_missing_start_is_skipped(make_record):
    record = make_record("1", None)
    assert collect_occurrences([record], APRIL, RenderedIds()) == []


def test_date_is_all_day():
    midnight = pendulum.datetime(2025, 4, 3, tz="UTC")

    assert date_is_all_day(midnight, midnight.set(hour=23, minute=59, second=59))
    assert date_is_all_day(midnight, midnight.add(days=1))
    assert not date_is_all_day(midnight, midnight.set(hour=22))
    assert not date_is_all_day(midnight.set(hour=1), midnight.set(hour=23, minute=59, second=59))
    assert date_is_all_day(
        midnight, midnight.set(hour=23, minute=55), granularity="minute", increment=5
    )
    assert not date_is_all_day(
        midnight, midnight.set(hour=23, minute=50), granularity="minute", increment=5
    )
    assert not date_is_all_day(None, midnight)


def test_group_by_day_sorts_dates_and_times(make_record):
    records = [
        make_record("1", "2025-04-02T10:00:00", "2025-04-02T11:00:00"),
        make_record("2", "2025-04-01T15:00:00", "2025-04-01T16:00:00"),
        make_record("3", "2025-04-01T09:00:00", "2025-04-01T10:00:00"),
    ]

    items = group_by_day(collect_occurrences(records, APRIL, RenderedIds()))

    assert list(items.keys()) == ["2025-04-01", "2025-04-02"]
    assert list(items["2025-04-01"].keys()) == ["09:00:00", "15:00:00"]
