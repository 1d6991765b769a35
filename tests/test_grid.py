# tests/test_grid.py
from calgrid.model.calendar_render import RenderState
from calgrid.service.argument import parse_date_argument
from calgrid.service.calendar import CalendarRenderer, render_calendar
from calgrid.service.grid import GridAssembler
from calgrid.service.split import RenderedIds, collect_occurrences, group_by_day

TODAY = "2025-04-10"


def _assembler(records, style, date="2025-04", granularity="month"):
    visible_range = parse_date_argument(
        date, granularity, "UTC", style["first_day_of_week"], today=TODAY
    )
    items = group_by_day(collect_occurrences(records, visible_range, RenderedIds()))
    return GridAssembler(items, visible_range, style)


def _titles(buckets):
    return [
        bucket["occurrence"]["title"] if bucket["occurrence"] is not None else None
        for bucket in buckets
    ]


def _week_rows(rows):
    weeks = []
    for row in rows:
        if row["row_kind"] == "date-box":
            weeks.append([])
        weeks[-1].append(row)
    return weeks


def _cell(rows, date, row_kind):
    for row in rows:
        for cell in row["cells"]:
            if cell["date"] == date and cell["row_kind"] == row_kind:
                return cell
    raise AssertionError(f"No {row_kind} cell for {date}")


def _five_events_on(make_record, day="2025-04-10"):
    return [
        make_record(str(hour), f"{day}T{hour:02d}:00:00", f"{day}T{hour:02d}:30:00")
        for hour in range(9, 14)
    ]


def test_month_packs_five_week_rows(make_record, make_style):
    packed = _assembler([], make_style()).pack_month()

    assert len(packed) == 5
    assert packed[0]["build"]["dates"][0] == "2025-03-30"
    assert packed[-1]["build"]["dates"][-1] == "2025-05-03"


def test_band_continues_across_week_boundary(make_record, make_style):
    record = make_record(
        "1", "2025-04-03T09:00:00", "2025-04-08T17:00:00", title="Conference"
    )

    packed = _assembler([record], make_style()).pack_month()
    first = packed[0]["build"]
    second = packed[1]["build"]

    start = first["multi_day_buckets"][4][0]
    assert start["colspan"] == 3
    assert start["occurrence"]["continuation"] is False
    assert start["occurrence"]["continues"] is True
    assert first["multi_day_buckets"][5][0]["colspan"] == 0
    assert first["multi_day_buckets"][6][0]["colspan"] == 0
    assert first["total_rows"] == 2

    resumed = second["multi_day_buckets"][0][0]
    assert resumed["colspan"] == 3
    assert resumed["occurrence"]["title"] == "Conference"
    assert resumed["occurrence"]["continuation"] is True
    assert resumed["occurrence"]["continues"] is False


def test_overlapping_bands_get_distinct_rows(make_record, make_style):
    records = [
        make_record("a", "2025-04-07T10:00:00", "2025-04-09T10:00:00", title="A"),
        make_record("b", "2025-04-08T10:00:00", "2025-04-10T10:00:00", title="B"),
        make_record("c", "2025-04-10T12:00:00", "2025-04-11T10:00:00", title="C"),
    ]
    style = make_style(calendar_type="week")

    build = _assembler(records, style, "202515", "week").pack_week()
    buckets = build["multi_day_buckets"]

    assert build["dates"][0] == "2025-04-06"
    assert _titles(buckets[1]) == ["A"]
    assert _titles(buckets[2]) == ["A", "B"]
    assert buckets[2][0]["colspan"] == 0
    assert buckets[2][1]["colspan"] == 3
    assert _titles(buckets[4]) == ["C", "B"]
    assert buckets[4][0]["colspan"] == 2
    assert build["total_rows"] == 3


def test_continuing_band_keeps_its_row(make_record, make_style):
    records = [
        make_record("x", "2025-04-04T10:00:00", "2025-04-05T10:00:00", title="X"),
        make_record("y", "2025-04-05T09:00:00", "2025-04-07T12:00:00", title="Y"),
    ]

    packed = _assembler(records, make_style()).pack_month()
    first = packed[0]["build"]["multi_day_buckets"]
    second = packed[1]["build"]["multi_day_buckets"]

    assert _titles(first[6]) == ["X", "Y"]
    assert _titles(second[0]) == [None, "Y"]
    assert second[0][0]["avail"] is True


def test_month_rows_stay_rectangular(make_record, make_style):
    records = [
        make_record("1", "2025-04-03T09:00:00", "2025-04-08T17:00:00"),
        make_record("2", "2025-04-04T09:00:00", "2025-04-04T10:00:00"),
        make_record("3", "2025-04-07T00:00:00", "2025-04-07T23:59:59"),
    ]

    assembler = _assembler(records, make_style(show_week_numbers=True))
    packed = assembler.pack_month()
    rows = assembler.assemble_month(packed)

    for week, week_rows in zip(packed, _week_rows(rows)):
        total_rows = week["build"]["total_rows"]
        assert len(week_rows) == total_rows + 1
        coverage = [0] * 7
        for row in week_rows:
            for cell in row["cells"]:
                if cell["column"] < 0:
                    assert cell["rowspan"] == total_rows + 1
                    continue
                assert cell["colspan"] >= 1
                for column in range(cell["column"], cell["column"] + cell["colspan"]):
                    coverage[column] += cell["rowspan"]
        assert coverage == [total_rows + 1] * 7


def test_month_cells_carry_state_classes(make_record, make_style):
    record = make_record("1", "2025-04-10T09:00:00", "2025-04-12T09:00:00")

    rows = _assembler([record], make_style()).build_month()

    assert "today" in _cell(rows, "2025-04-10", "date-box")["classes"]
    assert "empty" in _cell(rows, "2025-03-31", "date-box")["classes"]
    assert "past-month" in _cell(rows, "2025-03-31", "date-box")["classes"]
    assert "no-entry" in _cell(rows, "2025-04-02", "date-box")["classes"]
    band = _cell(rows, "2025-04-10", "multi-day")
    assert band["colspan"] == 3
    assert "starts-today" in band["classes"]
    assert "continues" not in band["classes"]


def test_week_number_cell_links_to_week_view(make_style):
    rows = _assembler([], make_style(show_week_numbers=True)).build_month()

    week_cell = rows[0]["cells"][0]
    assert week_cell["column"] == -1
    assert week_cell["week_number"] == 14
    assert week_cell["link"] == "202514"


def test_max_items_more_truncates_with_hidden_count(make_record, make_style):
    style = make_style(max_items=2, max_items_behavior="more")

    rows = _assembler(_five_events_on(make_record), style).build_month()
    cell = _cell(rows, "2025-04-10", "single-day")

    assert [occurrence["title"] for occurrence in cell["content"]] == [
        "Event 9",
        "Event 10",
    ]
    assert cell["more"]["count"] == 3
    assert cell["more"]["total"] == 5
    assert len(cell["more"]["ids"]) == 3


def test_max_items_hide_shows_only_link(make_record, make_style):
    style = make_style(max_items=2, max_items_behavior="hide")

    rows = _assembler(_five_events_on(make_record), style).build_month()
    cell = _cell(rows, "2025-04-10", "single-day")

    assert cell["content"] == []
    assert cell["more"]["count"] == 5
    assert cell["more"]["behavior"] == "hide"


def test_hide_keeps_day_with_exactly_max_items(make_record, make_style):
    records = _five_events_on(make_record)[:2]
    style = make_style(max_items=2, max_items_behavior="hide")

    cell = _cell(_assembler(records, style).build_month(), "2025-04-10", "single-day")

    assert len(cell["content"]) == 2
    assert cell["more"] is None


def test_multi_day_events_do_not_count_toward_max_items(make_record, make_style):
    records = [
        make_record(f"m{index}", "2025-04-09T08:00:00", "2025-04-11T18:00:00")
        for index in range(3)
    ] + _five_events_on(make_record)[:2]
    style = make_style(max_items=2)

    rows = _assembler(records, style).build_month()
    cell = _cell(rows, "2025-04-10", "single-day")

    assert len(cell["content"]) == 2
    assert cell["more"] is None


def test_single_day_events_grouped_by_bucket(make_record, make_style):
    records = [
        make_record("late", "2025-04-10T12:15:00", "2025-04-10T13:00:00"),
        make_record("early", "2025-04-10T09:45:00", "2025-04-10T10:00:00"),
        make_record("earlier", "2025-04-10T09:05:00", "2025-04-10T10:00:00"),
    ]
    style = make_style(group_by_times=["09:00:00", "12:00:00"])

    packed = _assembler(records, style).pack_month()
    buckets = packed[1]["build"]["single_day_buckets"][4]

    assert [bucket["label"] for bucket in buckets] == ["09:00:00", "12:00:00"]
    assert [o["entity_id"] for o in buckets[0]["occurrences"]] == ["earlier", "early"]


def test_without_multi_day_theme_bands_become_day_entries(make_record, make_style):
    record = make_record("1", "2025-04-03T09:00:00", "2025-04-05T17:00:00")

    packed = _assembler([record], make_style(multi_day_theme=False)).pack_month()
    build = packed[0]["build"]

    assert all(buckets == [] for buckets in build["multi_day_buckets"])
    assert [len(build["single_day_buckets"][column]) for column in (4, 5, 6)] == [1, 1, 1]
    assert build["total_rows"] == 2


def test_day_content_splits_all_day_and_buckets(make_record, make_style):
    records = [
        make_record("a", "2025-04-10T09:15:00", "2025-04-10T10:00:00"),
        make_record("b", "2025-04-10T10:00:00", "2025-04-10T11:00:00"),
        make_record("c", "2025-04-10T12:30:00", "2025-04-10T13:00:00"),
        make_record("d", "2025-04-10T00:00:00", "2025-04-10T23:59:59"),
    ]
    style = make_style(calendar_type="day", group_by_times=["09:00:00", "12:00:00"])

    day = _assembler(records, style, "2025-04-10", "day").build_day()

    assert day["selected"] is True
    assert [o["entity_id"] for o in day["all_day"]] == ["d"]
    assert list(day["items"].keys()) == ["09:00:00", "12:00:00"]
    assert [o["entity_id"] for o in day["items"]["09:00:00"]] == ["a", "b"]
    assert day["link"] is None


def test_day_content_adds_link_outside_day_view(make_record, make_style):
    style = make_style(max_items=2)
    assembler = _assembler(_five_events_on(make_record), style)

    day = assembler.build_day(assembler.range_first_day.add(days=9))

    assert day["date"] == "2025-04-10"
    assert sum(len(items) for items in day["items"].values()) == 2
    assert day["link"]["count"] == 3
    assert day["link"]["total"] == 5


def test_day_content_hide_clears_items(make_record, make_style):
    style = make_style(max_items=2, max_items_behavior="hide")
    assembler = _assembler(_five_events_on(make_record), style)

    day = assembler.build_day(assembler.range_first_day.add(days=9))

    assert day["items"] == {}
    assert day["link"]["count"] == 5


def test_year_marks_days_with_events(make_record, make_style):
    record = make_record("1", "2025-02-14T12:00:00", "2025-02-14T13:00:00")
    style = make_style(calendar_type="year", mini=True)

    months = _assembler([record], style, "2025", "year").build_year()

    assert len(months) == 12
    february = months[1]
    cell = _cell(february, "2025-02-14", "mini")
    assert cell["has_events"] is True
    assert "has-events" in cell["classes"]
    assert "friday" in cell["classes"]
    assert "has-no-events" in _cell(february, "2025-02-13", "mini")["classes"]
    assert "empty" in _cell(february, "2025-01-26", "mini")["classes"]


def test_renderer_reaches_rendered_state(make_record, make_style):
    record = make_record("1", "2025-04-03T09:00:00", "2025-04-08T17:00:00")
    renderer = CalendarRenderer(make_style())

    render = renderer.render([record], "2025-04", "UTC", today=TODAY)

    assert render["state"] == RenderState.RENDERED
    assert renderer.state == RenderState.RENDERED
    assert render["messages"] == []
    assert len(render["header"]) == 7
    assert render["rows"][0]["row_kind"] == "date-box"
    assert render["pager"] == {"previous": "2025-03", "next": "2025-05"}


def test_renderer_reports_bad_date_argument(make_style):
    renderer = CalendarRenderer(make_style())

    render = renderer.render([], "2025-13", "UTC")

    assert render["state"] == RenderState.IDLE
    assert render["rows"] == []
    assert "2025-13" in render["messages"][0]


def test_renderer_reports_bad_style_options(make_style):
    render = CalendarRenderer(make_style(max_items_behavior="sometimes")).render(
        [], "2025-04", "UTC"
    )

    assert render["state"] == RenderState.IDLE
    assert render["messages"]


def test_renderer_builds_day_and_year(make_record, make_style):
    record = make_record("1", "2025-04-10T09:00:00", "2025-04-10T10:00:00")

    day = CalendarRenderer(make_style(calendar_type="day")).render(
        [record], "2025-04-10", "UTC"
    )
    year = CalendarRenderer(make_style(calendar_type="year")).render(
        [record], "2025", "UTC"
    )

    assert day["day"] is not None
    assert day["day"]["items"]["09:00:00"][0]["entity_id"] == "1"
    assert len(year["months"]) == 12


def test_render_calendar_skips_duplicate_records(make_record, make_style):
    first = make_record("1", "2025-04-10T09:00:00", "2025-04-10T10:00:00")
    duplicate = make_record("1", "2025-04-11T09:00:00", "2025-04-11T10:00:00")

    render = render_calendar(
        [first, duplicate], make_style(calendar_type="week"), "202515", today=TODAY
    )

    dated = {
        cell["date"]
        for row in render["rows"]
        for cell in row["cells"]
        if cell["row_kind"] == "single-day" and cell["content"]
    }
    assert dated == {"2025-04-10"}
    assert render["pager"] == {"previous": "202514", "next": "202516"}


def test_day_calendar_shows_every_event_despite_max_items(make_record, make_style):
    style = make_style(calendar_type="day", max_items=2, max_items_behavior="hide")

    render = render_calendar(
        _five_events_on(make_record), style, "2025-04-10", today=TODAY
    )

    day = render["day"]
    assert sum(len(items) for items in day["items"].values()) == 5
    assert day["link"] is None


def test_renderer_reports_unknown_timezone(make_record, make_style):
    record = make_record("1", "2025-04-10T09:00:00", "2025-04-10T10:00:00")

    render = render_calendar([record], make_style(), "2025-04", timezone="Not/AZone")

    assert render["state"] == RenderState.IDLE
    assert render["rows"] == []
    assert render["messages"] == ["Unknown timezone 'Not/AZone'"]
