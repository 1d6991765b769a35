# SPDX-License-Identifier: MIT

from typing import Callable, Optional

from calgrid.error import CalendarConfigurationError
from calgrid.model.calendar_render import CalendarRender, RenderState
from calgrid.model.grid_cell import GridCell
from calgrid.model.granularity_type import GRANULARITIES, TimeGranularityType
from calgrid.model.raw_record import RawRecord
from calgrid.model.style_options import HIDE_ALL, StyleOptions
from calgrid.model.visible_range import VisibleRange
from calgrid.service.argument import pager_arguments, parse_date_argument
from calgrid.service.grid import GridAssembler
from calgrid.service.split import (
    OccurrenceSource,
    RenderedIds,
    collect_occurrences,
    group_by_day,
    record_occurrence_source,
)
from calgrid.service.week import FULL_NAME_SIZE, week_header


def validate_style_options(style: StyleOptions) -> None:
    """Raise CalendarConfigurationError for style options the grid cannot use."""
    if style["calendar_type"] not in GRANULARITIES:
        raise CalendarConfigurationError(
            f"Unknown calendar type '{style['calendar_type']}'"
        )
    if style["max_items_behavior"] not in ("more", "hide"):
        raise CalendarConfigurationError(
            f"Unknown max items behavior '{style['max_items_behavior']}'"
        )
    if not isinstance(style["max_items"], int) or style["max_items"] < HIDE_ALL:
        raise CalendarConfigurationError(
            f"Max items must be -1, 0 or a positive number, got {style['max_items']}"
        )
    if not 0 <= style["first_day_of_week"] <= 6:
        raise CalendarConfigurationError(
            f"First day of week must be between 0 and 6, got {style['first_day_of_week']}"
        )
    if style["name_size"] not in (0, 1, 2, 3, FULL_NAME_SIZE):
        raise CalendarConfigurationError(
            f"Day name size must be 1, 2, 3 or {FULL_NAME_SIZE}, got {style['name_size']}"
        )


def empty_render(style: StyleOptions, messages: list[str]) -> CalendarRender:
    return {
        "calendar_type": style["calendar_type"],
        "state": RenderState.IDLE,
        "messages": messages,
        "header": [],
        "rows": [],
        "months": [],
        "day": None,
        "pager": None,
    }


class CalendarRenderer:
    """
    Runs one render pass from raw records to a calendar grid.

    A renderer owns the already-rendered id set and the slot matrix of its
    pass, so a fresh instance is needed per render.
    """

    def __init__(
        self,
        style: StyleOptions,
        recurrence: Callable[
            [RawRecord], Optional[OccurrenceSource]
        ] = record_occurrence_source,
        granularity: TimeGranularityType = "second",
        increment: int = 1,
    ) -> None:
        self.style = style
        self.recurrence = recurrence
        self.granularity = granularity
        self.increment = increment
        self.state = RenderState.IDLE
        self.rendered_ids = RenderedIds()

    def resolve_range(
        self,
        date_argument: Optional[str],
        timezone: str,
        today: Optional[str] = None,
    ) -> VisibleRange:
        visible_range = parse_date_argument(
            date_argument,
            self.style["calendar_type"],
            timezone,
            self.style["first_day_of_week"],
            today,
        )
        self.state = RenderState.RANGE_RESOLVED
        return visible_range

    def render(
        self,
        records: list[RawRecord],
        date_argument: Optional[str] = None,
        timezone: str = "UTC",
        visible_range: Optional[VisibleRange] = None,
        today: Optional[str] = None,
    ) -> CalendarRender:
        """
        Render records into the grid of the configured calendar type.

        Args:
            records: Raw records from the entity layer
            date_argument: Date argument selecting the period, ignored when
                ``visible_range`` is given
            timezone: Display timezone used to resolve ``date_argument``
            visible_range: An already resolved range
            today: Today as YYYY-MM-DD, for past/future styling

        Returns:
            The render; a configuration problem yields an empty render in
            the IDLE state whose messages explain the problem
        """
        try:
            validate_style_options(self.style)
            if visible_range is None:
                visible_range = self.resolve_range(date_argument, timezone, today)
            else:
                self.state = RenderState.RANGE_RESOLVED
        except CalendarConfigurationError as error:
            self.state = RenderState.IDLE
            return empty_render(self.style, [str(error)])

        occurrences = collect_occurrences(
            records,
            visible_range,
            self.rendered_ids,
            self.recurrence,
            self.granularity,
            self.increment,
        )
        items = group_by_day(occurrences)
        self.state = RenderState.EVENTS_COLLECTED

        render: CalendarRender = {
            "calendar_type": self.style["calendar_type"],
            "state": self.state,
            "messages": [],
            "header": [],
            "rows": [],
            "months": [],
            "day": None,
            "pager": None,
        }

        assembler = GridAssembler(items, visible_range, self.style)
        calendar_type = self.style["calendar_type"]
        if calendar_type == "month" and self.style["mini"]:
            self.state = RenderState.PER_WEEK_PACKED
            render["header"] = self._header()
            render["rows"] = assembler.build_mini_month()
        elif calendar_type == "month":
            packed = assembler.pack_month()
            self.state = RenderState.PER_WEEK_PACKED
            render["header"] = self._header()
            render["rows"] = assembler.assemble_month(packed)
        elif calendar_type == "week":
            build = assembler.pack_week()
            self.state = RenderState.PER_WEEK_PACKED
            render["header"] = self._header()
            render["rows"] = assembler.assemble_week(build)
        elif calendar_type == "year":
            self.state = RenderState.PER_WEEK_PACKED
            render["header"] = self._header(mini=True)
            render["months"] = assembler.build_year()
        else:
            self.state = RenderState.PER_WEEK_PACKED
            render["day"] = assembler.build_day()
        self.state = RenderState.ASSEMBLED

        render["pager"] = pager_arguments(
            visible_range, self.style["first_day_of_week"]
        )
        self.state = RenderState.RENDERED
        render["state"] = self.state
        return render

    def _header(self, mini: bool = False) -> list[GridCell]:
        mini = mini or self.style["mini"]
        return week_header(
            self.style["first_day_of_week"],
            self.style["name_size"],
            mini,
            self.style["show_week_numbers"] and self.style["calendar_type"] != "week",
        )


def render_calendar(
    records: list[RawRecord],
    style: StyleOptions,
    date_argument: Optional[str] = None,
    timezone: str = "UTC",
    today: Optional[str] = None,
) -> CalendarRender:
    return CalendarRenderer(style).render(
        records, date_argument, timezone, today=today
    )
