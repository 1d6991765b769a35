# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

import pendulum

from calgrid.model.bucket_cell import MultiDayBucket, SingleDayBucket, WeekBuild
from calgrid.model.day_content import DayContent
from calgrid.model.grid_cell import GridCell, GridRow, MoreLink
from calgrid.model.occurrence import EventOccurrence
from calgrid.model.style_options import HIDE_ALL, SHOW_ALL, StyleOptions
from calgrid.model.visible_range import VisibleRange
from calgrid.service.argument import format_date_argument
from calgrid.service.bucket import bucket_floor
from calgrid.service.slot import DAYS_IN_WEEK, WeekSlotPacker, week_span
from calgrid.service.split import DayItems
from calgrid.service.week import (
    UNTRANSLATED_DAYS,
    date_week,
    day_state_classes,
    week_days_ordered,
    week_start,
)
from calgrid.time import DATE_STORAGE_FORMAT, last_day


class PackedWeek(TypedDict):
    build: WeekBuild
    # month the week row belongs to
    month: int
    week_number: int
    week_argument: str


class GridAssembler:
    """
    Lays out grouped occurrences into day, week, month and year grids.

    The assembler walks a cursor day through the visible range the same way
    a paper calendar is filled: week rows are packed one after another so
    bands continuing from the previous week can keep their slot row.
    """

    def __init__(
        self, items: DayItems, visible_range: VisibleRange, style: StyleOptions
    ) -> None:
        self.items = items
        self.visible_range = visible_range
        self.style = style
        self.timezone = visible_range["timezone"]
        self.first_day = style["first_day_of_week"]
        self.today = visible_range["today"]
        self.packer = WeekSlotPacker()

        self.range_first_day = visible_range["min"].in_tz(self.timezone).start_of("day")
        self.range_last_day = visible_range["max"].in_tz(self.timezone).start_of("day")
        self.min_date = self.range_first_day.format(DATE_STORAGE_FORMAT)
        self.max_date = self.range_last_day.format(DATE_STORAGE_FORMAT)
        self.current_day = self.range_first_day

    def _date(self, day: pendulum.DateTime) -> str:
        return day.format(DATE_STORAGE_FORMAT)

    def _in_range(self, date: str) -> bool:
        return self.min_date <= date <= self.max_date

    def _day_occurrences(self, date: str) -> list[EventOccurrence]:
        occurrences: list[EventOccurrence] = []
        for hour in self.items.get(date, {}).values():
            occurrences.extend(hour)
        return occurrences

    def _is_band(self, occurrence: EventOccurrence) -> bool:
        return self.style["multi_day_theme"] and (
            occurrence["is_multi_day"] or occurrence["all_day"]
        )

    # Week packing

    def build_week(self, check_month: bool = False) -> WeekBuild:
        """
        Build the buckets of the week containing the cursor day.

        Args:
            check_month: Leave days outside the visible range or outside the
                cursor's month empty

        Returns:
            The multi-day buckets, single-day buckets and row count per
            column; the cursor moves to the first day of the next week
        """
        month = self.current_day.month
        day = week_start(self.current_day, self.first_day)
        self.packer.start_week()

        dates: list[str] = []
        multi_day_buckets: list[list[Optional[MultiDayBucket]]] = []
        single_day_buckets: list[list[SingleDayBucket]] = []

        for column in range(DAYS_IN_WEEK):
            date = self._date(day)
            dates.append(date)
            multi_day_buckets.append([])
            single_day_buckets.append([])

            if check_month and (not self._in_range(date) or day.month != month):
                pass
            else:
                self._build_week_day(
                    column, day, multi_day_buckets[column], single_day_buckets
                )

            day = day.add(days=1)

        self.current_day = day

        filled = self._fill_multi_day_blanks(multi_day_buckets)

        total_rows = 0
        for column in range(DAYS_IN_WEEK):
            if self.style["multi_day_theme"]:
                total_rows = max(len(filled[column]) + 1, total_rows)
            else:
                total_rows = max(len(single_day_buckets[column]) + 1, total_rows)

        return {
            "dates": dates,
            "multi_day_buckets": filled,
            "single_day_buckets": single_day_buckets,
            "total_rows": total_rows,
        }

    def _fill_multi_day_blanks(
        self, multi_day_buckets: list[list[Optional[MultiDayBucket]]]
    ) -> list[list[MultiDayBucket]]:
        filled: list[list[MultiDayBucket]] = []
        for column, buckets in enumerate(multi_day_buckets):
            column_buckets: list[MultiDayBucket] = []
            for index, bucket in enumerate(buckets):
                if bucket is None:
                    bucket = {
                        "occurrence": None,
                        "colspan": 1,
                        "all_day": False,
                        "avail": self.packer.matrix.is_cell_slot_empty(index, column),
                    }
                column_buckets.append(bucket)
            filled.append(column_buckets)
        return filled

    def _build_week_day(
        self,
        column: int,
        day: pendulum.DateTime,
        column_multi_day: list[Optional[MultiDayBucket]],
        single_day_buckets: list[list[SingleDayBucket]],
    ) -> None:
        date = self._date(day)
        max_events = (
            self.style["max_items"] if self.style["calendar_type"] == "month" else SHOW_ALL
        )

        bands: list[EventOccurrence] = []
        singles: list[EventOccurrence] = []
        for occurrence in self._day_occurrences(date):
            if self._is_band(occurrence):
                bands.append(occurrence)
            else:
                singles.append(occurrence)

        # Bands running in from the previous week go first to keep their row
        bands.sort(key=lambda occurrence: not occurrence["start"] < day)
        for occurrence in bands:
            self._place_band(column, day, occurrence, column_multi_day)

        shown = self._truncate(singles, max_events)
        groups: dict[str, list[EventOccurrence]] = {}
        for occurrence in shown:
            label = bucket_floor(
                occurrence["calendar_start"],
                self.style["group_by_times"],
                self.timezone,
            )
            groups.setdefault(label, []).append(occurrence)

        for label in sorted(groups.keys()):
            single_day_buckets[column].append(
                {"label": label, "occurrences": groups[label], "more": None}
            )

        more = self._more_link(date, singles, shown, max_events)
        if more is not None:
            single_day_buckets[column].append(
                {"label": None, "occurrences": [], "more": more}
            )

    def _truncate(
        self, singles: list[EventOccurrence], max_events: int
    ) -> list[EventOccurrence]:
        if max_events == SHOW_ALL:
            return singles
        if max_events == HIDE_ALL:
            return []
        if self.style["max_items_behavior"] == "hide" and len(singles) > max_events:
            return []
        return singles[:max_events]

    def _more_link(
        self,
        date: str,
        occurrences: list[EventOccurrence],
        shown: list[EventOccurrence],
        max_events: int,
    ) -> Optional[MoreLink]:
        if max_events == SHOW_ALL or len(shown) >= len(occurrences):
            return None
        shown_ids = {occurrence["date_id"] for occurrence in shown}
        return {
            "date": date,
            "count": len(occurrences) - len(shown),
            "total": len(occurrences),
            "ids": [
                occurrence["date_id"]
                for occurrence in occurrences
                if occurrence["date_id"] not in shown_ids
            ],
            "behavior": self.style["max_items_behavior"],
        }

    def _place_band(
        self,
        column: int,
        day: pendulum.DateTime,
        occurrence: EventOccurrence,
        column_multi_day: list[Optional[MultiDayBucket]],
    ) -> None:
        key = occurrence["occurrence_key"]
        event_last_day = last_day(occurrence["start"], occurrence["end"], self.timezone)
        colspan, continues = week_span(
            day, column, event_last_day, self.range_last_day
        )

        row = self.packer.find_row(key, column)
        if row is None:
            row = self.packer.place_multi_day(
                key, column, colspan, continuing=occurrence["start"] < day
            )
        else:
            # Covered by a band that started further left in this row
            colspan = 0

        occurrence["continuation"] = occurrence["start"] < day
        occurrence["continues"] = continues

        while len(column_multi_day) <= row:
            column_multi_day.append(None)
        column_multi_day[row] = {
            "occurrence": occurrence,
            "colspan": colspan,
            "all_day": occurrence["all_day"],
            "avail": False,
        }

    # Month

    def pack_month(self) -> list[PackedWeek]:
        """Pack every week row of the month containing the cursor day."""
        month = self.current_day.month
        self.current_day = self.current_day.start_of("month")

        packed: list[PackedWeek] = []
        while True:
            first_of_week = week_start(self.current_day, self.first_day)
            week_number = date_week(self._date(self.current_day), self.first_day)
            week_argument = format_date_argument(
                first_of_week.add(days=(1 - self.first_day) % 7), "week"
            )
            build = self.build_week(check_month=True)
            packed.append(
                {
                    "build": build,
                    "month": month,
                    "week_number": week_number,
                    "week_argument": week_argument,
                }
            )
            if (
                self.current_day.month != month
                or self._date(self.current_day) > self.max_date
            ):
                break

        return packed

    def assemble_month(self, packed: list[PackedWeek]) -> list[GridRow]:
        rows: list[GridRow] = []
        for week in packed:
            rows.extend(
                self.assemble_week_rows(
                    week["build"],
                    week["month"],
                    check_month=True,
                    week_number=week["week_number"],
                    week_argument=week["week_argument"],
                )
            )
        return rows

    def build_month(self) -> list[GridRow]:
        return self.assemble_month(self.pack_month())

    def assemble_week_rows(
        self,
        build: WeekBuild,
        month: int,
        check_month: bool = False,
        week_number: Optional[int] = None,
        week_argument: Optional[str] = None,
    ) -> list[GridRow]:
        """
        Turn the buckets of one week into rows of grid cells.

        Row 0 holds the date boxes, then one row per slot row of multi-day
        bands, then the single-day cells which span the remaining rows so
        every column stays rectangular.
        """
        total_rows = build["total_rows"]
        multi_day_buckets = build["multi_day_buckets"]
        single_day_buckets = build["single_day_buckets"]
        rows: list[GridRow] = []

        for i in range(total_rows + 1):
            cells: list[GridCell] = []
            if (
                i == 0
                and week_number is not None
                and self.style["show_week_numbers"]
                and self.visible_range["granularity"] not in ("day", "week")
            ):
                cells.append(
                    {
                        "id": f"weekno-{build['dates'][0]}",
                        "content": [],
                        "more": None,
                        "colspan": 1,
                        "rowspan": total_rows + 1,
                        "classes": ["week"],
                        "date": build["dates"][0],
                        "row_kind": "date-box",
                        "column": -1,
                        "week_number": week_number,
                        "link": week_argument,
                    }
                )

            for column, date in enumerate(build["dates"]):
                day_month = int(date[5:7])
                in_month = self._in_range(date) and (
                    not check_month or day_month == month
                )
                states = day_state_classes(
                    date, self.today, day_month, month, in_month
                )
                singles = single_day_buckets[column]
                multi_count = len(multi_day_buckets[column])
                cell: Optional[GridCell] = None

                if i == 0:
                    cell = self._date_box_cell(
                        column, date, states, singles, multi_count, in_month
                    )
                else:
                    index = i - 1
                    if index < multi_count:
                        cell = self._multi_day_cell(
                            column,
                            date,
                            index,
                            multi_day_buckets[column][index],
                            states,
                            in_month,
                        )
                    elif index == multi_count:
                        cell = self._single_day_cell(
                            column,
                            date,
                            index,
                            total_rows - index,
                            singles,
                            multi_count,
                            states,
                        )

                if cell is not None:
                    if not in_month:
                        cell["classes"].append("empty")
                    cells.append(cell)

            if i == 0:
                row_kind = "date-box"
            elif i == total_rows:
                row_kind = "single-day"
            else:
                row_kind = "multi-day"
            rows.append({"row_kind": row_kind, "cells": cells})

        return rows

    def _date_box_cell(
        self,
        column: int,
        date: str,
        states: list[str],
        singles: list[SingleDayBucket],
        multi_count: int,
        in_month: bool,
    ) -> GridCell:
        classes = ["date-box"] + states
        if not singles and multi_count == 0:
            classes.append("no-entry")
        return {
            "id": f"{date}-date-box",
            "content": [],
            "more": None,
            "colspan": 1,
            "rowspan": 1,
            "classes": classes,
            "date": date,
            "row_kind": "date-box",
            "column": column,
            "header": UNTRANSLATED_DAYS[week_days_ordered(self.first_day)[column]],
            "day_of_month": int(date[8:10]),
            "has_events": in_month and bool(singles or multi_count),
        }

    def _multi_day_cell(
        self,
        column: int,
        date: str,
        index: int,
        bucket: MultiDayBucket,
        states: list[str],
        in_month: bool,
    ) -> Optional[GridCell]:
        occurrence = bucket["occurrence"]
        if occurrence is None:
            if not bucket["avail"]:
                return None
            return {
                "id": f"{date}-multi-{index}",
                "content": [],
                "more": None,
                "colspan": 1,
                "rowspan": 1,
                "classes": ["multi-day", "no-entry"] + states,
                "date": date,
                "row_kind": "multi-day",
                "column": column,
            }

        if bucket["colspan"] == 0:
            return None

        classes = ["multi-day"]
        if date == self.today and in_month:
            classes.append("starts-today")
        end_date = self._date(
            pendulum.parse(date, tz=self.timezone).add(days=bucket["colspan"] - 1)  # type: ignore[union-attr]
        )
        if end_date == self.today and in_month:
            classes.append("ends-today")
        if occurrence["continuation"]:
            classes.append("continuation")
        if occurrence["continues"]:
            classes.append("continues")
        if bucket["all_day"]:
            classes.append("all-day")

        return {
            "id": f"{date}-multi-{index}",
            "content": [occurrence],
            "more": None,
            "colspan": bucket["colspan"],
            "rowspan": 1,
            "classes": classes,
            "date": date,
            "row_kind": "multi-day",
            "column": column,
        }

    def _single_day_cell(
        self,
        column: int,
        date: str,
        index: int,
        rowspan: int,
        singles: list[SingleDayBucket],
        multi_count: int,
        states: list[str],
    ) -> GridCell:
        content: list[EventOccurrence] = []
        more: Optional[MoreLink] = None
        for bucket in singles:
            content.extend(bucket["occurrences"])
            if bucket["more"] is not None:
                more = bucket["more"]

        classes = ["single-day"]
        if not content and more is None:
            classes.append("no-entry")
            if multi_count > 0:
                classes.append("noentry-multi-day")

        return {
            "id": f"{date}-{index}",
            "content": content,
            "more": more,
            "colspan": 1,
            "rowspan": max(1, rowspan),
            "classes": classes + states,
            "date": date,
            "row_kind": "single-day",
            "column": column,
        }

    # Week

    def pack_week(self) -> WeekBuild:
        return self.build_week(check_month=False)

    def assemble_week(self, build: WeekBuild) -> list[GridRow]:
        return self.assemble_week_rows(build, self.range_first_day.month)

    # Day

    def build_day(self, day: Optional[pendulum.DateTime] = None) -> DayContent:
        """
        Build the content of a single day.

        All-day occurrences are listed apart from the time buckets. Day
        calendars ignore the item limit; other calendar types replace the
        occurrences over it with a "more" link.
        """
        if day is None:
            day = self.current_day
        date = self._date(day)
        # Day calendars list every event
        max_events = (
            SHOW_ALL if self.style["calendar_type"] == "day" else self.style["max_items"]
        )
        mini = self.style["mini"]

        occurrences = self._day_occurrences(date)
        selected = date in self.items
        all_day: list[EventOccurrence] = []
        inner: dict[str, list[EventOccurrence]] = {}
        shown: list[EventOccurrence] = []

        for count, occurrence in enumerate(occurrences, start=1):
            if mini:
                continue
            if not (
                max_events == SHOW_ALL or count <= max_events or max_events == HIDE_ALL
            ):
                continue
            shown.append(occurrence)
            if occurrence["all_day"]:
                all_day.append(occurrence)
            else:
                label = bucket_floor(
                    occurrence["calendar_start"],
                    self.style["group_by_times"],
                    self.timezone,
                )
                inner.setdefault(label, []).append(occurrence)

        items = {label: inner[label] for label in sorted(inner.keys())}
        empty = not items and not all_day

        link: Optional[MoreLink] = None
        count = len(occurrences)
        if (
            max_events != SHOW_ALL
            and count > 0
            and (count > max_events or max_events == HIDE_ALL)
            and self.style["calendar_type"] != "day"
            and not mini
        ):
            if self.style["max_items_behavior"] == "hide" or max_events == HIDE_ALL:
                all_day = []
                items = {}
                shown = []
            link = self._more_link(date, occurrences, shown, max_events)

        return {
            "date": date,
            "selected": selected,
            "empty": empty,
            "link": link,
            "all_day": all_day,
            "items": items,
        }

    # Mini month and year

    def build_mini_week(self, check_month: bool = False) -> GridRow:
        month = self.current_day.month
        week_number = date_week(self._date(self.current_day), self.first_day)
        day = week_start(self.current_day, self.first_day)
        cells: list[GridCell] = []

        if self.style["show_week_numbers"]:
            cells.append(
                {
                    "id": f"weekno-{self._date(day)}",
                    "content": [],
                    "more": None,
                    "colspan": 1,
                    "rowspan": 1,
                    "classes": ["mini", "week"],
                    "date": self._date(day),
                    "row_kind": "mini",
                    "column": -1,
                    "week_number": week_number,
                    "link": format_date_argument(
                        day.add(days=(1 - self.first_day) % 7), "week"
                    ),
                }
            )

        for column, weekday in enumerate(week_days_ordered(self.first_day)):
            date = self._date(day)
            classes = [UNTRANSLATED_DAYS[weekday], "mini"]
            has_events = False
            if check_month and (not self._in_range(date) or day.month != month):
                classes.append("empty")
            else:
                has_events = bool(self.items.get(date))
                classes += day_state_classes(date, self.today, day.month, month)
                classes.append("has-events" if has_events else "has-no-events")
            cells.append(
                {
                    "id": date,
                    "content": [],
                    "more": None,
                    "colspan": 1,
                    "rowspan": 1,
                    "classes": classes,
                    "date": date,
                    "row_kind": "mini",
                    "column": column,
                    "day_of_month": day.day,
                    "has_events": has_events,
                    "link": date,
                }
            )
            day = day.add(days=1)

        self.current_day = day
        return {"row_kind": "mini", "cells": cells}

    def build_mini_month(self) -> list[GridRow]:
        month = self.current_day.month
        self.current_day = self.current_day.start_of("month")

        rows: list[GridRow] = []
        while True:
            rows.append(self.build_mini_week(check_month=True))
            if (
                self.current_day.month != month
                or self._date(self.current_day) > self.max_date
            ):
                break
        return rows

    def build_year(self) -> list[list[GridRow]]:
        months: list[list[GridRow]] = []
        for _ in range(12):
            months.append(self.build_mini_month())
        return months
