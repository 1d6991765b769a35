# SPDX-License-Identifier: MIT

from typing import Optional

import pendulum

from calgrid.time import days_between

# Columns past this bound are ignored rather than rejected
MAX_SLOT_COLUMNS = 31

DAYS_IN_WEEK = 7

type SlotRow = list[Optional[str]]


class SlotMatrix:
    """
    Sparse grid of slot rows by day column for one week of multi-day bands.

    A cell holds the occurrence key occupying it, or None when free.
    """

    def __init__(self) -> None:
        self._rows: list[SlotRow] = []
        self._previous_rows: dict[str, int] = {}

    @property
    def row_count(self) -> int:
        return len(self._rows)

    def rows(self) -> list[SlotRow]:
        return [list(row) for row in self._rows]

    def reset(self) -> None:
        """Empty the matrix, remembering which row every key ended in."""
        previous_rows: dict[str, int] = {}
        for index, row in enumerate(self._rows):
            for value in row:
                if value is not None:
                    previous_rows[value] = index
        self._previous_rows = previous_rows
        self._rows = []

    def previous_row(self, key: str) -> Optional[int]:
        return self._previous_rows.get(key)

    def _default_row(self) -> SlotRow:
        return [None] * MAX_SLOT_COLUMNS

    def _ensure_row(self, index: int) -> None:
        while len(self._rows) <= index:
            self._rows.append(self._default_row())

    def is_cell_slot_empty(self, index: int, column: int) -> bool:
        if index < 0 or index >= len(self._rows):
            return True
        if column < 0 or column >= MAX_SLOT_COLUMNS:
            return True
        return self._rows[index][column] is None

    def is_span_empty(self, index: int, column: int, length: int) -> bool:
        return all(
            self.is_cell_slot_empty(index, wday)
            for wday in range(column, column + max(0, length))
        )

    def set_cell_slot(self, index: int, column: int, length: int, key: str) -> None:
        """Mark ``length`` columns from ``column`` in row ``index`` as taken by ``key``."""
        if index < 0:
            return
        self._ensure_row(index)
        for wday in range(column, column + max(0, length)):
            if 0 <= wday < MAX_SLOT_COLUMNS:
                self._rows[index][wday] = key

    def find_empty_cell_floor(
        self, column: int, length: int = 1, only_append: bool = False
    ) -> int:
        """
        Find the first row with ``length`` free columns starting at ``column``.

        Args:
            column: The first day column of the span
            length: The number of contiguous columns needed
            only_append: Skip the scan and always open a new row

        Returns:
            Index of the first fitting row, or of a newly appended row
        """
        if not only_append and length > 0:
            for index in range(len(self._rows)):
                if self.is_span_empty(index, column, length):
                    return index

        self._rows.append(self._default_row())
        return len(self._rows) - 1

    def find_cell_floor_by_id(self, column: int, key: str) -> Optional[int]:
        """Return the row holding ``key`` in ``column``, or None."""
        if column < 0 or column >= MAX_SLOT_COLUMNS:
            return None
        for index, row in enumerate(self._rows):
            if row[column] == key:
                return index
        return None


class WeekSlotPacker:
    """Assigns multi-day bands of one week to non-overlapping slot rows."""

    def __init__(self) -> None:
        self.matrix = SlotMatrix()

    def start_week(self) -> None:
        self.matrix.reset()

    def place_multi_day(
        self, key: str, column: int, colspan: int, continuing: bool = False
    ) -> int:
        """
        Reserve a row for a band starting at ``column``.

        A band continuing from the previous week takes back the row it held
        there when that row is still free, so it stays aligned across weeks.
        """
        colspan = max(0, colspan)
        if continuing:
            row = self.matrix.previous_row(key)
            if row is not None and self.matrix.is_span_empty(row, column, colspan):
                self.matrix.set_cell_slot(row, column, colspan, key)
                return row

        row = self.matrix.find_empty_cell_floor(column, colspan)
        self.matrix.set_cell_slot(row, column, colspan, key)
        return row

    def find_row(self, key: str, column: int) -> Optional[int]:
        return self.matrix.find_cell_floor_by_id(column, key)


def week_span(
    current_day: pendulum.DateTime,
    column: int,
    event_last_day: pendulum.DateTime,
    range_last_day: pendulum.DateTime,
) -> tuple[int, bool]:
    """
    Compute the colspan a band gets in the current week row.

    Args:
        current_day: Midnight of the day the band starts in this row
        column: Position of that day in the week (0-6)
        event_last_day: Midnight of the last day the event occupies
        range_last_day: Midnight of the last visible day

    Returns:
        Tuple of (colspan, continues) where continues is True when the event
        runs past the columns granted here
    """
    remaining_event_days = days_between(current_day, event_last_day)
    remaining_row_days = min(
        DAYS_IN_WEEK - 1 - column, days_between(current_day, range_last_day)
    )
    bucket_count = max(0, min(remaining_event_days, remaining_row_days))
    return bucket_count + 1, remaining_event_days > bucket_count
