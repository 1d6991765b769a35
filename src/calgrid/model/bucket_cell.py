# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from calgrid.model.grid_cell import MoreLink
from calgrid.model.occurrence import EventOccurrence


class MultiDayBucket(TypedDict):
    """One slot row of one day column in a week."""

    occurrence: Optional[EventOccurrence]
    # 0 marks a column covered by a band that started further left
    colspan: int
    all_day: bool
    # True when the slot row is free in this column
    avail: bool


class SingleDayBucket(TypedDict):
    # None for the trailing "more" group and for out-of-month placeholders
    label: Optional[str]
    occurrences: list[EventOccurrence]
    more: Optional[MoreLink]


class WeekBuild(TypedDict):
    dates: list[str]
    multi_day_buckets: list[list[MultiDayBucket]]
    single_day_buckets: list[list[SingleDayBucket]]
    total_rows: int
