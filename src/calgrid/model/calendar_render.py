# SPDX-License-Identifier: MIT

from enum import Enum
from typing import Optional, TypedDict

from calgrid.model.day_content import DayContent
from calgrid.model.grid_cell import GridCell, GridRow
from calgrid.model.granularity_type import CalendarType


class RenderState(Enum):
    IDLE = 0
    RANGE_RESOLVED = 1
    EVENTS_COLLECTED = 2
    PER_WEEK_PACKED = 3
    ASSEMBLED = 4
    RENDERED = 5


class Pager(TypedDict):
    previous: str
    next: str


class CalendarRender(TypedDict):
    calendar_type: CalendarType
    state: RenderState
    messages: list[str]
    header: list[GridCell]
    rows: list[GridRow]
    # year view: one list of rows per month
    months: list[list[GridRow]]
    day: Optional[DayContent]
    pager: Optional[Pager]
