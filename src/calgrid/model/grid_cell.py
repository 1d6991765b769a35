# SPDX-License-Identifier: MIT

from typing import Literal, NotRequired, Optional, TypedDict

from calgrid.model.occurrence import EventOccurrence
from calgrid.model.style_options import MaxItemsBehavior

RowKind = Literal["header", "date-box", "multi-day", "single-day", "mini"]


class MoreLink(TypedDict):
    date: str
    count: int
    total: int
    ids: list[str]
    behavior: MaxItemsBehavior


class GridCell(TypedDict):
    id: str
    content: list[EventOccurrence]
    more: Optional[MoreLink]
    colspan: int
    rowspan: int
    classes: list[str]
    date: Optional[str]
    row_kind: RowKind
    column: int
    header: NotRequired[str]
    day_of_month: NotRequired[int]
    week_number: NotRequired[int]
    link: NotRequired[Optional[str]]
    has_events: NotRequired[bool]


class GridRow(TypedDict):
    row_kind: RowKind
    cells: list[GridCell]
