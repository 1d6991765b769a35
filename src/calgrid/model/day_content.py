# SPDX-License-Identifier: MIT

from typing import Optional, TypedDict

from calgrid.model.grid_cell import MoreLink
from calgrid.model.occurrence import EventOccurrence


class DayContent(TypedDict):
    date: str
    selected: bool
    empty: bool
    link: Optional[MoreLink]
    all_day: list[EventOccurrence]
    items: dict[str, list[EventOccurrence]]
