# SPDX-License-Identifier: MIT

from typing import Literal, TypedDict

from calgrid.model.granularity_type import CalendarType

MaxItemsBehavior = Literal["more", "hide"]

SHOW_ALL = 0
HIDE_ALL = -1


class StyleOptions(TypedDict):
    calendar_type: CalendarType
    mini: bool
    show_week_numbers: bool
    max_items: int
    max_items_behavior: MaxItemsBehavior
    group_by_times: list[str]
    multi_day_theme: bool
    first_day_of_week: int
    name_size: int
