# SPDX-License-Identifier: MIT

from typing import Literal

GranularityType = Literal["day", "week", "month", "year"]

CalendarType = Literal["day", "week", "month", "year"]

GRANULARITIES: tuple[GranularityType, ...] = ("day", "week", "month", "year")

# Resolution used when deciding whether a day intersection covers the full day
TimeGranularityType = Literal["second", "minute", "hour"]
