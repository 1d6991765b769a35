# SPDX-License-Identifier: MIT

from typing import TypedDict

import pendulum

from calgrid.model.granularity_type import GranularityType


class VisibleRange(TypedDict):
    min: pendulum.DateTime
    max: pendulum.DateTime
    granularity: GranularityType
    timezone: str
    # YYYY-MM-DD in the display timezone
    today: str
