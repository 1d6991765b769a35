# SPDX-License-Identifier: MIT

from typing import Any, Optional, TypedDict

import pendulum

from calgrid.model.entity_id import EntityId


class EventOccurrence(TypedDict):
    entity_id: EntityId
    entity_type: str
    title: Optional[str]
    color: Optional[str]
    # true bounds of the occurrence
    start: pendulum.DateTime
    end: pendulum.DateTime
    # intersection with the rendered day
    calendar_start: pendulum.DateTime
    calendar_end: pendulum.DateTime
    timezone: str
    all_day: bool
    is_multi_day: bool
    continuation: bool
    continues: bool
    date_id: str
    occurrence_key: str
    rendered_fields: dict[str, Any]
    stripe_labels: list[str]
    stripe_colors: list[str]
