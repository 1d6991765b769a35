# SPDX-License-Identifier: MIT

from typing import Any, NotRequired, Optional, TypedDict

import pendulum

from calgrid.model.entity_id import EntityId


class DateFieldValue(TypedDict):
    start: Optional[pendulum.DateTime]
    end: Optional[pendulum.DateTime]


class RawRecord(TypedDict):
    id: EntityId
    entity_type: str
    title: Optional[str]
    color: Optional[str]
    timezone: str
    field_name: str
    dates: list[DateFieldValue]
    occurrences: NotRequired[Optional[list[DateFieldValue]]]
    rendered_fields: NotRequired[dict[str, Any]]
    stripe_labels: NotRequired[list[str]]
    stripe_colors: NotRequired[list[str]]
