# SPDX-License-Identifier: MIT

import datetime
from pathlib import Path
from typing import Any, Optional

import pendulum
from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]

from calgrid import configuration, time
from calgrid.model.entity_id import normalize_entity_id
from calgrid.model.raw_record import DateFieldValue, RawRecord

DEFAULT_ENTITY_TYPE = "event"
DEFAULT_FIELD_NAME = "date"


def _instant_from_value(value: Any, tz: str) -> Optional[pendulum.DateTime]:
    """
    Convert a stored date value into an instant.

    YAML hands back unquoted timestamps as datetime or date objects and
    anything else as strings; values that cannot be read become None.
    """
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return pendulum.instance(value, tz=tz)
    if isinstance(value, datetime.date):
        return pendulum.datetime(value.year, value.month, value.day, tz=tz)
    if isinstance(value, str):
        try:
            return time.datetime_from_str(value, tz)
        except ValueError:
            return None
    return None


def _date_values(raw_dates: Any, tz: str) -> list[DateFieldValue]:
    if not isinstance(raw_dates, list):
        return []
    values: list[DateFieldValue] = []
    for raw_date in raw_dates:
        if not isinstance(raw_date, dict):
            values.append({"start": None, "end": None})
            continue
        values.append(
            {
                "start": _instant_from_value(raw_date.get("start"), tz),
                "end": _instant_from_value(raw_date.get("end"), tz),
            }
        )
    return values


class RecordRepository:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._records: Optional[list[RawRecord]] = None

    @property
    def path(self) -> Path:
        if self._path is not None:
            return self._path
        return configuration.DATA_EVENTS_PATH

    @property
    def records(self) -> list[RawRecord]:
        if self._records is None:
            self.__load_data()
        if self._records is None:
            raise ValueError()
        return self._records

    def __load_data(self) -> None:
        self._records = []
        if not self.path.is_file():
            return
        data = load(self.path.read_text(), Loader=Loader)
        if data is None:
            return
        for raw_record in data.get("records") or []:
            if not isinstance(raw_record, dict):
                continue
            record = self.__convert_record_for_deserialization(raw_record)
            # Records without an id cannot be told apart and are left out
            if record is not None:
                self._records.append(record)

    def __convert_record_for_deserialization(
        self, record: dict[str, Any]
    ) -> Optional[RawRecord]:
        entity_id = normalize_entity_id(record.get("id"))
        if entity_id is None:
            return None
        tz = record.get("timezone") or "UTC"
        raw_record: RawRecord = {
            "id": entity_id,
            "entity_type": record.get("entity_type") or DEFAULT_ENTITY_TYPE,
            "title": record.get("title"),
            "color": record.get("color"),
            "timezone": tz,
            "field_name": record.get("field_name") or DEFAULT_FIELD_NAME,
            "dates": _date_values(record.get("dates"), tz),
            "rendered_fields": record.get("rendered_fields") or {},
            "stripe_labels": record.get("stripe_labels") or [],
            "stripe_colors": record.get("stripe_colors") or [],
        }
        if record.get("occurrences") is not None:
            raw_record["occurrences"] = _date_values(record.get("occurrences"), tz)
        return raw_record

    def get_all_records(self) -> list[RawRecord]:
        return list(self.records)

    def get_record(self, entity_id: str) -> Optional[RawRecord]:
        for record in self.records:
            if record["id"] == entity_id:
                return record
        return None


RECORD_REPO = RecordRepository()
