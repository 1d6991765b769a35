# tests/conftest.py
from typing import Any, Optional

import pendulum
import pytest
import yaml

from calgrid import configuration
from calgrid.model.raw_record import RawRecord
from calgrid.model.style_options import StyleOptions
from calgrid.repository.configuration import CONFIGURATION_REPO


def _instant(value: Optional[str], tz: str) -> Optional[pendulum.DateTime]:
    if value is None:
        return None
    return pendulum.parse(value, tz=tz)  # type: ignore[return-value]


@pytest.fixture
def make_record():
    """
    Factory for raw records with a single date value.

    Dates are given as ISO strings read in the record's timezone.
    """

    def _make(
        record_id: str,
        start: Optional[str],
        end: Optional[str] = None,
        title: Optional[str] = None,
        tz: str = "UTC",
        occurrences: Optional[list[tuple[str, str]]] = None,
    ) -> RawRecord:
        record: RawRecord = {
            "id": record_id,
            "entity_type": "event",
            "title": title if title is not None else f"Event {record_id}",
            "color": None,
            "timezone": tz,
            "field_name": "date",
            "dates": [{"start": _instant(start, tz), "end": _instant(end, tz)}],
        }
        if occurrences is not None:
            record["occurrences"] = [
                {"start": _instant(s, tz), "end": _instant(e, tz)}
                for s, e in occurrences
            ]
        return record

    return _make


@pytest.fixture
def make_style():
    """Factory for month style options with keyword overrides."""

    def _make(**overrides: Any) -> StyleOptions:
        style: StyleOptions = {
            "calendar_type": "month",
            "mini": False,
            "show_week_numbers": False,
            "max_items": 0,
            "max_items_behavior": "more",
            "group_by_times": [],
            "multi_day_theme": True,
            "first_day_of_week": 0,
            "name_size": 3,
        }
        style.update(overrides)  # type: ignore[typeddict-item]
        return style

    return _make


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """
    Point the configuration and data paths at a temporary directory and
    write a default configuration there.
    """
    config_path = tmp_path / "config"
    data_path = tmp_path / "data"
    config_path.mkdir()
    data_path.mkdir()

    monkeypatch.setattr(configuration, "CONFIG_PATH", config_path)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_path / "config.yaml")
    monkeypatch.setattr(configuration, "DATA_PATH", data_path)
    monkeypatch.setattr(configuration, "DATA_EVENTS_PATH", data_path / "events.yaml")
    monkeypatch.setattr(CONFIGURATION_REPO, "_config", None)
    monkeypatch.setattr(CONFIGURATION_REPO, "is_dirty", False)

    config = configuration.default_configuration()
    config["timezone"] = "UTC"
    (config_path / "config.yaml").write_text(yaml.dump(config))
    (data_path / "events.yaml").write_text(yaml.dump({"records": []}))

    return tmp_path
