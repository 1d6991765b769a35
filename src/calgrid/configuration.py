# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import NotRequired, Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

from calgrid.error import CalendarConfigurationError
from calgrid.model.granularity_type import CalendarType
from calgrid.model.style_options import SHOW_ALL, MaxItemsBehavior, StyleOptions
from calgrid.service.bucket import groupby_times, parse_custom_groupby_times

APP_NAME = "calgrid"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# Set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)
DATA_EVENTS_PATH: Path = DATA_PATH / "events.yaml"


class Configuration(TypedDict):
    show_header: bool
    timezone: str
    first_day_of_week: int
    calendar_type: CalendarType
    max_items: int
    max_items_behavior: MaxItemsBehavior
    # "hour", "half" or None
    group_by: Optional[str]
    # comma separated HH:MM:SS list, overrides group_by
    group_by_custom: Optional[str]
    multi_day_theme: bool
    show_week_numbers: bool
    name_size: int
    data_path: Optional[str]
    all_day_granularity: NotRequired[str]
    all_day_increment: NotRequired[int]


def default_configuration() -> Configuration:
    return {
        "show_header": True,
        "timezone": "local",
        "first_day_of_week": 0,
        "calendar_type": "month",
        "max_items": 0,
        "max_items_behavior": "more",
        "group_by": None,
        "group_by_custom": None,
        "multi_day_theme": True,
        "show_week_numbers": False,
        "name_size": 3,
        "data_path": None,
        "all_day_granularity": "second",
        "all_day_increment": 1,
    }


def load_data_path_configuration() -> None:
    """
    Load the configuration and set the DATA_PATH variables dynamically.

    This must be called after the config file exists and before any
    repositories are used.
    """
    global DATA_PATH, DATA_EVENTS_PATH

    if not APP_CONFIG_PATH.is_file():
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")

    if data_path_setting is not None:
        DATA_PATH = Path(data_path_setting)
        DATA_EVENTS_PATH = DATA_PATH / "events.yaml"


def _int_option(config: Configuration, key: str) -> int:
    value = config[key]  # type: ignore[literal-required]
    if isinstance(value, bool) or not isinstance(value, int):
        raise CalendarConfigurationError(f"Configuration value {key} must be a number")
    return value


def style_options_from_configuration(
    config: Configuration,
    calendar_type: Optional[CalendarType] = None,
    mini: bool = False,
) -> StyleOptions:
    """
    Convert the stored configuration into style options for one render.

    Args:
        config: The loaded configuration
        calendar_type: Overrides the configured calendar type
        mini: Render mini calendars

    Raises:
        CalendarConfigurationError: When a value has the wrong type
    """
    group_by_custom = config.get("group_by_custom")
    group_by_times = (
        parse_custom_groupby_times(group_by_custom)
        if group_by_custom
        else groupby_times(config.get("group_by"))
    )

    resolved_type = (
        calendar_type if calendar_type is not None else config["calendar_type"]
    )
    max_items = _int_option(config, "max_items")
    if resolved_type == "day":
        max_items = SHOW_ALL

    return {
        "calendar_type": resolved_type,
        "mini": mini,
        "show_week_numbers": bool(config["show_week_numbers"]),
        "max_items": max_items,
        "max_items_behavior": config["max_items_behavior"],
        "group_by_times": group_by_times,
        "multi_day_theme": bool(config["multi_day_theme"]),
        "first_day_of_week": _int_option(config, "first_day_of_week"),
        "name_size": _int_option(config, "name_size"),
    }
