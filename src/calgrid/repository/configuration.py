# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from calgrid import configuration
from calgrid.model.granularity_type import CalendarType
from calgrid.model.style_options import MaxItemsBehavior


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        self._config = load(configuration.APP_CONFIG_PATH.read_text(), Loader=Loader)

        if self._config is None:
            raise ValueError()

        # Migration: backfill keys added after the file was written
        defaults = configuration.default_configuration()
        for key, value in defaults.items():
            if key not in self._config:
                self._config[key] = value  # type: ignore[literal-required]

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(config, Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        show_header: Optional[bool] = None,
        timezone: Optional[str] = None,
        first_day_of_week: Optional[int] = None,
        calendar_type: Optional[CalendarType] = None,
        max_items: Optional[int] = None,
        max_items_behavior: Optional[MaxItemsBehavior] = None,
        group_by: Optional[str] = None,
        remove_group_by: bool = False,
        group_by_custom: Optional[str] = None,
        remove_group_by_custom: bool = False,
        multi_day_theme: Optional[bool] = None,
        show_week_numbers: Optional[bool] = None,
        name_size: Optional[int] = None,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
    ) -> None:
        self.is_dirty = True

        if show_header is not None:
            self.config["show_header"] = show_header
        if timezone is not None:
            self.config["timezone"] = timezone
        if first_day_of_week is not None:
            self.config["first_day_of_week"] = first_day_of_week
        if calendar_type is not None:
            self.config["calendar_type"] = calendar_type
        if max_items is not None:
            self.config["max_items"] = max_items
        if max_items_behavior is not None:
            self.config["max_items_behavior"] = max_items_behavior
        if group_by is not None:
            self.config["group_by"] = group_by
        if remove_group_by:
            self.config["group_by"] = None
        if group_by_custom is not None:
            self.config["group_by_custom"] = group_by_custom
        if remove_group_by_custom:
            self.config["group_by_custom"] = None
        if multi_day_theme is not None:
            self.config["multi_day_theme"] = multi_day_theme
        if show_week_numbers is not None:
            self.config["show_week_numbers"] = show_week_numbers
        if name_size is not None:
            self.config["name_size"] = name_size
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None


CONFIGURATION_REPO = ConfigurationRepository()
