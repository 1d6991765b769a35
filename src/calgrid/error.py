# SPDX-License-Identifier: MIT


class CalendarConfigurationError(ValueError):
    """A render cannot start: missing or invalid date argument or style option."""
