# SPDX-License-Identifier: MIT

from contextvars import ContextVar

# The --no-header flag and the show_header setting both end up here
_show_header: ContextVar[bool] = ContextVar("calgrid_show_header", default=True)


def set_show_header(value: bool) -> None:
    _show_header.set(value)


def get_show_header() -> bool:
    """Whether the calgrid banner is printed above a calendar."""
    return _show_header.get()
