# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Annotated, Optional, cast

import typer
from rich.console import Console

from calgrid.configuration import style_options_from_configuration
from calgrid.error import CalendarConfigurationError
from calgrid.model.granularity_type import CalendarType, TimeGranularityType
from calgrid.model.style_options import MaxItemsBehavior, StyleOptions
from calgrid.repository.configuration import CONFIGURATION_REPO
from calgrid.repository.record import RECORD_REPO, RecordRepository
from calgrid.service.argument import current_date_argument
from calgrid.service.calendar import CalendarRenderer
from calgrid.terminal.custom_typer import OrderedAliasedTyperGroup
from calgrid.terminal.parse import (
    parse_first_day,
    parse_group_by,
    parse_max_items_behavior,
    parse_timezone,
)
from calgrid.view.calendar import calendar_view

app = typer.Typer(cls=OrderedAliasedTyperGroup, no_args_is_help=True)

DateArgument = Annotated[
    Optional[str],
    typer.Argument(
        help="Period to show: YYYY, YYYY-MM, YYYYWW or YYYY-MM-DD (defaults to now)",
    ),
]
EventsOption = Annotated[
    Optional[Path],
    typer.Option(
        "--events",
        "-e",
        help="YAML file of records to show instead of the data directory",
    ),
]
MaxItemsOption = Annotated[
    Optional[int],
    typer.Option(
        "--max-items",
        "-m",
        help="Single-day events shown per day (0 = all, -1 = none)",
    ),
]
MaxItemsBehaviorOption = Annotated[
    Optional[str],
    typer.Option(
        "--max-items-behavior",
        "-b",
        help="'more' to show a +N more link, 'hide' to hide every event of a full day",
    ),
]
GroupByOption = Annotated[
    Optional[str],
    typer.Option(
        "--group-by",
        "-g",
        help="Time grouping: hour, half, none or a list like 08:00,12:00,17:30",
    ),
]
FirstDayOption = Annotated[
    Optional[int],
    typer.Option(
        "--first-day",
        "-f",
        parser=parse_first_day,
        help="First day of the week, 0-6 (Sunday = 0) or a day name",
    ),
]
WeekNumbersOption = Annotated[
    Optional[bool],
    typer.Option(
        "--week-numbers/--no-week-numbers",
        help="Show or hide the week number column",
    ),
]
TimezoneOption = Annotated[
    Optional[str],
    typer.Option(
        "--timezone",
        "-tz",
        parser=parse_timezone,
        help="Display timezone (IANA name or 'local')",
    ),
]
NoMultiDayThemeOption = Annotated[
    bool,
    typer.Option(
        "--no-multi-day-theme",
        help="List multi-day and all-day events per day instead of as bands",
    ),
]


def _apply_overrides(
    style: StyleOptions,
    max_items: Optional[int],
    max_items_behavior: Optional[MaxItemsBehavior],
    group_by: Optional[list[str]],
    first_day: Optional[int],
    week_numbers: Optional[bool],
    no_multi_day_theme: bool,
) -> StyleOptions:
    if max_items is not None and style["calendar_type"] != "day":
        style["max_items"] = max_items
    if max_items_behavior is not None:
        style["max_items_behavior"] = max_items_behavior
    if group_by is not None:
        style["group_by_times"] = group_by
    if first_day is not None:
        style["first_day_of_week"] = first_day
    if week_numbers is not None:
        style["show_week_numbers"] = week_numbers
    if no_multi_day_theme:
        style["multi_day_theme"] = False
    return style


def show_calendar(
    calendar_type: CalendarType,
    date: Optional[str],
    events: Optional[Path],
    max_items: Optional[int],
    max_items_behavior: Optional[str],
    group_by: Optional[str],
    first_day: Optional[int],
    week_numbers: Optional[bool],
    timezone: Optional[str],
    no_multi_day_theme: bool,
    mini: bool = False,
) -> None:
    console = Console()
    config = CONFIGURATION_REPO.get_config()
    display_timezone = timezone if timezone is not None else config["timezone"]

    try:
        style = style_options_from_configuration(config, calendar_type, mini)
    except CalendarConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    style = _apply_overrides(
        style,
        max_items,
        parse_max_items_behavior(max_items_behavior),
        parse_group_by(group_by),
        first_day,
        week_numbers,
        no_multi_day_theme,
    )

    if events is not None and not events.is_file():
        raise typer.BadParameter(f"Events file does not exist: {events}")
    repository = RecordRepository(events) if events is not None else RECORD_REPO

    if date is None:
        try:
            date = current_date_argument(calendar_type, display_timezone)
        except CalendarConfigurationError as e:
            console.print(f"[red]{e}[/red]")
            raise typer.Exit(1)

    renderer = CalendarRenderer(
        style,
        granularity=cast(
            TimeGranularityType, config.get("all_day_granularity", "second")
        ),
        increment=config.get("all_day_increment", 1),
    )
    render = renderer.render(repository.get_all_records(), date, display_timezone)
    calendar_view(render, date, console=console)

    if render["messages"]:
        raise typer.Exit(1)


@app.command("month, m")
def month(
    date: DateArgument = None,
    events: EventsOption = None,
    max_items: MaxItemsOption = None,
    max_items_behavior: MaxItemsBehaviorOption = None,
    group_by: GroupByOption = None,
    first_day: FirstDayOption = None,
    week_numbers: WeekNumbersOption = None,
    timezone: TimezoneOption = None,
    no_multi_day_theme: NoMultiDayThemeOption = False,
    mini: Annotated[
        bool, typer.Option("--mini", help="Show a compact month without events")
    ] = False,
) -> None:
    """Display a month grid with multi-day bands and single-day events."""
    show_calendar(
        "month",
        date,
        events,
        max_items,
        max_items_behavior,
        group_by,
        first_day,
        week_numbers,
        timezone,
        no_multi_day_theme,
        mini,
    )


@app.command("week, w")
def week(
    date: DateArgument = None,
    events: EventsOption = None,
    max_items: MaxItemsOption = None,
    max_items_behavior: MaxItemsBehaviorOption = None,
    group_by: GroupByOption = None,
    first_day: FirstDayOption = None,
    week_numbers: WeekNumbersOption = None,
    timezone: TimezoneOption = None,
    no_multi_day_theme: NoMultiDayThemeOption = False,
) -> None:
    """Display a single week."""
    show_calendar(
        "week",
        date,
        events,
        max_items,
        max_items_behavior,
        group_by,
        first_day,
        week_numbers,
        timezone,
        no_multi_day_theme,
    )


@app.command("day, d")
def day(
    date: DateArgument = None,
    events: EventsOption = None,
    max_items: MaxItemsOption = None,
    max_items_behavior: MaxItemsBehaviorOption = None,
    group_by: GroupByOption = None,
    first_day: FirstDayOption = None,
    week_numbers: WeekNumbersOption = None,
    timezone: TimezoneOption = None,
    no_multi_day_theme: NoMultiDayThemeOption = False,
) -> None:
    """Display the events of a single day grouped by time."""
    show_calendar(
        "day",
        date,
        events,
        max_items,
        max_items_behavior,
        group_by,
        first_day,
        week_numbers,
        timezone,
        no_multi_day_theme,
    )


@app.command("year, y")
def year(
    date: DateArgument = None,
    events: EventsOption = None,
    first_day: FirstDayOption = None,
    week_numbers: WeekNumbersOption = None,
    timezone: TimezoneOption = None,
) -> None:
    """Display twelve mini months marking the days that have events."""
    show_calendar(
        "year",
        date,
        events,
        None,
        None,
        None,
        first_day,
        week_numbers,
        timezone,
        False,
        mini=True,
    )
