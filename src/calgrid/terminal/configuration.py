# SPDX-License-Identifier: MIT

from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from calgrid import configuration
from calgrid.model.granularity_type import GRANULARITIES
from calgrid.repository.configuration import CONFIGURATION_REPO
from calgrid.service.week import FULL_NAME_SIZE, UNTRANSLATED_DAYS
from calgrid.terminal.custom_typer import AliasedTyperGroup
from calgrid.terminal.parse import (
    parse_first_day,
    parse_group_by,
    parse_max_items_behavior,
    parse_timezone,
)

app = typer.Typer(cls=AliasedTyperGroup, no_args_is_help=True)


def _enabled(value: bool) -> str:
    return "✓ Enabled" if value else "✗ Disabled"


@app.command("view, v")
def view() -> None:
    """Display current configuration settings."""
    config = CONFIGURATION_REPO.get_config()

    console = Console()
    table = Table()
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="magenta")

    table.add_row("show_header", _enabled(config["show_header"]))
    table.add_row("timezone", config["timezone"])
    table.add_row(
        "first_day_of_week",
        f"{config['first_day_of_week']} ({UNTRANSLATED_DAYS[config['first_day_of_week'] % 7]})",
    )
    table.add_row("calendar_type", config["calendar_type"])
    table.add_row("max_items", str(config["max_items"]))
    table.add_row("max_items_behavior", config["max_items_behavior"])
    table.add_row("group_by", config["group_by"] or "None")
    table.add_row("group_by_custom", config["group_by_custom"] or "None")
    table.add_row("multi_day_theme", _enabled(config["multi_day_theme"]))
    table.add_row("show_week_numbers", _enabled(config["show_week_numbers"]))
    table.add_row("name_size", str(config["name_size"]))
    table.add_row("data_path", str(configuration.DATA_PATH))

    console.print(table)

    yaml_library_type = "untested"
    try:
        from yaml import CDumper as Dumper  # noqa: F401
        from yaml import CLoader as Loader  # noqa: F401

        yaml_library_type = "C"
    except ImportError:
        from yaml import Loader  # type: ignore[assignment] # noqa: F401

        yaml_library_type = "Python"

    console.print()
    console.print(f"YAML Library Type: {yaml_library_type}")


@app.command("set, s")
def set(
    show_header: Annotated[
        Optional[bool],
        typer.Option(
            "--show-header/--no-show-header",
            help="Show or hide the header above calendars",
        ),
    ] = None,
    timezone: Annotated[
        Optional[str],
        typer.Option(
            "--timezone",
            parser=parse_timezone,
            help="Display timezone (IANA name or 'local')",
        ),
    ] = None,
    first_day_of_week: Annotated[
        Optional[int],
        typer.Option(
            "--first-day",
            parser=parse_first_day,
            help="First day of the week, 0-6 (Sunday = 0) or a day name",
        ),
    ] = None,
    calendar_type: Annotated[
        Optional[str],
        typer.Option(
            "--calendar-type",
            help="Default calendar type: day, week, month or year",
        ),
    ] = None,
    max_items: Annotated[
        Optional[int],
        typer.Option(
            "--max-items",
            help="Single-day events shown per day (0 = all, -1 = none)",
        ),
    ] = None,
    max_items_behavior: Annotated[
        Optional[str],
        typer.Option(
            "--max-items-behavior",
            help="'more' or 'hide'",
        ),
    ] = None,
    group_by: Annotated[
        Optional[str],
        typer.Option("--group-by", help="Time grouping preset: hour or half"),
    ] = None,
    remove_group_by: Annotated[
        bool, typer.Option("--remove-group-by", help="Stop grouping by a preset")
    ] = False,
    group_by_custom: Annotated[
        Optional[str],
        typer.Option(
            "--group-by-custom",
            help="Comma separated HH:MM(:SS) boundaries, overrides the preset",
        ),
    ] = None,
    remove_group_by_custom: Annotated[
        bool,
        typer.Option("--remove-group-by-custom", help="Remove custom boundaries"),
    ] = False,
    multi_day_theme: Annotated[
        Optional[bool],
        typer.Option(
            "--multi-day-theme/--no-multi-day-theme",
            help="Draw multi-day and all-day events as bands",
        ),
    ] = None,
    show_week_numbers: Annotated[
        Optional[bool],
        typer.Option(
            "--week-numbers/--no-week-numbers",
            help="Show or hide the week number column",
        ),
    ] = None,
    name_size: Annotated[
        Optional[int],
        typer.Option(
            "--name-size",
            help=f"Letters of day names shown: 1, 2, 3 or {FULL_NAME_SIZE} for the full name",
        ),
    ] = None,
    data_path: Annotated[
        Optional[str],
        typer.Option(
            "--data-path",
            help="Directory path for storing the events file",
        ),
    ] = None,
    remove_data_path: Annotated[
        bool,
        typer.Option(
            "--remove-data-path",
            help="Reset data path to the platform default",
        ),
    ] = False,
) -> None:
    """Update configuration settings."""
    if calendar_type is not None and calendar_type not in GRANULARITIES:
        raise typer.BadParameter(
            f"Calendar type must be one of {', '.join(GRANULARITIES)}, got {calendar_type}"
        )
    if group_by is not None and group_by not in ("hour", "half"):
        raise typer.BadParameter(f"Group by must be 'hour' or 'half', got {group_by}")
    if group_by_custom is not None:
        parse_group_by(group_by_custom)
    if max_items is not None and max_items < -1:
        raise typer.BadParameter(f"Max items must be -1 or more, got {max_items}")
    if name_size is not None and name_size not in (1, 2, 3, FULL_NAME_SIZE):
        raise typer.BadParameter(
            f"Name size must be 1, 2, 3 or {FULL_NAME_SIZE}, got {name_size}"
        )

    CONFIGURATION_REPO.update_config(
        show_header=show_header,
        timezone=timezone,
        first_day_of_week=first_day_of_week,
        calendar_type=calendar_type,  # type: ignore[arg-type]
        max_items=max_items,
        max_items_behavior=parse_max_items_behavior(max_items_behavior),
        group_by=group_by,
        remove_group_by=remove_group_by,
        group_by_custom=group_by_custom,
        remove_group_by_custom=remove_group_by_custom,
        multi_day_theme=multi_day_theme,
        show_week_numbers=show_week_numbers,
        name_size=name_size,
        data_path=data_path,
        remove_data_path=remove_data_path,
    )

    console = Console()
    console.print("[green]Configuration updated successfully![/green]\n")
    view()
