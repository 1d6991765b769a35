# SPDX-License-Identifier: MIT

from typing import Optional

from rich import box
from rich.columns import Columns
from rich.console import Console, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from calgrid.color import (
    BAND_CONTINUATION_STYLE,
    HAS_EVENTS_STYLE,
    MORE_STYLE,
    OUT_OF_MONTH_STYLE,
    TODAY_STYLE,
    WEEK_NUMBER_STYLE,
    event_color,
)
from calgrid.model.calendar_render import CalendarRender
from calgrid.model.day_content import DayContent
from calgrid.model.grid_cell import GridCell, GridRow, MoreLink
from calgrid.model.occurrence import EventOccurrence
from calgrid.view.header import header

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


def _title(occurrence: EventOccurrence) -> str:
    title = occurrence.get("title")
    if title is None or title == "":
        return "[no title]"
    return title


def _truncate(text: str, width: int) -> str:
    if len(text) > width:
        return text[: max(1, width - 3)] + "..."
    return text


def _more_text(more: MoreLink) -> Text:
    if more["behavior"] == "hide":
        return Text(f"{more['total']} events", style=MORE_STYLE)
    return Text(f"+{more['count']} more", style=MORE_STYLE)


def _band_text(occurrence: EventOccurrence, cell_width: int) -> Text:
    text = Text()
    style = event_color(occurrence["color"])
    if occurrence["continuation"]:
        text.append("◀ ", style=style)
    label = _truncate(_title(occurrence), cell_width - 4)
    text.append(label, style=f"reverse {style}")
    if occurrence["continues"]:
        text.append(" ▶", style=style)
    return text


def _single_text(occurrence: EventOccurrence, cell_width: int) -> Text:
    text = Text()
    style = event_color(occurrence["color"])
    local_start = occurrence["calendar_start"].in_tz(occurrence["timezone"])
    text.append(local_start.format("HH:mm "), style="dim")
    text.append(_truncate(_title(occurrence), cell_width - 6), style=style)
    return text


def _split_weeks(rows: list[GridRow]) -> list[list[GridRow]]:
    weeks: list[list[GridRow]] = []
    for row in rows:
        if row["row_kind"] == "date-box" or not weeks:
            weeks.append([])
        weeks[-1].append(row)
    return weeks


def _week_renderables(
    week: list[GridRow], show_week_numbers: bool, cell_width: int
) -> list[RenderableType]:
    """
    Flatten the rows of one week into one text block per day column.

    Band rows become one line each in every column so bands stay aligned;
    single-day cells are listed below the bands of their column.
    """
    band_lines: list[list[Text]] = [[] for _ in range(7)]
    single_lines: list[list[Text]] = [[] for _ in range(7)]
    day_numbers: list[Text] = [Text() for _ in range(7)]
    week_number = Text()

    for row in week:
        if row["row_kind"] == "date-box":
            for cell in row["cells"]:
                if cell["column"] < 0:
                    week_number = Text(
                        str(cell.get("week_number", "")), style=WEEK_NUMBER_STYLE
                    )
                    continue
                day_numbers[cell["column"]] = _day_number_text(cell)
            continue

        covered: set[int] = set()
        for cell in row["cells"]:
            column = cell["column"]
            if cell["row_kind"] == "multi-day":
                if cell["content"]:
                    band_lines[column].append(
                        _band_text(cell["content"][0], cell_width)
                    )
                    for offset in range(1, cell["colspan"]):
                        if column + offset < 7:
                            band_lines[column + offset].append(
                                Text("─" * (cell_width - 2), style=BAND_CONTINUATION_STYLE)
                            )
                            covered.add(column + offset)
                else:
                    band_lines[column].append(Text(""))
                covered.add(column)
            elif cell["row_kind"] == "single-day":
                for occurrence in cell["content"]:
                    single_lines[column].append(_single_text(occurrence, cell_width))
                if cell["more"] is not None:
                    single_lines[column].append(_more_text(cell["more"]))

    band_depth = max(len(lines) for lines in band_lines)
    renderables: list[RenderableType] = []
    if show_week_numbers:
        renderables.append(week_number)
    for column in range(7):
        text = Text()
        text.append_text(day_numbers[column])
        lines = band_lines[column] + [Text("")] * (band_depth - len(band_lines[column]))
        for line in lines + single_lines[column]:
            text.append("\n")
            text.append_text(line)
        renderables.append(text)
    return renderables


def _day_number_text(cell: GridCell) -> Text:
    day_number = f"{cell.get('day_of_month', 0):2d}"
    classes = cell["classes"]
    if "empty" in classes:
        return Text(day_number, style=OUT_OF_MONTH_STYLE)
    if "today" in classes:
        return Text(day_number, style=TODAY_STYLE)
    return Text(day_number, style="bold")


def _grid_table(
    header_cells: list[GridCell], cell_width: int, show_lines: bool = True
) -> Table:
    table = Table(box=box.SIMPLE, show_header=True, show_lines=show_lines, padding=(0, 1))
    for cell in header_cells:
        if cell["column"] < 0:
            table.add_column(cell.get("header", ""), style=WEEK_NUMBER_STYLE, width=4)
        else:
            table.add_column(cell.get("header", ""), style="bold", width=cell_width)
    return table


def render_grid(render: CalendarRender, cell_width: int = 18) -> Table:
    """Build the month or week table of a render."""
    show_week_numbers = any(cell["column"] < 0 for cell in render["header"])
    table = _grid_table(render["header"], cell_width)
    for week in _split_weeks(render["rows"]):
        table.add_row(*_week_renderables(week, show_week_numbers, cell_width))
    return table


def render_mini_month(
    header_cells: list[GridCell], rows: list[GridRow], title: str
) -> Panel:
    table = _grid_table(header_cells, 3, show_lines=False)
    for row in rows:
        texts: list[RenderableType] = []
        for cell in row["cells"]:
            if cell["column"] < 0:
                texts.append(Text(str(cell.get("week_number", "")), style=WEEK_NUMBER_STYLE))
                continue
            day_number = f"{cell.get('day_of_month', 0):2d}"
            classes = cell["classes"]
            if "empty" in classes:
                texts.append(Text(day_number, style=OUT_OF_MONTH_STYLE))
            elif "today" in classes:
                texts.append(Text(day_number, style=TODAY_STYLE))
            elif cell.get("has_events"):
                texts.append(Text(day_number, style=HAS_EVENTS_STYLE))
            else:
                texts.append(Text(day_number))
        table.add_row(*texts)
    return Panel(table, title=title, border_style="bright_black", padding=(0, 1))


def render_day(day: DayContent) -> Table:
    table = Table(box=box.SIMPLE, show_header=True, padding=(0, 1))
    table.add_column("Time", style="dim", width=10)
    table.add_column(day["date"], style="bold")

    for occurrence in day["all_day"]:
        table.add_row(
            "all day",
            Text(_title(occurrence), style=event_color(occurrence["color"])),
        )
    for label, occurrences in day["items"].items():
        for index, occurrence in enumerate(occurrences):
            text = Text(_title(occurrence), style=event_color(occurrence["color"]))
            if occurrence["continuation"]:
                text = Text("◀ ").append_text(text)
            if occurrence["continues"]:
                text.append(" ▶")
            table.add_row(label[:5] if index == 0 else "", text)
    if day["link"] is not None:
        table.add_row("", _more_text(day["link"]))
    if day["empty"] and day["link"] is None:
        table.add_row("", Text("No events", style=MORE_STYLE))
    return table


def calendar_view(
    render: CalendarRender,
    title: str,
    cell_width: int = 18,
    console: Optional[Console] = None,
) -> None:
    """
    Display a calendar render in the terminal.

    Args:
        render: The render to display
        title: Heading shown above the grid
        cell_width: Width of each day column in characters
        console: Console to print to (defaults to a new one)
    """
    if console is None:
        console = Console()

    header(f"{render['calendar_type']} calendar", title)

    for message in render["messages"]:
        console.print(f"[red]{message}[/red]")
    if render["messages"]:
        return

    console.print(f"\n[bold]{title}[/bold]\n")

    calendar_type = render["calendar_type"]
    if calendar_type in ("month", "week"):
        if render["rows"] and render["rows"][0]["row_kind"] == "mini":
            console.print(render_mini_month(render["header"], render["rows"], title))
        else:
            console.print(render_grid(render, cell_width))
    elif calendar_type == "year":
        panels: list[RenderableType] = [
            render_mini_month(render["header"], rows, MONTH_NAMES[index])
            for index, rows in enumerate(render["months"])
        ]
        console.print(Columns(panels, equal=False, expand=False, padding=(0, 2)))
    elif render["day"] is not None:
        console.print(render_day(render["day"]))

    if render["pager"] is not None:
        console.print(
            f"[dim]previous: {render['pager']['previous']}   "
            f"next: {render['pager']['next']}[/dim]"
        )
    console.print()
