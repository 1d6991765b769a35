# SPDX-License-Identifier: MIT

from typing import Annotated

import typer

from calgrid.terminal import configuration, view
from calgrid.terminal.custom_typer import OrderedAliasedTyperGroup
from calgrid.view import state as view_state

app = typer.Typer(
    cls=OrderedAliasedTyperGroup,
    help="calgrid - Event calendar grids in the CLI",
    no_args_is_help=True,
)
app.add_typer(view.app, name="view, v")
app.add_typer(configuration.app, name="config, c")


@app.callback()
def main_callback(
    no_header: Annotated[
        bool,
        typer.Option(
            "--no-header",
            "-nh",
            help="Suppress header output above calendars",
        ),
    ] = False,
) -> None:
    """
    calgrid - Event calendar grids in the CLI

    Global options that apply to all commands.
    """
    if no_header:
        view_state.set_show_header(False)


def run() -> None:
    app()
