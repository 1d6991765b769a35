# SPDX-License-Identifier: MIT

import re
from typing import Optional

import click
import typer.core

_ALIAS_SEPARATOR = re.compile(r"\s*,\s*")


def command_aliases(name: str) -> list[str]:
    """Split a registered command name like "month, m" into its aliases."""
    return [alias for alias in _ALIAS_SEPARATOR.split(name) if alias]


class AliasedTyperGroup(typer.core.TyperGroup):
    """TyperGroup whose commands are registered as "name, alias, ..." """

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self.resolve_alias(cmd_name))

    def resolve_alias(self, typed: str) -> str:
        """Registered name of the command ``typed`` is an alias of, else ``typed``."""
        for registered in self.commands:
            if typed in command_aliases(registered):
                return registered
        return typed


class OrderedAliasedTyperGroup(AliasedTyperGroup):
    """Lists commands from the widest period to the narrowest"""

    desired_order = [
        "view, v",
        "config, c",
        "year, y",
        "month, m",
        "week, w",
        "day, d",
    ]

    def list_commands(self, ctx: click.Context) -> list[str]:
        ordered = [name for name in self.desired_order if name in self.commands]
        return ordered + sorted(set(self.commands) - set(ordered))
