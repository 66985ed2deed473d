"""Subcommand modules for weaveplan.

Provides register_commands() which uses deferred imports to keep
``weaveplan --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from weaveplan.commands.check import check
    from weaveplan.commands.definitions import definitions
    from weaveplan.commands.plan import plan

    cli.add_command(check)
    cli.add_command(definitions)
    cli.add_command(plan)
