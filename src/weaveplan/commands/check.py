"""Command: validate every configured and discovered definition."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from weaveplan.commands._base import WeaveCommand

if TYPE_CHECKING:
    from weaveplan.commands._context import AppContext


@click.command(
    cls=WeaveCommand,
    examples=(
        "weaveplan check",
        "weaveplan --json check",
        "weaveplan -c ./weaveplan.toml check",
    ),
)
@click.pass_obj
def check(app: AppContext) -> None:
    """Load all definitions and fail if any was rejected."""
    app.emit(app.service.check())
