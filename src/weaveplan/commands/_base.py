"""Click base classes with an on-demand ``--examples`` flag.

Commands declare ``examples`` as a sequence of command lines. ``--help``
only mentions that examples exist; ``--examples`` prints them and exits.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import click

_PROMPT = "$ "


def _examples_option(examples: Sequence[str]) -> click.Option:
    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in examples:
            click.echo(f"  {_PROMPT}{line}")
        ctx.exit(0)

    return click.Option(
        ["--examples"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=show_examples,
        help="Show usage examples.",
    )


class WeaveCommand(click.Command):
    """Command accepting ``examples=("weaveplan ...", ...)``."""

    def __init__(self, *args: Any, examples: Sequence[str] = (), **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = tuple(examples)
        if self.examples:
            self.params.append(_examples_option(self.examples))

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"Run '{ctx.command_path} --examples' for usage examples.")


class WeaveGroup(click.Group):
    """Root group; subcommands default to :class:`WeaveCommand`."""

    command_class = WeaveCommand
