"""Command: print the enhancement plan for one type."""

from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import TYPE_CHECKING

import click

from weaveplan.commands._base import WeaveCommand

if TYPE_CHECKING:
    from weaveplan.commands._context import AppContext
    from weaveplan.domain.elements import TypeDescription


def _load_class(ref: str) -> type:
    module_name, sep, attr_path = ref.partition(":")
    if not sep or not attr_path:
        msg = f"Expected 'module:Class', got {ref!r}"
        raise click.BadParameter(msg, param_hint="--describe")
    try:
        obj: object = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot load {ref!r}: {exc}"
        raise click.BadParameter(msg, param_hint="--describe") from exc
    if not isinstance(obj, type):
        msg = f"{ref!r} is not a class"
        raise click.BadParameter(msg, param_hint="--describe")
    return obj


def _load_type_file(path: Path) -> TypeDescription:
    from weaveplan.domain.elements import TypeDescription

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return TypeDescription.from_dict(data)
    except (ValueError, KeyError, TypeError) as exc:
        msg = f"Invalid type description in {path}: {exc}"
        raise click.BadParameter(msg, param_hint="--type-file") from exc


@click.command(
    cls=WeaveCommand,
    examples=(
        "weaveplan plan --describe mypkg.client:Collection",
        "weaveplan plan --type-file dbcollection.json",
        "weaveplan -v plan --type-file dbcollection.json",
    ),
)
@click.option("--describe", "class_ref", default=None, help="Python class as module:Class.")
@click.option(
    "--type-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON type description: name, constructors, methods.",
)
@click.pass_obj
def plan(app: AppContext, class_ref: str | None, type_file: Path | None) -> None:
    """Show which constructors and methods of a type would be intercepted."""
    if (class_ref is None) == (type_file is None):
        msg = "Pass exactly one of --describe or --type-file."
        raise click.UsageError(msg)

    if type_file is not None:
        target = _load_type_file(type_file)
    else:
        from weaveplan.domain.introspect import describe_class

        assert class_ref is not None
        target = describe_class(_load_class(class_ref))

    app.emit(app.service.plan(target))
