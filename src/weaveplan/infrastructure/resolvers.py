"""Type resolvers — host capabilities answering "is this type name resolvable".

:func:`import_resolver` checks the running Python process and may import
modules as a side effect. :class:`StaticResolver` answers from a fixed set
and is used for offline planning.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
from collections.abc import Iterable

logger = logging.getLogger(__name__)


def import_resolver(type_name: str) -> bool:
    """True if *type_name* is an importable module or an attribute path under one.

    ``package.module.Class.Inner`` resolves when the longest importable
    module prefix exposes the remaining attributes.
    """
    parts = type_name.split(".")
    for split in range(len(parts), 0, -1):
        module_name = ".".join(parts[:split])
        try:
            if importlib.util.find_spec(module_name) is None:
                continue
            module = importlib.import_module(module_name)
        except (ImportError, ValueError):
            continue

        obj: object = module
        for attr in parts[split:]:
            if not hasattr(obj, attr):
                return False
            obj = getattr(obj, attr)
        return True
    logger.debug("Type %s is not resolvable", type_name)
    return False


class StaticResolver:
    """Resolves exactly the names it was built with."""

    def __init__(self, present: Iterable[str] = ()) -> None:
        self._present = frozenset(present)

    def __call__(self, type_name: str) -> bool:
        return type_name in self._present

    def __repr__(self) -> str:
        return f"StaticResolver({sorted(self._present)!r})"
