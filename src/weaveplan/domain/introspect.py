"""Build a :class:`TypeDescription` from a live Python class.

Python has no overloads by name, so each public function yields exactly one
method element. Declared annotations become parameter type names; they are
never evaluated, so forward references stay as written.
"""

from __future__ import annotations

import builtins
import inspect
from typing import Any

from weaveplan.domain.elements import ElementDescription, TypeDescription, constructor, method

_UNANNOTATED = "object"
_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


def qualified_name(obj: type) -> str:
    """``module.QualName`` for a class; builtins stay unqualified."""
    module = getattr(obj, "__module__", None)
    qualname = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", repr(obj))
    if module in (None, builtins.__name__):
        return qualname
    return f"{module}.{qualname}"


def type_name(annotation: Any) -> str:
    if annotation is inspect.Parameter.empty:
        return _UNANNOTATED
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, type):
        return qualified_name(annotation)
    # Generic aliases and unions: fall back to their repr.
    return repr(annotation)


def _param_types(func: Any) -> tuple[str, ...] | None:
    try:
        sig = inspect.signature(func)
    except (TypeError, ValueError):
        return None
    params = list(sig.parameters.values())
    if params and params[0].name in ("self", "cls"):
        params = params[1:]
    return tuple(type_name(p.annotation) for p in params if p.kind not in _SKIPPED_KINDS)


def _own_or_inherited_init(cls: type) -> Any:
    # First __init__ along the MRO; object.__init__ counts as none.
    for klass in cls.__mro__:
        if klass is object:
            break
        init = klass.__dict__.get("__init__")
        if init is not None:
            return init
    return None


def describe_class(cls: type) -> TypeDescription:
    """Describe *cls*'s constructor (own or inherited) and its own public methods."""
    constructors: list[ElementDescription] = []
    init = _own_or_inherited_init(cls)
    if init is not None:
        params = _param_types(init)
        if params is not None:
            constructors.append(constructor(*params))
    else:
        constructors.append(constructor())

    methods: list[ElementDescription] = []
    for attr_name, attr in cls.__dict__.items():
        if attr_name.startswith("_"):
            continue
        if isinstance(attr, (staticmethod, classmethod)):
            continue
        if not inspect.isfunction(attr):
            continue
        params = _param_types(attr)
        if params is None:
            continue
        methods.append(method(attr_name, *params))

    return TypeDescription(
        name=qualified_name(cls),
        constructors=tuple(constructors),
        methods=tuple(methods),
    )
