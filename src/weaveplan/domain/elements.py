"""Host-provided descriptions of a loaded type and its members.

The weaving engine hands these in on every class-load event. Parameter
types are declared type *names*; nothing here resolves or loads them.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from weaveplan.domain.types import CONSTRUCTOR_NAME, ElementKind


@dataclass(frozen=True)
class ElementDescription:
    """One constructor or method of a target type."""

    kind: ElementKind
    name: str
    param_types: tuple[str, ...] = ()

    @property
    def arity(self) -> int:
        return len(self.param_types)

    @property
    def ref(self) -> str:
        """Short reference such as ``insert/3``."""
        return f"{self.name}/{self.arity}"

    def __str__(self) -> str:
        return self.ref

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.kind),
            "name": self.name,
            "param_types": list(self.param_types),
        }


def constructor(*param_types: str) -> ElementDescription:
    return ElementDescription(ElementKind.CONSTRUCTOR, CONSTRUCTOR_NAME, tuple(param_types))


def method(name: str, *param_types: str) -> ElementDescription:
    return ElementDescription(ElementKind.METHOD, name, tuple(param_types))


@dataclass(frozen=True)
class TypeDescription:
    """A loaded type: its fully-qualified name, constructors and methods.

    Members keep declaration order; enhancement plans follow it.
    """

    name: str
    constructors: tuple[ElementDescription, ...] = field(default=())
    methods: tuple[ElementDescription, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "constructors", tuple(self.constructors))
        object.__setattr__(self, "methods", tuple(self.methods))

    def elements(self) -> Iterator[ElementDescription]:
        yield from self.constructors
        yield from self.methods

    def overloads(self, name: str) -> list[ElementDescription]:
        return [m for m in self.methods if m.name == name]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> TypeDescription:
        """Build from ``{"name", "constructors": [[...]], "methods": [{"name", "params"}]}``.

        Raises:
            TypeError: If a section has the wrong JSON shape.
            KeyError: If a type or method name is missing.
        """
        if not isinstance(data, Mapping):
            msg = f"type description must be an object, got {type(data).__name__}"
            raise TypeError(msg)
        ctors = _sequence(data.get("constructors", ()), "constructors")
        methods = _sequence(data.get("methods", ()), "methods")
        for entry in methods:
            if not isinstance(entry, Mapping):
                msg = f"method entries must be objects, got {type(entry).__name__}"
                raise TypeError(msg)
        return cls(
            name=data["name"],
            constructors=tuple(constructor(*_sequence(p, "constructor params")) for p in ctors),
            methods=tuple(
                method(m["name"], *_sequence(m.get("params", ()), "method params"))
                for m in methods
            ),
        )


def _sequence(value: Any, what: str) -> Sequence[Any]:
    # JSON arrays only; a bare string would otherwise split into characters.
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        msg = f"{what} must be a list, got {type(value).__name__}"
        raise TypeError(msg)
    return value
