"""Intercept points and the directives resolved from them.

Points are plain data plus one predicate: a tagged union of
:class:`ConstructorInterceptPoint` and :class:`MethodInterceptPoint`
rather than a class hierarchy.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

from weaveplan.domain.elements import ElementDescription
from weaveplan.domain.errors import DefinitionError
from weaveplan.domain.matching import (
    ArgumentConstraint,
    MethodSignaturePattern,
    arguments_match,
    constraints_overlap,
    normalize_constraints,
)
from weaveplan.domain.types import ElementKind


def _require_handler(handler_id: str) -> None:
    if not handler_id or not handler_id.strip():
        msg = "Intercept point handler id must not be empty"
        raise DefinitionError(msg)


@dataclass(frozen=True)
class ConstructorInterceptPoint:
    """Intercepts constructors; no constraints means every constructor."""

    handler_id: str
    constraints: tuple[ArgumentConstraint, ...] = field(default=())

    kind: ClassVar[ElementKind] = ElementKind.CONSTRUCTOR

    def __post_init__(self) -> None:
        _require_handler(self.handler_id)
        object.__setattr__(self, "constraints", normalize_constraints(self.constraints))

    @property
    def override_args(self) -> bool:
        return False

    def matches(self, element: ElementDescription) -> bool:
        if element.kind is not ElementKind.CONSTRUCTOR:
            return False
        return arguments_match(self.constraints, element.param_types)

    def overlaps(self, other: InterceptPoint) -> bool:
        if not isinstance(other, ConstructorInterceptPoint):
            return False
        return constraints_overlap(self.constraints, other.constraints)

    def describe(self) -> str:
        if not self.constraints:
            return "<init>[*]"
        args = ", ".join(f"{c.position}={c.expected_type}" for c in self.constraints)
        return f"<init>[{args}]"


@dataclass(frozen=True)
class MethodInterceptPoint:
    """Intercepts exactly the instance methods *pattern* matches.

    ``override_args`` tells the weaving engine whether the handler may
    replace call arguments; it is carried through untouched.
    """

    pattern: MethodSignaturePattern
    handler_id: str
    override_args: bool = False

    kind: ClassVar[ElementKind] = ElementKind.METHOD

    def __post_init__(self) -> None:
        _require_handler(self.handler_id)

    def matches(self, element: ElementDescription) -> bool:
        if element.kind is not ElementKind.METHOD:
            return False
        return self.pattern.matches(element.name, element.param_types)

    def overlaps(self, other: InterceptPoint) -> bool:
        if not isinstance(other, MethodInterceptPoint):
            return False
        return self.pattern.overlaps(other.pattern)

    def describe(self) -> str:
        return self.pattern.describe()


InterceptPoint = ConstructorInterceptPoint | MethodInterceptPoint


@dataclass(frozen=True)
class InterceptDirective:
    """One entry of an enhancement plan handed to the weaving engine."""

    element_kind: ElementKind
    element: ElementDescription
    handler_id: str
    override_args: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": str(self.element_kind),
            "element": self.element.ref,
            "param_types": list(self.element.param_types),
            "handler": self.handler_id,
            "override_args": self.override_args,
        }


def resolve(
    points: Sequence[InterceptPoint],
    candidates: Iterable[ElementDescription],
) -> list[InterceptDirective]:
    """Test every point against every candidate.

    Candidates keep their given order, points their declared order. Each
    ``(element, handler_id)`` pair is emitted once; unmatched candidates
    are left out.
    """
    directives: list[InterceptDirective] = []
    for element in candidates:
        handlers: set[str] = set()
        for point in points:
            if point.handler_id in handlers or not point.matches(element):
                continue
            handlers.add(point.handler_id)
            directives.append(
                InterceptDirective(
                    element_kind=element.kind,
                    element=element,
                    handler_id=point.handler_id,
                    override_args=point.override_args,
                )
            )
    return directives
