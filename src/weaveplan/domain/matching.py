"""Type and method matchers.

Overloads are told apart solely by checking fixed parameter positions
against one expected declared type name each. Signatures are never parsed
in full, so an upstream overload that gains, loses or widens a parameter
can silently stop matching (or start matching a different overload).
That limitation is accepted: callers pin positions against the library
version they instrument.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from weaveplan.domain.errors import DefinitionError

# ---------------------------------------------------------------------------
# Class matching
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ClassMatch:
    """Exact, case-sensitive match on a fully-qualified type name."""

    target_name: str

    def __post_init__(self) -> None:
        if not self.target_name or not self.target_name.strip():
            msg = "ClassMatch target name must not be empty"
            raise DefinitionError(msg)

    def matches(self, type_name: str) -> bool:
        return type_name == self.target_name


def by_name(target_name: str) -> ClassMatch:
    """Declarative constructor for :class:`ClassMatch`."""
    return ClassMatch(target_name)


# ---------------------------------------------------------------------------
# Argument constraints
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ArgumentConstraint:
    """Parameter at *position* must be declared exactly as *expected_type*."""

    position: int
    expected_type: str

    def __post_init__(self) -> None:
        if self.position < 0:
            msg = f"Argument position must be non-negative, got {self.position}"
            raise DefinitionError(msg, position=self.position)
        if not self.expected_type:
            msg = f"Expected type for argument {self.position} must not be empty"
            raise DefinitionError(msg, position=self.position)

    def holds(self, param_types: Sequence[str]) -> bool:
        # Out-of-range positions simply fail to match.
        if self.position >= len(param_types):
            return False
        return param_types[self.position] == self.expected_type


def takes_argument_with_type(position: int, expected_type: str) -> ArgumentConstraint:
    return ArgumentConstraint(position, expected_type)


def normalize_constraints(
    constraints: Iterable[ArgumentConstraint],
) -> tuple[ArgumentConstraint, ...]:
    """Freeze *constraints* into a tuple, rejecting repeated positions."""
    frozen = tuple(constraints)
    seen: set[int] = set()
    for constraint in frozen:
        if constraint.position in seen:
            msg = f"Argument position {constraint.position} is constrained more than once"
            raise DefinitionError(msg, position=constraint.position)
        seen.add(constraint.position)
    return frozen


def arguments_match(
    constraints: Sequence[ArgumentConstraint],
    param_types: Sequence[str],
) -> bool:
    """True when every constraint holds. No constraints match anything."""
    return all(c.holds(param_types) for c in constraints)


def constraints_overlap(
    left: Sequence[ArgumentConstraint],
    right: Sequence[ArgumentConstraint],
) -> bool:
    """True when some concrete parameter list could satisfy both sides.

    Two constraint sets are disjoint only if they pin the same position to
    different types.
    """
    pinned = {c.position: c.expected_type for c in left}
    for c in right:
        expected = pinned.get(c.position)
        if expected is not None and expected != c.expected_type:
            return False
    return True


# ---------------------------------------------------------------------------
# Method signature patterns
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MethodSignaturePattern:
    """Method name plus zero or more positional parameter-type constraints.

    An empty constraint list matches every overload of the name and should
    only be used when the target has no overloads to disambiguate.
    """

    name: str
    constraints: tuple[ArgumentConstraint, ...] = field(default=())

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            msg = "Method pattern name must not be empty"
            raise DefinitionError(msg)
        object.__setattr__(self, "constraints", normalize_constraints(self.constraints))

    def matches(self, candidate_name: str, candidate_param_types: Sequence[str]) -> bool:
        if candidate_name != self.name:
            return False
        return arguments_match(self.constraints, candidate_param_types)

    def overlaps(self, other: MethodSignaturePattern) -> bool:
        """Whether one concrete method could satisfy both patterns."""
        if self.name != other.name:
            return False
        return constraints_overlap(self.constraints, other.constraints)

    def taking(self, position: int, expected_type: str) -> MethodSignaturePattern:
        """Return a copy further constrained at *position*."""
        return MethodSignaturePattern(
            self.name,
            (*self.constraints, ArgumentConstraint(position, expected_type)),
        )

    @property
    def max_position(self) -> int | None:
        if not self.constraints:
            return None
        return max(c.position for c in self.constraints)

    def describe(self) -> str:
        if not self.constraints:
            return self.name
        args = ", ".join(f"{c.position}={c.expected_type}" for c in self.constraints)
        return f"{self.name}[{args}]"


def named(name: str) -> MethodSignaturePattern:
    """Start a pattern matching every overload of *name*."""
    return MethodSignaturePattern(name)
