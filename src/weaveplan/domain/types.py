"""Element kinds and lifecycle enums shared across the domain layer."""

from __future__ import annotations

from enum import StrEnum

CONSTRUCTOR_NAME = "<init>"


class ElementKind(StrEnum):
    """Kind of type member an intercept point applies to."""

    CONSTRUCTOR = "constructor"
    METHOD = "method"


class PositionCheck(StrEnum):
    """How construction treats a constraint position beyond every known overload."""

    OFF = "off"
    WARN = "warn"
    ERROR = "error"


class WitnessState(StrEnum):
    """Memoized witness evaluation state."""

    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"


class DefinitionState(StrEnum):
    """Per-process lifecycle of a constructed definition."""

    VALIDATED = "validated"
    ACTIVE = "active"
    INACTIVE = "inactive"
