"""Construction-time errors for plugin definitions.

INVARIANT: Only construction raises. Matching and planning never do.
"""

from __future__ import annotations

from typing import Any


class DefinitionError(ValueError):
    """A plugin definition is malformed and must be rejected in its entirety."""

    code = "INVALID_DEFINITION"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class ConfigurationConflict(DefinitionError):
    """Two intercept points would match one concrete signature with different handlers."""

    code = "CONFIGURATION_CONFLICT"


class InvalidPosition(DefinitionError):
    """A constraint position lies beyond every known overload of the method."""

    code = "INVALID_POSITION"
