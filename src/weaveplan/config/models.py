"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, weaveplan.toml only contains
overrides. Static rule sets live in ``[[definitions]]`` tables and are
turned into :class:`PluginDefinition` objects by ``to_definition()``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from weaveplan.domain.definition import PluginDefinition
from weaveplan.domain.errors import DefinitionError
from weaveplan.domain.matching import ArgumentConstraint, ClassMatch, MethodSignaturePattern
from weaveplan.domain.points import ConstructorInterceptPoint, InterceptPoint, MethodInterceptPoint
from weaveplan.domain.types import PositionCheck
from weaveplan.domain.witness import WitnessRequirement

# --- weaveplan.toml sections ---


class RegistryConfig(BaseModel):
    """[registry] section."""

    model_config = {"frozen": True}

    builtins: bool = True
    disabled: list[str] = Field(default_factory=list)
    local_dir: str | None = None
    position_check: PositionCheck = PositionCheck.ERROR


class WitnessConfig(BaseModel):
    """[witness] section — how the CLI answers "is this type resolvable"."""

    model_config = {"frozen": True}

    resolver: Literal["import", "static"] = "import"
    present: list[str] = Field(default_factory=list)


# --- [[definitions]] tables ---


# Raw keys are kept until to_point(); "1" and "01" name the same position.
ArgumentMap = dict[int | str, str]


def _position(key: int | str) -> int:
    if isinstance(key, int):
        return key
    try:
        return int(key)
    except ValueError as exc:
        msg = f"Argument position must be an integer, got {key!r}"
        raise DefinitionError(msg, position=key) from exc


def _constraints(arguments: ArgumentMap) -> tuple[ArgumentConstraint, ...]:
    seen: dict[int, int | str] = {}
    constraints: list[ArgumentConstraint] = []
    for key, expected in arguments.items():
        position = _position(key)
        if position in seen:
            msg = (
                f"Argument position {position} is given twice "
                f"(keys {seen[position]!r} and {key!r})"
            )
            raise DefinitionError(msg, position=position)
        seen[position] = key
        constraints.append(ArgumentConstraint(position, expected))
    return tuple(constraints)


class ConstructorPointModel(BaseModel):
    """One ``[[definitions.constructors]]`` entry."""

    model_config = {"frozen": True}

    handler: str
    arguments: ArgumentMap = Field(default_factory=dict)

    def to_point(self) -> ConstructorInterceptPoint:
        return ConstructorInterceptPoint(self.handler, _constraints(self.arguments))


class MethodPointModel(BaseModel):
    """One ``[[definitions.methods]]`` entry."""

    model_config = {"frozen": True}

    name: str
    handler: str
    arguments: ArgumentMap = Field(default_factory=dict)
    override_args: bool = False

    def to_point(self) -> MethodInterceptPoint:
        return MethodInterceptPoint(
            MethodSignaturePattern(self.name, _constraints(self.arguments)),
            self.handler,
            override_args=self.override_args,
        )


class DefinitionModel(BaseModel):
    """One ``[[definitions]]`` table describing a complete rule set."""

    model_config = {"frozen": True}

    name: str
    target: str
    witness: list[str] = Field(default_factory=list)
    require_all_witnesses: bool = False
    constructors: list[ConstructorPointModel] = Field(default_factory=list)
    methods: list[MethodPointModel] = Field(default_factory=list)

    def to_definition(self) -> PluginDefinition:
        """Build and validate the definition.

        Raises:
            DefinitionError: If the rule set fails construction-time validation.
        """
        points: list[InterceptPoint] = [c.to_point() for c in self.constructors]
        points.extend(m.to_point() for m in self.methods)
        return PluginDefinition(
            self.name,
            ClassMatch(self.target),
            points,
            WitnessRequirement(self.witness, require_all=self.require_all_witnesses),
        )


class WeaveConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    witness: WitnessConfig = Field(default_factory=WitnessConfig)
    definitions: list[DefinitionModel] = Field(default_factory=list)
