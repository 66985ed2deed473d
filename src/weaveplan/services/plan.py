"""PlanService — registry bootstrap, validation report and enhancement plans.

Wraps the domain layer for the CLI: every operation returns a
:class:`ServiceResult`, rejected definitions surface as warnings or errors
instead of exceptions.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import structlog

from weaveplan.domain.errors import DefinitionError
from weaveplan.domain.types import PositionCheck
from weaveplan.infrastructure.resolvers import StaticResolver, import_resolver
from weaveplan.plugins.builtins import BUILTIN_PLUGINS
from weaveplan.plugins.manager import DefinitionRegistry
from weaveplan.services.result import ServiceError, ServiceResult

if TYPE_CHECKING:
    from weaveplan.config.settings import WeaveSettings
    from weaveplan.domain.elements import TypeDescription
    from weaveplan.domain.witness import TypeResolver

logger = logging.getLogger(__name__)


def build_registry(settings: WeaveSettings) -> DefinitionRegistry:
    """Bootstrap a registry from configuration.

    Order: ``[[definitions]]`` tables, then built-ins, then entry-point and
    local plugins. The first definition to claim a target type keeps it.
    """
    registry = DefinitionRegistry(disabled=settings.registry.disabled)

    for model in settings.definitions:
        source = f"config:{model.name}"
        try:
            definition = model.to_definition()
        except DefinitionError as exc:
            registry.reject(source, exc)
            continue
        registry.add_definition(definition, source=source)

    if settings.registry.builtins:
        for name, plugin_cls in BUILTIN_PLUGINS.items():
            registry.register_plugin(plugin_cls(), name=f"builtin:{name}")

    registry.discover_and_load(local_dir=settings.local_plugin_dir)
    return registry


def build_resolver(settings: WeaveSettings) -> TypeResolver:
    if settings.witness.resolver == "static":
        return StaticResolver(settings.witness.present)
    return import_resolver


class PlanService:
    """Read-only operations over a bootstrapped :class:`DefinitionRegistry`."""

    def __init__(
        self,
        registry: DefinitionRegistry,
        resolver: TypeResolver,
        *,
        position_check: PositionCheck = PositionCheck.ERROR,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._position_check = position_check

    @classmethod
    def from_settings(cls, settings: WeaveSettings) -> PlanService:
        return cls(
            build_registry(settings),
            build_resolver(settings),
            position_check=settings.registry.position_check,
        )

    @property
    def registry(self) -> DefinitionRegistry:
        return self._registry

    def list_definitions(self) -> ServiceResult:
        definitions = [d.to_dict() for d in self._registry.definitions]
        rejections = self._registry.rejections
        return ServiceResult.success(
            "definitions",
            {"definitions": definitions, "rejections": [r.to_dict() for r in rejections]},
            warnings=[f"{r.source}: {r.message}" for r in rejections],
            meta={"count": len(definitions)},
        )

    def check(self) -> ServiceResult:
        """Fail when any plugin or definition was rejected at bootstrap."""
        rejections = self._registry.rejections
        data = {
            "loaded": self._registry.list_definition_names(),
            "rejected": len(rejections),
        }
        if not rejections:
            return ServiceResult.success("check", data)
        error = ServiceError(
            code="DEFINITIONS_REJECTED",
            message=f"{len(rejections)} definition(s) rejected",
            detail={"rejections": [r.to_dict() for r in rejections]},
        )
        return ServiceResult.failure("check", error, data=data)

    def plan(self, target_type: TypeDescription) -> ServiceResult:
        """Enhancement plan for *target_type*, checking positions against it."""
        with structlog.contextvars.bound_contextvars(target=target_type.name):
            return self._plan(target_type)

    def _plan(self, target_type: TypeDescription) -> ServiceResult:
        definition = self._registry.definition_for(target_type.name)
        if definition is None:
            return ServiceResult.success(
                "plan",
                {"target": target_type.name, "definition": None, "directives": []},
                warnings=[f"No definition targets {target_type.name}"],
            )

        warnings: list[str] = []
        if self._position_check is not PositionCheck.OFF:
            issues = definition.check_positions(target_type)
            if issues and self._position_check is PositionCheck.ERROR:
                return ServiceResult.failure("plan", issues[0])
            warnings.extend(issue.message for issue in issues)

        directives = self._registry.enhancement_plan(target_type, self._resolver)
        active = definition.is_active(self._resolver)
        if not active:
            warnings.append(
                f"Definition {definition.name} is inactive: witness "
                f"{sorted(definition.witness.required_type_names)} not resolvable"
            )
        logger.debug("Planned %d directive(s) with %s", len(directives), definition.name)
        return ServiceResult.success(
            "plan",
            {
                "target": target_type.name,
                "definition": definition.name,
                "active": active,
                "directives": [d.to_dict() for d in directives],
            },
            warnings=warnings,
            meta={"count": len(directives)},
        )
