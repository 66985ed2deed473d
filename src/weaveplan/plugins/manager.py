"""Definition registry — plugin discovery, loading, and per-type lookup.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus local directory discovery and directly registered built-ins.
Every plugin contributes definitions through ``register_plugin_definitions``.

INVARIANT: Plugin failures are warnings, never errors. A plugin whose hook
raises has every definition it would have contributed rejected.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import pluggy

from weaveplan.domain.definition import PluginDefinition
from weaveplan.domain.errors import DefinitionError
from weaveplan.plugins.hookspecs import PROJECT_NAME, WeaveplanHookSpec

if TYPE_CHECKING:
    from weaveplan.domain.elements import TypeDescription
    from weaveplan.domain.points import InterceptDirective
    from weaveplan.domain.witness import TypeResolver

ENTRY_POINT_GROUP = "weaveplan.plugins"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rejection:
    """A plugin or definition that was refused at bootstrap."""

    source: str
    code: str
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"source": self.source, "code": self.code, "message": self.message}


class DefinitionRegistry:
    """Constructs, owns and indexes plugin definitions by target type.

    Parameters:
        disabled: Definition names to skip.
    """

    def __init__(self, *, disabled: Iterable[str] = ()) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(WeaveplanHookSpec)
        self._disabled = frozenset(disabled)
        self._by_target: dict[str, PluginDefinition] = {}
        self._rejections: list[Rejection] = []
        self._collected: set[str] = set()
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Uses pluggy's native setuptools entry_point discovery for the
        ``weaveplan.plugins`` group, then scans *local_dir* for single-file
        Python plugins, then collects definitions from every registered plugin.

        Returns the names of all loaded definitions.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        for plugin in self._pm.get_plugins():
            self._collect_definitions(plugin, self._plugin_name(plugin))
        self._loaded = True
        return self.list_definition_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly (e.g. built-in plugins)."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._collect_definitions(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance. Definitions already collected stay."""
        self._pm.unregister(plugin)

    def add_definition(self, definition: PluginDefinition, *, source: str = "direct") -> bool:
        """Index *definition* by target type.

        Returns False (with a warning) when another definition already owns
        the target type, or silently when the definition is disabled.
        """
        if definition.name in self._disabled:
            logger.debug("Skipping disabled definition %s", definition.name)
            return False

        existing = self._by_target.get(definition.target_name)
        if existing is not None:
            msg = (
                f"Definition {definition.name!r} targets {definition.target_name!r}, "
                f"already claimed by {existing.name!r}"
            )
            logger.warning(msg)
            self._rejections.append(Rejection(source, "DUPLICATE_TARGET", msg))
            return False

        self._by_target[definition.target_name] = definition
        logger.debug("Loaded definition %s for %s", definition.name, definition.target_name)
        return True

    def reject(self, source: str, error: DefinitionError) -> None:
        """Record a definition refused by construction-time validation."""
        logger.warning("Rejected definition from %s: %s", source, error.message)
        self._rejections.append(Rejection(source, error.code, error.message))

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def definitions(self) -> tuple[PluginDefinition, ...]:
        return tuple(self._by_target.values())

    @property
    def rejections(self) -> tuple[Rejection, ...]:
        return tuple(self._rejections)

    def get_plugins(self) -> list[object]:
        """Return all registered plugins."""
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        """Return names of all registered plugins."""
        return [self._plugin_name(p) for p in self._pm.get_plugins()]

    def list_definition_names(self) -> list[str]:
        return [d.name for d in self._by_target.values()]

    def definition_for(self, type_name: str) -> PluginDefinition | None:
        return self._by_target.get(type_name)

    def enhancement_plan(
        self,
        target_type: TypeDescription,
        resolver: TypeResolver,
    ) -> list[InterceptDirective]:
        """Plan for *target_type*; empty when no definition targets it."""
        definition = self._by_target.get(target_type.name)
        if definition is None:
            return []
        return definition.enhancement_plan(target_type, resolver)

    # ------------------------------------------------------------------
    # Definition collection
    # ------------------------------------------------------------------

    def _plugin_name(self, plugin: object) -> str:
        return self._pm.get_name(plugin) or plugin.__class__.__name__

    def _collect_definitions(self, plugin: object, plugin_name: str) -> None:
        """Collect and index definitions exposed by a single plugin instance."""
        hook = getattr(plugin, "register_plugin_definitions", None)
        if hook is None or plugin_name in self._collected:
            return
        self._collected.add(plugin_name)

        try:
            contributed = hook()
        except DefinitionError as exc:
            self.reject(plugin_name, exc)
            return
        except Exception as exc:
            logger.warning(
                "Failed to collect definitions from plugin %s",
                plugin_name,
                exc_info=True,
            )
            self._rejections.append(Rejection(plugin_name, "PLUGIN_FAILED", str(exc)))
            return

        if contributed is None:
            return
        if not isinstance(contributed, (list, tuple)):
            msg = f"Plugin {plugin_name} returned non-list plugin definitions"
            logger.warning(msg)
            self._rejections.append(Rejection(plugin_name, "PLUGIN_FAILED", msg))
            return

        for definition in contributed:
            if not isinstance(definition, PluginDefinition):
                logger.warning(
                    "Skipping non-definition %r from plugin %s",
                    definition,
                    plugin_name,
                )
                continue
            self.add_definition(definition, source=plugin_name)

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry pluggy hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised: a broken local plugin
        must not prevent the rest of the system from starting.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"weaveplan_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue  # skip imported classes
                if not self._has_hook_impls(obj):
                    continue
                try:
                    instance = obj()
                    self._pm.register(instance, name=f"{module_name}.{obj.__name__}")
                    logger.debug("Loaded local plugin %s from %s", obj.__name__, py_file)
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("weaveplan")`` sets a ``weaveplan_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "weaveplan_impl", None):
                return True
        return False
