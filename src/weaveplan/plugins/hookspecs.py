"""Pluggy hook specifications for contributing plugin definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from weaveplan.domain.definition import PluginDefinition

PROJECT_NAME = "weaveplan"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class WeaveplanHookSpec:
    """Hook specifications for the weaveplan plugin system."""

    @hookspec
    def register_plugin_definitions(self) -> list[PluginDefinition] | None:
        """Return the plugin definitions this plugin contributes.

        Definitions are constructed (and therefore validated) inside the
        hook. A hook that raises has all of its definitions rejected.
        """
