"""Extension layer — definition discovery via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints.
INVARIANT: Plugin failures are warnings, never errors.
"""

from weaveplan.plugins.hookspecs import hookimpl
from weaveplan.plugins.manager import DefinitionRegistry, Rejection

__all__ = ["DefinitionRegistry", "Rejection", "hookimpl"]
