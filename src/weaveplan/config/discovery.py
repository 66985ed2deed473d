"""Config file discovery and loading.

Settings come from a dedicated ``weaveplan.toml`` or from the
``[tool.weaveplan]`` table of a ``pyproject.toml``. The finder walks up from
the working directory and, in each directory, prefers the dedicated file.
``WEAVEPLAN_CONFIG`` names a file explicitly and disables the walk.
"""

from __future__ import annotations

import os
import tomllib
from collections.abc import Iterator
from pathlib import Path
from typing import Any

from weaveplan.config.models import WeaveConfig

CONFIG_FILENAME = "weaveplan.toml"
PYPROJECT_FILENAME = "pyproject.toml"
CONFIG_ENV_VAR = "WEAVEPLAN_CONFIG"
TOOL_TABLE = "weaveplan"


class ConfigFileError(ValueError):
    """A config file exists but is not valid TOML."""


def _parents(start: Path | None) -> Iterator[Path]:
    current = (start or Path.cwd()).resolve()
    yield current
    yield from current.parents


def _has_tool_table(pyproject: Path) -> bool:
    # Another tool's file: unreadable means "not ours", never an error.
    try:
        data = tomllib.loads(pyproject.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return TOOL_TABLE in data.get("tool", {})


def find_config(start: Path | None = None) -> Path | None:
    """Locate the config file in effect for *start* (default: cwd).

    Returns None when ``WEAVEPLAN_CONFIG`` points at a missing file or
    no candidate exists up to the filesystem root.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    for directory in _parents(start):
        dedicated = directory / CONFIG_FILENAME
        if dedicated.is_file():
            return dedicated
        pyproject = directory / PYPROJECT_FILENAME
        if pyproject.is_file() and _has_tool_table(pyproject):
            return pyproject
    return None


def read_config_table(path: Path) -> dict[str, Any]:
    """Return the raw weaveplan settings table stored in *path*.

    Raises:
        ConfigFileError: If *path* is not valid TOML.
    """
    raw = path.read_text(encoding="utf-8")
    try:
        data: dict[str, Any] = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {path}: {exc}"
        raise ConfigFileError(msg) from exc
    if path.name == PYPROJECT_FILENAME:
        return dict(data.get("tool", {}).get(TOOL_TABLE, {}))
    return data


def load_config(path: Path | None = None, cwd: Path | None = None) -> WeaveConfig:
    """Load and validate the config sections only, without CLI or env layers.

    Returns a default :class:`WeaveConfig` when no file is found.
    """
    if path is None:
        path = find_config(cwd)
    if path is None:
        return WeaveConfig()
    return WeaveConfig.model_validate(read_config_table(path))
