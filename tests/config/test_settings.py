"""Tests for WeaveSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from weaveplan.config.discovery import ConfigFileError
from weaveplan.config.settings import WeaveSettings
from weaveplan.domain.types import PositionCheck


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("WEAVEPLAN_CONFIG", "WEAVEPLAN_PROJECT_ROOT", "WEAVEPLAN_VERBOSE"):
        monkeypatch.delenv(var, raising=False)


class TestWeaveSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        assert settings.project_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.registry.builtins is True
        assert settings.witness.resolver == "import"
        assert settings.definitions == []
        assert settings.local_plugin_dir is None

    def test_frozen(self, tmp_path: Path) -> None:
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "weaveplan.toml").write_text(
            '[registry]\ndisabled = ["mongodb-2.x/DBCollection"]\nposition_check = "warn"\n'
            '[witness]\nresolver = "static"\npresent = ["a.B"]\n'
        )
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        assert settings.registry.disabled == ["mongodb-2.x/DBCollection"]
        assert settings.registry.position_check is PositionCheck.WARN
        assert settings.witness.present == ["a.B"]
        assert settings.registry.builtins is True  # default preserved

    def test_definitions_tables(self, tmp_path: Path) -> None:
        (tmp_path / "weaveplan.toml").write_text(
            "[[definitions]]\n"
            'name = "client"\n'
            'target = "mypkg.Client"\n'
            "[[definitions.methods]]\n"
            'name = "send"\n'
            'handler = "send-handler"\n'
            'arguments = { "1" = "bytes" }\n'
        )
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        (model,) = settings.definitions
        assert model.methods[0].arguments == {"1": "bytes"}
        assert model.to_definition().points[0].describe() == "send[1=bytes]"

    def test_cli_flags_override_toml(self, tmp_path: Path) -> None:
        (tmp_path / "weaveplan.toml").write_text("verbose = false\n")
        settings = WeaveSettings.from_cli(project_root=tmp_path, verbose=True)
        assert settings.verbose is True

    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "weaveplan.toml").write_text("verbose = false\n")
        monkeypatch.setenv("WEAVEPLAN_VERBOSE", "true")
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        assert settings.verbose is True

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        cfg = tmp_path / "custom.toml"
        cfg.write_text('[registry]\nlocal_dir = "plugins"\n')
        settings = WeaveSettings.from_cli(config_path=str(cfg))
        assert settings.config_path == cfg
        assert settings.project_root == tmp_path
        assert settings.local_plugin_dir == tmp_path / "plugins"

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "weaveplan.toml").write_text("[registry\n")
        with pytest.raises(ConfigFileError, match="Invalid TOML"):
            WeaveSettings.from_cli(project_root=tmp_path)

    def test_pyproject_tool_table(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text(
            '[project]\nname = "host"\n\n[tool.weaveplan.witness]\nresolver = "static"\n'
        )
        settings = WeaveSettings.from_cli(project_root=tmp_path)
        assert settings.config_path == (tmp_path / "pyproject.toml").resolve()
        assert settings.witness.resolver == "static"
