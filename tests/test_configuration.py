from __future__ import annotations

from pathlib import Path

import pytest

from turnsafe.cli import io as cli_io
from turnsafe.cli.errors import CliError
from turnsafe.configuration import load_project_config, pyproject_for, tool_table

from tests.helpers import write_pyproject

_SAMPLE = """
    [project]
    name = "demo"

    [tool.turnsafe.environment]
    friction_coefficient = 0.5
    turn_radius = 120.0

    [tool.turnsafe.sweep]
    mode = "independent"
"""


def test_pyproject_for_accepts_directories_and_pyproject_files(tmp_path: Path) -> None:
    assert pyproject_for(tmp_path) == tmp_path / "pyproject.toml"
    assert pyproject_for(tmp_path / "pyproject.toml") == tmp_path / "pyproject.toml"
    assert pyproject_for(tmp_path / "settings.toml") is None


def test_tool_table_ignores_non_table_values() -> None:
    assert tool_table({"tool": {"turnsafe": {"sweep": {}}}}) == {"sweep": {}}
    assert tool_table({"tool": {"turnsafe": "on"}}) is None
    assert tool_table({"tool": ["turnsafe"]}) is None
    assert tool_table({}) is None


def test_load_project_config_reads_tool_section(tmp_path: Path) -> None:
    path = write_pyproject(tmp_path, _SAMPLE)

    loaded = load_project_config(tmp_path)

    assert loaded is not None
    payload, resolved = loaded
    assert resolved == path.resolve()
    assert payload["environment"] == {"friction_coefficient": 0.5, "turn_radius": 120.0}
    assert payload["sweep"]["mode"] == "independent"


def test_load_project_config_without_section(tmp_path: Path) -> None:
    write_pyproject(tmp_path, '[project]\nname = "demo"\n')
    assert load_project_config(tmp_path) is None


def test_load_project_config_missing_file(tmp_path: Path) -> None:
    assert load_project_config(tmp_path) is None


@pytest.mark.parametrize("explicit_path", [False, True], ids=["via-chdir", "explicit-path"])
def test_load_cli_config_from_pyproject(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, explicit_path: bool
) -> None:
    monkeypatch.delenv(cli_io.CONFIG_ENV_VAR, raising=False)
    pyproject_path = write_pyproject(tmp_path, _SAMPLE)

    if explicit_path:
        config = cli_io.load_cli_config(pyproject_path)
    else:
        monkeypatch.chdir(tmp_path)
        config = cli_io.load_cli_config()

    assert config["environment"]["turn_radius"] == 120.0
    assert config["_config_path"] == str(pyproject_path.resolve())


def test_load_cli_config_from_environment_variable(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, isolated_cwd: Path
) -> None:
    config_dir = tmp_path / "elsewhere"
    config_dir.mkdir()
    write_pyproject(config_dir, _SAMPLE)
    monkeypatch.setenv(cli_io.CONFIG_ENV_VAR, str(config_dir))

    config = cli_io.load_cli_config()

    assert config["sweep"]["mode"] == "independent"


def test_load_cli_config_defaults_without_files(isolated_cwd: Path) -> None:
    assert cli_io.load_cli_config() == {"_config_path": None}


def test_missing_explicit_config_is_an_error(tmp_path: Path, isolated_cwd: Path) -> None:
    with pytest.raises(CliError) as excinfo:
        cli_io.load_cli_config(tmp_path / "nope" / "pyproject.toml")
    assert excinfo.value.category == "not_found"
    assert excinfo.value.status_code == 4


def test_malformed_toml_is_an_io_error(tmp_path: Path, isolated_cwd: Path) -> None:
    path = write_pyproject(tmp_path, "[tool.turnsafe\nbroken = ")

    with pytest.raises(CliError) as excinfo:
        cli_io.load_cli_config(path)
    assert excinfo.value.category == "io"
    assert excinfo.value.status_code == 3
