"""Read the ``[tool.turnsafe]`` table out of ``pyproject.toml``."""

from __future__ import annotations

from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - Python < 3.11 fallback
    import tomli as tomllib  # type: ignore


PYPROJECT_NAME = "pyproject.toml"
TOOL_TABLE = "turnsafe"


def pyproject_for(location: Path) -> Path | None:
    """Map a directory or a ``pyproject.toml`` path onto the file to read.

    Any other file name yields ``None``.
    """

    location = location.expanduser()
    if location.name == PYPROJECT_NAME:
        return location
    if location.suffix:
        return None
    return location / PYPROJECT_NAME


def tool_table(document: dict[str, Any], name: str = TOOL_TABLE) -> dict[str, Any] | None:
    """Return ``[tool.<name>]`` from a parsed TOML document, if it is a table."""

    tools = document.get("tool")
    if not isinstance(tools, dict):
        return None
    table = tools.get(name)
    return table if isinstance(table, dict) else None


def load_project_config(location: Path) -> tuple[dict[str, Any], Path] | None:
    """Load ``[tool.turnsafe]`` together with the resolved file it came from.

    Returns ``None`` when the file is missing or has no such table.
    Malformed TOML propagates as :class:`tomllib.TOMLDecodeError`.
    """

    pyproject = pyproject_for(location)
    if pyproject is None:
        return None
    pyproject = pyproject.resolve(strict=False)
    if not pyproject.is_file():
        return None
    with pyproject.open("rb") as handle:
        table = tool_table(tomllib.load(handle))
    if table is None:
        return None
    return table, pyproject


__all__ = ["PYPROJECT_NAME", "load_project_config", "pyproject_for", "tool_table", "tomllib"]
