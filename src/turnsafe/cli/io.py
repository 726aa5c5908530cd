"""Configuration discovery for the turnsafe CLI."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from turnsafe.cli.errors import CliError
from turnsafe.configuration import load_project_config, pyproject_for, tomllib

CONFIG_ENV_VAR = "TURNSAFE_CONFIG"


def _iter_unique_paths(candidates: List[Path]) -> List[Path]:
    seen: Dict[Path, None] = {}
    ordered: List[Path] = []
    for candidate in candidates:
        resolved = candidate.expanduser().resolve(strict=False)
        if resolved in seen:
            continue
        seen[resolved] = None
        ordered.append(resolved)
    return ordered


def _load_from(candidate: Path) -> Dict[str, Any] | None:
    try:
        loaded = load_project_config(candidate)
    except tomllib.TOMLDecodeError as exc:
        raise CliError(
            f"Invalid TOML in {candidate}: {exc}",
            category="io",
            context={"path": str(candidate)},
        ) from exc
    if not loaded:
        return None
    payload, resolved = loaded
    data = {str(key): value for key, value in payload.items()}
    data["_config_path"] = str(resolved)
    return data


def load_cli_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Load CLI defaults from ``pyproject.toml``.

    Lookup order: the explicit ``path``, the ``TURNSAFE_CONFIG`` environment
    variable, then the current working directory. An explicit path that does
    not exist is reported as an error; a missing file elsewhere is not.
    """

    env_config = os.environ.get(CONFIG_ENV_VAR)
    env_path = Path(env_config) if env_config else None

    explicit: List[Path] = []
    if path is not None:
        pyproject = pyproject_for(Path(path))
        if pyproject is None or not pyproject.expanduser().exists():
            raise CliError(
                f"Configuration file {path} does not exist",
                category="not_found",
                context={"path": str(path)},
            )
        explicit.append(pyproject)
    if env_path is not None:
        pyproject = pyproject_for(env_path)
        if pyproject is not None:
            explicit.append(pyproject)

    for candidate in _iter_unique_paths(explicit):
        data = _load_from(candidate)
        if data is not None:
            return data

    cwd_candidate = pyproject_for(Path.cwd())
    if cwd_candidate is not None:
        data = _load_from(cwd_candidate)
        if data is not None:
            return data

    return {"_config_path": None}


__all__ = ["CONFIG_ENV_VAR", "load_cli_config"]
