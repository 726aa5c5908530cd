"""CLI-related test helpers."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent
from typing import Sequence

import pytest

from turnsafe.cli import run_cli


def write_pyproject(directory: Path, contents: str) -> Path:
    """Persist a ``pyproject.toml`` under ``directory`` and return its path."""

    payload = dedent(contents).lstrip()
    target = directory / "pyproject.toml"
    target.write_text(payload, encoding="utf8")
    return target


def run_cli_capture(
    argv: Sequence[str],
    capsys: pytest.CaptureFixture[str],
) -> tuple[str, str]:
    """Run the CLI with ``argv`` and return its captured stdout."""

    result = run_cli(list(argv))
    captured = capsys.readouterr()
    return result, captured.out
