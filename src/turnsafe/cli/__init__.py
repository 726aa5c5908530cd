"""Command line interface for turnsafe."""

from __future__ import annotations

from .app import main, run_cli
from .errors import CliError, ErrorPayload
from .parser import build_parser

__all__ = ["CliError", "ErrorPayload", "build_parser", "main", "run_cli"]
