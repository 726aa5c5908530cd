"""Convenience re-exports for test helpers."""

from __future__ import annotations

from .cli import run_cli_capture, write_pyproject
from .vehicles import (
    CARAVAN_SPEC,
    CELICA_SPEC,
    build_environment,
    build_vehicle_spec,
    write_vehicle_manifest,
)

__all__ = [
    "CARAVAN_SPEC",
    "CELICA_SPEC",
    "build_environment",
    "build_vehicle_spec",
    "run_cli_capture",
    "write_pyproject",
    "write_vehicle_manifest",
]
