"""Argument parsing helpers for the turnsafe CLI."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Mapping, Optional

from . import duel as duel_command
from .common import add_environment_arguments, add_export_argument, section, validated_export
from .workflows import _handle_analyze, _handle_critical, _handle_vehicles, critical_defaults


def build_parser(config: Optional[Mapping[str, Any]] = None) -> argparse.ArgumentParser:
    config = dict(config or {})
    logging_cfg = section(config, "logging")
    paths_cfg = section(config, "paths")

    parser = argparse.ArgumentParser(
        prog="turnsafe",
        description="turnsafe: spin-out and rollover limits of vehicles in a constant-radius turn",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml carrying a [tool.turnsafe] table.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=logging_cfg.get("level", "info"),
        help="Logging level (e.g. debug, info, warning).",
    )
    parser.add_argument(
        "--log-output",
        dest="log_output",
        default=logging_cfg.get("output", "stderr"),
        help="Logging destination (stdout, stderr or a file path).",
    )
    parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=logging_cfg.get("format", "json"),
        help="Logging formatter (json or text).",
    )
    parser.add_argument(
        "--vehicles-dir",
        dest="vehicles_dir",
        type=Path,
        default=None,
        help=(
            "Directory of vehicle TOML manifests. Overrides paths.vehicles_dir "
            f"({paths_cfg.get('vehicles_dir', 'bundled catalogue')})."
        ),
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    vehicles_parser = subparsers.add_parser(
        "vehicles",
        help="List the vehicles available in the catalogue.",
    )
    add_export_argument(
        vehicles_parser,
        default="text",
        help_text="Exporter used to render the catalogue (default: text).",
    )
    vehicles_parser.set_defaults(handler=_handle_vehicles)

    analyze_cfg = section(config, "analyze")
    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Check one vehicle for spin-out and rollover at a single speed.",
    )
    analyze_parser.add_argument("vehicle", help="Catalogue key of the vehicle.")
    analyze_parser.add_argument(
        "--speed",
        type=float,
        required=True,
        help="Vehicle speed in mph.",
    )
    add_environment_arguments(analyze_parser, config)
    add_export_argument(
        analyze_parser,
        default=validated_export(analyze_cfg.get("export"), fallback="text"),
        help_text="Exporter used to render the analysis (default: text).",
    )
    analyze_parser.set_defaults(handler=_handle_analyze)

    bounds = critical_defaults(config)
    critical_parser = subparsers.add_parser(
        "critical",
        help="Search the lowest speed at which a vehicle spins out or rolls over.",
    )
    critical_parser.add_argument("vehicle", help="Catalogue key of the vehicle.")
    critical_parser.add_argument(
        "--min-speed",
        dest="min_speed",
        type=float,
        default=bounds["min_speed"],
        help="Lower bound of the search in mph (default: 10).",
    )
    critical_parser.add_argument(
        "--max-speed",
        dest="max_speed",
        type=float,
        default=bounds["max_speed"],
        help="Upper bound of the search in mph (default: 150).",
    )
    critical_parser.add_argument(
        "--tolerance",
        type=float,
        default=bounds["tolerance"],
        help="Width of the final bracket in mph (default: 0.1).",
    )
    add_environment_arguments(critical_parser, config)
    add_export_argument(
        critical_parser,
        default=validated_export(section(config, "critical").get("export"), fallback="text"),
        help_text="Exporter used to render the search result (default: text).",
    )
    critical_parser.set_defaults(handler=_handle_critical)

    duel_command.register_subparser(subparsers, config=config)

    return parser


__all__ = ["build_parser"]
