"""Command line application entry point for turnsafe."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Optional, Sequence

from ..logging.config import setup_logging
from .errors import CliError, log_cli_error
from .io import load_cli_config
from .parser import build_parser

CommandHandler = Callable[[argparse.Namespace, Mapping[str, Any]], str]


def _emit(text: str) -> None:
    sys.stdout.write(text)
    if not text.endswith("\n"):
        sys.stdout.write("\n")


def _fail(exc: CliError) -> SystemExit:
    if not exc.logged:
        log_cli_error(exc.payload, exc_info=exc)
        exc.logged = True
    if exc.payload.message:
        _emit(exc.payload.message)
    return SystemExit(exc.status_code)


def _configure_logging(config: dict[str, Any], preliminary: argparse.Namespace) -> None:
    raw = config.get("logging", {})
    logging_config = dict(raw) if isinstance(raw, Mapping) else {}
    if preliminary.log_level is not None:
        logging_config["level"] = preliminary.log_level
    if preliminary.log_output is not None:
        logging_config["output"] = preliminary.log_output
    if preliminary.log_format is not None:
        logging_config["format"] = preliminary.log_format
    logging_config.setdefault("level", "info")
    logging_config.setdefault("output", "stderr")
    logging_config.setdefault("format", "json")
    config["logging"] = logging_config
    try:
        setup_logging(config)
    except ValueError as exc:
        raise CliError(str(exc), category="usage", context=logging_config) from exc


def run_cli(args: Optional[Sequence[str]] = None) -> str:
    """Execute the turnsafe command line interface."""

    config_parser = argparse.ArgumentParser(add_help=False)
    config_parser.add_argument(
        "--config",
        dest="config_path",
        type=Path,
        default=None,
        help="Path to the pyproject.toml carrying a [tool.turnsafe] table.",
    )
    config_parser.add_argument("--log-level", dest="log_level", default=None)
    config_parser.add_argument("--log-output", dest="log_output", default=None)
    config_parser.add_argument(
        "--log-format",
        dest="log_format",
        choices=("json", "text"),
        default=None,
    )
    preliminary, remaining = config_parser.parse_known_args(args)

    try:
        config = load_cli_config(preliminary.config_path)
        _configure_logging(config, preliminary)
    except CliError as exc:
        raise _fail(exc) from exc

    logging_config = config["logging"]
    try:
        parser = build_parser(config)
    except CliError as exc:
        raise _fail(exc) from exc
    parser.set_defaults(config_path=preliminary.config_path)
    parser.set_defaults(log_level=logging_config.get("level"))
    parser.set_defaults(log_output=logging_config.get("output"))
    parser.set_defaults(log_format=logging_config.get("format"))
    namespace = parser.parse_args(list(remaining), namespace=preliminary)
    namespace.config = config
    namespace.config_path = preliminary.config_path or config.get("_config_path")

    handler: CommandHandler | None = getattr(namespace, "handler", None)
    if handler is None:
        raise _fail(
            CliError(
                f"Unknown command '{getattr(namespace, 'command', None)}'.",
                category="usage",
                context={"command": getattr(namespace, "command", None)},
            )
        )

    try:
        result = handler(namespace, config=config)
    except CliError as exc:
        raise _fail(exc) from exc
    if result:
        _emit(result)
    return result


def main() -> None:  # pragma: no cover - thin wrapper
    run_cli()


if __name__ == "__main__":  # pragma: no cover - CLI invocation guard
    main()
