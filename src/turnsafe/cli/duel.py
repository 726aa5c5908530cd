"""Command helpers for the ``duel`` sub-command."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from typing import Any, Dict, Mapping

from turnsafe_core.equations.constants import DEFAULT_MAX_SPEED, DEFAULT_SPEED_TOLERANCE
from turnsafe_core.models import InvalidParameterError

from ..exporters import describe_verdict
from ..sweep import SWEEP_MODES, SweepSettings, run_duel
from .common import (
    CliError,
    add_environment_arguments,
    add_export_argument,
    config_number,
    environment_from_namespace,
    environment_payload,
    load_catalogue,
    render_payload,
    resolve_exports,
    resolve_vehicle,
    section,
    validated_export,
    vehicle_payload,
)


def register_subparser(
    subparsers: argparse._SubParsersAction[argparse.ArgumentParser],
    *,
    config: Mapping[str, Any],
) -> None:
    """Register the ``duel`` sub-command."""

    sweep_cfg = section(config, "sweep")
    default_mode = str(sweep_cfg.get("mode", "synchronized"))
    if default_mode not in SWEEP_MODES:
        default_mode = "synchronized"

    parser = subparsers.add_parser(
        "duel",
        help="Ramp two vehicles through the same turn and report which lasts longer.",
    )
    parser.add_argument("vehicle_a", help="Catalogue key of the first vehicle.")
    parser.add_argument("vehicle_b", help="Catalogue key of the second vehicle.")
    parser.add_argument(
        "--mode",
        choices=SWEEP_MODES,
        default=default_mode,
        help="Sweep both vehicles in lock-step or as independent tasks (default: synchronized).",
    )
    parser.add_argument(
        "--start",
        type=float,
        default=config_number(sweep_cfg, "start", 10.0, table="sweep"),
        help="First speed of the ramp in mph (default: 10).",
    )
    parser.add_argument(
        "--max-speed",
        dest="max_speed",
        type=float,
        default=config_number(sweep_cfg, "max_speed", DEFAULT_MAX_SPEED, table="sweep"),
        help="Last speed of the ramp in mph (default: 150).",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=config_number(sweep_cfg, "step", 1.0, table="sweep"),
        help="Speed increment in mph (default: 1).",
    )
    add_environment_arguments(parser, config)
    add_export_argument(
        parser,
        default=validated_export(sweep_cfg.get("export"), fallback="text"),
        help_text="Exporter used to render the duel (default: text).",
    )
    parser.set_defaults(handler=handle)


def handle(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    """Execute the ``duel`` command returning the rendered payload."""

    catalogue = load_catalogue(namespace, config)
    vehicle_a = resolve_vehicle(namespace.vehicle_a, catalogue)
    vehicle_b = resolve_vehicle(namespace.vehicle_b, catalogue)
    environment = environment_from_namespace(namespace)
    try:
        settings = SweepSettings(
            start=namespace.start,
            max_speed=namespace.max_speed,
            step=namespace.step,
            mode=namespace.mode,
        )
        result = run_duel(
            vehicle_a.spec,
            vehicle_b.spec,
            environment,
            settings,
            tolerance=DEFAULT_SPEED_TOLERANCE,
        )
    except InvalidParameterError as exc:
        raise CliError.from_invalid_parameter(exc) from exc

    verdict = result.verdict
    winner_key = {"a": vehicle_a.key, "b": vehicle_b.key}.get(verdict.winner or "")
    payload: Dict[str, Any] = {
        "command": "duel",
        "title": f"{vehicle_a.label} vs {vehicle_b.label}",
        "mode": result.mode,
        "environment": environment_payload(environment),
        "sweep": {"start": settings.start, "max_speed": settings.max_speed, "step": settings.step},
        "vehicle_a": {
            "vehicle": vehicle_payload(vehicle_a),
            "outcome": asdict(result.outcome_a),
        },
        "vehicle_b": {
            "vehicle": vehicle_payload(vehicle_b),
            "outcome": asdict(result.outcome_b),
        },
        "winner": winner_key,
        "tie": verdict.tie,
        "reason": verdict.reason,
        "summary": describe_verdict(
            vehicle_a.label,
            vehicle_b.label,
            result.outcome_a,
            result.outcome_b,
            verdict,
            vehicle_a=vehicle_a.spec,
            vehicle_b=vehicle_b.spec,
        ),
    }
    return render_payload(payload, resolve_exports(namespace))


__all__ = ["register_subparser", "handle"]
