"""Shared helpers for turnsafe CLI commands."""

from __future__ import annotations

import argparse
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from turnsafe_core.equations.constants import (
    DEFAULT_FRICTION_COEFFICIENT,
    DEFAULT_TURN_RADIUS_FT,
)
from turnsafe_core.models import EnvironmentParams, InvalidParameterError, create_environment

from ..exporters import exporters_registry
from ..vehicles import CatalogueVehicle, get_vehicle, load_vehicles
from .errors import CliError

__all__ = [
    "CliError",
    "section",
    "validated_export",
    "add_export_argument",
    "add_environment_arguments",
    "config_flag",
    "config_number",
    "resolve_exports",
    "render_payload",
    "resolve_vehicles_dir",
    "load_catalogue",
    "resolve_vehicle",
    "environment_from_namespace",
    "environment_payload",
    "vehicle_payload",
]


def section(config: Mapping[str, Any], name: str) -> Dict[str, Any]:
    """Return ``config[name]`` as a dictionary, ignoring malformed values."""

    raw = config.get(name, {})
    if isinstance(raw, Mapping):
        return dict(raw)
    return {}


def validated_export(value: Any, *, fallback: str) -> str:
    """Return ``value`` when it matches a registered exporter, else ``fallback``."""

    if isinstance(value, str) and value in exporters_registry:
        return value
    return fallback


def add_export_argument(
    parser: argparse.ArgumentParser, *, default: str, help_text: str
) -> None:
    """Register the ``--export`` flag on ``parser``."""

    parser.add_argument(
        "--export",
        dest="exports",
        choices=sorted(exporters_registry.keys()),
        action="append",
        help=f"{help_text} Repeat the flag to combine exporters.",
    )
    parser.set_defaults(exports=None, export_default=default)


def config_number(cfg: Mapping[str, Any], key: str, default: float, *, table: str) -> float:
    """Read a numeric ``key`` from the ``table`` section of the configuration."""

    value = cfg.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CliError.from_config_value(table, key, value, expected="a number")
    return float(value)


def config_flag(cfg: Mapping[str, Any], key: str, default: bool, *, table: str) -> bool:
    value = cfg.get(key, default)
    if not isinstance(value, bool):
        raise CliError.from_config_value(table, key, value, expected="true or false")
    return value


def add_environment_arguments(parser: argparse.ArgumentParser, config: Mapping[str, Any]) -> None:
    """Register the track condition flags shared by the physics commands.

    Defaults come from the ``environment`` section of the configuration so
    that an explicit flag always wins over the file.
    """

    env_cfg = section(config, "environment")
    parser.add_argument(
        "--friction",
        dest="friction_coefficient",
        type=float,
        default=config_number(
            env_cfg, "friction_coefficient", DEFAULT_FRICTION_COEFFICIENT, table="environment"
        ),
        help=f"Tyre-road friction coefficient (default: {DEFAULT_FRICTION_COEFFICIENT}).",
    )
    parser.add_argument(
        "--radius",
        dest="turn_radius",
        type=float,
        default=config_number(env_cfg, "turn_radius", DEFAULT_TURN_RADIUS_FT, table="environment"),
        help=f"Turn radius in feet (default: {DEFAULT_TURN_RADIUS_FT:g}).",
    )
    parser.add_argument(
        "--ignore-spin-out",
        dest="ignore_spin_out",
        action=argparse.BooleanOptionalAction,
        default=config_flag(env_cfg, "ignore_spin_out", False, table="environment"),
        help="Disable the spin-out check.",
    )
    parser.add_argument(
        "--ignore-rollover",
        dest="ignore_rollover",
        action=argparse.BooleanOptionalAction,
        default=config_flag(env_cfg, "ignore_rollover", False, table="environment"),
        help="Disable the rollover check.",
    )


def _unique_export_list(values: Sequence[str]) -> list[str]:
    ordered: list[str] = []
    for value in values:
        if value not in ordered:
            ordered.append(value)
    return ordered


def resolve_exports(namespace: argparse.Namespace) -> List[str]:
    """Return the exporters requested by ``namespace`` or raise :class:`CliError`."""

    exports = getattr(namespace, "exports", None)
    if exports:
        return _unique_export_list(exports)
    default = getattr(namespace, "export_default", None)
    if isinstance(default, str):
        return [default]
    raise CliError("No exporter configured for this command.", category="usage")


def render_payload(payload: Mapping[str, Any], exporters: Sequence[str] | str) -> str:
    """Render ``payload`` with every exporter listed in ``exporters``."""

    selected = [exporters] if isinstance(exporters, str) else _unique_export_list(exporters)
    rendered_outputs: List[str] = []
    for exporter_name in selected:
        exporter = exporters_registry.get(exporter_name)
        if exporter is None:
            raise CliError(
                f"Unknown exporter '{exporter_name}'.",
                category="usage",
                context={"exporter": exporter_name},
            )
        rendered_outputs.append(exporter(dict(payload)))
    return "\n\n".join(rendered_outputs)


def resolve_vehicles_dir(
    namespace: Optional[argparse.Namespace], config: Mapping[str, Any]
) -> Optional[Path]:
    """Pick the manifest directory from ``--vehicles-dir`` or ``paths.vehicles_dir``.

    Relative configuration paths are resolved against the directory holding
    the configuration file.
    """

    if namespace is not None:
        raw = getattr(namespace, "vehicles_dir", None)
        if raw:
            return Path(raw).expanduser()
    raw = section(config, "paths").get("vehicles_dir")
    if not isinstance(raw, str) or not raw.strip():
        return None
    candidate = Path(raw).expanduser()
    config_path = config.get("_config_path")
    if not candidate.is_absolute() and isinstance(config_path, str):
        candidate = Path(config_path).parent / candidate
    return candidate


def load_catalogue(
    namespace: Optional[argparse.Namespace], config: Mapping[str, Any]
) -> Dict[str, CatalogueVehicle]:
    vehicles_dir = resolve_vehicles_dir(namespace, config)
    try:
        return load_vehicles(vehicles_dir)
    except FileNotFoundError as exc:
        raise CliError(
            str(exc),
            category="not_found",
            context={"vehicles_dir": vehicles_dir},
        ) from exc
    except InvalidParameterError as exc:
        raise CliError.from_invalid_parameter(exc) from exc
    except ValueError as exc:
        raise CliError(str(exc), category="io", context={"vehicles_dir": vehicles_dir}) from exc


def resolve_vehicle(key: str, catalogue: Mapping[str, CatalogueVehicle]) -> CatalogueVehicle:
    try:
        return get_vehicle(key, catalogue)
    except KeyError as exc:
        message = exc.args[0] if exc.args else f"Unknown vehicle '{key}'"
        raise CliError(
            str(message),
            category="not_found",
            context={"vehicle": key},
        ) from exc


def environment_from_namespace(namespace: argparse.Namespace) -> EnvironmentParams:
    """Build the track conditions selected on the command line."""

    try:
        return create_environment(
            namespace.friction_coefficient,
            namespace.turn_radius,
            ignore_spin_out=bool(namespace.ignore_spin_out),
            ignore_rollover=bool(namespace.ignore_rollover),
        )
    except InvalidParameterError as exc:
        raise CliError.from_invalid_parameter(exc) from exc


def environment_payload(environment: EnvironmentParams) -> Dict[str, Any]:
    return asdict(environment.snapshot())


def vehicle_payload(vehicle: CatalogueVehicle) -> Dict[str, Any]:
    """Plain mapping describing ``vehicle`` for the exporters."""

    spec = vehicle.spec
    return {
        "key": vehicle.key,
        "name": vehicle.label,
        "weight": spec.weight,
        "center_of_mass_height": spec.center_of_mass_height,
        "wheelbase": spec.wheelbase,
        "front_track": spec.front_track,
        "rear_track": spec.rear_track,
        "drive_type": spec.drive_type.value,
    }
