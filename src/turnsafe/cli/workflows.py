"""Handlers for the single-vehicle turnsafe commands."""

from __future__ import annotations

import argparse
import logging
from dataclasses import asdict
from typing import Any, Dict, Mapping

from turnsafe_core.analysis import analyze_failure, find_critical_speed
from turnsafe_core.equations.constants import (
    DEFAULT_MAX_SPEED,
    DEFAULT_MIN_SPEED,
    DEFAULT_SPEED_TOLERANCE,
)
from turnsafe_core.models import InvalidParameterError

from ..exporters import describe_analysis, describe_critical
from .common import (
    config_number,
    environment_from_namespace,
    environment_payload,
    load_catalogue,
    render_payload,
    resolve_exports,
    resolve_vehicle,
    section,
    vehicle_payload,
)
from .errors import CliError

logger = logging.getLogger(__name__)


def _handle_vehicles(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    catalogue = load_catalogue(namespace, config)
    payload: Dict[str, Any] = {
        "command": "vehicles",
        "title": "Vehicle catalogue",
        "vehicles": {key: vehicle_payload(vehicle) for key, vehicle in catalogue.items()},
        "summary": [
            f"{key}: {vehicle.label}, {vehicle.spec.weight:.0f} lb, "
            f"{vehicle.spec.drive_type.value}"
            for key, vehicle in catalogue.items()
        ],
    }
    return render_payload(payload, resolve_exports(namespace))


def _handle_analyze(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    catalogue = load_catalogue(namespace, config)
    vehicle = resolve_vehicle(namespace.vehicle, catalogue)
    environment = environment_from_namespace(namespace)
    try:
        analysis = analyze_failure(vehicle.spec, namespace.speed, environment)
    except InvalidParameterError as exc:
        raise CliError.from_invalid_parameter(exc) from exc

    logger.info(
        "Analysed %s at %.1f mph: %s",
        vehicle.key,
        analysis.speed,
        analysis.failure_type.value,
        extra={"event": "analyze.finished", "vehicle": vehicle.key},
    )
    payload: Dict[str, Any] = {
        "command": "analyze",
        "title": f"{vehicle.label} at {analysis.speed:.1f} mph",
        "vehicle": vehicle_payload(vehicle),
        "environment": environment_payload(environment),
        "analysis": asdict(analysis),
        "summary": describe_analysis(vehicle.label, analysis, vehicle.spec),
    }
    return render_payload(payload, resolve_exports(namespace))


def _handle_critical(namespace: argparse.Namespace, *, config: Mapping[str, Any]) -> str:
    catalogue = load_catalogue(namespace, config)
    vehicle = resolve_vehicle(namespace.vehicle, catalogue)
    environment = environment_from_namespace(namespace)
    try:
        result = find_critical_speed(
            vehicle.spec,
            environment,
            min_speed=namespace.min_speed,
            max_speed=namespace.max_speed,
            tolerance=namespace.tolerance,
        )
    except InvalidParameterError as exc:
        raise CliError.from_invalid_parameter(exc) from exc

    details = result.failure_details
    logger.info(
        "Critical speed for %s: %.2f mph (%s)",
        vehicle.key,
        result.critical_speed,
        details.failure_type.value,
        extra={"event": "critical.finished", "vehicle": vehicle.key},
    )
    payload: Dict[str, Any] = {
        "command": "critical",
        "title": f"Critical speed for {vehicle.label}",
        "vehicle": vehicle_payload(vehicle),
        "environment": environment_payload(environment),
        "search": {
            "min_speed": float(namespace.min_speed),
            "max_speed": float(namespace.max_speed),
            "tolerance": result.tolerance,
        },
        "critical_speed": result.critical_speed,
        "has_failed": details.has_failed,
        "failure_type": details.failure_type,
        "summary": describe_critical(vehicle.label, result, float(namespace.max_speed)),
    }
    return render_payload(payload, resolve_exports(namespace))


def critical_defaults(config: Mapping[str, Any]) -> Dict[str, float]:
    """Search bounds from the ``critical`` section with built-in fallbacks."""

    critical_cfg = section(config, "critical")
    fallbacks = {
        "min_speed": DEFAULT_MIN_SPEED,
        "max_speed": DEFAULT_MAX_SPEED,
        "tolerance": DEFAULT_SPEED_TOLERANCE,
    }
    return {
        key: config_number(critical_cfg, key, fallback, table="critical")
        for key, fallback in fallbacks.items()
    }


__all__ = ["_handle_vehicles", "_handle_analyze", "_handle_critical", "critical_defaults"]
