"""Vehicle and environment builders shared by the physics tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from turnsafe_core.models import DriveType, EnvironmentParams, VehicleSpec

CELICA_SPEC = VehicleSpec(
    weight=2650.0,
    center_of_mass_height=21.0,
    wheelbase=102.4,
    front_track=59.9,
    rear_track=59.4,
    drive_type=DriveType.FWD,
)

CARAVAN_SPEC = VehicleSpec(
    weight=4560.0,
    center_of_mass_height=27.0,
    wheelbase=121.2,
    front_track=64.8,
    rear_track=64.8,
    drive_type=DriveType.FWD,
)


def build_vehicle_spec(**overrides: Any) -> VehicleSpec:
    """Return a mid-size AWD sedan with ``overrides`` applied."""

    payload: dict[str, Any] = {
        "weight": 3000.0,
        "center_of_mass_height": 22.0,
        "wheelbase": 105.0,
        "front_track": 60.0,
        "rear_track": 60.0,
        "drive_type": DriveType.AWD,
    }
    payload.update(overrides)
    return VehicleSpec(**payload)


def build_environment(
    friction_coefficient: float = 0.7,
    turn_radius: float = 75.0,
    **flags: bool,
) -> EnvironmentParams:
    return EnvironmentParams(friction_coefficient, turn_radius, **flags)


def write_vehicle_manifest(directory: Path, key: str, **fields: Any) -> Path:
    """Write a minimal manifest named ``<key>.toml`` under ``directory``."""

    values = {
        "weight": 3000,
        "center_of_mass_height": 22,
        "wheelbase": 105,
        "front_track": 60,
        "rear_track": 60,
        "drive_type": "AWD",
    }
    values.update(fields)
    lines = [f'key = "{key}"', f'name = "{key.title()} Test"']
    for name, value in values.items():
        if value is None:
            continue
        rendered = f'"{value}"' if isinstance(value, str) else str(value)
        lines.append(f"{name} = {rendered}")
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / f"{key}.toml"
    target.write_text("\n".join(lines) + "\n", encoding="utf8")
    return target
