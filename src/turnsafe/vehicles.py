"""Vehicle catalogue backed by TOML manifests."""

from __future__ import annotations

from collections.abc import Mapping as ABCMapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from turnsafe_core.models import VehicleSpec

from .configuration import tomllib
from .data import vehicles_root

__all__ = ["CatalogueVehicle", "load_vehicles", "get_vehicle", "vehicle_from_mapping"]

_SPEC_FIELDS: tuple[str, ...] = (
    "weight",
    "center_of_mass_height",
    "wheelbase",
    "front_track",
    "rear_track",
)


@dataclass(frozen=True, slots=True)
class CatalogueVehicle:
    """A named catalogue entry wrapping the :class:`VehicleSpec` used by the thresholds.

    ``reference`` carries manufacturer figures that no calculation uses
    (overall length, width, height, tyre size).
    """

    key: str
    name: str
    spec: VehicleSpec
    year: int | None = None
    reference: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def label(self) -> str:
        return f"{self.year} {self.name}" if self.year else self.name


def vehicle_from_mapping(payload: Mapping[str, Any], *, fallback_key: str | None = None) -> CatalogueVehicle:
    """Build a :class:`CatalogueVehicle` from a parsed manifest."""

    key = str(payload.get("key") or fallback_key or "").strip()
    if not key:
        raise ValueError("Vehicle manifest is missing a 'key'")
    missing = [name for name in _SPEC_FIELDS if name not in payload]
    if missing:
        raise ValueError(f"Vehicle '{key}' is missing fields: {', '.join(missing)}")

    spec = VehicleSpec(
        weight=payload["weight"],
        center_of_mass_height=payload["center_of_mass_height"],
        wheelbase=payload["wheelbase"],
        front_track=payload["front_track"],
        rear_track=payload["rear_track"],
        drive_type=payload.get("drive_type", "FWD"),
    )
    year = payload.get("year")
    reference = payload.get("reference")
    return CatalogueVehicle(
        key=key,
        name=str(payload.get("name") or key),
        spec=spec,
        year=int(year) if year is not None else None,
        reference=MappingProxyType(dict(reference)) if isinstance(reference, ABCMapping) else MappingProxyType({}),
    )


def load_vehicles(vehicles_dir: str | Path | None = None) -> dict[str, CatalogueVehicle]:
    """Load every ``*.toml`` manifest keyed by its ``key``.

    Parameters
    ----------
    vehicles_dir:
        Directory containing the manifests. Defaults to the bundled
        ``turnsafe/data/vehicles`` directory.
    """

    path = Path(vehicles_dir).expanduser() if vehicles_dir is not None else vehicles_root()
    if not path.is_dir():
        raise FileNotFoundError(f"Vehicle directory {path} does not exist")

    vehicles: dict[str, CatalogueVehicle] = {}
    for manifest in sorted(path.glob("*.toml")):
        with manifest.open("rb") as buffer:
            payload = tomllib.load(buffer)
        vehicle = vehicle_from_mapping(payload, fallback_key=manifest.stem)
        if vehicle.key in vehicles:
            raise ValueError(f"Duplicated vehicle key: {vehicle.key}")
        vehicles[vehicle.key] = vehicle
    return vehicles


def get_vehicle(key: str, catalogue: Mapping[str, CatalogueVehicle]) -> CatalogueVehicle:
    """Look up ``key`` case-insensitively in ``catalogue``."""

    candidate = key.strip().lower()
    for vehicle_key, vehicle in catalogue.items():
        if vehicle_key.lower() == candidate:
            return vehicle
    available = ", ".join(sorted(catalogue)) or "none"
    raise KeyError(f"Unknown vehicle '{key}' (available: {available})")
