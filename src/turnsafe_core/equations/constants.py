"""Physical constants and model factors shared across turnsafe modules."""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from turnsafe_core.models import DriveType

#: Standard gravity in ft/s².
GRAVITY_FPS2: float = 32.174

INCHES_TO_FEET: float = 1.0 / 12.0

#: Multiply a speed in mph to obtain ft/s.
MPH_TO_FPS: float = 5280.0 / 3600.0

#: Weight (lb) at which the grip factor equals one.
REFERENCE_WEIGHT_LB: float = 3000.0

#: Normalised weight above which heavier vehicles gain no extra grip.
MAX_NORMALISED_WEIGHT: float = 1.5

DRIVE_TYPE_FACTORS: Mapping[DriveType, float] = MappingProxyType(
    {
        DriveType.FWD: 1.05,
        DriveType.RWD: 0.98,
        DriveType.AWD: 1.0,
    }
)

DEFAULT_DRIVE_TYPE_FACTOR: float = 1.0

DEFAULT_FRICTION_COEFFICIENT: float = 0.7
DEFAULT_TURN_RADIUS_FT: float = 75.0

DEFAULT_MIN_SPEED: float = 10.0
DEFAULT_MAX_SPEED: float = 150.0
DEFAULT_SPEED_TOLERANCE: float = 0.1

__all__ = [
    "GRAVITY_FPS2",
    "INCHES_TO_FEET",
    "MPH_TO_FPS",
    "REFERENCE_WEIGHT_LB",
    "MAX_NORMALISED_WEIGHT",
    "DRIVE_TYPE_FACTORS",
    "DEFAULT_DRIVE_TYPE_FACTOR",
    "DEFAULT_FRICTION_COEFFICIENT",
    "DEFAULT_TURN_RADIUS_FT",
    "DEFAULT_MIN_SPEED",
    "DEFAULT_MAX_SPEED",
    "DEFAULT_SPEED_TOLERANCE",
]
