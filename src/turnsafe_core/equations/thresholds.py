"""Lateral acceleration and failure-threshold equations.

All functions are pure. Speeds are in mph, vehicle lengths in inches, turn
radii in feet and accelerations in ft/s².
"""

from __future__ import annotations

import math

from turnsafe_core.equations.constants import (
    DEFAULT_DRIVE_TYPE_FACTOR,
    DRIVE_TYPE_FACTORS,
    GRAVITY_FPS2,
    INCHES_TO_FEET,
    MAX_NORMALISED_WEIGHT,
    MPH_TO_FPS,
    REFERENCE_WEIGHT_LB,
)
from turnsafe_core.models import DriveType, EnvironmentParams, EnvironmentSnapshot, VehicleSpec

__all__ = [
    "lateral_acceleration",
    "turn_radius",
    "weight_grip_factor",
    "drive_type_factor",
    "spin_out_limit",
    "static_stability_factor",
    "rollover_limit",
]


def lateral_acceleration(speed: float, turn_radius: float) -> float:
    """Return the centripetal acceleration ``v² / r`` for ``speed`` in mph.

    ``turn_radius`` is assumed positive; it is validated when the environment
    is configured rather than on every call.
    """

    speed_fps = speed * MPH_TO_FPS
    return (speed_fps * speed_fps) / turn_radius


def turn_radius(environment: EnvironmentParams | EnvironmentSnapshot) -> float:
    """Return the fixed radius of the track curve.

    The radius belongs to the road: every vehicle tested in ``environment``
    negotiates the same curve regardless of its speed.
    """

    return environment.turn_radius


def weight_grip_factor(vehicle: VehicleSpec) -> float:
    """Grip multiplier from tyre contact patch growth, capped at 1.5× reference."""

    normalised = vehicle.weight / REFERENCE_WEIGHT_LB
    return math.sqrt(min(normalised, MAX_NORMALISED_WEIGHT))


def drive_type_factor(drive_type: DriveType) -> float:
    return DRIVE_TYPE_FACTORS.get(drive_type, DEFAULT_DRIVE_TYPE_FACTOR)


def spin_out_limit(friction_coefficient: float, vehicle: VehicleSpec) -> float:
    """Maximum lateral acceleration before the tyres lose traction."""

    base_limit = friction_coefficient * GRAVITY_FPS2
    return base_limit * weight_grip_factor(vehicle) * drive_type_factor(vehicle.drive_type)


def static_stability_factor(vehicle: VehicleSpec) -> float:
    """Return ``track / (2 × CoM height)`` using the average track width."""

    track_ft = vehicle.average_track * INCHES_TO_FEET
    com_height_ft = vehicle.center_of_mass_height * INCHES_TO_FEET
    return track_ft / (2.0 * com_height_ft)


def rollover_limit(vehicle: VehicleSpec) -> float:
    """Maximum lateral acceleration before the vehicle tips over."""

    return static_stability_factor(vehicle) * GRAVITY_FPS2
