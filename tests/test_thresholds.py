from __future__ import annotations

import math

import pytest

from turnsafe_core.equations import (
    GRAVITY_FPS2,
    drive_type_factor,
    lateral_acceleration,
    rollover_limit,
    spin_out_limit,
    static_stability_factor,
    turn_radius,
    weight_grip_factor,
)
from turnsafe_core.models import DriveType, EnvironmentParams

from tests.helpers import build_environment, build_vehicle_spec


@pytest.mark.parametrize(
    "speed, radius, expected",
    [
        (90.0, 75.0, 232.32),
        (60.0, 100.0, 77.44),
        (0.0, 75.0, 0.0),
    ],
)
def test_lateral_acceleration_converts_mph(speed: float, radius: float, expected: float) -> None:
    assert lateral_acceleration(speed, radius) == pytest.approx(expected)


def test_lateral_acceleration_scales_with_square_of_speed() -> None:
    base = lateral_acceleration(30.0, 75.0)
    assert lateral_acceleration(60.0, 75.0) == pytest.approx(4.0 * base)


def test_turn_radius_is_a_track_property(environment: EnvironmentParams) -> None:
    assert turn_radius(environment) == 75.0
    assert turn_radius(environment.snapshot()) == 75.0
    environment.set_turn_radius(120.0)
    assert turn_radius(environment) == 120.0


@pytest.mark.parametrize(
    "weight, expected",
    [
        (3000.0, 1.0),
        (2650.0, math.sqrt(2650.0 / 3000.0)),
        (4500.0, math.sqrt(1.5)),
        (9000.0, math.sqrt(1.5)),
    ],
)
def test_weight_grip_factor_is_capped(weight: float, expected: float) -> None:
    vehicle = build_vehicle_spec(weight=weight)
    assert weight_grip_factor(vehicle) == pytest.approx(expected)


@pytest.mark.parametrize(
    "drive, expected",
    [(DriveType.FWD, 1.05), (DriveType.RWD, 0.98), (DriveType.AWD, 1.0)],
)
def test_drive_type_factor(drive: DriveType, expected: float) -> None:
    assert drive_type_factor(drive) == expected


def test_spin_out_limit_for_reference_vehicle() -> None:
    vehicle = build_vehicle_spec()
    assert spin_out_limit(0.7, vehicle) == pytest.approx(0.7 * GRAVITY_FPS2)


def test_spin_out_limit_for_celica(celica) -> None:
    assert spin_out_limit(0.7, celica) == pytest.approx(22.2257, rel=1e-4)


def test_spin_out_limit_grows_with_friction() -> None:
    vehicle = build_vehicle_spec()
    assert spin_out_limit(0.9, vehicle) > spin_out_limit(0.3, vehicle)


def test_static_stability_factor_uses_average_track(celica) -> None:
    assert static_stability_factor(celica) == pytest.approx(59.65 / 42.0)
    assert rollover_limit(celica) == pytest.approx(59.65 / 42.0 * GRAVITY_FPS2)


def test_rollover_limit_ignores_friction(celica) -> None:
    dry = build_environment(friction_coefficient=0.9)
    wet = build_environment(friction_coefficient=0.3)
    assert dry.friction_coefficient != wet.friction_coefficient
    # Only the vehicle geometry enters the tipping limit.
    assert rollover_limit(celica) == pytest.approx(45.694, rel=1e-4)


def test_higher_centre_of_mass_lowers_stability() -> None:
    low = build_vehicle_spec(center_of_mass_height=20.0)
    high = build_vehicle_spec(center_of_mass_height=30.0)
    assert static_stability_factor(high) < static_stability_factor(low)
