"""Value types describing vehicles, environments and failure verdicts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any

__all__ = [
    "InvalidParameterError",
    "DriveType",
    "FailureType",
    "VehicleSpec",
    "EnvironmentSnapshot",
    "EnvironmentParams",
    "ThresholdResult",
    "FailureAnalysis",
    "CriticalSpeedResult",
    "create_environment",
]


class InvalidParameterError(ValueError):
    """Raised when a vehicle, environment or search parameter is out of range."""

    def __init__(self, parameter: str, value: Any, reason: str = "must be strictly positive") -> None:
        super().__init__(f"Invalid {parameter} {value!r}: {reason}")
        self.parameter = parameter
        self.value = value


def _require_positive(parameter: str, value: Any) -> float:
    if isinstance(value, bool):
        raise InvalidParameterError(parameter, value, "must be a number")
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(parameter, value, "must be a number") from None
    if not math.isfinite(numeric):
        raise InvalidParameterError(parameter, value, "must be finite")
    if numeric <= 0.0:
        raise InvalidParameterError(parameter, value)
    return numeric


class DriveType(str, Enum):
    """Driven axle layout."""

    FWD = "FWD"
    RWD = "RWD"
    AWD = "AWD"

    @classmethod
    def coerce(cls, value: "DriveType | str") -> "DriveType":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise InvalidParameterError(
                "drive_type", value, f"expected one of {choices}"
            ) from None


class FailureType(str, Enum):
    """Outcome of a single-speed failure check."""

    NONE = "none"
    SPIN_OUT = "spin-out"
    ROLLOVER = "rollover"


@dataclass(frozen=True, slots=True)
class VehicleSpec:
    """Static vehicle description.

    Lengths are expressed in inches and ``weight`` in pounds. ``wheelbase`` is
    informational and does not enter either threshold.
    """

    weight: float
    center_of_mass_height: float
    wheelbase: float
    front_track: float
    rear_track: float
    drive_type: DriveType = DriveType.FWD

    def __post_init__(self) -> None:
        for name in ("weight", "center_of_mass_height", "wheelbase", "front_track", "rear_track"):
            object.__setattr__(self, name, _require_positive(name, getattr(self, name)))
        object.__setattr__(self, "drive_type", DriveType.coerce(self.drive_type))

    @property
    def average_track(self) -> float:
        return (self.front_track + self.rear_track) / 2.0


@dataclass(frozen=True, slots=True)
class EnvironmentSnapshot:
    """Immutable view of an :class:`EnvironmentParams` at one instant."""

    friction_coefficient: float
    turn_radius: float
    ignore_spin_out: bool = False
    ignore_rollover: bool = False


class EnvironmentParams:
    """Track and rule settings shared by every vehicle in a session.

    Setters validate their input and only affect evaluations started after
    the call. Evaluations read a :meth:`snapshot`; callers mutating the
    environment from another thread must serialise those writes themselves.
    """

    __slots__ = ("_friction_coefficient", "_turn_radius", "_ignore_spin_out", "_ignore_rollover")

    def __init__(
        self,
        friction_coefficient: float,
        turn_radius: float,
        *,
        ignore_spin_out: bool = False,
        ignore_rollover: bool = False,
    ) -> None:
        self._friction_coefficient = _require_positive("friction_coefficient", friction_coefficient)
        self._turn_radius = _require_positive("turn_radius", turn_radius)
        self._ignore_spin_out = bool(ignore_spin_out)
        self._ignore_rollover = bool(ignore_rollover)

    @property
    def friction_coefficient(self) -> float:
        return self._friction_coefficient

    @property
    def turn_radius(self) -> float:
        return self._turn_radius

    @property
    def ignore_spin_out(self) -> bool:
        return self._ignore_spin_out

    @property
    def ignore_rollover(self) -> bool:
        return self._ignore_rollover

    def set_friction_coefficient(self, value: float) -> None:
        self._friction_coefficient = _require_positive("friction_coefficient", value)

    def set_turn_radius(self, value: float) -> None:
        self._turn_radius = _require_positive("turn_radius", value)

    def set_ignore_spin_out(self, value: bool) -> None:
        self._ignore_spin_out = bool(value)

    def set_ignore_rollover(self, value: bool) -> None:
        self._ignore_rollover = bool(value)

    def snapshot(self) -> EnvironmentSnapshot:
        return EnvironmentSnapshot(
            friction_coefficient=self._friction_coefficient,
            turn_radius=self._turn_radius,
            ignore_spin_out=self._ignore_spin_out,
            ignore_rollover=self._ignore_rollover,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(friction_coefficient={self._friction_coefficient!r}, "
            f"turn_radius={self._turn_radius!r}, ignore_spin_out={self._ignore_spin_out!r}, "
            f"ignore_rollover={self._ignore_rollover!r})"
        )


def create_environment(
    friction_coefficient: float,
    turn_radius: float,
    ignore_spin_out: bool = False,
    ignore_rollover: bool = False,
) -> EnvironmentParams:
    """Build a validated :class:`EnvironmentParams`."""

    return EnvironmentParams(
        friction_coefficient,
        turn_radius,
        ignore_spin_out=ignore_spin_out,
        ignore_rollover=ignore_rollover,
    )


@dataclass(frozen=True, slots=True)
class ThresholdResult:
    """Required versus available lateral acceleration for one failure mode."""

    mode: FailureType
    required_lateral_accel: float
    limit: float
    margin: float
    turn_radius: float
    static_stability_factor: float | None = None
    weight_grip_factor: float | None = None
    drive_type_factor: float | None = None
    ignored: bool = False

    @property
    def effective_margin(self) -> float:
        """Margin used for arbitration, ``+inf`` when the mode is ignored."""

        return math.inf if self.ignored else self.margin

    @property
    def will_fail(self) -> bool:
        return self.effective_margin < 0.0


@dataclass(frozen=True, slots=True)
class FailureAnalysis:
    """Verdict for a vehicle at a single speed."""

    has_failed: bool
    failure_type: FailureType
    spin_out: ThresholdResult
    rollover: ThresholdResult
    speed: float


@dataclass(frozen=True, slots=True)
class CriticalSpeedResult:
    """Outcome of a critical-speed search."""

    critical_speed: float
    failure_details: FailureAnalysis
    tolerance: float = 0.1
