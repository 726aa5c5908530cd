"""Core physics for turn spin-out and rollover analysis.

Everything exported here is synchronous and free of side effects: thresholds
depend only on the vehicle and the environment passed in by the caller.
"""

from __future__ import annotations

from . import analysis, equations
from .analysis import (
    ComparisonVerdict,
    SweepOutcome,
    VerdictReason,
    analyze_failure,
    check_rollover,
    check_spin_out,
    compare_outcomes,
    find_critical_speed,
)
from .equations import (
    GRAVITY_FPS2,
    drive_type_factor,
    lateral_acceleration,
    rollover_limit,
    spin_out_limit,
    static_stability_factor,
    turn_radius,
    weight_grip_factor,
)
from .models import (
    CriticalSpeedResult,
    DriveType,
    EnvironmentParams,
    EnvironmentSnapshot,
    FailureAnalysis,
    FailureType,
    InvalidParameterError,
    ThresholdResult,
    VehicleSpec,
    create_environment,
)

__all__ = [
    "analysis",
    "equations",
    "GRAVITY_FPS2",
    "ComparisonVerdict",
    "CriticalSpeedResult",
    "DriveType",
    "EnvironmentParams",
    "EnvironmentSnapshot",
    "FailureAnalysis",
    "FailureType",
    "InvalidParameterError",
    "SweepOutcome",
    "ThresholdResult",
    "VehicleSpec",
    "VerdictReason",
    "analyze_failure",
    "check_rollover",
    "check_spin_out",
    "compare_outcomes",
    "create_environment",
    "drive_type_factor",
    "find_critical_speed",
    "lateral_acceleration",
    "rollover_limit",
    "spin_out_limit",
    "static_stability_factor",
    "turn_radius",
    "weight_grip_factor",
]
