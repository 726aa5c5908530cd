"""Single-speed failure verdicts and the critical-speed search."""

from __future__ import annotations

import logging
import math

from turnsafe_core.equations.constants import (
    DEFAULT_MAX_SPEED,
    DEFAULT_MIN_SPEED,
    DEFAULT_SPEED_TOLERANCE,
)
from turnsafe_core.equations.thresholds import (
    drive_type_factor,
    lateral_acceleration,
    rollover_limit,
    spin_out_limit,
    static_stability_factor,
    turn_radius,
    weight_grip_factor,
)
from turnsafe_core.models import (
    CriticalSpeedResult,
    EnvironmentParams,
    EnvironmentSnapshot,
    FailureAnalysis,
    FailureType,
    InvalidParameterError,
    ThresholdResult,
    VehicleSpec,
)

__all__ = [
    "check_spin_out",
    "check_rollover",
    "analyze_failure",
    "find_critical_speed",
]

logger = logging.getLogger(__name__)

Environment = EnvironmentParams | EnvironmentSnapshot


def _snapshot(environment: Environment) -> EnvironmentSnapshot:
    if isinstance(environment, EnvironmentParams):
        return environment.snapshot()
    return environment


def _validated_speed(speed: float) -> float:
    numeric = float(speed)
    if not math.isfinite(numeric) or numeric < 0.0:
        raise InvalidParameterError("speed", speed, "must be a finite, non-negative number")
    return numeric


def check_spin_out(vehicle: VehicleSpec, speed: float, environment: Environment) -> ThresholdResult:
    """Compare the required lateral acceleration against the traction limit."""

    env = _snapshot(environment)
    radius = turn_radius(env)
    required = lateral_acceleration(_validated_speed(speed), radius)
    limit = spin_out_limit(env.friction_coefficient, vehicle)
    return ThresholdResult(
        mode=FailureType.SPIN_OUT,
        required_lateral_accel=required,
        limit=limit,
        margin=limit - required,
        turn_radius=radius,
        weight_grip_factor=weight_grip_factor(vehicle),
        drive_type_factor=drive_type_factor(vehicle.drive_type),
        ignored=env.ignore_spin_out,
    )


def check_rollover(vehicle: VehicleSpec, speed: float, environment: Environment) -> ThresholdResult:
    """Compare the required lateral acceleration against the tipping limit."""

    env = _snapshot(environment)
    radius = turn_radius(env)
    required = lateral_acceleration(_validated_speed(speed), radius)
    limit = rollover_limit(vehicle)
    return ThresholdResult(
        mode=FailureType.ROLLOVER,
        required_lateral_accel=required,
        limit=limit,
        margin=limit - required,
        turn_radius=radius,
        static_stability_factor=static_stability_factor(vehicle),
        ignored=env.ignore_rollover,
    )


def _arbitrate(spin_out: ThresholdResult, rollover: ThresholdResult) -> FailureType:
    spin_margin = spin_out.effective_margin
    roll_margin = rollover.effective_margin
    spin_fails = spin_margin < 0.0
    roll_fails = roll_margin < 0.0
    if spin_fails and roll_fails:
        # Equal margins resolve to spin-out.
        return FailureType.ROLLOVER if roll_margin < spin_margin else FailureType.SPIN_OUT
    if spin_fails:
        return FailureType.SPIN_OUT
    if roll_fails:
        return FailureType.ROLLOVER
    return FailureType.NONE


def analyze_failure(vehicle: VehicleSpec, speed: float, environment: Environment) -> FailureAnalysis:
    """Evaluate both failure modes at ``speed`` and decide which one occurs.

    A mode fails when its margin is strictly negative. When both fail, the
    mode breached more severely (lower margin) is reported; exact ties are
    reported as spin-out. Modes ignored by the environment never fail.
    """

    env = _snapshot(environment)
    spin_out = check_spin_out(vehicle, speed, env)
    rollover = check_rollover(vehicle, speed, env)
    failure_type = _arbitrate(spin_out, rollover)
    return FailureAnalysis(
        has_failed=failure_type is not FailureType.NONE,
        failure_type=failure_type,
        spin_out=spin_out,
        rollover=rollover,
        speed=float(speed),
    )


def find_critical_speed(
    vehicle: VehicleSpec,
    environment: Environment,
    min_speed: float = DEFAULT_MIN_SPEED,
    max_speed: float = DEFAULT_MAX_SPEED,
    tolerance: float = DEFAULT_SPEED_TOLERANCE,
) -> CriticalSpeedResult:
    """Bisect ``[min_speed, max_speed]`` for the lowest failing speed.

    The search relies on failure being monotonic in speed, which holds because
    both limits depend only on the vehicle and the environment. When nothing
    fails inside the range the result reports ``max_speed`` together with its
    (non-failing) analysis.
    """

    low = _validated_speed(min_speed)
    high = _validated_speed(max_speed)
    if high <= low:
        raise InvalidParameterError("max_speed", max_speed, f"must exceed min_speed {min_speed!r}")
    tolerance = float(tolerance)
    if not math.isfinite(tolerance) or tolerance <= 0.0:
        raise InvalidParameterError("tolerance", tolerance)

    env = _snapshot(environment)

    floor = analyze_failure(vehicle, low, env)
    if floor.has_failed:
        logger.debug("Vehicle already fails at the lower bound %.2f", low)
        return CriticalSpeedResult(critical_speed=low, failure_details=floor, tolerance=tolerance)

    critical: FailureAnalysis | None = None
    iterations = 0
    while high - low > tolerance:
        mid = (low + high) / 2.0
        analysis = analyze_failure(vehicle, mid, env)
        iterations += 1
        if analysis.has_failed:
            critical = analysis
            high = mid
        else:
            low = mid

    logger.debug(
        "Critical speed search finished after %d iterations (low=%.3f, high=%.3f)",
        iterations,
        low,
        high,
    )

    if critical is None:
        ceiling = _validated_speed(max_speed)
        return CriticalSpeedResult(
            critical_speed=ceiling,
            failure_details=analyze_failure(vehicle, ceiling, env),
            tolerance=tolerance,
        )
    return CriticalSpeedResult(
        critical_speed=critical.speed,
        failure_details=critical,
        tolerance=tolerance,
    )
