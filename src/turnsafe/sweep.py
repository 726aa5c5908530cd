"""Speed sweeps driving the failure analysis for one or two vehicles."""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from turnsafe_core.analysis import (
    ComparisonVerdict,
    SweepOutcome,
    analyze_failure,
    compare_outcomes,
)
from turnsafe_core.equations.constants import DEFAULT_SPEED_TOLERANCE
from turnsafe_core.models import (
    EnvironmentParams,
    FailureAnalysis,
    FailureType,
    InvalidParameterError,
    VehicleSpec,
)

__all__ = [
    "SWEEP_MODES",
    "SweepSettings",
    "DuelResult",
    "speed_schedule",
    "independent_sweep",
    "synchronized_sweep",
    "run_independent_duel",
    "independent_duel",
    "run_duel",
]

logger = logging.getLogger(__name__)

SWEEP_MODES: tuple[str, ...] = ("synchronized", "independent")

StopPredicate = Callable[[float], bool]


@dataclass(frozen=True, slots=True)
class SweepSettings:
    """Speed ramp shared by both vehicles of a duel (mph)."""

    start: float = 10.0
    max_speed: float = 150.0
    step: float = 1.0
    mode: str = "synchronized"

    def __post_init__(self) -> None:
        for name in ("start", "max_speed", "step"):
            value = float(getattr(self, name))
            if not math.isfinite(value) or value <= 0.0:
                raise InvalidParameterError(name, getattr(self, name))
            object.__setattr__(self, name, value)
        if self.max_speed < self.start:
            raise InvalidParameterError(
                "max_speed", self.max_speed, f"must not be below start {self.start!r}"
            )
        mode = str(self.mode).strip().lower()
        if mode not in SWEEP_MODES:
            raise InvalidParameterError("mode", self.mode, f"expected one of {', '.join(SWEEP_MODES)}")
        object.__setattr__(self, "mode", mode)


@dataclass(frozen=True, slots=True)
class DuelResult:
    outcome_a: SweepOutcome
    outcome_b: SweepOutcome
    verdict: ComparisonVerdict
    mode: str


def speed_schedule(settings: SweepSettings) -> np.ndarray:
    """Return ``start, start + step, …`` up to and including ``max_speed``.

    Speeds are computed as ``start + k·step`` so long ramps with fractional
    steps do not accumulate rounding drift.
    """

    count = int(np.floor((settings.max_speed - settings.start) / settings.step + 1e-9)) + 1
    speeds = settings.start + settings.step * np.arange(count, dtype=float)
    return np.round(speeds, 9)


def _completed(last: FailureAnalysis | None, settings: SweepSettings) -> SweepOutcome:
    if last is not None:
        return SweepOutcome.from_analysis(last)
    return SweepOutcome(has_failed=False, failure_type=FailureType.NONE, speed=settings.start)


def independent_sweep(
    vehicle: VehicleSpec,
    environment: EnvironmentParams,
    settings: SweepSettings | None = None,
    should_stop: Optional[StopPredicate] = None,
) -> SweepOutcome:
    """Ramp ``vehicle`` through the schedule until it fails.

    ``should_stop`` is polled with the next speed before each evaluation;
    returning ``True`` ends the sweep with the last completed speed. The
    environment is read afresh at each step.
    """

    settings = settings or SweepSettings()
    last: FailureAnalysis | None = None
    for raw_speed in speed_schedule(settings):
        speed = float(raw_speed)
        if should_stop is not None and should_stop(speed):
            logger.debug("Sweep stopped early before %.2f mph", speed)
            break
        analysis = analyze_failure(vehicle, speed, environment)
        logger.debug(
            "Sweep step %.2f mph: %s",
            speed,
            analysis.failure_type.value,
            extra={"event": "sweep.step", "speed": speed},
        )
        if analysis.has_failed:
            return SweepOutcome.from_analysis(analysis)
        last = analysis
    return _completed(last, settings)


def synchronized_sweep(
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    environment: EnvironmentParams,
    settings: SweepSettings | None = None,
) -> tuple[SweepOutcome, SweepOutcome]:
    """Evaluate both vehicles at identical speeds.

    The sweep ends at the first speed where either vehicle fails; both
    outcomes then refer to that common speed.
    """

    settings = settings or SweepSettings()
    last_a: FailureAnalysis | None = None
    last_b: FailureAnalysis | None = None
    for raw_speed in speed_schedule(settings):
        speed = float(raw_speed)
        snapshot = environment.snapshot()
        last_a = analyze_failure(vehicle_a, speed, snapshot)
        last_b = analyze_failure(vehicle_b, speed, snapshot)
        logger.debug(
            "Synchronised step %.2f mph: a=%s b=%s",
            speed,
            last_a.failure_type.value,
            last_b.failure_type.value,
            extra={"event": "sweep.step", "speed": speed},
        )
        if last_a.has_failed or last_b.has_failed:
            break
    return _completed(last_a, settings), _completed(last_b, settings)


async def run_independent_duel(
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    environment: EnvironmentParams,
    settings: SweepSettings | None = None,
) -> tuple[SweepOutcome, SweepOutcome]:
    """Run each vehicle's own ramp as a cooperative task.

    Tasks yield between speed steps and watch the opponent's failure speed. A
    task keeps testing up to and including the speed at which its opponent
    failed, then stops, so a shared failure speed is always observed.
    """

    settings = settings or SweepSettings()
    failures: dict[str, float | None] = {"a": None, "b": None}

    async def _ramp(label: str, opponent: str, vehicle: VehicleSpec) -> SweepOutcome:
        def _opponent_done(speed: float) -> bool:
            failed_at = failures[opponent]
            return failed_at is not None and failed_at < speed

        last: FailureAnalysis | None = None
        for raw_speed in speed_schedule(settings):
            speed = float(raw_speed)
            if _opponent_done(speed):
                break
            analysis = analyze_failure(vehicle, speed, environment)
            if analysis.has_failed:
                failures[label] = speed
                logger.debug("Vehicle %s failed at %.2f mph", label, speed)
                return SweepOutcome.from_analysis(analysis)
            last = analysis
            await asyncio.sleep(0)
        return _completed(last, settings)

    outcome_a, outcome_b = await asyncio.gather(
        _ramp("a", "b", vehicle_a),
        _ramp("b", "a", vehicle_b),
    )
    return outcome_a, outcome_b


def independent_duel(
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    environment: EnvironmentParams,
    settings: SweepSettings | None = None,
) -> tuple[SweepOutcome, SweepOutcome]:
    """Synchronous wrapper around :func:`run_independent_duel`."""

    return asyncio.run(run_independent_duel(vehicle_a, vehicle_b, environment, settings))


def run_duel(
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    environment: EnvironmentParams,
    settings: SweepSettings | None = None,
    *,
    tolerance: float = DEFAULT_SPEED_TOLERANCE,
) -> DuelResult:
    """Sweep both vehicles according to ``settings.mode`` and pick a winner."""

    settings = settings or SweepSettings()
    if settings.mode == "independent":
        outcome_a, outcome_b = independent_duel(vehicle_a, vehicle_b, environment, settings)
    else:
        outcome_a, outcome_b = synchronized_sweep(vehicle_a, vehicle_b, environment, settings)
    verdict = compare_outcomes(outcome_a, outcome_b, tolerance=tolerance)
    logger.info(
        "Duel finished: winner=%s reason=%s",
        verdict.winner,
        verdict.reason.value,
        extra={
            "event": "duel.finished",
            "mode": settings.mode,
            "context": {
                "speed_a": outcome_a.speed,
                "speed_b": outcome_b.speed,
                "failure_a": outcome_a.failure_type.value,
                "failure_b": outcome_b.failure_type.value,
            },
        },
    )
    return DuelResult(outcome_a=outcome_a, outcome_b=outcome_b, verdict=verdict, mode=settings.mode)
