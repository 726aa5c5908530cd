"""Head-to-head winner rules for two vehicle sweeps."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from turnsafe_core.equations.constants import DEFAULT_SPEED_TOLERANCE
from turnsafe_core.models import FailureAnalysis, FailureType

__all__ = [
    "SweepOutcome",
    "VerdictReason",
    "ComparisonVerdict",
    "compare_outcomes",
]


@dataclass(frozen=True, slots=True)
class SweepOutcome:
    """Final state of one vehicle after a speed sweep.

    ``speed`` is the failing speed when ``has_failed`` is true, otherwise the
    highest speed the vehicle completed.
    """

    has_failed: bool
    failure_type: FailureType
    speed: float
    analysis: FailureAnalysis | None = None

    @classmethod
    def from_analysis(cls, analysis: FailureAnalysis) -> "SweepOutcome":
        return cls(
            has_failed=analysis.has_failed,
            failure_type=analysis.failure_type,
            speed=analysis.speed,
            analysis=analysis,
        )


class VerdictReason(str, Enum):
    TIE = "tie"
    HIGHER_FAILURE_SPEED = "higher_failure_speed"
    SOLE_SURVIVOR = "sole_survivor"
    BOTH_COMPLETED = "both_completed"


@dataclass(frozen=True, slots=True)
class ComparisonVerdict:
    """Winner of a head-to-head comparison.

    ``winner`` is ``"a"``, ``"b"`` or ``None`` (tie or both completed).
    """

    winner: str | None
    tie: bool
    reason: VerdictReason

    @property
    def both_completed(self) -> bool:
        return self.reason is VerdictReason.BOTH_COMPLETED


def compare_outcomes(
    result_a: SweepOutcome,
    result_b: SweepOutcome,
    tolerance: float = DEFAULT_SPEED_TOLERANCE,
) -> ComparisonVerdict:
    """Declare the winner between two sweep outcomes.

    Rules, in priority order: both failed within ``tolerance`` of each other
    is a tie; both failed at different speeds favours the higher failing
    speed; a single failure hands the win to the other vehicle; no failure at
    all means both completed the range.
    """

    if result_a.has_failed and result_b.has_failed:
        if abs(result_a.speed - result_b.speed) < tolerance:
            return ComparisonVerdict(winner=None, tie=True, reason=VerdictReason.TIE)
        winner = "a" if result_a.speed > result_b.speed else "b"
        return ComparisonVerdict(
            winner=winner, tie=False, reason=VerdictReason.HIGHER_FAILURE_SPEED
        )
    if result_a.has_failed:
        return ComparisonVerdict(winner="b", tie=False, reason=VerdictReason.SOLE_SURVIVOR)
    if result_b.has_failed:
        return ComparisonVerdict(winner="a", tie=False, reason=VerdictReason.SOLE_SURVIVOR)
    return ComparisonVerdict(winner=None, tie=False, reason=VerdictReason.BOTH_COMPLETED)
