"""Human readable explanations of failure verdicts and duel winners."""

from __future__ import annotations

from typing import Sequence

from turnsafe_core.analysis import ComparisonVerdict, SweepOutcome, VerdictReason
from turnsafe_core.equations.constants import MPH_TO_FPS
from turnsafe_core.models import (
    CriticalSpeedResult,
    FailureAnalysis,
    FailureType,
    ThresholdResult,
    VehicleSpec,
)

__all__ = ["describe_analysis", "describe_critical", "describe_verdict"]

_FAILURE_VERBS = {
    FailureType.SPIN_OUT: "spun out",
    FailureType.ROLLOVER: "rolled over",
}


def _mode_line(label: str, required: float, limit: float, margin: float, ignored: bool) -> str:
    status = "ignored" if ignored else ("exceeded" if margin < 0.0 else "ok")
    return (
        f"{label}: required {required:.2f} ft/s² vs limit {limit:.2f} ft/s² "
        f"(margin {margin:+.2f}, {status})"
    )


def describe_analysis(name: str, analysis: FailureAnalysis, vehicle: VehicleSpec) -> list[str]:
    """Explain the verdict for ``name`` at ``analysis.speed``."""

    spin_out = analysis.spin_out
    rollover = analysis.rollover
    speed_fps = analysis.speed * MPH_TO_FPS
    if analysis.has_failed:
        headline = f"{name} {_FAILURE_VERBS[analysis.failure_type]} at {analysis.speed:.1f} mph."
    else:
        headline = f"{name} completed the turn at {analysis.speed:.1f} mph."
    lines = [
        headline,
        f"Track radius {spin_out.turn_radius:.2f} ft, speed {speed_fps:.2f} ft/s, "
        f"lateral acceleration {spin_out.required_lateral_accel:.2f} ft/s².",
        _mode_line("Spin-out", spin_out.required_lateral_accel, spin_out.limit, spin_out.margin, spin_out.ignored),
        _mode_line("Rollover", rollover.required_lateral_accel, rollover.limit, rollover.margin, rollover.ignored),
    ]
    if analysis.failure_type is FailureType.SPIN_OUT:
        lines.append(
            f"Grip: weight {vehicle.weight:.0f} lb gives factor {spin_out.weight_grip_factor:.3f}, "
            f"{vehicle.drive_type.value} gives factor {spin_out.drive_type_factor:.2f}."
        )
    elif analysis.failure_type is FailureType.ROLLOVER:
        lines.append(
            f"Stability: track {vehicle.average_track:.1f} in / (2 × {vehicle.center_of_mass_height:.1f} in) "
            f"= SSF {rollover.static_stability_factor:.3f}."
        )
    return lines


def describe_critical(name: str, result: CriticalSpeedResult, max_speed: float) -> list[str]:
    details = result.failure_details
    if not details.has_failed:
        return [f"{name} does not fail anywhere up to {max_speed:.1f} mph."]
    return [
        f"{name} reaches its limit at {result.critical_speed:.1f} mph "
        f"(±{result.tolerance:g} mph) by {details.failure_type.value}."
    ]


def _check_status(threshold: ThresholdResult) -> str:
    if threshold.ignored:
        return "IGNORED"
    return "FAILED" if threshold.margin < 0.0 else "PASSED"


def _table(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> list[str]:
    """Plain text table with left-aligned columns."""

    widths = [max(len(cell) for cell in column) for column in zip(headers, *rows)]

    def render(cells: Sequence[str]) -> str:
        return "  ".join(cell.ljust(width) for cell, width in zip(cells, widths)).rstrip()

    return [render(headers), render(["-" * width for width in widths]), *map(render, rows)]


def _margin_table(
    name_a: str, name_b: str, analysis_a: FailureAnalysis, analysis_b: FailureAnalysis
) -> list[str]:
    rows = []
    for label, check_a, check_b in (
        ("Spin-out", analysis_a.spin_out, analysis_b.spin_out),
        ("Rollover", analysis_a.rollover, analysis_b.rollover),
    ):
        rows.append(
            [
                label,
                f"{check_a.margin:+.2f} ft/s²",
                f"{check_b.margin:+.2f} ft/s²",
                f"{_check_status(check_a)} vs {_check_status(check_b)}",
            ]
        )
    return _table(["Check", name_a, name_b, "Result"], rows)


def _key_differences(
    winner: tuple[str, FailureAnalysis, VehicleSpec | None],
    loser: tuple[str, FailureAnalysis, VehicleSpec | None],
    failure_type: FailureType,
) -> list[str]:
    win_name, win_analysis, win_vehicle = winner
    lose_name, lose_analysis, lose_vehicle = loser
    lines = ["Key differences:"]
    if failure_type is FailureType.SPIN_OUT:
        if win_vehicle is not None and lose_vehicle is not None:
            lines.append(
                f"  Weight: {win_name} {win_vehicle.weight:.0f} lb vs {lose_name} "
                f"{lose_vehicle.weight:.0f} lb (grip factor "
                f"{win_analysis.spin_out.weight_grip_factor:.3f} vs "
                f"{lose_analysis.spin_out.weight_grip_factor:.3f})."
            )
        lines.append(
            f"  Spin-out limit: {win_name} {win_analysis.spin_out.limit:.2f} ft/s² vs "
            f"{lose_name} {lose_analysis.spin_out.limit:.2f} ft/s²."
        )
        return lines

    lines.append(
        f"  SSF: {win_name} {win_analysis.rollover.static_stability_factor:.3f} vs "
        f"{lose_name} {lose_analysis.rollover.static_stability_factor:.3f}."
    )
    for name, vehicle in ((win_name, win_vehicle), (lose_name, lose_vehicle)):
        if vehicle is not None:
            lines.append(
                f"  {name}: track {vehicle.average_track:.1f} in, "
                f"centre of mass {vehicle.center_of_mass_height:.1f} in."
            )
    lines.append(
        f"  Rollover limit: {win_name} {win_analysis.rollover.limit:.2f} ft/s² vs "
        f"{lose_name} {lose_analysis.rollover.limit:.2f} ft/s²."
    )
    return lines


def _vehicle_table(
    name_a: str,
    name_b: str,
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    analysis_a: FailureAnalysis,
    analysis_b: FailureAnalysis,
) -> list[str]:
    """Side-by-side properties with the difference taken as ``b - a``."""

    properties = (
        ("Weight", vehicle_a.weight, vehicle_b.weight, "lb", ".0f"),
        ("CoM height", vehicle_a.center_of_mass_height, vehicle_b.center_of_mass_height, "in", ".1f"),
        ("Wheelbase", vehicle_a.wheelbase, vehicle_b.wheelbase, "in", ".1f"),
        ("Avg track", vehicle_a.average_track, vehicle_b.average_track, "in", ".1f"),
        (
            "Lateral accel",
            analysis_a.spin_out.required_lateral_accel,
            analysis_b.spin_out.required_lateral_accel,
            "ft/s²",
            ".2f",
        ),
        ("Spin-out limit", analysis_a.spin_out.limit, analysis_b.spin_out.limit, "ft/s²", ".2f"),
        ("Rollover limit", analysis_a.rollover.limit, analysis_b.rollover.limit, "ft/s²", ".2f"),
    )
    rows = [
        [
            label,
            f"{value_a:{spec}} {unit}",
            f"{value_b:{spec}} {unit}",
            f"{value_b - value_a:+{spec}} {unit}",
        ]
        for label, value_a, value_b, unit, spec in properties
    ]
    return _table(["Property", name_a, name_b, "Difference"], rows)


def describe_verdict(
    name_a: str,
    name_b: str,
    outcome_a: SweepOutcome,
    outcome_b: SweepOutcome,
    verdict: ComparisonVerdict,
    *,
    vehicle_a: VehicleSpec | None = None,
    vehicle_b: VehicleSpec | None = None,
) -> list[str]:
    """Explain why the duel ended the way it did.

    The headline is always the first line. When both outcomes carry their
    final :class:`FailureAnalysis`, a sole survivor also gets the margins of
    both checks at the failing speed and the properties that decided it.
    Passing both vehicle specs appends a side-by-side property table.
    """

    analysis_a, analysis_b = outcome_a.analysis, outcome_b.analysis
    have_analyses = analysis_a is not None and analysis_b is not None

    if verdict.reason is VerdictReason.TIE:
        lines = [
            f"Tie: both vehicles failed at {outcome_a.speed:.1f} mph.",
            f"{name_a} failed by {outcome_a.failure_type.value}.",
            f"{name_b} failed by {outcome_b.failure_type.value}.",
        ]
    elif verdict.reason is VerdictReason.BOTH_COMPLETED:
        top = max(outcome_a.speed, outcome_b.speed)
        return [
            f"Both vehicles completed the tested range up to {top:.1f} mph; no winner.",
            "Neither vehicle exceeded an enabled limit at any tested speed.",
        ]
    else:
        if verdict.winner == "a":
            winner = (name_a, outcome_a, analysis_a, vehicle_a)
            loser = (name_b, outcome_b, analysis_b, vehicle_b)
        else:
            winner = (name_b, outcome_b, analysis_b, vehicle_b)
            loser = (name_a, outcome_a, analysis_a, vehicle_a)
        win_name, win_outcome, win_analysis, win_vehicle = winner
        lose_name, lose_outcome, lose_analysis, lose_vehicle = loser

        if verdict.reason is VerdictReason.HIGHER_FAILURE_SPEED:
            gap = win_outcome.speed - lose_outcome.speed
            lines = [
                f"{win_name} wins by sustaining a higher speed before failure: "
                f"{win_outcome.speed:.1f} mph vs {lose_outcome.speed:.1f} mph ({gap:.1f} mph).",
                f"{lose_name} {_FAILURE_VERBS[lose_outcome.failure_type]} at "
                f"{lose_outcome.speed:.1f} mph; {win_name} "
                f"{_FAILURE_VERBS[win_outcome.failure_type]} at {win_outcome.speed:.1f} mph.",
            ]
        else:
            lines = [
                f"{win_name} wins: {lose_name} {_FAILURE_VERBS[lose_outcome.failure_type]} at "
                f"{lose_outcome.speed:.1f} mph while {win_name} completed "
                f"{win_outcome.speed:.1f} mph.",
            ]
            if have_analyses:
                if win_outcome.speed == lose_outcome.speed:
                    lines.append(f"Margins at {lose_outcome.speed:.1f} mph (failure speed):")
                else:
                    lines.append(
                        f"Margins at the last tested speeds ({outcome_a.speed:.1f} and "
                        f"{outcome_b.speed:.1f} mph):"
                    )
                lines.extend(_margin_table(name_a, name_b, analysis_a, analysis_b))
                lines.extend(
                    _key_differences(
                        (win_name, win_analysis, win_vehicle),
                        (lose_name, lose_analysis, lose_vehicle),
                        lose_outcome.failure_type,
                    )
                )

    if have_analyses and vehicle_a is not None and vehicle_b is not None:
        lines.append("Vehicle comparison:")
        lines.extend(_vehicle_table(name_a, name_b, vehicle_a, vehicle_b, analysis_a, analysis_b))
    return lines
