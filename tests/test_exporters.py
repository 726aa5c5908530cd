from __future__ import annotations

import json
import math

from turnsafe.exporters import (
    describe_analysis,
    describe_critical,
    describe_verdict,
    exporters_registry,
    json_exporter,
    markdown_exporter,
    text_exporter,
)
from turnsafe_core.analysis import (
    ComparisonVerdict,
    SweepOutcome,
    VerdictReason,
    analyze_failure,
    compare_outcomes,
    find_critical_speed,
)
from turnsafe_core.models import EnvironmentParams, FailureType, VehicleSpec

from tests.helpers import build_environment


def _payload() -> dict[str, object]:
    return {
        "command": "analyze",
        "title": "Celica at 90.0 mph",
        "failure_type": FailureType.SPIN_OUT,
        "analysis": {"margin": -210.09412, "ignored": False, "limit": math.inf},
        "summary": ["Celica spun out at 90.0 mph."],
    }


def test_registry_lists_all_formats() -> None:
    assert set(exporters_registry) == {"json", "markdown", "text"}


def test_json_exporter_normalises_enums_and_infinities() -> None:
    decoded = json.loads(json_exporter(_payload()))

    assert decoded["failure_type"] == "spin-out"
    assert decoded["analysis"]["limit"] == "inf"
    assert decoded["summary"] == ["Celica spun out at 90.0 mph."]


def test_json_exporter_serialises_dataclasses(celica: VehicleSpec, environment: EnvironmentParams) -> None:
    analysis = analyze_failure(celica, 90.0, environment)

    decoded = json.loads(json_exporter({"analysis": analysis}))

    assert decoded["analysis"]["failure_type"] == "spin-out"
    assert decoded["analysis"]["spin_out"]["mode"] == "spin-out"


def test_markdown_exporter_renders_table_and_summary() -> None:
    rendered = markdown_exporter(_payload())
    lines = rendered.splitlines()

    assert lines[0] == "## Celica at 90.0 mph"
    assert "| Field | Value |" in lines
    assert "| analysis.margin | -210.094 |" in lines
    assert "| analysis.ignored | no |" in lines
    assert "| failure_type | spin-out |" in lines
    assert lines[-1] == "- Celica spun out at 90.0 mph."


def test_text_exporter_prefers_summary() -> None:
    assert text_exporter(_payload()) == "Celica spun out at 90.0 mph."
    assert json.loads(text_exporter({"value": 1})) == {"value": 1}


def test_describe_analysis_for_spin_out(celica: VehicleSpec, environment: EnvironmentParams) -> None:
    lines = describe_analysis("Celica", analyze_failure(celica, 90.0, environment), celica)

    assert lines[0] == "Celica spun out at 90.0 mph."
    assert "lateral acceleration 232.32" in lines[1]
    assert lines[2].startswith("Spin-out: required 232.32")
    assert lines[2].endswith("exceeded)")
    assert lines[-1].startswith("Grip: weight 2650 lb")


def test_describe_analysis_for_rollover(celica: VehicleSpec) -> None:
    environment = build_environment(ignore_spin_out=True)

    lines = describe_analysis("Celica", analyze_failure(celica, 90.0, environment), celica)

    assert lines[0] == "Celica rolled over at 90.0 mph."
    assert "ignored" in lines[2]
    assert "SSF 1.420" in lines[-1]


def test_describe_analysis_when_safe(celica: VehicleSpec, environment: EnvironmentParams) -> None:
    lines = describe_analysis("Celica", analyze_failure(celica, 20.0, environment), celica)
    assert lines[0] == "Celica completed the turn at 20.0 mph."
    assert len(lines) == 4


def test_describe_critical(celica: VehicleSpec, environment: EnvironmentParams) -> None:
    result = find_critical_speed(celica, environment)
    assert describe_critical("Celica", result, 150.0)[0].startswith("Celica reaches its limit at 27.")

    relaxed = build_environment(ignore_spin_out=True, ignore_rollover=True)
    safe = find_critical_speed(celica, relaxed)
    assert describe_critical("Celica", safe, 150.0) == [
        "Celica does not fail anywhere up to 150.0 mph."
    ]


def test_describe_verdict_cases() -> None:
    failed = SweepOutcome(has_failed=True, failure_type=FailureType.SPIN_OUT, speed=28.0)
    survived = SweepOutcome(has_failed=False, failure_type=FailureType.NONE, speed=28.0)
    later = SweepOutcome(has_failed=True, failure_type=FailureType.ROLLOVER, speed=40.0)

    sole = describe_verdict(
        "Celica",
        "Caravan",
        failed,
        survived,
        ComparisonVerdict(winner="b", tie=False, reason=VerdictReason.SOLE_SURVIVOR),
    )
    higher = describe_verdict(
        "Celica",
        "Caravan",
        later,
        failed,
        ComparisonVerdict(winner="a", tie=False, reason=VerdictReason.HIGHER_FAILURE_SPEED),
    )
    tie = describe_verdict(
        "Celica",
        "Caravan",
        failed,
        failed,
        ComparisonVerdict(winner=None, tie=True, reason=VerdictReason.TIE),
    )

    assert sole == ["Caravan wins: Celica spun out at 28.0 mph while Caravan completed 28.0 mph."]
    assert higher[0].startswith("Celica wins by sustaining a higher speed before failure: 40.0 mph")
    assert tie == [
        "Tie: both vehicles failed at 28.0 mph.",
        "Celica failed by spin-out.",
        "Caravan failed by spin-out.",
    ]


def _duel_at(
    speed: float,
    vehicle_a: VehicleSpec,
    vehicle_b: VehicleSpec,
    environment: EnvironmentParams,
) -> tuple[SweepOutcome, SweepOutcome, ComparisonVerdict]:
    outcome_a = SweepOutcome.from_analysis(analyze_failure(vehicle_a, speed, environment))
    outcome_b = SweepOutcome.from_analysis(analyze_failure(vehicle_b, speed, environment))
    return outcome_a, outcome_b, compare_outcomes(outcome_a, outcome_b)


def test_sole_survivor_after_spin_out_explains_grip(
    celica: VehicleSpec, caravan: VehicleSpec, environment: EnvironmentParams
) -> None:
    outcome_a, outcome_b, verdict = _duel_at(28.0, celica, caravan, environment)

    lines = describe_verdict(
        "Celica", "Caravan", outcome_a, outcome_b, verdict, vehicle_a=celica, vehicle_b=caravan
    )

    assert lines[0] == "Caravan wins: Celica spun out at 28.0 mph while Caravan completed 28.0 mph."
    assert lines[1] == "Margins at 28.0 mph (failure speed):"
    assert lines[2].split() == ["Check", "Celica", "Caravan", "Result"]
    assert lines[4].startswith("Spin-out ") and lines[4].endswith("FAILED vs PASSED")
    assert lines[5].startswith("Rollover ") and lines[5].endswith("PASSED vs PASSED")
    assert lines[6] == "Key differences:"
    assert lines[7].startswith("  Weight: Caravan 4560 lb vs Celica 2650 lb")
    assert lines[8] == "  Spin-out limit: Caravan 28.96 ft/s² vs Celica 22.23 ft/s²."


def test_sole_survivor_after_rollover_explains_stability(
    celica: VehicleSpec, caravan: VehicleSpec
) -> None:
    environment = build_environment(ignore_spin_out=True)
    outcome_a, outcome_b, verdict = _duel_at(37.0, celica, caravan, environment)

    lines = describe_verdict("Celica", "Caravan", outcome_a, outcome_b, verdict)

    assert verdict.winner == "a"
    assert lines[0].startswith("Celica wins: Caravan rolled over at 37.0 mph")
    assert lines[4].endswith("IGNORED vs IGNORED")
    assert lines[5].endswith("PASSED vs FAILED")
    assert lines[7] == "  SSF: Celica 1.420 vs Caravan 1.200."
    assert lines[-1] == "  Rollover limit: Celica 45.69 ft/s² vs Caravan 38.61 ft/s²."
    assert "Vehicle comparison:" not in lines


def test_vehicle_comparison_table(
    celica: VehicleSpec, caravan: VehicleSpec, environment: EnvironmentParams
) -> None:
    outcome_a, outcome_b, verdict = _duel_at(28.0, celica, caravan, environment)

    lines = describe_verdict(
        "Celica", "Caravan", outcome_a, outcome_b, verdict, vehicle_a=celica, vehicle_b=caravan
    )
    table = lines[lines.index("Vehicle comparison:") + 1 :]
    rows = {line.split("  ")[0]: line for line in table[2:]}

    assert table[0].split() == ["Property", "Celica", "Caravan", "Difference"]
    assert set(rows) == {
        "Weight",
        "CoM height",
        "Wheelbase",
        "Avg track",
        "Lateral accel",
        "Spin-out limit",
        "Rollover limit",
    }
    assert rows["Weight"].split()[-2:] == ["+1910", "lb"]
    assert rows["CoM height"].split()[-2:] == ["+6.0", "in"]
    assert rows["Lateral accel"].split()[-2:] == ["+0.00", "ft/s²"]
