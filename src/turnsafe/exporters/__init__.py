"""Exporter registry for turnsafe command outputs."""

from __future__ import annotations

import json
import math
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Protocol, Sequence

from .explain import describe_analysis, describe_critical, describe_verdict


class Exporter(Protocol):
    """Exporter callable protocol."""

    def __call__(self, results: Dict[str, Any]) -> str:  # pragma: no cover - interface only
        ...


def _normalise(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return _normalise(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_normalise(item) for item in value]
    if isinstance(value, Mapping):
        return {str(key): _normalise(item) for key, item in value.items()}
    return value


def json_exporter(results: Dict[str, Any]) -> str:
    payload = _normalise(results)
    return json.dumps(payload, indent=2, sort_keys=True)


def _format_cell(value: Any) -> str:
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.3f}"
    return str(value)


def _flatten(prefix: str, value: Any, rows: list[tuple[str, str]]) -> None:
    if isinstance(value, Mapping):
        for key, item in value.items():
            _flatten(f"{prefix}.{key}" if prefix else str(key), item, rows)
        return
    if isinstance(value, list):
        return
    rows.append((prefix, _format_cell(value)))


def _summary_lines(results: Mapping[str, Any]) -> list[str]:
    summary = results.get("summary")
    if isinstance(summary, Sequence) and not isinstance(summary, str):
        return [str(line) for line in summary if line]
    return []


def markdown_exporter(results: Dict[str, Any]) -> str:
    """Render scalar fields as a two-column table followed by the summary."""

    payload = _normalise(results)
    title = str(payload.get("title") or payload.get("command") or "turnsafe")
    rows: list[tuple[str, str]] = []
    for key, value in payload.items():
        if key in {"title", "summary"}:
            continue
        _flatten(key, value, rows)

    lines = [f"## {title}", "", "| Field | Value |", "| --- | --- |"]
    lines.extend(f"| {field} | {value} |" for field, value in rows)
    summary = _summary_lines(payload)
    if summary:
        lines.append("")
        lines.extend(f"- {line}" for line in summary)
    return "\n".join(lines)


def text_exporter(results: Dict[str, Any]) -> str:
    summary = _summary_lines(results)
    if summary:
        return "\n".join(summary)
    return json_exporter(results)


exporters_registry: Dict[str, Exporter] = {
    "json": json_exporter,
    "markdown": markdown_exporter,
    "text": text_exporter,
}


__all__ = [
    "Exporter",
    "json_exporter",
    "markdown_exporter",
    "text_exporter",
    "exporters_registry",
    "describe_analysis",
    "describe_critical",
    "describe_verdict",
]
