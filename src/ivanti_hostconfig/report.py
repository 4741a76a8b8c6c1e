"""Run-result roll-ups and YAML report output."""

from __future__ import annotations

import os
from typing import Any

import yaml

from .models import OutcomeStatus, RunResult


def compute_run_rollup(result: RunResult) -> dict[str, Any]:
    summary: dict[str, Any] = {
        "total": len(result.resources),
        "unchanged": 0,
        "applied": 0,
        "failed": 0,
        "pending": 0,
    }
    for entry in result.resources:
        if entry.outcome is None:
            summary["pending"] += 1
        else:
            summary[entry.outcome.status.value] += 1

    if result.error is not None or summary["failed"]:
        status = "FAILED"
    elif summary["applied"] or summary["pending"]:
        status = "CHANGED"
    else:
        status = "CONVERGED"

    return {"summary": summary, "status": status}


def result_to_dict(result: RunResult) -> dict[str, Any]:
    data = result.model_dump(mode="json")
    data.update(compute_run_rollup(result))
    return data


def write_report(result: RunResult, output_path: str) -> None:
    parent = os.path.dirname(output_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        yaml.dump(result_to_dict(result), f, default_flow_style=False, sort_keys=False)


def format_outcomes(result: RunResult) -> list[str]:
    """One human-readable line per resource, in run order."""
    lines = []
    for entry in result.resources:
        if entry.outcome is None:
            label = f"would {entry.diff.action.value}"
        else:
            label = entry.outcome.status.value
        line = f"{label:<16} {entry.resource_id}"
        reason = entry.outcome.reason if entry.outcome and entry.outcome.status is OutcomeStatus.FAILED else None
        if reason:
            line += f"  ({reason})"
        lines.append(line)
    return lines
