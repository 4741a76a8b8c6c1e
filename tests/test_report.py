"""Tests for run roll-ups and YAML reports."""

import os
import tempfile

import yaml

from ivanti_hostconfig.models import Diff, Facts, Outcome, OutcomeStatus, RunResult
from ivanti_hostconfig.report import compute_run_rollup, format_outcomes, write_report

FACTS = Facts(os_family="RedHat", os_version="8")


def _result(*outcomes):
    result = RunResult(facts=FACTS)
    for i, outcome in enumerate(outcomes):
        change = Diff.noop() if outcome.status is OutcomeStatus.UNCHANGED else Diff.create()
        result.record(f"Package[p{i}]", change, outcome)
    return result.finish()


def test_rollup_converged():
    rollup = compute_run_rollup(_result(Outcome.unchanged(), Outcome.unchanged()))
    assert rollup["status"] == "CONVERGED"
    assert rollup["summary"]["unchanged"] == 2


def test_rollup_changed_and_failed():
    assert compute_run_rollup(_result(Outcome.applied(), Outcome.unchanged()))["status"] == "CHANGED"
    rollup = compute_run_rollup(_result(Outcome.applied(), Outcome.failed("boom")))
    assert rollup["status"] == "FAILED"
    assert rollup["summary"] == {"total": 2, "unchanged": 0, "applied": 1, "failed": 1, "pending": 0}


def test_rollup_run_error():
    result = RunResult(facts=FACTS, error="Unsupported OS family 'x'").finish()
    assert compute_run_rollup(result)["status"] == "FAILED"


def test_format_outcomes_includes_failure_reason():
    lines = format_outcomes(_result(Outcome.applied(), Outcome.failed("No match for argument")))
    assert lines[0].startswith("applied")
    assert "Package[p1]" in lines[1]
    assert "(No match for argument)" in lines[1]


def test_format_outcomes_for_plan():
    result = RunResult(facts=FACTS, mode="plan")
    result.record("Package[p0]", Diff.create(), None)
    assert format_outcomes(result)[0].startswith("would create")


def test_write_report():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, "reports", "run.yaml")
        write_report(_result(Outcome.applied(), Outcome.failed("boom")), path)
        with open(path) as f:
            data = yaml.safe_load(f)
    assert data["facts"] == {"os_family": "RedHat", "os_version": "8"}
    assert data["status"] == "FAILED"
    assert data["resources"][1]["outcome"] == {"status": "failed", "reason": "boom"}
    assert data["resources"][0]["diff"]["action"] == "create"
