"""One reconciliation pass: build the catalog, then observe, diff and enforce each resource."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .catalog import build_catalog
from .comparator import diff as compute_diff
from .enforcer import Enforcer
from .errors import CatalogError
from .models import Catalog, Diff, DiffAction, Facts, Outcome, OutcomeStatus, RunResult

logger = logging.getLogger(__name__)

CatalogBuilder = Callable[[Facts], Catalog]


class ReconciliationRun:
    def __init__(
        self,
        enforcer: Enforcer,
        builder: CatalogBuilder = build_catalog,
        timeout_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.enforcer = enforcer
        self.builder = builder
        self.timeout_seconds = timeout_seconds
        self._clock = clock

    def _build(self, facts: Facts, result: RunResult) -> Catalog | None:
        try:
            return self.builder(facts)
        except CatalogError as exc:
            logger.error("Catalog build failed for %s %s: %s", facts.os_family, facts.os_version, exc)
            result.error = str(exc)
            return None

    def run(self, facts: Facts) -> RunResult:
        """Converge the host once. Resource failures are recorded, never raised."""
        result = RunResult(facts=facts, mode="apply")
        catalog = self._build(facts, result)
        if catalog is None:
            return result.finish()

        deadline = None if self.timeout_seconds is None else self._clock() + self.timeout_seconds
        for resource in catalog.resources:
            rid = resource.resource_id
            if deadline is not None and self._clock() >= deadline:
                reason = f"aborted: run timeout of {self.timeout_seconds:g}s exceeded"
                result.record(rid, Diff.unknown("not evaluated"), Outcome.failed(reason))
                logger.warning("%s %s", rid, reason)
                continue

            observed = self.enforcer.observe(resource)
            change = compute_diff(resource, observed)
            logger.debug("%s: %s", rid, change.action.value)
            outcome = self.enforcer.apply(resource, change)
            result.record(rid, change, outcome)

            if outcome.status is OutcomeStatus.APPLIED:
                logger.info("%s: %s applied", rid, change.action.value)
            elif outcome.status is OutcomeStatus.FAILED:
                logger.warning("%s failed: %s", rid, outcome.reason)

        logger.info(
            "Run finished: %d changed, %d failed of %d resources",
            len(result.changed),
            len(result.failed),
            len(result.resources),
        )
        return result.finish()

    def plan(self, facts: Facts) -> RunResult:
        """Observe and diff every resource without enforcing anything."""
        result = RunResult(facts=facts, mode="plan")
        catalog = self._build(facts, result)
        if catalog is None:
            return result.finish()

        for resource in catalog.resources:
            change = compute_diff(resource, self.enforcer.observe(resource))
            outcome = None
            if change.is_noop:
                outcome = Outcome.unchanged()
            elif change.action is DiffAction.UNKNOWN:
                outcome = Outcome.failed(change.reason or "state unknown")
            result.record(resource.resource_id, change, outcome)
        return result.finish()

    def verify(self, facts: Facts) -> list[str]:
        """Return one message per resource that is not in its desired state.

        Raises ``CatalogError`` when no catalog can be built for *facts*.
        """
        violations = []
        for resource in self.builder(facts).resources:
            change = compute_diff(resource, self.enforcer.observe(resource))
            if not change.is_noop:
                violations.append(f"{resource.resource_id}: {change.reason or change.action.value}")
        return violations
