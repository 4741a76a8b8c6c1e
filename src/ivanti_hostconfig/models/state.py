from datetime import datetime, timezone
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .resources import Facts


class ObservedPackage(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["package"] = "package"
    name: str
    installed: bool = False
    error: Optional[str] = None


class ObservedFile(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal["file"] = "file"
    path: str
    exists: bool = False
    content: Optional[str] = None
    error: Optional[str] = None


ObservedState = Union[ObservedPackage, ObservedFile]


class DiffAction(str, Enum):
    NOOP = "noop"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UNKNOWN = "unknown"


class Diff(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    action: DiffAction
    reason: Optional[str] = None

    @classmethod
    def noop(cls) -> "Diff":
        return cls(action=DiffAction.NOOP)

    @classmethod
    def create(cls, reason: str | None = None) -> "Diff":
        return cls(action=DiffAction.CREATE, reason=reason)

    @classmethod
    def update(cls, reason: str | None = None) -> "Diff":
        return cls(action=DiffAction.UPDATE, reason=reason)

    @classmethod
    def unknown(cls, reason: str) -> "Diff":
        return cls(action=DiffAction.UNKNOWN, reason=reason)

    @property
    def is_noop(self) -> bool:
        return self.action is DiffAction.NOOP


class OutcomeStatus(str, Enum):
    UNCHANGED = "unchanged"
    APPLIED = "applied"
    FAILED = "failed"


class Outcome(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    status: OutcomeStatus
    reason: Optional[str] = None

    @classmethod
    def unchanged(cls) -> "Outcome":
        return cls(status=OutcomeStatus.UNCHANGED)

    @classmethod
    def applied(cls) -> "Outcome":
        return cls(status=OutcomeStatus.APPLIED)

    @classmethod
    def failed(cls, reason: str) -> "Outcome":
        return cls(status=OutcomeStatus.FAILED, reason=reason)


class ResourceResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    resource_id: str
    diff: Diff
    # None while planning: the diff was computed but nothing was enforced.
    outcome: Optional[Outcome] = None


class RunResult(BaseModel):
    model_config = ConfigDict(extra="forbid")

    facts: Facts
    mode: Literal["apply", "plan"] = "apply"
    started_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    resources: list[ResourceResult] = Field(default_factory=list)

    def record(self, resource_id: str, diff: Diff, outcome: Outcome | None) -> ResourceResult:
        entry = ResourceResult(resource_id=resource_id, diff=diff, outcome=outcome)
        self.resources.append(entry)
        return entry

    def finish(self) -> "RunResult":
        self.finished_at = datetime.now(tz=timezone.utc)
        return self

    def outcome_for(self, resource_id: str) -> Outcome | None:
        for entry in self.resources:
            if entry.resource_id == resource_id:
                return entry.outcome
        raise KeyError(resource_id)

    @property
    def failed(self) -> list[ResourceResult]:
        return [r for r in self.resources if r.outcome and r.outcome.status is OutcomeStatus.FAILED]

    @property
    def changed(self) -> list[ResourceResult]:
        if self.mode == "plan":
            return [r for r in self.resources if not r.diff.is_noop]
        return [r for r in self.resources if r.outcome and r.outcome.status is OutcomeStatus.APPLIED]

    @property
    def ok(self) -> bool:
        return self.error is None and not self.failed
