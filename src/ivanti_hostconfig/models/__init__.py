from .resources import (
    Catalog,
    ContentSpec,
    DesiredResource,
    Ensure,
    Facts,
    FileResource,
    PackageResource,
)
from .settings import Settings, SudoersSettings
from .state import (
    Diff,
    DiffAction,
    ObservedFile,
    ObservedPackage,
    ObservedState,
    Outcome,
    OutcomeStatus,
    ResourceResult,
    RunResult,
)

__all__ = [
    "Catalog",
    "ContentSpec",
    "DesiredResource",
    "Diff",
    "DiffAction",
    "Ensure",
    "Facts",
    "FileResource",
    "ObservedFile",
    "ObservedPackage",
    "ObservedState",
    "Outcome",
    "OutcomeStatus",
    "PackageResource",
    "ResourceResult",
    "RunResult",
    "Settings",
    "SudoersSettings",
]
