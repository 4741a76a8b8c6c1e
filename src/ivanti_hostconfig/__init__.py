"""Desired-state reconciliation for the Ivanti (LANDesk) endpoint agent."""

from .catalog import PACKAGES, SUDOERS_PATH, SUDOERS_PATTERN, build_catalog
from .comparator import diff
from .enforcer import Enforcer
from .errors import (
    CatalogError,
    ConfigError,
    DuplicateResource,
    FactsError,
    FsError,
    HostConfigError,
    PackageError,
    QueryError,
    UnsupportedPlatform,
)
from .reconcile import ReconciliationRun

__all__ = [
    "PACKAGES",
    "SUDOERS_PATH",
    "SUDOERS_PATTERN",
    "CatalogError",
    "ConfigError",
    "DuplicateResource",
    "Enforcer",
    "FactsError",
    "FsError",
    "HostConfigError",
    "PackageError",
    "QueryError",
    "ReconciliationRun",
    "UnsupportedPlatform",
    "build_catalog",
    "diff",
]
