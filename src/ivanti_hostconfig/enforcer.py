"""Observation and enforcement of single resources against the host primitives."""

from __future__ import annotations

import logging

from jinja2 import TemplateError

from .backends.base import Filesystem, PackageManager
from .errors import FsError, PackageError, QueryError
from .models import (
    DesiredResource,
    Diff,
    DiffAction,
    FileResource,
    ObservedFile,
    ObservedPackage,
    ObservedState,
    Outcome,
    PackageResource,
)

logger = logging.getLogger(__name__)


class Enforcer:
    def __init__(self, packages: PackageManager, files: Filesystem) -> None:
        self.packages = packages
        self.files = files

    def observe(self, resource: DesiredResource) -> ObservedState:
        """Query the host for the current state of *resource*; failures become ``error``."""
        if isinstance(resource, PackageResource):
            try:
                installed = self.packages.query_installed(resource.name)
            except QueryError as exc:
                return ObservedPackage(name=resource.name, error=str(exc))
            return ObservedPackage(name=resource.name, installed=installed)

        try:
            raw = self.files.read_file(resource.path)
        except FsError as exc:
            return ObservedFile(path=resource.path, error=str(exc))
        if raw is None:
            return ObservedFile(path=resource.path, exists=False)
        return ObservedFile(path=resource.path, exists=True, content=raw.decode("utf-8", errors="replace"))

    def apply(self, resource: DesiredResource, diff: Diff) -> Outcome:
        if diff.action is DiffAction.NOOP:
            return Outcome.unchanged()
        if diff.action is DiffAction.UNKNOWN:
            return Outcome.failed(f"state unknown, not modified: {diff.reason}")
        if diff.action is DiffAction.DELETE:
            return Outcome.failed(f"unsupported transition {diff.action.value} for {resource.resource_id}")

        if isinstance(resource, PackageResource):
            return self._install(resource)
        return self._write(resource)

    def _install(self, resource: PackageResource) -> Outcome:
        try:
            self.packages.ensure_installed(resource.name)
        except PackageError as exc:
            return Outcome.failed(str(exc))
        return Outcome.applied()

    def _write(self, resource: FileResource) -> Outcome:
        try:
            content = resource.content.render()
        except TemplateError as exc:
            return Outcome.failed(f"cannot render {resource.content.template}: {exc}")
        try:
            self.files.write_file(
                resource.path,
                content.encode("utf-8"),
                mode=resource.mode,
                owner=resource.owner,
                group=resource.group,
            )
        except FsError as exc:
            return Outcome.failed(str(exc))
        return Outcome.applied()
