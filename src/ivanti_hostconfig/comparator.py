"""Desired-vs-observed comparison, one resource at a time."""

from __future__ import annotations

from typing import cast

from .models import (
    DesiredResource,
    Diff,
    FileResource,
    ObservedFile,
    ObservedPackage,
    ObservedState,
    PackageResource,
)


def _diff_package(desired: PackageResource, observed: ObservedPackage) -> Diff:
    if observed.installed:
        return Diff.noop()
    return Diff.create(f"package {desired.name} is not installed")


def _diff_file(desired: FileResource, observed: ObservedFile) -> Diff:
    if not observed.exists:
        return Diff.create(f"{desired.path} does not exist")
    if observed.content is not None and desired.content.matches(observed.content):
        return Diff.noop()
    return Diff.update(f"{desired.path} content does not match {desired.content.pattern}")


def diff(desired: DesiredResource, observed: ObservedState) -> Diff:
    """Return the transition that converges *observed* onto *desired*.

    A failed observation yields an ``unknown`` diff; it is never read as
    "already converged".
    """
    if desired.kind != observed.kind:
        raise TypeError(f"Cannot compare {desired.kind} resource with observed {observed.kind} state")

    if observed.error is not None:
        return Diff.unknown(observed.error)

    # Kinds match, so the observed variant follows the desired one.
    if isinstance(desired, PackageResource):
        return _diff_package(desired, cast(ObservedPackage, observed))
    return _diff_file(desired, cast(ObservedFile, observed))
