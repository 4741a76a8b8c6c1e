"""Desired-state catalog for the Ivanti (LANDesk) agent.

``build_catalog`` is a pure function of the host facts: it performs no I/O and
returns the same catalog for the same facts on every call.
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .errors import DuplicateResource, UnsupportedPlatform
from .models import Catalog, ContentSpec, DesiredResource, Facts, FileResource, PackageResource

logger = logging.getLogger(__name__)

# (name, attributes) rows; order is the enforcement order.
PACKAGES: tuple[tuple[str, dict[str, Any]], ...] = (
    ("ivanti-software-distribution", {"ensure": "installed"}),
    ("ivanti-base-agent", {"ensure": "installed"}),
    ("ivanti-pds2", {"ensure": "installed"}),
    ("ivanti-schedule", {"ensure": "installed"}),
    ("ivanti-inventory", {"ensure": "installed"}),
    ("ivanti-vulnerability", {"ensure": "installed"}),
    ("ivanti-cba8", {"ensure": "installed"}),
)

SUDOERS_ACCOUNT = "landesk"
SUDOERS_PATH = "/etc/sudoers.d/10_landesk"


def sudoers_pattern(account: str) -> str:
    """The rule line the drop-in must contain, one or more spaces/tabs between tokens."""
    return rf"^{re.escape(account)}[ \t]+ALL=\(ALL\)[ \t]+NOPASSWD:[ \t]+ALL$"


def sudoers_rule(
    account: str = SUDOERS_ACCOUNT,
    path: str = SUDOERS_PATH,
    mode: int = 0o440,
    owner: str = "root",
    group: str = "root",
) -> dict[str, Any]:
    return {
        "path": path,
        "content": {
            "template": "sudoers_dropin.j2",
            "variables": {"account": account},
            "pattern": sudoers_pattern(account),
        },
        "mode": mode,
        "owner": owner,
        "group": group,
    }


SUDOERS_PATTERN = sudoers_pattern(SUDOERS_ACCOUNT)
SUDOERS_RULE: dict[str, Any] = sudoers_rule()

# os family -> versions the agent packages are published for
SUPPORTED_OS: dict[str, tuple[str, ...]] = {
    "RedHat": ("7", "8", "9"),
    "Suse": ("12", "15"),
    "Debian": ("10", "11", "12", "20.04", "22.04", "24.04"),
}


def _is_tested(version: str, versions: tuple[str, ...]) -> bool:
    return version in versions or version.split(".")[0] in versions


def check_platform(facts: Facts, supported: dict[str, tuple[str, ...]] = SUPPORTED_OS) -> None:
    """Raise ``UnsupportedPlatform`` unless the facts name a supported OS family."""
    versions = supported.get(facts.os_family)
    if versions is None:
        raise UnsupportedPlatform(facts.os_family, tuple(supported))
    if not _is_tested(facts.os_version, versions):
        logger.warning(
            "%s %s is not a tested release (tested: %s); using the common catalog",
            facts.os_family,
            facts.os_version,
            ", ".join(versions),
        )


def build_catalog(
    facts: Facts,
    packages: tuple[tuple[str, dict[str, Any]], ...] = PACKAGES,
    sudoers: dict[str, Any] = SUDOERS_RULE,
    supported: dict[str, tuple[str, ...]] = SUPPORTED_OS,
) -> Catalog:
    """Compute the desired resources for a host.

    The catalog does not vary by OS family or version: every supported
    platform gets the same packages and the same sudoers drop-in.
    """
    check_platform(facts, supported)

    resources: list[DesiredResource] = []
    seen: set[str] = set()

    def _add(resource: DesiredResource) -> None:
        if resource.resource_id in seen:
            raise DuplicateResource(resource.resource_id)
        seen.add(resource.resource_id)
        resources.append(resource)

    for name, attrs in packages:
        _add(PackageResource(name=name, **attrs))

    _add(
        FileResource(
            path=sudoers["path"],
            content=ContentSpec(**sudoers["content"]),
            mode=sudoers.get("mode"),
            owner=sudoers.get("owner"),
            group=sudoers.get("group"),
        )
    )

    catalog = Catalog(facts=facts, resources=tuple(resources))
    logger.debug("Built catalog of %d resources for %s %s", len(resources), facts.os_family, facts.os_version)
    return catalog
