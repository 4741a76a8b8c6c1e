"""Fact providers: /etc/os-release detection and explicit/static facts."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from ..errors import FactsError
from ..models import Facts
from .base import FactProvider

logger = logging.getLogger(__name__)

OS_RELEASE_PATH = Path("/etc/os-release")

# os-release ID -> OS family name used by the catalog
OS_FAMILIES: dict[str, str] = {
    "rhel": "RedHat",
    "centos": "RedHat",
    "rocky": "RedHat",
    "almalinux": "RedHat",
    "ol": "RedHat",
    "fedora": "RedHat",
    "sles": "Suse",
    "sled": "Suse",
    "suse": "Suse",
    "opensuse": "Suse",
    "opensuse-leap": "Suse",
    "debian": "Debian",
    "ubuntu": "Debian",
}


def parse_os_release(text: str) -> dict[str, str]:
    info: dict[str, str] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, val = line.partition("=")
        info[key.strip()] = val.strip().strip('"').strip("'")
    return info


def family_for(os_id: str, id_like: str = "") -> str:
    """Map an os-release ID (falling back to ID_LIKE entries) to an OS family.

    Unknown distributions keep their raw ID so the catalog can reject them by name.
    """
    for candidate in [os_id, *id_like.split()]:
        family = OS_FAMILIES.get(candidate.lower())
        if family:
            return family
    return os_id


def _build_facts(os_family: Any, os_version: Any, source: str) -> Facts:
    try:
        return Facts(os_family=str(os_family or ""), os_version=str(os_version or ""))
    except ValidationError as exc:
        raise FactsError(f"Incomplete facts from {source}: {exc.error_count()} invalid field(s)") from exc


class OsReleaseFactProvider(FactProvider):
    def __init__(self, path: Path | str = OS_RELEASE_PATH) -> None:
        self.path = Path(path)

    def get_facts(self) -> Facts:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FactsError(f"Cannot read {self.path}: {exc}") from exc
        info = parse_os_release(text)
        os_id = info.get("ID", "")
        facts = _build_facts(family_for(os_id, info.get("ID_LIKE", "")), info.get("VERSION_ID"), str(self.path))
        logger.debug("Detected %s %s (ID=%s) from %s", facts.os_family, facts.os_version, os_id, self.path)
        return facts


class StaticFactProvider(FactProvider):
    def __init__(self, os_family: str, os_version: str) -> None:
        self._facts = _build_facts(os_family, os_version, "arguments")

    @classmethod
    def from_file(cls, path: Path | str) -> "StaticFactProvider":
        """Load facts from YAML, either flat or in facter's nested ``os`` layout.

        Flat::

            os_family: RedHat
            os_version: "8"

        Facter::

            os:
              family: RedHat
              release: {full: "8.9", major: "8"}
        """
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as exc:
            raise FactsError(f"Cannot load facts file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise FactsError(f"Facts file {path} is not a YAML mapping")

        os_block = data.get("os") if isinstance(data.get("os"), dict) else {}
        release = os_block.get("release") if isinstance(os_block.get("release"), dict) else {}
        family = data.get("os_family") or os_block.get("family")
        version = data.get("os_version") or release.get("major") or release.get("full")
        # An unquoted 8.10 loads as the float 8.1; only strings and whole numbers are exact.
        if version is not None and (isinstance(version, bool) or not isinstance(version, (str, int))):
            raise FactsError(f"Facts file {path}: OS version {version!r} is not a string; quote it, e.g. \"8.10\"")
        facts = _build_facts(family, version, str(path))
        return cls(facts.os_family, facts.os_version)

    def get_facts(self) -> Facts:
        return self._facts
