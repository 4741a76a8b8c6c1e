"""Package-manager backends driven through their command-line tools."""

from __future__ import annotations

import logging
import os
import subprocess
from abc import abstractmethod
from collections.abc import Callable, Sequence
from typing import Any

from ..catalog import SUPPORTED_OS
from ..errors import PackageError, QueryError, UnsupportedPlatform
from ..models import Facts, Settings
from .base import PackageManager

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


def _describe(result: "subprocess.CompletedProcess[str]") -> str:
    detail = (result.stderr or result.stdout or "").strip()
    if detail:
        return detail.splitlines()[-1]
    return f"exited {result.returncode}"


class CommandPackageManager(PackageManager):
    """Base for backends that shell out; subclasses supply the argument vectors."""

    env: dict[str, str] = {}

    def __init__(self, command_timeout: float = 900.0, runner: Runner = subprocess.run) -> None:
        self.command_timeout = command_timeout
        self._runner = runner

    @abstractmethod
    def install_command(self, name: str) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def query_command(self, name: str) -> list[str]:
        raise NotImplementedError

    @abstractmethod
    def parse_query(self, name: str, result: "subprocess.CompletedProcess[str]") -> bool:
        raise NotImplementedError

    def _run(self, cmd: Sequence[str]) -> "subprocess.CompletedProcess[str]":
        logger.debug("Running: %s", " ".join(cmd))
        kwargs: dict[str, Any] = {
            "capture_output": True,
            "text": True,
            "check": False,
            "timeout": self.command_timeout,
        }
        if self.env:
            kwargs["env"] = {**os.environ, **self.env}
        return self._runner(list(cmd), **kwargs)

    def query_installed(self, name: str) -> bool:
        cmd = self.query_command(name)
        try:
            result = self._run(cmd)
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise QueryError(f"{cmd[0]} query for {name} failed: {exc}") from exc
        return self.parse_query(name, result)

    def ensure_installed(self, name: str) -> None:
        cmd = self.install_command(name)
        try:
            result = self._run(cmd)
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise PackageError(f"{cmd[0]} install of {name} failed: {exc}") from exc
        if result.returncode != 0:
            raise PackageError(f"{cmd[0]} install of {name} failed: {_describe(result)}")
        logger.info("Installed package %s via %s", name, self.name)


class RpmQueryMixin:
    def query_command(self, name: str) -> list[str]:
        return ["rpm", "-q", name]

    def parse_query(self, name: str, result: "subprocess.CompletedProcess[str]") -> bool:
        if result.returncode == 0:
            return True
        # rpm reports a missing package on stdout; database problems land on stderr.
        if "error:" in (result.stderr or ""):
            raise QueryError(f"rpm query for {name} failed: {_describe(result)}")
        return False


class DnfPackageManager(RpmQueryMixin, CommandPackageManager):
    name = "dnf"

    def install_command(self, name: str) -> list[str]:
        return ["dnf", "install", "-y", name]


class YumPackageManager(RpmQueryMixin, CommandPackageManager):
    name = "yum"

    def install_command(self, name: str) -> list[str]:
        return ["yum", "install", "-y", name]


class ZypperPackageManager(RpmQueryMixin, CommandPackageManager):
    name = "zypper"

    def install_command(self, name: str) -> list[str]:
        return ["zypper", "--non-interactive", "install", name]


class AptPackageManager(CommandPackageManager):
    name = "apt"
    env = {"DEBIAN_FRONTEND": "noninteractive"}

    def install_command(self, name: str) -> list[str]:
        return ["apt-get", "install", "-y", name]

    def query_command(self, name: str) -> list[str]:
        return ["dpkg-query", "-W", "-f=${Status}", name]

    def parse_query(self, name: str, result: "subprocess.CompletedProcess[str]") -> bool:
        if result.returncode == 0:
            return result.stdout.strip().endswith(" installed")
        # dpkg-query exits 1 for packages it has never seen.
        if result.returncode == 1 and "no packages found" in (result.stderr or "").lower():
            return False
        raise QueryError(f"dpkg-query for {name} failed: {_describe(result)}")


_MANAGERS: dict[str, type[CommandPackageManager]] = {
    "dnf": DnfPackageManager,
    "yum": YumPackageManager,
    "zypper": ZypperPackageManager,
    "apt": AptPackageManager,
}

_FAMILY_MANAGERS = {"Suse": "zypper", "Debian": "apt"}


def default_manager_name(facts: Facts) -> str:
    family = facts.os_family
    if family not in SUPPORTED_OS:
        raise UnsupportedPlatform(family, tuple(SUPPORTED_OS))
    if family == "RedHat":
        return "yum" if facts.os_version.split(".")[0] == "7" else "dnf"
    return _FAMILY_MANAGERS[family]


def package_manager_for(facts: Facts, settings: Settings | None = None, runner: Runner = subprocess.run) -> PackageManager:
    """Pick the package-manager backend for a host, honouring a settings override."""
    settings = settings or Settings()
    name = settings.package_manager or default_manager_name(facts)
    logger.debug("Using %s package manager for %s %s", name, facts.os_family, facts.os_version)
    return _MANAGERS[name](command_timeout=settings.command_timeout_seconds, runner=runner)
