"""Host primitives the enforcer drives; concrete backends implement these."""

from abc import ABC, abstractmethod

from ..models import Facts


class PackageManager(ABC):
    name: str = "abstract"

    @abstractmethod
    def query_installed(self, name: str) -> bool:
        """Return whether *name* is installed; raise ``QueryError`` if unknown."""

    @abstractmethod
    def ensure_installed(self, name: str) -> None:
        """Install *name*; raise ``PackageError`` on failure."""


class Filesystem(ABC):
    @abstractmethod
    def read_file(self, path: str) -> bytes | None:
        """Return file bytes, ``None`` when absent; raise ``FsError`` otherwise."""

    @abstractmethod
    def write_file(
        self,
        path: str,
        content: bytes,
        mode: int | None = None,
        owner: str | None = None,
        group: str | None = None,
    ) -> None:
        """Replace *path* with *content*; raise ``FsError`` on failure."""


class FactProvider(ABC):
    @abstractmethod
    def get_facts(self) -> Facts:
        """Return the facts for this run; raise ``FactsError`` if undeterminable."""
