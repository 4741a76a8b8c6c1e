"""Exception hierarchy for catalog construction, host primitives and settings."""


class HostConfigError(Exception):
    """Base class for all ivanti_hostconfig errors."""


class CatalogError(HostConfigError):
    """The catalog could not be built; nothing may be enforced."""


class UnsupportedPlatform(CatalogError):
    def __init__(self, os_family: str, supported: tuple[str, ...] = ()) -> None:
        self.os_family = os_family
        self.supported = supported
        msg = f"Unsupported OS family '{os_family}'"
        if supported:
            msg += f" (supported: {', '.join(supported)})"
        super().__init__(msg)


class DuplicateResource(CatalogError):
    def __init__(self, resource_id: str) -> None:
        self.resource_id = resource_id
        super().__init__(f"Duplicate resource in catalog: {resource_id}")


class QueryError(HostConfigError):
    """Observed state could not be read from the host."""


class PackageError(HostConfigError):
    """The package manager failed to install a package."""


class FsError(HostConfigError):
    """A filesystem read or write failed."""


class ConfigError(HostConfigError):
    """The settings file is unreadable or invalid."""


class FactsError(HostConfigError):
    """Host facts could not be determined."""
