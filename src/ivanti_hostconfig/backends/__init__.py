from .base import FactProvider, Filesystem, PackageManager
from .facts import OsReleaseFactProvider, StaticFactProvider, family_for, parse_os_release
from .filesystem import LocalFilesystem
from .packages import (
    AptPackageManager,
    CommandPackageManager,
    DnfPackageManager,
    YumPackageManager,
    ZypperPackageManager,
    default_manager_name,
    package_manager_for,
)

__all__ = [
    "AptPackageManager",
    "CommandPackageManager",
    "DnfPackageManager",
    "FactProvider",
    "Filesystem",
    "LocalFilesystem",
    "OsReleaseFactProvider",
    "PackageManager",
    "StaticFactProvider",
    "YumPackageManager",
    "ZypperPackageManager",
    "default_manager_name",
    "family_for",
    "package_manager_for",
    "parse_os_release",
]
