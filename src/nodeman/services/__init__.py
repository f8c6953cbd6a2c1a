"""Command-level services: install, execute, remove, list."""

from .executor import Executor
from .installer import InstallResult, InstallState, Installer
from .listing import Listing, ListedVersion, VersionStatus, format_listing
from .remover import Remover

__all__ = [
    "Executor",
    "Installer",
    "InstallResult",
    "InstallState",
    "Listing",
    "ListedVersion",
    "VersionStatus",
    "format_listing",
    "Remover",
]
