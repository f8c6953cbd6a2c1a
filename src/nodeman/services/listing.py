"""Installed and remote version listings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from ..remote.index import ReleaseIndexClient
from ..runtime.resolver import RuntimeResolver
from ..runtime.types import NodeVersion
from ..store.versions import VersionStore


class VersionStatus(str, Enum):
    """How a listed version relates to this host."""

    ACTIVE = "active"
    INSTALLED = "installed"
    AVAILABLE = "available"


MARKERS = {
    VersionStatus.ACTIVE: "ο",
    VersionStatus.INSTALLED: "*",
    VersionStatus.AVAILABLE: " ",
}


@dataclass
class ListedVersion:
    version: NodeVersion
    status: VersionStatus

    @property
    def marker(self) -> str:
        return MARKERS[self.status]


class Listing:
    """Builds annotated version listings."""

    def __init__(
        self,
        store: VersionStore,
        resolver: RuntimeResolver,
        index: Optional[ReleaseIndexClient] = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.index = index

    def installed(self) -> List[ListedVersion]:
        """Installed versions, ascending, with the active one marked."""
        active = self.resolver.active_version()
        return self._annotate(self.store.installed_versions(), active)

    def remote(self) -> List[ListedVersion]:
        """Every published version, ascending, marked active/installed.

        Raises:
            FetchError: If the release index cannot be fetched
        """
        if self.index is None:
            raise ValueError("remote listing needs a release index")
        active = self.resolver.active_version()
        return self._annotate(self.index.versions(), active)

    def _annotate(
        self,
        versions: Iterable[NodeVersion],
        active: Optional[NodeVersion],
    ) -> List[ListedVersion]:
        listed = []
        for version in sorted(versions):
            if version == active:
                status = VersionStatus.ACTIVE
            elif self.store.exists(version):
                status = VersionStatus.INSTALLED
            else:
                status = VersionStatus.AVAILABLE
            listed.append(ListedVersion(version, status))
        return listed


def format_listing(listed: Iterable[ListedVersion]) -> str:
    """Render one ``  <marker> <version>`` line per entry."""
    return "\n".join(f"  {item.marker} {item.version}" for item in listed)
