"""Client for the remote Node.js release index.

The index is the mirror's plain directory listing. Every ``major.minor.patch``
token in it is taken as a published version.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional

import requests

from ..errors import FetchError, ParseError
from ..runtime.types import NodeVersion, max_version

logger = logging.getLogger(__name__)

VERSION_PATTERN = re.compile(r"\d+\.\d+\.\d+")

USER_AGENT = "nodeman/1.0"


def tarball_url(mirror: str, version: NodeVersion) -> str:
    """Download URL of a version's source archive.

    Releases before 0.5 sit flat in the mirror root, later ones in a
    per-version ``v<version>/`` subdirectory.
    """
    base = mirror if mirror.endswith("/") else mirror + "/"
    filename = f"node-v{version}.tar.gz"
    if version.minor < 5:
        return f"{base}{filename}"
    return f"{base}v{version}/{filename}"


def extract_versions(listing: str) -> List[NodeVersion]:
    """Pull every version token out of an index page, sorted ascending.

    Dotted triples that are not valid versions (dates such as ``2013.08.01``)
    are skipped.
    """
    found = set()
    for token in VERSION_PATTERN.findall(listing):
        try:
            found.add(NodeVersion.parse(token))
        except ParseError:
            logger.debug("Skipping index token %s", token)
    return sorted(found)


class ReleaseIndexClient:
    """Fetches and parses the remote release index."""

    def __init__(
        self,
        mirror: str,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.mirror = mirror if mirror.endswith("/") else mirror + "/"
        self.timeout = timeout
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session

    def fetch(self) -> str:
        """Return the raw index page.

        Raises:
            FetchError: If the mirror is unreachable or answers with an error
        """
        logger.debug("Fetching release index %s", self.mirror)
        try:
            r = self.session.get(self.mirror, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(self.mirror, str(e)) from e
        return r.text

    def versions(self) -> List[NodeVersion]:
        """All published versions, ascending.

        Raises:
            FetchError: If the index cannot be fetched or lists no versions
        """
        versions = extract_versions(self.fetch())
        if not versions:
            raise FetchError(self.mirror, "no versions found in index")
        return versions

    def latest(self) -> NodeVersion:
        """The greatest published version."""
        return max_version(self.versions())

    def stable(self) -> NodeVersion:
        """The greatest published version of an even (stable) minor series."""
        stable = max_version(v for v in self.versions() if v.is_stable)
        if stable is None:
            raise FetchError(self.mirror, "no stable versions found in index")
        return stable

    def tarball_url(self, version: NodeVersion) -> str:
        return tarball_url(self.mirror, version)
