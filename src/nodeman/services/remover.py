"""Delete installed versions from the store."""

from __future__ import annotations

import logging
import sys
from typing import List

from ..errors import UsageError
from ..runtime.types import NodeVersion
from ..store.versions import VersionStore

logger = logging.getLogger(__name__)


class Remover:
    """Removes version store entries.

    The active version may be removed too; the prefix keeps working until
    something else is activated.
    """

    def __init__(self, store: VersionStore) -> None:
        self.store = store

    def remove(self, *requested: str) -> List[NodeVersion]:
        """Remove each requested version.

        All identifiers are parsed before anything is deleted. Versions that
        are not installed are skipped silently.

        Returns:
            Versions that were actually deleted

        Raises:
            UsageError: If no version was given
            ParseError: If any identifier is malformed
        """
        if not requested:
            raise UsageError("version(s) required")

        versions = [NodeVersion.parse(value) for value in requested]

        removed = []
        for version in versions:
            if self.store.remove(version):
                print(f"🗑️  Removed node {version}", file=sys.stderr)
                removed.append(version)
            else:
                logger.debug("%s not installed, nothing to remove", version)
        return removed
