"""On-disk registry of installed Node.js versions.

Layout::

    <prefix>/n/versions/<version>/{bin,lib,include}/...
    <prefix>/n/versions/<version>/.config

The directory name is the key, so there is at most one entry per version.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from ..errors import ParseError, StoreWriteError
from ..runtime.specs import BinaryKind, get_binary_spec
from ..runtime.types import NodeVersion

logger = logging.getLogger(__name__)

BUILD_RECORD_NAME = ".config"

VersionLike = Union[NodeVersion, str]


def _as_version(version: VersionLike) -> NodeVersion:
    if isinstance(version, NodeVersion):
        return version
    return NodeVersion.parse(version)


class VersionStore:
    """Registry of installed versions, one directory per version.

    Each entry holds the installed runtime tree and a build record: the
    configure flags it was built with, stored verbatim as text.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    def ensure_root(self) -> None:
        """Create the store root and check it is writable.

        Raises:
            StoreWriteError: If the root cannot be created or written to
        """
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreWriteError(self.root, e.strerror or str(e)) from e

        if not os.access(self.root, os.W_OK):
            raise StoreWriteError(self.root, "permission denied")

    def entry_path(self, version: VersionLike) -> Path:
        return self.root / str(_as_version(version))

    def binary_path(self, version: VersionLike, kind: BinaryKind = BinaryKind.RUNTIME) -> Path:
        """Path of a binary inside an entry (it may not exist)."""
        spec = get_binary_spec(kind)
        return self.entry_path(version) / "bin" / spec.executable_name

    def exists(self, version: VersionLike) -> bool:
        return self.entry_path(version).is_dir()

    def read_record(self, version: VersionLike) -> str:
        """Return the build record of an entry, or "" if it has none."""
        record = self.entry_path(version) / BUILD_RECORD_NAME
        try:
            return record.read_text().rstrip("\n")
        except FileNotFoundError:
            return ""

    def entries(self) -> Iterator[Tuple[NodeVersion, str]]:
        """Yield ``(version, build_record)`` for every entry.

        Entries come out in directory enumeration order. Stray files and
        directories whose name is not a version are skipped.
        """
        if not self.root.is_dir():
            return

        for child in self.root.iterdir():
            if not child.is_dir():
                continue
            try:
                version = NodeVersion.parse(child.name)
            except ParseError:
                logger.debug("Skipping non-version directory %s", child)
                continue
            yield version, self.read_record(version)

    def installed_versions(self) -> List[NodeVersion]:
        """Sorted list of installed versions."""
        return sorted(version for version, _ in self.entries())

    def write(self, version: VersionLike, tree: Path, build_record: str) -> Path:
        """Persist a freshly built tree and its build record.

        Args:
            version: Version the tree was built for
            tree: Installed tree. Moved into place unless it already is the
                entry directory (the builder usually installs straight there)
            build_record: Configure flags, stored verbatim

        Returns:
            Path of the entry directory

        Raises:
            StoreWriteError: If the tree or record cannot be written
        """
        entry = self.entry_path(version)
        tree = Path(tree)

        try:
            if tree.resolve() != entry.resolve():
                if entry.exists():
                    shutil.rmtree(entry)
                entry.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(tree), str(entry))
            (entry / BUILD_RECORD_NAME).write_text(build_record)
        except OSError as e:
            raise StoreWriteError(entry, e.strerror or str(e)) from e

        logger.info("Stored node %s at %s", version, entry)
        return entry

    def remove(self, version: VersionLike) -> bool:
        """Delete an entry and everything under it.

        Returns:
            True if something was deleted, False if the entry was absent
        """
        entry = self.entry_path(version)
        if not entry.exists():
            return False
        try:
            shutil.rmtree(entry)
        except OSError as e:
            raise StoreWriteError(entry, e.strerror or str(e)) from e
        logger.info("Removed %s", entry)
        return True
