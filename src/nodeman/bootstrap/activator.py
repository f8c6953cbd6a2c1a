"""Publish a version store entry into the installation prefix.

Activation copies an entry's headers, node binary, helper binaries and
library tree over whatever is in ``<prefix>/{include,bin,lib}``. The copy is
not atomic: a failure part way through leaves a mix of versions behind and
is reported as an ActivationError naming the step.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Tuple

from ..errors import ActivationError
from ..runtime.specs import BinaryKind, get_binary_spec
from ..runtime.types import NodeVersion

logger = logging.getLogger(__name__)


@dataclass
class ActivationResult:
    """Outcome of a successful activation."""

    version: NodeVersion
    prefix: Path
    copied: List[Path] = field(default_factory=list)


class Activator:
    """Copies store entries into a fixed destination prefix."""

    def __init__(self, prefix: Path):
        self.prefix = Path(prefix)

    def activate(self, version: NodeVersion, entry: Path) -> ActivationResult:
        """Make ``entry`` the active runtime under the prefix.

        Args:
            version: Version the entry holds
            entry: Version store directory of that version

        Returns:
            ActivationResult listing the destination paths written

        Raises:
            ActivationError: If any copy step fails
        """
        entry = Path(entry)
        result = ActivationResult(version=version, prefix=self.prefix)

        steps: List[Tuple[str, Callable[[Path], List[Path]]]] = [
            ("headers", self._copy_headers),
            ("runtime binary", self._copy_runtime),
            ("helper binaries", self._copy_helpers),
            ("library tree", self._copy_libraries),
        ]

        for step, copy in steps:
            try:
                result.copied.extend(copy(entry))
            except OSError as e:
                raise ActivationError(str(version), step, e.strerror or str(e)) from e

        print(f"✅ Activated node {version} in {self.prefix}", file=sys.stderr)
        logger.info("Activated %s (%d paths)", version, len(result.copied))
        return result

    def _copy_headers(self, entry: Path) -> List[Path]:
        src = entry / "include" / "node"
        if not src.is_dir():
            return []
        dest = self.prefix / "include" / "node"
        self._copy_tree(src, dest)
        return [dest]

    def _copy_runtime(self, entry: Path) -> List[Path]:
        name = get_binary_spec(BinaryKind.RUNTIME).executable_name
        src = entry / "bin" / name
        dest = self.prefix / "bin" / name
        dest.parent.mkdir(parents=True, exist_ok=True)
        self._replace(src, dest)
        return [dest]

    def _copy_helpers(self, entry: Path) -> List[Path]:
        """Copy npm, npx, node-waf and friends, keeping symlinks as symlinks."""
        runtime_name = get_binary_spec(BinaryKind.RUNTIME).executable_name
        bin_dir = entry / "bin"
        if not bin_dir.is_dir():
            return []

        copied = []
        for src in sorted(bin_dir.iterdir()):
            if src.name == runtime_name:
                continue
            dest = self.prefix / "bin" / src.name
            self._replace(src, dest)
            copied.append(dest)
        return copied

    def _copy_libraries(self, entry: Path) -> List[Path]:
        lib_dir = entry / "lib"
        if not lib_dir.is_dir():
            return []

        copied = []
        for src in sorted(lib_dir.iterdir()):
            dest = self.prefix / "lib" / src.name
            if src.is_dir() and not src.is_symlink():
                self._copy_tree(src, dest)
            else:
                dest.parent.mkdir(parents=True, exist_ok=True)
                self._replace(src, dest)
            copied.append(dest)
        return copied

    def _copy_tree(self, src: Path, dest: Path) -> None:
        """Merge ``src`` into ``dest``, replacing files and links one by one."""
        for root, dirs, files in os.walk(src):
            root_path = Path(root)
            target = dest / root_path.relative_to(src)
            if target.is_symlink():
                target.unlink()
            target.mkdir(parents=True, exist_ok=True)

            # Links to directories are copied as links, not descended into
            for name in list(dirs):
                if (root_path / name).is_symlink():
                    dirs.remove(name)
                    files.append(name)

            for name in files:
                self._replace(root_path / name, target / name)

    @staticmethod
    def _replace(src: Path, dest: Path) -> None:
        # Existing links are replaced, never written through
        if dest.is_symlink() or (src.is_symlink() and dest.exists()):
            dest.unlink()
        shutil.copy2(src, dest, follow_symlinks=False)
