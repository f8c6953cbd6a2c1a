"""Resolve which Node.js version is currently active in the prefix."""

import logging
import re
import subprocess
from pathlib import Path
from typing import Optional

from ..errors import ParseError
from .specs import BinaryKind, BinarySpec, get_binary_spec
from .types import NodeVersion, RuntimeInfo

logger = logging.getLogger(__name__)


class RuntimeResolver:
    """Probe the installation prefix for the active runtime.

    There is no stored "current version" record. The active version is
    whatever ``<prefix>/bin/node --version`` reports at query time.
    """

    def __init__(self, prefix: Path):
        """Initialize resolver.

        Args:
            prefix: Installation prefix holding the active slot
        """
        self.prefix = Path(prefix)

    def resolve_active(self) -> Optional[RuntimeInfo]:
        """Resolve the runtime published in the prefix.

        Returns:
            RuntimeInfo for ``<prefix>/bin/node``, or None if nothing has
            been activated yet
        """
        spec = get_binary_spec(BinaryKind.RUNTIME)
        node_path = self.prefix / "bin" / spec.executable_name
        if not node_path.exists():
            return None

        version = self._get_version(str(node_path), spec)
        return RuntimeInfo(path=str(node_path), source="prefix", version=version)

    def active_version(self) -> Optional[NodeVersion]:
        """Shortcut for the version of :meth:`resolve_active`."""
        runtime = self.resolve_active()
        return runtime.version if runtime else None

    def _get_version(self, executable: str, spec: BinarySpec) -> Optional[NodeVersion]:
        """Get version of an executable."""
        version_check = spec.version_check
        if version_check is None:
            return None

        try:
            result = subprocess.run(
                [executable] + version_check.args,
                capture_output=True,
                text=True,
                timeout=5,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.debug("Version probe of %s failed: %s", executable, e)
            return None

        output = result.stdout + result.stderr
        match = re.search(version_check.parse, output)
        if not match:
            return None

        try:
            return NodeVersion.parse(match.group(1))
        except ParseError:
            return None
