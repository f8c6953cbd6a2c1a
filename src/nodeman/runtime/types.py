"""Data types for Node.js versions and resolved runtimes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

import semver

from ..errors import ParseError


@dataclass(frozen=True, order=True)
class NodeVersion:
    """A normalized ``major.minor.patch`` Node.js version.

    Ordering compares the numeric fields in turn, so ``9.2.0 < 10.0.0``.

    Attributes:
        major: Major version number
        minor: Minor version number
        patch: Patch version number
    """

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, value: str) -> "NodeVersion":
        """Parse a version string, tolerating a leading ``v``.

        Args:
            value: Version string such as ``"v10.2.0"`` or ``"0.4.12"``

        Returns:
            Parsed NodeVersion

        Raises:
            ParseError: If the value is not a plain dotted triple
        """
        text = normalize_version(value)
        try:
            parsed = semver.Version.parse(text)
        except (ValueError, TypeError) as e:
            raise ParseError(value) from e

        # Node releases never carry prerelease or build tags
        if parsed.prerelease or parsed.build:
            raise ParseError(value)

        return cls(parsed.major, parsed.minor, parsed.patch)

    @property
    def is_stable(self) -> bool:
        """Whether this belongs to an even-numbered (stable) minor series."""
        return self.minor % 2 == 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


def normalize_version(value: str) -> str:
    """Strip surrounding whitespace and a single leading ``v`` or ``V``."""
    text = value.strip()
    if text[:1] in ("v", "V"):
        text = text[1:]
    return text


def max_version(versions: Iterable[NodeVersion]) -> Optional[NodeVersion]:
    """Return the greatest version, or None for an empty iterable."""
    return max(versions, default=None)


@dataclass
class RuntimeInfo:
    """Information about the node binary currently answering in the prefix.

    Attributes:
        path: Absolute path to the node executable that was probed
        source: How the runtime was resolved ("prefix" or "system")
        version: Self-reported version, if the probe succeeded
    """

    path: str
    source: str
    version: Optional[NodeVersion] = None

    def __repr__(self) -> str:
        version_str = f" v{self.version}" if self.version else ""
        return f"<RuntimeInfo node{version_str} @ {self.path} ({self.source})>"
