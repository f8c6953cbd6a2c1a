"""Declarative specifications for the binaries an installed version provides.

This is DATA, not code. The executor and the resolver look binaries up here
instead of hard-coding names.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class BinaryKind(str, Enum):
    """Which binary of an installed version to run."""

    RUNTIME = "runtime"
    PACKAGE_MANAGER = "package_manager"


@dataclass(frozen=True)
class VersionCheck:
    """Configuration for checking a binary's self-reported version."""
    args: List[str]
    parse: str  # Regex pattern to extract version


@dataclass(frozen=True)
class BinarySpec:
    """Specification for one binary shipped in ``<entry>/bin``."""
    executable_name: str
    version_check: Optional[VersionCheck] = None  # How the resolver reads the version
    missing_hint: Optional[str] = None


# First node release with npm bundled in the source tarball
NPM_BUNDLED_SINCE = "0.6.3"

BINARY_SPECS: Dict[BinaryKind, BinarySpec] = {
    BinaryKind.RUNTIME: BinarySpec(
        executable_name="node",
        version_check=VersionCheck(
            args=["--version"],
            parse=r"v(\d+\.\d+\.\d+)",
        ),
    ),
    BinaryKind.PACKAGE_MANAGER: BinarySpec(
        executable_name="npm",
        missing_hint=f"npm is only bundled with node {NPM_BUNDLED_SINCE} and later",
    ),
}


def get_binary_spec(kind: BinaryKind) -> BinarySpec:
    """Get the spec for a binary kind.

    Args:
        kind: BinaryKind or its string value

    Returns:
        Binary specification

    Raises:
        ValueError: If the kind is unknown
    """
    try:
        return BINARY_SPECS[BinaryKind(kind)]
    except ValueError:
        supported = ", ".join(k.value for k in BinaryKind)
        raise ValueError(
            f"Binary kind '{kind}' not supported. Supported kinds: {supported}"
        ) from None
