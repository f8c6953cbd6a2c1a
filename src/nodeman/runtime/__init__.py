"""Node.js version types and active runtime resolution."""

from .resolver import RuntimeResolver
from .specs import BINARY_SPECS, BinaryKind, get_binary_spec
from .types import NodeVersion, RuntimeInfo, max_version, normalize_version

__all__ = [
    "RuntimeResolver",
    "RuntimeInfo",
    "NodeVersion",
    "BinaryKind",
    "BINARY_SPECS",
    "get_binary_spec",
    "max_version",
    "normalize_version",
]
