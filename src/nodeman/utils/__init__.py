"""Utility modules (toolchain dependency checks)."""

from .dependencies import (
    DependencyError,
    check_all_dependencies,
    check_dependencies_or_raise,
)

__all__ = [
    "DependencyError",
    "check_all_dependencies",
    "check_dependencies_or_raise",
]
