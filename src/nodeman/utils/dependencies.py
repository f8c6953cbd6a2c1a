"""Toolchain prerequisite checking for source builds."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from typing import List

from ..errors import BuildError


@dataclass
class Dependency:
    """A tool a source build needs on PATH.

    Any one of ``commands`` satisfies the dependency.
    """

    name: str
    commands: List[str]
    install_hint: str
    required: bool = True
    found: List[str] = field(default_factory=list)


class DependencyError(BuildError):
    """Raised when the toolchain needed to build node is missing."""

    def __init__(self, missing: List[Dependency], version: str = ""):
        self.missing = missing
        super().__init__(
            version,
            step="toolchain check",
            message=self._format_error_message(missing),
        )

    def _format_error_message(self, missing: List[Dependency]) -> str:
        """Format a user-friendly error message."""
        parts = [
            f"{dep.name} ({' or '.join(dep.commands)}; install: {dep.install_hint})"
            for dep in missing
        ]
        return "missing build prerequisites: " + ", ".join(parts)


# Tools needed to run ./configure && make install on a node source tree
BUILD_DEPENDENCIES = [
    Dependency(
        name="Make",
        commands=["make", "gmake"],
        install_hint="apt install make (or xcode-select --install)",
    ),
    Dependency(
        name="C++ Compiler",
        commands=["g++", "clang++", "c++"],
        install_hint="apt install g++ (or xcode-select --install)",
    ),
    Dependency(
        name="Python",
        commands=["python3", "python"],
        install_hint="apt install python3",
    ),
]


def check_command_exists(command: str) -> bool:
    """Check if a command exists in PATH."""
    return shutil.which(command) is not None


def check_dependency(dep: Dependency) -> bool:
    """Check if any command of a dependency is installed."""
    dep.found = [cmd for cmd in dep.commands if check_command_exists(cmd)]
    return bool(dep.found)


def check_all_dependencies() -> tuple[bool, List[Dependency]]:
    """Check all build dependencies.

    Returns:
        Tuple of (all_ok, missing_dependencies)
    """
    missing = [
        dep for dep in BUILD_DEPENDENCIES
        if not check_dependency(dep) and dep.required
    ]
    return len(missing) == 0, missing


def check_dependencies_or_raise(version: str = "") -> None:
    """Check build dependencies and raise DependencyError if any are missing.

    Raises:
        DependencyError: If required dependencies are missing
    """
    all_ok, missing = check_all_dependencies()

    if not all_ok:
        raise DependencyError(missing, version=version)

