"""Error taxonomy for nodeman.

Every error raised by the core derives from :class:`NodemanError`. The CLI
catches that base class, prints a one-line diagnostic and exits with
``exit_code``. Nothing is retried.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union


class NodemanError(Exception):
    """Base class for all errors that abort a nodeman invocation."""

    exit_code: int = 1


class UsageError(NodemanError):
    """A required argument (usually a version) was not supplied."""


class ParseError(NodemanError):
    """A version identifier could not be parsed as ``major.minor.patch``."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"invalid version '{value}' (expected major.minor.patch)")


class NotInstalled(NodemanError):
    """The requested version has no entry in the version store."""

    def __init__(self, version: str, hint: Optional[str] = None):
        self.version = version
        self.hint = hint
        message = f"{version} is not installed"
        if hint:
            message = f"{message} ({hint})"
        super().__init__(message)


class FetchError(NodemanError):
    """The remote index or a source archive was unreachable or empty."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"failed to fetch {url}: {reason}")


class BuildError(NodemanError):
    """configure, make or make install failed.

    The full toolchain output is never inlined; the message points at the
    build log instead.
    """

    def __init__(
        self,
        version: str,
        log_path: Optional[Union[str, Path]] = None,
        step: str = "build",
        message: Optional[str] = None,
    ):
        self.version = version
        self.log_path = Path(log_path) if log_path else None
        self.step = step
        if message is None:
            message = f"{step} failed for node {version}, see {self.log_path} for details"
        super().__init__(message)


class StoreWriteError(NodemanError):
    """The version store root could not be created or written to."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot write to version store {self.path}: {reason}")


class ActivationError(NodemanError):
    """Copying an entry into the installation prefix failed."""

    def __init__(self, version: str, step: str, reason: str):
        self.version = version
        self.step = step
        self.reason = reason
        super().__init__(f"failed to activate {version} while copying {step}: {reason}")


class ExecError(NodemanError):
    """An installed binary exists but could not be started."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot run {path}: {reason}")
