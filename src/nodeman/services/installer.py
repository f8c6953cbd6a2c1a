"""Install-or-reactivate orchestration.

The installer is a small state machine::

    RESOLVE_VERSION -> (REACTIVATE | BUILD) -> ACTIVATE -> DONE
                                  BUILD, ACTIVATE -> FAILED

A version already in the store is reactivated without touching the network
or the toolchain. Anything else is built, recorded, then activated.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence, Union

from ..bootstrap.activator import ActivationResult, Activator
from ..bootstrap.builder import Builder
from ..errors import NodemanError, UsageError
from ..remote.index import ReleaseIndexClient
from ..runtime.types import NodeVersion
from ..store.versions import VersionStore

logger = logging.getLogger(__name__)

LATEST = "latest"
STABLE = "stable"


class InstallState(str, Enum):
    """States of one install run."""

    RESOLVE_VERSION = "resolve_version"
    REACTIVATE = "reactivate"
    BUILD = "build"
    ACTIVATE = "activate"
    DONE = "done"
    FAILED = "failed"


@dataclass
class InstallResult:
    """What an install run did."""

    version: NodeVersion
    built: bool
    build_record: str
    states: List[InstallState] = field(default_factory=list)
    activation: Optional[ActivationResult] = None


class Installer:
    """Resolves a requested version, builds it if needed and activates it.

    Args:
        store: Version store holding installed entries
        builder: Builds missing versions from source
        activator: Publishes entries into the prefix
        index: Release index, only consulted for ``latest``/``stable``
        default_flags: Configure flags used when none are given
    """

    def __init__(
        self,
        store: VersionStore,
        builder: Builder,
        activator: Activator,
        index: Optional[ReleaseIndexClient] = None,
        default_flags: Sequence[str] = (),
    ) -> None:
        self.store = store
        self.builder = builder
        self.activator = activator
        self.index = index
        self.default_flags = list(default_flags)
        # States visited by the most recent run, kept for diagnostics
        self.states: List[InstallState] = []

    def resolve_version(self, requested: str) -> NodeVersion:
        """Turn a requested identifier into a concrete version.

        ``latest`` and ``stable`` are looked up in the release index (a
        blocking round trip); anything else is parsed after stripping a
        leading ``v``.

        Raises:
            UsageError: If nothing was requested
            ParseError: If the identifier is malformed
            FetchError: If the release index is unreachable
        """
        requested = (requested or "").strip()
        if not requested:
            raise UsageError("version required")

        keyword = requested.lower()
        if keyword in (LATEST, STABLE):
            if self.index is None:
                raise UsageError(f"cannot resolve '{requested}' without a release index")
            print(f"🔍 Resolving {keyword} node version...", file=sys.stderr)
            version = self.index.latest() if keyword == LATEST else self.index.stable()
            logger.info("Resolved %s to %s", keyword, version)
            return version

        return NodeVersion.parse(requested)

    def install(
        self,
        requested: Union[str, NodeVersion],
        flags: Sequence[str] = (),
    ) -> InstallResult:
        """Install (or reactivate) and activate a version.

        Args:
            requested: Version string, ``latest``/``stable``, or an already
                resolved NodeVersion
            flags: Configure flags, only used when a build happens

        Returns:
            InstallResult describing the path taken

        Raises:
            NodemanError: Any failure; the run ends in FAILED
        """
        self.states = []
        self._enter(InstallState.RESOLVE_VERSION)
        if isinstance(requested, NodeVersion):
            version = requested
        else:
            version = self.resolve_version(requested)

        flags = list(flags) or list(self.default_flags)

        if self.store.exists(version):
            # Existing record wins; new flags are ignored on reactivation
            self._enter(InstallState.REACTIVATE)
            built = False
        else:
            self._enter(InstallState.BUILD)
            try:
                tree = self.builder.build(version, flags)
                self.store.write(version, tree, " ".join(flags))
            except NodemanError:
                self._enter(InstallState.FAILED)
                raise
            built = True

        self._enter(InstallState.ACTIVATE)
        try:
            activation = self.activator.activate(version, self.store.entry_path(version))
        except NodemanError:
            self._enter(InstallState.FAILED)
            raise

        self._enter(InstallState.DONE)
        return InstallResult(
            version=version,
            built=built,
            build_record=self.store.read_record(version),
            states=list(self.states),
            activation=activation,
        )

    def _enter(self, state: InstallState) -> None:
        logger.debug("Installer state -> %s", state.value)
        self.states.append(state)
