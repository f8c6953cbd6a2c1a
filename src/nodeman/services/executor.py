"""Run a specific installed version without activating it."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence, Union

from ..errors import ExecError, NotInstalled
from ..runtime.specs import BinaryKind, get_binary_spec
from ..runtime.types import NodeVersion
from ..store.versions import VersionStore

logger = logging.getLogger(__name__)


class Executor:
    """Resolves binaries straight from the version store and execs them."""

    def __init__(
        self,
        store: VersionStore,
        exec_fn: Optional[Callable[[str, Sequence[str]], None]] = None,
    ) -> None:
        self.store = store
        self.exec_fn = exec_fn or os.execv

    def resolve(
        self,
        version: Union[str, NodeVersion],
        kind: BinaryKind = BinaryKind.RUNTIME,
    ) -> Path:
        """Path of ``kind``'s binary inside the entry for ``version``.

        Raises:
            ParseError: If the version is malformed
            NotInstalled: If the binary does not exist
        """
        if not isinstance(version, NodeVersion):
            version = NodeVersion.parse(version)

        path = self.store.binary_path(version, kind)
        if not path.exists():
            spec = get_binary_spec(kind)
            raise NotInstalled(str(version), hint=spec.missing_hint)
        return path

    def execute(
        self,
        version: Union[str, NodeVersion],
        kind: BinaryKind,
        args: Sequence[str] = (),
    ) -> None:
        """Replace the current process with the resolved binary.

        The child inherits the process, so its exit status is the exit
        status of this invocation. Only returns if ``exec_fn`` does.

        Raises:
            ExecError: If the binary cannot be started
        """
        path = self.resolve(version, kind)
        argv = [str(path), *args]
        logger.debug("exec %s", argv)

        sys.stdout.flush()
        sys.stderr.flush()
        try:
            self.exec_fn(str(path), argv)
        except OSError as e:
            raise ExecError(path, e.strerror or str(e)) from e
