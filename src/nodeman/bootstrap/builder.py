"""Build Node.js from source into the version store.

Downloads the release tarball, extracts it next to the store, runs
``./configure --prefix <store>/<version>`` and ``make install``. Toolchain
output goes to the build log, never to the terminal.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
import tarfile
from pathlib import Path
from typing import Any, Callable, List, Optional

import requests

from ..config import NodemanConfig
from ..errors import BuildError, FetchError, StoreWriteError
from ..remote.index import USER_AGENT, tarball_url
from ..runtime.types import NodeVersion
from ..utils.dependencies import check_dependencies_or_raise

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

Runner = Callable[..., Any]


class Builder:
    """Fetches, extracts and compiles one node version.

    Args:
        config: nodeman configuration (mirror, paths, jobs)
        session: HTTP session used for the download
        runner: Callable with the ``subprocess.run`` signature
        check_toolchain: Whether to verify make/compiler/python first
    """

    def __init__(
        self,
        config: NodemanConfig,
        session: Optional[requests.Session] = None,
        runner: Runner = subprocess.run,
        check_toolchain: bool = True,
    ) -> None:
        self.config = config
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT})
        self.session = session
        self.runner = runner
        self.check_toolchain = check_toolchain

    @property
    def log_path(self) -> Path:
        return self.config.log_file

    def archive_path(self, version: NodeVersion) -> Path:
        return self.config.n_dir / f"node-v{version}.tar.gz"

    def source_path(self, version: NodeVersion) -> Path:
        return self.config.n_dir / f"node-v{version}"

    def entry_path(self, version: NodeVersion) -> Path:
        return self.config.versions_dir / str(version)

    def build(self, version: NodeVersion, flags: List[str]) -> Path:
        """Build ``version`` and install it into its store directory.

        The entry directory only survives if ``make install`` succeeded; on
        any failure the archive and whatever was installed are removed.

        Args:
            version: Version to build
            flags: Extra ``./configure`` flags

        Returns:
            Path of the installed tree

        Raises:
            DependencyError: If the toolchain is incomplete
            FetchError: If the tarball cannot be downloaded
            BuildError: If extraction, configure or make fails
        """
        if self.check_toolchain:
            check_dependencies_or_raise(str(version))

        url = tarball_url(self.config.mirror, version)
        archive = self.archive_path(version)
        entry = self.entry_path(version)

        try:
            self.download(url, archive)
            source = self.extract(version, archive)
            self.compile(version, source, entry, flags)
        except (FetchError, BuildError, StoreWriteError):
            self._cleanup_failure(archive, entry)
            print(f"❌ Install of node {version} failed", file=sys.stderr)
            raise

        self.cleanup(version)
        return entry

    def download(self, url: str, archive: Path) -> None:
        """Stream ``url`` into ``archive``."""
        print(f"📦 Downloading {url}", file=sys.stderr)
        archive.parent.mkdir(parents=True, exist_ok=True)

        try:
            with self.session.get(url, stream=True, timeout=self.config.remote.timeout) as r:
                r.raise_for_status()
                with open(archive, "wb") as f:
                    for chunk in r.iter_content(chunk_size=CHUNK_SIZE):
                        f.write(chunk)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e
        except OSError as e:
            raise StoreWriteError(archive, e.strerror or str(e)) from e

        if archive.stat().st_size == 0:
            raise FetchError(url, "empty archive")

    def extract(self, version: NodeVersion, archive: Path) -> Path:
        """Unpack ``archive`` into a fresh ``node-v<version>`` source tree."""
        source = self.source_path(version)
        if source.exists():
            shutil.rmtree(source)

        logger.debug("Extracting %s into %s", archive, source.parent)
        try:
            with tarfile.open(archive, "r:gz") as tar:
                tar.extractall(source.parent)
        except (tarfile.TarError, OSError) as e:
            self._log(f"extracting {archive} failed: {e}\n")
            raise BuildError(str(version), self.log_path, step="extract") from e

        if not source.is_dir():
            self._log(f"{archive} did not contain {source.name}/\n")
            raise BuildError(str(version), self.log_path, step="extract")
        return source

    def compile(self, version: NodeVersion, source: Path, entry: Path, flags: List[str]) -> None:
        """Run configure and make install, appending output to the build log."""
        print(f"🔨 Building node {version} (log: {self.log_path})", file=sys.stderr)

        steps = [
            ("configure", ["./configure", "--prefix", str(entry), *flags]),
            ("make install", ["make", f"-j{max(self.config.build.jobs, 1)}", "install"]),
        ]

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        for step, cmd in steps:
            self._log(f"$ {' '.join(cmd)}\n")
            with open(self.log_path, "a") as log:
                try:
                    result = self.runner(
                        cmd,
                        cwd=str(source),
                        stdout=log,
                        stderr=subprocess.STDOUT,
                    )
                except OSError as e:
                    log.write(f"{step} could not start: {e}\n")
                    raise BuildError(str(version), self.log_path, step=step) from e

            if result.returncode != 0:
                raise BuildError(str(version), self.log_path, step=step)

    def cleanup(self, version: NodeVersion) -> None:
        """Remove the extracted source tree and the archive."""
        source = self.source_path(version)
        if source.exists():
            shutil.rmtree(source)
        self.archive_path(version).unlink(missing_ok=True)

    def _cleanup_failure(self, archive: Path, entry: Path) -> None:
        archive.unlink(missing_ok=True)
        # make install may have created the entry before failing
        if entry.exists():
            shutil.rmtree(entry, ignore_errors=True)

    def _log(self, text: str) -> None:
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a") as log:
            log.write(text)
