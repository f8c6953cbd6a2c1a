"""End-to-end install, switch, run and remove flows.

The real Builder, VersionStore and Activator are used; only the network and
the compiler toolchain are replaced.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from nodeman.bootstrap import Activator, Builder
from nodeman.runtime import BinaryKind
from nodeman.services import (
    Executor,
    Installer,
    InstallState,
    Listing,
    Remover,
    VersionStatus,
)
from tests.helpers.store_helpers import make_source_tarball, make_tree, snapshot


class MakeInstallRunner:
    """Pretends to configure and compile; ``make install`` writes the tree."""

    def __init__(self):
        self.prefix = None
        self.commands = []

    def __call__(self, cmd, cwd=None, stdout=None, stderr=None):
        self.commands.append(list(cmd))
        if cmd[0] == "./configure":
            self.prefix = Path(cmd[cmd.index("--prefix") + 1])
        else:
            make_tree(self.prefix, self.prefix.name)
        return MagicMock(returncode=0)


class TarballSession:
    """Serves a source tarball for whichever version is requested."""

    def __init__(self):
        self.urls = []

    def get(self, url, stream=False, timeout=None):
        self.urls.append(url)
        version = url.rsplit("node-v", 1)[1][: -len(".tar.gz")]
        response = MagicMock()
        response.iter_content.return_value = [make_source_tarball(version)]
        context = MagicMock()
        context.__enter__.return_value = response
        return context


@pytest.fixture
def runner():
    return MakeInstallRunner()


@pytest.fixture
def session():
    return TarballSession()


@pytest.fixture
def real_installer(config, store, fake_index, runner, session):
    builder = Builder(config, session=session, runner=runner, check_toolchain=False)
    return Installer(
        store=store,
        builder=builder,
        activator=Activator(config.prefix),
        index=fake_index,
    )


class TestInstallFlow:
    def test_fresh_install(self, real_installer, store, resolver, config, session):
        result = real_installer.install("10.2.0")

        assert result.built
        assert result.states == [
            InstallState.RESOLVE_VERSION,
            InstallState.BUILD,
            InstallState.ACTIVATE,
            InstallState.DONE,
        ]
        assert store.read_record("10.2.0") == ""
        assert str(resolver.active_version()) == "10.2.0"
        assert session.urls == ["https://nodejs.org/dist/node-v10.2.0.tar.gz"]

        # Scratch files are gone, only the store and the log remain
        assert not (config.n_dir / "node-v10.2.0").exists()
        assert not (config.n_dir / "node-v10.2.0.tar.gz").exists()

    def test_reinstall_keeps_record(self, real_installer, store, runner, config):
        real_installer.install("10.2.0")
        entry_before = snapshot(store.entry_path("10.2.0"))
        commands = len(runner.commands)

        result = real_installer.install("10.2.0", ["--shared-zlib"])

        assert not result.built
        assert InstallState.REACTIVATE in result.states
        assert result.build_record == ""
        assert len(runner.commands) == commands
        assert snapshot(store.entry_path("10.2.0")) == entry_before
        assert (config.prefix / "bin" / "node").exists()

    def test_switch_versions(self, real_installer, resolver, session):
        real_installer.install("0.4.12", ["--debug"])
        real_installer.install("10.2.0")
        assert str(resolver.active_version()) == "10.2.0"

        real_installer.install("0.4.12")
        assert str(resolver.active_version()) == "0.4.12"

        # Old releases come from the flat mirror layout
        assert session.urls[0] == "https://nodejs.org/dist/node-v0.4.12.tar.gz"
        assert len(session.urls) == 2

    def test_latest_and_stable(self, real_installer, resolver):
        assert str(real_installer.install("latest").version) == "11.1.0"
        assert str(real_installer.install("stable").version) == "10.2.0"
        assert str(resolver.active_version()) == "10.2.0"


class TestRunAndRemove:
    def test_use_runs_without_touching_active_slot(self, real_installer, store, config):
        real_installer.install("8.9.0")
        real_installer.install("10.2.0")
        active_before = snapshot(config.prefix / "bin")
        exec_fn = MagicMock()

        Executor(store, exec_fn=exec_fn).execute("8.9.0", BinaryKind.RUNTIME, ["-e", "console.log(1)"])

        node = str(store.entry_path("8.9.0") / "bin" / "node")
        exec_fn.assert_called_once_with(node, [node, "-e", "console.log(1)"])
        assert snapshot(config.prefix / "bin") == active_before

    def test_remove_all_then_list(self, real_installer, store, fake_index):
        for version in ["0.4.12", "0.6.3", "10.2.0"]:
            real_installer.install(version)

        Remover(store).remove("0.4.12", "0.6.3", "10.2.0")

        listing = Listing(store, MagicMock(active_version=MagicMock(return_value=None)), fake_index)
        assert store.installed_versions() == []
        assert all(item.status == VersionStatus.AVAILABLE for item in listing.remote())
