"""Pytest configuration and shared fixtures."""

import tempfile
from pathlib import Path
from typing import Generator
from unittest.mock import MagicMock

import pytest

from nodeman.bootstrap import Activator
from nodeman.config import NodemanConfig
from nodeman.remote import ReleaseIndexClient
from nodeman.runtime import NodeVersion, RuntimeResolver
from nodeman.services import Installer
from nodeman.store import VersionStore
from tests.helpers.store_helpers import FakeBuilder

REMOTE_VERSIONS = ["0.4.12", "0.5.10", "0.6.3", "9.9.9", "10.0.0", "10.2.0", "11.1.0"]


@pytest.fixture
def prefix_dir() -> Generator[Path, None, None]:
    """Create an empty temporary installation prefix."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def config(prefix_dir: Path) -> NodemanConfig:
    """Default configuration rooted at the temporary prefix."""
    config = NodemanConfig()
    config.paths.prefix = prefix_dir
    return config


@pytest.fixture
def store(config: NodemanConfig) -> VersionStore:
    store = VersionStore(config.versions_dir)
    store.ensure_root()
    return store


@pytest.fixture
def fake_builder(config: NodemanConfig) -> FakeBuilder:
    return FakeBuilder(config.versions_dir, log_path=config.log_file)


@pytest.fixture
def fake_index() -> MagicMock:
    """A release index that knows REMOTE_VERSIONS."""
    index = MagicMock(spec=ReleaseIndexClient)
    versions = sorted(NodeVersion.parse(v) for v in REMOTE_VERSIONS)
    index.versions.return_value = versions
    index.latest.return_value = versions[-1]
    index.stable.return_value = max(v for v in versions if v.is_stable)
    return index


@pytest.fixture
def resolver(config: NodemanConfig) -> RuntimeResolver:
    return RuntimeResolver(config.prefix)


@pytest.fixture
def installer(
    config: NodemanConfig,
    store: VersionStore,
    fake_builder: FakeBuilder,
    fake_index: MagicMock,
) -> Installer:
    """Installer wired to a fake builder and a real activator."""
    return Installer(
        store=store,
        builder=fake_builder,
        activator=Activator(config.prefix),
        index=fake_index,
    )
