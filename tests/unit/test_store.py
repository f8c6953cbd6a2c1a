"""Unit tests for the version store."""

import pytest

from nodeman.errors import ParseError, StoreWriteError
from nodeman.runtime import BinaryKind, NodeVersion
from nodeman.store import VersionStore
from tests.helpers.store_helpers import make_entry, make_tree


class TestExistsAndEntries:
    """Test lookups."""

    def test_empty_store(self, store):
        assert not store.exists("10.2.0")
        assert list(store.entries()) == []

    def test_exists_accepts_v_prefix(self, store):
        make_entry(store.root, "10.2.0")
        assert store.exists("10.2.0")
        assert store.exists("v10.2.0")
        assert store.exists(NodeVersion(10, 2, 0))

    def test_malformed_version(self, store):
        with pytest.raises(ParseError):
            store.exists("ten")

    def test_entries_with_and_without_record(self, store):
        make_entry(store.root, "0.4.12", record="--debug")
        make_entry(store.root, "0.6.3")

        entries = dict(store.entries())

        assert entries == {
            NodeVersion(0, 4, 12): "--debug",
            NodeVersion(0, 6, 3): "",
        }

    def test_entries_skip_junk(self, store):
        make_entry(store.root, "0.6.3")
        (store.root / "node-v0.6.3").mkdir()
        (store.root / "README").write_text("not a version")

        assert [v for v, _ in store.entries()] == [NodeVersion(0, 6, 3)]

    def test_installed_versions_sorted_numerically(self, store):
        for version in ["10.0.0", "9.9.9", "0.4.12"]:
            make_entry(store.root, version)

        assert [str(v) for v in store.installed_versions()] == ["0.4.12", "9.9.9", "10.0.0"]

    def test_record_trailing_newline_ignored(self, store):
        make_entry(store.root, "0.4.12", record="--without-ssl\n")
        assert store.read_record("0.4.12") == "--without-ssl"

    def test_binary_path(self, store):
        assert store.binary_path("8.9.0") == store.root / "8.9.0" / "bin" / "node"
        assert store.binary_path("8.9.0", BinaryKind.PACKAGE_MANAGER) == (
            store.root / "8.9.0" / "bin" / "npm"
        )


class TestWrite:
    """Test persisting built trees."""

    def test_write_in_place(self, store):
        tree = make_tree(store.entry_path("10.2.0"), "10.2.0")

        entry = store.write("10.2.0", tree, "")

        assert entry == store.entry_path("10.2.0")
        assert store.read_record("10.2.0") == ""
        assert (entry / ".config").read_text() == ""

    def test_write_moves_tree(self, store, prefix_dir):
        staging = make_tree(prefix_dir / "staging", "0.6.3")

        entry = store.write("0.6.3", staging, "--shared-zlib --debug")

        assert not staging.exists()
        assert (entry / "bin" / "node").exists()
        assert store.read_record("0.6.3") == "--shared-zlib --debug"

    def test_write_failure(self, store, prefix_dir):
        with pytest.raises(StoreWriteError):
            store.write("0.6.3", prefix_dir / "does-not-exist", "")


class TestRemove:
    """Test entry removal."""

    def test_remove_existing(self, store):
        make_entry(store.root, "10.2.0")

        assert store.remove("10.2.0") is True
        assert not store.exists("10.2.0")

    def test_remove_absent_is_noop(self, store):
        assert store.remove("10.2.0") is False


class TestEnsureRoot:
    """Test store root creation."""

    def test_creates_root(self, prefix_dir):
        store = VersionStore(prefix_dir / "n" / "versions")
        store.ensure_root()
        assert store.root.is_dir()

    def test_uncreatable_root(self, prefix_dir):
        blocker = prefix_dir / "n"
        blocker.write_text("a file where a directory should be")

        store = VersionStore(blocker / "versions")
        with pytest.raises(StoreWriteError, match="cannot write"):
            store.ensure_root()
