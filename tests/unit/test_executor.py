"""Unit tests for the Executor."""

from unittest.mock import MagicMock, patch

import pytest

from nodeman.errors import ExecError, NotInstalled, ParseError
from nodeman.runtime import BinaryKind
from nodeman.services import Executor
from tests.helpers.store_helpers import make_entry


class TestResolve:
    def test_runtime_path(self, store):
        make_entry(store.root, "8.9.0")

        path = Executor(store).resolve("v8.9.0", BinaryKind.RUNTIME)

        assert path == store.root / "8.9.0" / "bin" / "node"

    def test_not_installed(self, store):
        with pytest.raises(NotInstalled) as exc_info:
            Executor(store).resolve("8.9.0", BinaryKind.RUNTIME)

        assert exc_info.value.hint is None
        assert "8.9.0 is not installed" in str(exc_info.value)

    def test_missing_npm_carries_hint(self, store):
        make_entry(store.root, "0.4.12", with_npm=False)

        with pytest.raises(NotInstalled) as exc_info:
            Executor(store).resolve("0.4.12", BinaryKind.PACKAGE_MANAGER)

        assert "0.6.3" in exc_info.value.hint
        assert "0.6.3" in str(exc_info.value)

    def test_malformed_version(self, store):
        with pytest.raises(ParseError):
            Executor(store).resolve("eight", BinaryKind.RUNTIME)


class TestExecute:
    def test_replaces_process_with_args(self, store, prefix_dir):
        make_entry(store.root, "8.9.0")
        exec_fn = MagicMock()

        Executor(store, exec_fn=exec_fn).execute(
            "8.9.0", BinaryKind.RUNTIME, ["-e", "console.log(1)"]
        )

        node = str(store.root / "8.9.0" / "bin" / "node")
        exec_fn.assert_called_once_with(node, [node, "-e", "console.log(1)"])
        # The active slot is never touched
        assert not (prefix_dir / "bin").exists()

    def test_package_manager(self, store):
        make_entry(store.root, "0.6.3")
        exec_fn = MagicMock()

        Executor(store, exec_fn=exec_fn).execute("0.6.3", BinaryKind.PACKAGE_MANAGER, ["ls"])

        npm = str(store.root / "0.6.3" / "bin" / "npm")
        exec_fn.assert_called_once_with(npm, [npm, "ls"])

    def test_defaults_to_execv(self, store):
        make_entry(store.root, "8.9.0")

        with patch("os.execv") as mock_execv:
            Executor(store).execute("8.9.0", BinaryKind.RUNTIME)

        node = str(store.root / "8.9.0" / "bin" / "node")
        mock_execv.assert_called_once_with(node, [node])

    def test_not_installed_never_execs(self, store):
        exec_fn = MagicMock()

        with pytest.raises(NotInstalled):
            Executor(store, exec_fn=exec_fn).execute("8.9.0", BinaryKind.RUNTIME)

        exec_fn.assert_not_called()

    def test_exec_failure_is_reported(self, store):
        make_entry(store.root, "8.9.0")
        exec_fn = MagicMock(side_effect=PermissionError(13, "Permission denied"))

        with pytest.raises(ExecError) as exc_info:
            Executor(store, exec_fn=exec_fn).execute("8.9.0", BinaryKind.RUNTIME)

        assert "Permission denied" in str(exc_info.value)
        assert exc_info.value.path == store.root / "8.9.0" / "bin" / "node"
