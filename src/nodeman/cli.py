"""Command line entry point for nodeman."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from . import __version__
from .bootstrap import Activator, Builder
from .config import NodemanConfig, load_config
from .errors import NodemanError, UsageError
from .remote import ReleaseIndexClient
from .runtime import BinaryKind, RuntimeResolver
from .services import Executor, Installer, Listing, Remover, format_listing
from .store import VersionStore

logger = logging.getLogger(__name__)

HELP = """\
Usage: nodeman [options] [COMMAND] [config]

Commands:

  nodeman                            Output versions installed
  nodeman latest [config ...]        Install or activate the latest node release
  nodeman stable [config ...]        Install or activate the latest stable node release
  nodeman <version> [config ...]     Install and/or use node <version>
  nodeman use <version> [args ...]   Execute node <version> with [args ...]
  nodeman npm <version> [args ...]   Execute npm of node <version> with [args ...]
  nodeman bin <version>              Output bin path for <version>
  nodeman rm <version ...>           Remove the given version(s)
  nodeman --latest                   Output the latest node version available
  nodeman --stable                   Output the latest stable node version available
  nodeman ls                         Output the versions of node available

Options:

  -V, --version   Output current version of nodeman
  -h, --help      Display help information

Aliases:

  which   bin
  -       rm
  list    ls

Environment:

  N_PREFIX        Installation prefix (default /usr/local)
  N_NODE_MIRROR   Release mirror (default https://nodejs.org/dist/)
"""


@dataclass
class App:
    """Wired-up services for one invocation."""

    config: NodemanConfig
    store: VersionStore
    index: ReleaseIndexClient
    resolver: RuntimeResolver
    installer: Installer
    executor: Executor
    remover: Remover
    listing: Listing


def build_app(config: NodemanConfig) -> App:
    """Construct every service from the configuration."""
    store = VersionStore(config.versions_dir)
    index = ReleaseIndexClient(config.mirror, timeout=config.remote.timeout)
    resolver = RuntimeResolver(config.prefix)
    installer = Installer(
        store=store,
        builder=Builder(config, session=index.session),
        activator=Activator(config.prefix),
        index=index,
        default_flags=config.build.default_flags,
    )
    return App(
        config=config,
        store=store,
        index=index,
        resolver=resolver,
        installer=installer,
        executor=Executor(store),
        remover=Remover(store),
        listing=Listing(store, resolver, index),
    )


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _require_version(command: str, args: List[str]) -> str:
    if not args:
        raise UsageError(f"{command}: version required")
    return args[0]


def cmd_list_installed(app: App, args: List[str]) -> int:
    output = format_listing(app.listing.installed())
    if output:
        print(output)
    return 0


def cmd_list_remote(app: App, args: List[str]) -> int:
    print(format_listing(app.listing.remote()))
    return 0


def cmd_print_latest(app: App, args: List[str]) -> int:
    print(app.index.latest())
    return 0


def cmd_print_stable(app: App, args: List[str]) -> int:
    print(app.index.stable())
    return 0


def cmd_bin(app: App, args: List[str]) -> int:
    version = _require_version("bin", args)
    print(app.executor.resolve(version, BinaryKind.RUNTIME))
    return 0


def cmd_use(app: App, args: List[str]) -> int:
    version = _require_version("use", args)
    app.executor.execute(version, BinaryKind.RUNTIME, args[1:])
    return 0


def cmd_npm(app: App, args: List[str]) -> int:
    version = _require_version("npm", args)
    app.executor.execute(version, BinaryKind.PACKAGE_MANAGER, args[1:])
    return 0


def cmd_remove(app: App, args: List[str]) -> int:
    if not args:
        raise UsageError("rm: version(s) required")
    app.remover.remove(*args)
    return 0


def cmd_install(app: App, args: List[str]) -> int:
    requested, flags = args[0], args[1:]
    result = app.installer.install(requested, flags)
    logger.debug("Install of %s visited %s", result.version, [s.value for s in result.states])
    return 0


COMMANDS: Dict[str, Callable[[App, List[str]], int]] = {
    "use": cmd_use,
    "npm": cmd_npm,
    "bin": cmd_bin,
    "which": cmd_bin,
    "rm": cmd_remove,
    "-": cmd_remove,
    "ls": cmd_list_remote,
    "list": cmd_list_remote,
    "--latest": cmd_print_latest,
    "--stable": cmd_print_stable,
}


def dispatch(app: App, argv: List[str]) -> int:
    """Route ``argv`` to a command; anything unrecognized is a version."""
    if not argv:
        return cmd_list_installed(app, [])

    command, rest = argv[0], argv[1:]
    handler = COMMANDS.get(command)
    if handler is not None:
        return handler(app, rest)

    # <version>, latest or stable, each followed by configure flags
    return cmd_install(app, argv)


def main(argv: Optional[List[str]] = None, config: Optional[NodemanConfig] = None) -> int:
    """Run nodeman and return the process exit code."""
    argv = sys.argv[1:] if argv is None else list(argv)

    if argv and argv[0] in ("-h", "--help", "help"):
        print(HELP)
        return 0
    if argv and argv[0] in ("-V", "--version"):
        print(__version__)
        return 0

    if config is None:
        config = load_config()
    setup_logging(config.logging.level)

    try:
        app = build_app(config)
        app.store.ensure_root()
        return dispatch(app, argv)
    except NodemanError as e:
        print(f"Error: {e}", file=sys.stderr)
        return e.exit_code
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        return 130


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
