"""Configuration file parser for nodeman."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from dotenv import load_dotenv

try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python 3.10

DEFAULT_PREFIX = "/usr/local"
DEFAULT_MIRROR = "https://nodejs.org/dist/"
CONFIG_FILE_NAME = ".nodeman.toml"

# Environment overrides
ENV_PREFIX = "N_PREFIX"
ENV_MIRROR = "N_NODE_MIRROR"
ENV_LOG_LEVEL = "NODEMAN_LOG_LEVEL"
ENV_CONFIG = "NODEMAN_CONFIG"


@dataclass
class PathsConfig:
    """Where the active slot and the version store live."""

    prefix: Path = field(default_factory=lambda: Path(DEFAULT_PREFIX))


@dataclass
class RemoteConfig:
    """Release index and download settings."""

    mirror: str = DEFAULT_MIRROR
    timeout: float = 30.0


@dataclass
class BuildConfig:
    """Toolchain settings used when compiling from source."""

    jobs: int = 1
    default_flags: List[str] = field(default_factory=list)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "WARNING"


@dataclass
class NodemanConfig:
    """Complete nodeman configuration."""

    paths: PathsConfig = field(default_factory=PathsConfig)
    remote: RemoteConfig = field(default_factory=RemoteConfig)
    build: BuildConfig = field(default_factory=BuildConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # File the configuration was read from, if any
    source: Optional[Path] = None

    @property
    def prefix(self) -> Path:
        return self.paths.prefix

    @property
    def n_dir(self) -> Path:
        """Scratch directory for downloads, builds and the build log."""
        return self.prefix / "n"

    @property
    def versions_dir(self) -> Path:
        """Root of the version store."""
        return self.n_dir / "versions"

    @property
    def log_file(self) -> Path:
        return self.n_dir / "build.log"

    @property
    def mirror(self) -> str:
        """Mirror URL, always with a trailing slash."""
        mirror = self.remote.mirror
        return mirror if mirror.endswith("/") else mirror + "/"


def find_config_file(env: Optional[Mapping[str, str]] = None) -> Optional[Path]:
    """Find the nodeman config file.

    ``$NODEMAN_CONFIG`` wins when set; otherwise ``~/.nodeman.toml``.

    Args:
        env: Environment mapping (defaults to ``os.environ``)

    Returns:
        Path to the config file if found, None otherwise
    """
    env = os.environ if env is None else env

    explicit = env.get(ENV_CONFIG)
    if explicit:
        config_file = Path(explicit).expanduser()
        return config_file if config_file.exists() else None

    config_file = Path.home() / CONFIG_FILE_NAME
    if config_file.exists():
        return config_file
    return None


def _number(value: Any, cast: Callable[[Any], Any], default: Any) -> Any:
    """Convert a config value, keeping the default when it is malformed."""
    try:
        return cast(value)
    except (TypeError, ValueError):
        return default


def _apply_file(config: NodemanConfig, data: Dict[str, Any]) -> None:
    """Apply parsed TOML data on top of the defaults."""
    if "paths" in data:
        paths_data = data["paths"]
        if paths_data.get("prefix"):
            config.paths.prefix = Path(paths_data["prefix"]).expanduser()

    if "remote" in data:
        remote_data = data["remote"]
        config.remote.mirror = remote_data.get("mirror", DEFAULT_MIRROR)
        config.remote.timeout = _number(remote_data.get("timeout", 30.0), float, 30.0)

    if "build" in data:
        build_data = data["build"]
        config.build.jobs = _number(build_data.get("jobs", 1), int, 1)
        flags = build_data.get("default_flags", [])
        # Accept either a list or a single space separated string
        if isinstance(flags, str):
            flags = flags.split()
        config.build.default_flags = list(flags)

    if "logging" in data:
        config.logging.level = str(data["logging"].get("level", "WARNING")).upper()


def _apply_env(config: NodemanConfig, env: Mapping[str, str]) -> None:
    """Apply environment overrides (highest precedence)."""
    if env.get(ENV_PREFIX):
        config.paths.prefix = Path(env[ENV_PREFIX]).expanduser()
    if env.get(ENV_MIRROR):
        config.remote.mirror = env[ENV_MIRROR]
    if env.get(ENV_LOG_LEVEL):
        config.logging.level = env[ENV_LOG_LEVEL].upper()


def load_config(
    env: Optional[Mapping[str, str]] = None,
    config_file: Optional[Path] = None,
    use_dotenv: bool = True,
) -> NodemanConfig:
    """Load configuration from defaults, the TOML file and the environment.

    Args:
        env: Environment mapping (defaults to ``os.environ``)
        config_file: Explicit config file; found via :func:`find_config_file`
            when omitted
        use_dotenv: Whether to load a ``.env`` file into ``os.environ`` first

    Returns:
        NodemanConfig with loaded or default configuration
    """
    if use_dotenv and env is None:
        # Load environment variables from .env file if present
        load_dotenv()
    env = os.environ if env is None else env

    config = NodemanConfig()

    if config_file is None:
        config_file = find_config_file(env)

    if config_file is not None:
        # Parse TOML file
        try:
            with open(config_file, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError):
            # If TOML parsing fails, keep defaults
            data = {}
        else:
            config.source = config_file
        _apply_file(config, data)

    _apply_env(config, env)
    return config
