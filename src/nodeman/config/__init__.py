"""Configuration management for nodeman."""

from .parser import (
    NodemanConfig,
    load_config,
    find_config_file,
)

__all__ = [
    "NodemanConfig",
    "load_config",
    "find_config_file",
]
