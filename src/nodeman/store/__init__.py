"""Version store: installed Node.js trees and their build records."""

from .versions import BUILD_RECORD_NAME, VersionStore

__all__ = ["VersionStore", "BUILD_RECORD_NAME"]
