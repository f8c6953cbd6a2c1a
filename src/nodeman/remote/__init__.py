"""Remote release index access."""

from .index import ReleaseIndexClient, extract_versions, tarball_url

__all__ = ["ReleaseIndexClient", "extract_versions", "tarball_url"]
