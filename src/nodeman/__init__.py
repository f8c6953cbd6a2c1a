"""nodeman - build, install and switch between Node.js versions."""

__version__ = "0.4.0"

__all__ = ["__version__"]
