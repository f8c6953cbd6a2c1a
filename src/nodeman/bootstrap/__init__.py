"""Building node from source and publishing it into the prefix."""

from .activator import ActivationResult, Activator
from .builder import Builder

__all__ = [
    "Activator",
    "ActivationResult",
    "Builder",
]
