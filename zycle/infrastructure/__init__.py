"""Infrastructure layer implementations."""

from zycle.infrastructure import storage

__all__ = ["storage"]
