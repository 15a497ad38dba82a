"""Repository interfaces and the in-memory backend."""

from .container import Container

__all__ = ["Container"]
