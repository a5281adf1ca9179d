"""Infrastructure - store implementations."""

from .memory_store import Container, InMemoryContainerStore

__all__ = ["Container", "InMemoryContainerStore"]
