"""Data models for structure organizer."""

from .config import StructureConfig, ContainerConfig, OrganizerConfig, ResolverSettings

__all__ = ["StructureConfig", "ContainerConfig", "OrganizerConfig", "ResolverSettings"]
