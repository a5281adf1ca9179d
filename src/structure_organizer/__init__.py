"""Structure Organizer

Places items in a container hierarchy where some containers organize their
children, e.g. grouping news items by year and month.
"""

__version__ = "0.1.0"

from .core.resolver import ParentResolver, Resolution, TerminationReason
from .core.placement import PlacementInterceptor
from .core.structure_service import StructureService
from .domain.contracts import ContainerStore, HierarchyStore, OrganizingPolicy
from .domain.items import Item
from .domain.policies import AttributeOrganizingPolicy, DateOrganizingPolicy, RedirectPolicy
from .domain.references import ContainerRef, is_null_or_empty, is_value
from .exceptions import (
    StructureOrganizerError,
    StoreLookupError,
    ContainerNotFoundError,
    ItemNotFoundError,
    ConfigurationError,
)
from .infrastructure.memory_store import Container, InMemoryContainerStore

__all__ = [
    # Resolution
    "ParentResolver",
    "Resolution",
    "TerminationReason",
    "PlacementInterceptor",
    "StructureService",

    # Contracts and domain types
    "ContainerStore",
    "HierarchyStore",
    "OrganizingPolicy",
    "ContainerRef",
    "Item",
    "is_value",
    "is_null_or_empty",

    # Policies
    "DateOrganizingPolicy",
    "AttributeOrganizingPolicy",
    "RedirectPolicy",

    # Stores
    "Container",
    "InMemoryContainerStore",

    # Errors
    "StructureOrganizerError",
    "StoreLookupError",
    "ContainerNotFoundError",
    "ItemNotFoundError",
    "ConfigurationError",
]
