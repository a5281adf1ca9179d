"""
Domain Layer - container references, items, policies and the contracts
the resolver depends on.
"""

from .contracts import ContainerStore, HierarchyStore, OrganizingPolicy
from .items import Item
from .policies import AttributeOrganizingPolicy, DateOrganizingPolicy, RedirectPolicy
from .references import ContainerRef, is_null_or_empty, is_value
from .result import Result, Success, Failure, try_catch

__all__ = [
    "ContainerStore",
    "HierarchyStore",
    "OrganizingPolicy",
    "Item",
    "AttributeOrganizingPolicy",
    "DateOrganizingPolicy",
    "RedirectPolicy",
    "ContainerRef",
    "is_null_or_empty",
    "is_value",
    # Result pattern
    "Result",
    "Success",
    "Failure",
    "try_catch",
]
