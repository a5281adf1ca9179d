"""Contracts between the parent resolver and its collaborators.

The resolver is parameterized over two capabilities:

- a ``ContainerStore`` telling, for a container reference, which organizing
  policy the container exposes (``None`` for plain containers);
- an ``OrganizingPolicy`` computing, for an item, the container that
  should actually hold it.
"""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from .references import ContainerRef


@runtime_checkable
class OrganizingPolicy(Protocol):
    """Placement rule attached to an organizing container."""

    def get_target_container(self, item: Any) -> Optional[ContainerRef]:
        """Return the container that should hold ``item``.

        ``None`` or the empty reference means "no change".
        """
        ...


@runtime_checkable
class ContainerStore(Protocol):
    """Read access to the organizing capability of containers."""

    def get_organizing_policy(self, ref: ContainerRef) -> Optional[OrganizingPolicy]:
        """Return the container's policy, or ``None`` for plain containers.

        Raises:
            StoreLookupError: If the store cannot answer.
        """
        ...


@runtime_checkable
class HierarchyStore(ContainerStore, Protocol):
    """Store that policies can use to find or create child containers."""

    def find_child(self, parent: ContainerRef, name: str) -> Optional[ContainerRef]:
        ...

    def get_or_create_child(self, parent: ContainerRef, name: str) -> ContainerRef:
        ...
