"""In-memory container store.

Keeps containers, their organizing policies and the items placed in them.
Used by the CLI and the tests; real deployments put their own backing store
behind the ``ContainerStore`` contract.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from ..domain.contracts import OrganizingPolicy
from ..domain.items import Item
from ..domain.references import ContainerRef, is_value
from ..exceptions import ContainerNotFoundError, ItemNotFoundError, StoreLookupError

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """A node of the hierarchy."""

    ref: ContainerRef
    name: str
    parent: Optional[ContainerRef] = None
    policy: Optional[OrganizingPolicy] = None

    @property
    def is_organizing(self) -> bool:
        return self.policy is not None


class InMemoryContainerStore:
    """Container store backed by dictionaries."""

    def __init__(self, provider: Optional[str] = None):
        self.provider = provider
        self.available = True
        self._containers: Dict[int, Container] = {}
        self._items: Dict[str, Item] = {}
        self._next_id = 1

    # Lookups

    def get_organizing_policy(self, ref: ContainerRef) -> Optional[OrganizingPolicy]:
        return self.get_container(ref).policy

    def get_container(self, ref: ContainerRef) -> Container:
        """Get a container, ignoring the reference's work id.

        Raises:
            StoreLookupError: If the store is unavailable.
            ContainerNotFoundError: If no such container exists.
        """
        if not self.available:
            raise StoreLookupError(f"Store unavailable while looking up {ref}")
        if not is_value(ref) or (ref.provider or None) != self.provider:
            raise ContainerNotFoundError(ref)

        container = self._containers.get(ref.id)
        if container is None:
            raise ContainerNotFoundError(ref)
        return container

    def __contains__(self, ref: object) -> bool:
        return (
            is_value(ref)
            and (ref.provider or None) == self.provider
            and ref.id in self._containers
        )

    def __iter__(self) -> Iterator[Container]:
        return iter(self._containers.values())

    def __len__(self) -> int:
        return len(self._containers)

    def roots(self) -> List[Container]:
        return [c for c in self._containers.values() if c.parent is None]

    def children(self, ref: ContainerRef) -> List[Container]:
        parent = self.get_container(ref)
        return [c for c in self._containers.values()
                if c.parent is not None and c.parent.equivalent(parent.ref)]

    def find_child(self, parent: ContainerRef, name: str) -> Optional[ContainerRef]:
        for child in self.children(parent):
            if child.name == name:
                return child.ref
        return None

    def path_of(self, ref: ContainerRef) -> str:
        """Get the slash separated path of a container, e.g. ``/News/2024``."""
        names = []
        container: Optional[Container] = self.get_container(ref)
        while container is not None:
            names.append(container.name)
            container = self.get_container(container.parent) if container.parent else None
        return "/" + "/".join(reversed(names))

    def find_by_path(self, path: str) -> Optional[ContainerRef]:
        names = [part for part in path.strip().split("/") if part]
        if not names:
            return None

        current = next((c.ref for c in self.roots() if c.name == names[0]), None)
        for name in names[1:]:
            if current is None:
                return None
            current = self.find_child(current, name)
        return current

    # Mutations

    def add_container(
        self,
        name: str,
        parent: Optional[ContainerRef] = None,
        policy: Optional[OrganizingPolicy] = None
    ) -> ContainerRef:
        """Create a container and return its reference."""
        if not name or "/" in name:
            raise ValueError(f"Invalid container name: {name!r}")
        if parent is not None:
            parent = self.get_container(parent).ref
            if self.find_child(parent, name) is not None:
                raise ValueError(f"Container '{name}' already exists under {self.path_of(parent)}")

        ref = ContainerRef(self._next_id, provider=self.provider)
        self._next_id += 1
        self._containers[ref.id] = Container(ref=ref, name=name, parent=parent, policy=policy)
        logger.debug(f"Created container {ref} '{name}' under {parent}")
        return ref

    def get_or_create_child(self, parent: ContainerRef, name: str) -> ContainerRef:
        existing = self.find_child(parent, name)
        if existing is not None:
            return existing
        return self.add_container(name, parent)

    def set_policy(self, ref: ContainerRef, policy: Optional[OrganizingPolicy]) -> None:
        """Attach a policy to a container, or make it plain with ``None``."""
        self.get_container(ref).policy = policy

    # Items

    def add_item(self, item: Item) -> Item:
        if not is_value(item.parent):
            raise ValueError(f"Item '{item.name}' has no parent container")
        item.parent = self.get_container(item.parent).ref
        self._items[item.item_id] = item
        return item

    def get_item(self, item_id: str) -> Item:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def move_item(self, item_id: str, target: ContainerRef) -> Item:
        item = self.get_item(item_id)
        target = self.get_container(target).ref
        logger.debug(f"Moving item {item_id} from {item.parent} to {target}")
        item.parent = target
        return item

    def items_in(self, ref: ContainerRef) -> List[Item]:
        container = self.get_container(ref)
        return [i for i in self._items.values()
                if i.parent is not None and i.parent.equivalent(container.ref)]
