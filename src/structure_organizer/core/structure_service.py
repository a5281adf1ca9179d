"""Host-side item operations that fire lifecycle events."""

import logging

from ..domain.items import Item
from ..domain.references import ContainerRef
from ..events.event_bus import EventBus, EventPriority
from ..events.lifecycle_events import ItemCreating, ItemMoved
from ..infrastructure.memory_store import InMemoryContainerStore

logger = logging.getLogger(__name__)


class StructureService:
    """Creates and moves items in a store, notifying subscribers on the bus.

    Lifecycle events are published with CRITICAL priority, so handler
    failures abort the operation.
    """

    def __init__(self, store: InMemoryContainerStore, bus: EventBus):
        self.store = store
        self.bus = bus

    async def create_item(self, item: Item) -> Item:
        """Announce the new item, then commit it under its (possibly rewritten) parent."""
        await self.bus.publish(ItemCreating(item=item), EventPriority.CRITICAL)
        self.store.add_item(item)
        logger.debug(f"Created item '{item.name}' under {item.parent}")
        return item

    async def move_item(self, item_id: str, target: ContainerRef) -> Item:
        """Move the item, then announce the move."""
        item = self.store.get_item(item_id)
        source = item.parent
        self.store.move_item(item_id, target)
        await self.bus.publish(
            ItemMoved(item_id=item_id, source=source, target=target),
            EventPriority.CRITICAL
        )
        return self.store.get_item(item_id)
