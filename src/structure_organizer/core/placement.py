"""Placement interception for item creation and moves.

The interceptor hooks into the host's lifecycle events: items being created
under an organizing container get their parent rewritten before they are
committed, and items moved into an organizing container are moved on to the
container its policy picks.
"""

import logging
from typing import Optional

from ..domain.references import is_value
from ..events.event_bus import EventBus
from ..events.lifecycle_events import ItemCreating, ItemMoved, ItemPlaced
from ..infrastructure.memory_store import InMemoryContainerStore
from .resolver import ParentResolver

logger = logging.getLogger(__name__)


class PlacementInterceptor:
    """Reroutes created and moved items through organizing containers."""

    def __init__(self, store: InMemoryContainerStore, resolver: Optional[ParentResolver] = None):
        self.store = store
        self.resolver = resolver or ParentResolver(store)
        self._bus: Optional[EventBus] = None

    @property
    def attached(self) -> bool:
        return self._bus is not None

    def attach(self, bus: EventBus) -> None:
        """Subscribe to item creation and move events."""
        if self._bus is not None:
            raise RuntimeError("Interceptor is already attached to an event bus")
        bus.subscribe(ItemCreating, self.on_item_creating)
        bus.subscribe(ItemMoved, self.on_item_moved)
        self._bus = bus

    def detach(self) -> None:
        """Unsubscribe the handlers registered by ``attach``."""
        if self._bus is None:
            return
        self._bus.unsubscribe(ItemCreating, self.on_item_creating)
        self._bus.unsubscribe(ItemMoved, self.on_item_moved)
        self._bus = None

    async def on_item_creating(self, event: ItemCreating) -> None:
        """Change the parent the new item is going to be added under."""
        item = event.item
        resolution = self.resolver.resolve_with_trace(item.parent, item)
        if not resolution.changed:
            return

        logger.info(f"Placing new item '{item.name}' under {resolution.resolved} instead of {item.parent}")
        item.parent = resolution.resolved
        await self._announce(item.item_id, resolution.requested, resolution.resolved)

    async def on_item_moved(self, event: ItemMoved) -> None:
        """Move an item on when it was moved into an organizing container."""
        item = self.store.get_item(event.item_id)
        resolved = self.resolver.resolve(event.target, item)

        if not is_value(resolved):
            return  # no new parent found
        if event.target.equivalent(resolved):
            return  # parent is unchanged from the requested target

        logger.info(f"Moving item '{item.name}' on from {event.target} to {resolved}")
        self.store.move_item(item.item_id, resolved)
        await self._announce(item.item_id, event.target, resolved)

    async def _announce(self, item_id, requested, resolved) -> None:
        if self._bus is not None:
            await self._bus.publish(
                ItemPlaced(item_id=item_id, requested=requested, resolved=resolved)
            )
