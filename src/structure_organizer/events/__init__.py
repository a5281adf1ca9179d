"""
Event System - Item lifecycle events.

The host publishes item creation and moves on the bus; the placement
interceptor subscribes to them to reroute items into organized containers.
"""

from .event_bus import EventBus, DomainEvent, EventPriority
from .lifecycle_events import ItemCreating, ItemMoved, ItemPlaced

__all__ = [
    "EventBus",
    "DomainEvent",
    "EventPriority",
    "ItemCreating",
    "ItemMoved",
    "ItemPlaced",
]
