"""
Event Bus - Item lifecycle notifications.

This module provides a lightweight event bus through which the host
announces item creation and moves, so placement logic can hook in
without the host knowing about it.
"""

import asyncio
import logging
import weakref
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

logger = logging.getLogger(__name__)


class EventPriority(Enum):
    """Priority levels for events."""
    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


T = TypeVar('T', bound='DomainEvent')


@dataclass
class DomainEvent:
    """Base class for all domain events."""
    event_id: str = field(default_factory=lambda: f"evt_{datetime.now().timestamp()}")
    timestamp: datetime = field(default_factory=datetime.now)
    aggregate_id: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_type": self.__class__.__name__,
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "aggregate_id": self.aggregate_id,
            "metadata": self.metadata,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        return {}


class EventBus:
    """
    Central event bus for publishing and subscribing to domain events.

    CRITICAL events are handled one handler at a time and a failing handler
    aborts the publish. Other events are handled concurrently and handler
    failures are only logged.
    """

    def __init__(self, max_events_in_memory: int = 1000):
        self._handlers: Dict[Type[DomainEvent], List[weakref.ref]] = {}
        self._event_store: List[DomainEvent] = []
        self._max_events_in_memory = max_events_in_memory

    def subscribe(
        self,
        event_type: Type[T],
        handler: Callable[[T], Any]
    ) -> None:
        """
        Subscribe to events of a specific type.

        Handlers are held weakly; the subscriber must keep them alive.
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        if hasattr(handler, '__self__'):
            ref = weakref.WeakMethod(handler)
        else:
            ref = weakref.ref(handler)

        self._handlers[event_type].append(ref)

    def unsubscribe(
        self,
        event_type: Type[DomainEvent],
        handler: Callable
    ) -> None:
        if event_type in self._handlers:
            self._handlers[event_type] = [
                ref for ref in self._handlers[event_type]
                if ref() is not None and ref() != handler
            ]

    def handler_count(self, event_type: Type[DomainEvent]) -> int:
        return sum(1 for ref in self._handlers.get(event_type, []) if ref() is not None)

    async def publish(
        self,
        event: DomainEvent,
        priority: EventPriority = EventPriority.NORMAL
    ) -> None:
        """
        Publish an event to all subscribers of its type and parent types.
        """
        self._event_store.append(event)
        if len(self._event_store) > self._max_events_in_memory:
            self._event_store.pop(0)

        handlers = []
        for event_type in type(event).__mro__:
            if event_type in self._handlers:
                handlers.extend(ref() for ref in self._handlers[event_type] if ref() is not None)

        if handlers:
            if priority == EventPriority.CRITICAL:
                await self._handle_sync(event, handlers)
            else:
                await self._handle_async(event, handlers)

    def get_events(
        self,
        event_type: Optional[Type[DomainEvent]] = None,
        aggregate_id: Optional[str] = None
    ) -> List[DomainEvent]:
        filtered_events = self._event_store

        if aggregate_id:
            filtered_events = [e for e in filtered_events if e.aggregate_id == aggregate_id]

        if event_type:
            filtered_events = [e for e in filtered_events if isinstance(e, event_type)]

        return filtered_events

    async def _handle_sync(self, event: DomainEvent, handlers: List[Callable]) -> None:
        """Handle event in order, propagating handler errors."""
        for handler in handlers:
            try:
                result = handler(event)
                if asyncio.iscoroutine(result):
                    await result
            except Exception:
                logger.error(f"Error in event handler {handler} for {type(event).__name__}")
                raise

    async def _handle_async(self, event: DomainEvent, handlers: List[Callable]) -> None:
        tasks = [asyncio.create_task(self._safe_handle(handler, event)) for handler in handlers]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _safe_handle(self, handler: Callable, event: DomainEvent) -> None:
        """Handle an event, logging exceptions."""
        try:
            result = handler(event)
            if asyncio.iscoroutine(result):
                await result
        except Exception as e:
            logger.error(f"Error in async event handler {handler}: {e}")

    def clear(self) -> None:
        """Clear all handlers and events."""
        self._handlers.clear()
        self._event_store.clear()
