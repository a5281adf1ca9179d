"""
Item lifecycle events fired by the host around structural changes.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..domain.items import Item
from ..domain.references import ContainerRef
from .event_bus import DomainEvent


def _ref_str(ref: Optional[ContainerRef]) -> Optional[str]:
    return str(ref) if ref is not None else None


@dataclass(kw_only=True)
class ItemCreating(DomainEvent):
    """Fired before an item is committed; handlers may change ``item.parent``."""
    item: Item

    def __post_init__(self):
        if self.aggregate_id is None:
            self.aggregate_id = self.item.item_id

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "item_id": self.item.item_id,
            "name": self.item.name,
            "parent": _ref_str(self.item.parent),
        }


@dataclass(kw_only=True)
class ItemMoved(DomainEvent):
    """Fired after an item was moved to ``target``."""
    item_id: str
    source: Optional[ContainerRef]
    target: ContainerRef

    def __post_init__(self):
        if self.aggregate_id is None:
            self.aggregate_id = self.item_id

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "source": _ref_str(self.source),
            "target": _ref_str(self.target),
        }


@dataclass(kw_only=True)
class ItemPlaced(DomainEvent):
    """Fired when an organizing container redirected an item."""
    item_id: str
    requested: Optional[ContainerRef]
    resolved: ContainerRef

    def __post_init__(self):
        if self.aggregate_id is None:
            self.aggregate_id = self.item_id

    def _get_event_data(self) -> Dict[str, Any]:
        return {
            "item_id": self.item_id,
            "requested": _ref_str(self.requested),
            "resolved": _ref_str(self.resolved),
        }
