"""Item entity.

Items are the entities placed into containers. The resolver never looks
inside an item; organizing policies read its dates and attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import uuid4

from .references import ContainerRef


@dataclass
class Item:
    """An entity being placed in the hierarchy."""

    name: str
    parent: Optional[ContainerRef] = None
    item_id: str = field(default_factory=lambda: uuid4().hex)
    created: datetime = field(default_factory=datetime.now)
    published: Optional[datetime] = None
    attributes: Dict[str, Any] = field(default_factory=dict)

    def get_date(self, attribute: str = "published") -> Optional[datetime]:
        """Get a date from the item.

        ``published`` and ``created`` map to the item fields, other names are
        read from ``attributes`` (datetimes or ISO formatted strings).
        """
        if attribute == "published":
            return self.published
        if attribute == "created":
            return self.created

        value = self.attributes.get(attribute)
        if isinstance(value, datetime):
            return value
        if isinstance(value, str) and value:
            try:
                return datetime.fromisoformat(value)
            except ValueError:
                return None
        return None

    def get_attribute(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)
