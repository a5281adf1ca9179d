"""Organizing policies.

A policy is attached to an organizing container and decides, per item,
which container should actually hold the item:

- ``DateOrganizingPolicy``: ``News`` -> ``News/2024/05`` from the item date
- ``AttributeOrganizingPolicy``: ``Articles`` -> ``Articles/sports`` from an attribute
- ``RedirectPolicy``: always the same target container
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional, Sequence, Tuple

from .contracts import HierarchyStore
from .items import Item
from .references import ContainerRef

DATE_LEVELS = ("year", "month", "day")

_INVALID_NAME_CHARS = '<>:"|?*'


def clean_container_name(value: str) -> str:
    """Turn an attribute value into a usable container name."""
    for char in _INVALID_NAME_CHARS:
        value = value.replace(char, '')

    # Slashes would be read as path separators
    value = value.replace('/', '_')
    value = re.sub(r'\s+', ' ', value)
    return value.strip(' _-')


def format_date_level(date: datetime, level: str) -> str:
    if level == "year":
        return f"{date.year:04d}"
    if level == "month":
        return f"{date.month:02d}"
    if level == "day":
        return f"{date.day:02d}"
    raise ValueError(f"Unknown date level: {level}")


class _ChildRoutingPolicy:
    """Base for policies routing items into (nested) children of their container."""

    def __init__(self, store: HierarchyStore, container: ContainerRef, create_missing: bool = True):
        self.store = store
        self.container = container
        self.create_missing = create_missing

    def _descend(self, names: Sequence[str]) -> Optional[ContainerRef]:
        """Walk ``names`` below the container, creating levels when allowed.

        Returns ``None`` when a level is missing and may not be created.
        """
        current = self.container
        for name in names:
            if self.create_missing:
                current = self.store.get_or_create_child(current, name)
            else:
                child = self.store.find_child(current, name)
                if child is None:
                    return None
                current = child
        return current


class DateOrganizingPolicy(_ChildRoutingPolicy):
    """Groups items in year/month/day containers below the organizing container."""

    def __init__(
        self,
        store: HierarchyStore,
        container: ContainerRef,
        levels: Sequence[str] = ("year", "month"),
        date_attribute: str = "published",
        create_missing: bool = True
    ):
        super().__init__(store, container, create_missing)
        self.levels: Tuple[str, ...] = tuple(levels)
        self.date_attribute = date_attribute

        if not self.levels:
            raise ValueError("At least one date level is required")
        if self.levels != DATE_LEVELS[:len(self.levels)]:
            raise ValueError(
                f"Date levels must be a prefix of {', '.join(DATE_LEVELS)}, got {', '.join(self.levels)}"
            )

    def get_target_container(self, item: Item) -> Optional[ContainerRef]:
        date = item.get_date(self.date_attribute)
        if date is None and self.date_attribute != "created":
            date = item.created
        if date is None:
            return None

        return self._descend([format_date_level(date, level) for level in self.levels])


class AttributeOrganizingPolicy(_ChildRoutingPolicy):
    """Groups items in child containers named after one of their attributes."""

    def __init__(
        self,
        store: HierarchyStore,
        container: ContainerRef,
        attribute: str,
        default: Optional[str] = None,
        create_missing: bool = True
    ):
        super().__init__(store, container, create_missing)
        self.attribute = attribute
        self.default = default

    def get_target_container(self, item: Item) -> Optional[ContainerRef]:
        value = item.get_attribute(self.attribute)
        name = clean_container_name(str(value)) if value is not None else ""
        if not name:
            name = self.default or ""
        if not name:
            return None

        return self._descend([name])


class RedirectPolicy:
    """Sends every item to a fixed container."""

    def __init__(self, target: ContainerRef):
        self.target = target

    def get_target_container(self, item: Item) -> Optional[ContainerRef]:
        return self.target
