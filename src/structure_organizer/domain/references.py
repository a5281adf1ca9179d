"""Container reference value object.

A ContainerRef points at a position in the hierarchy. Besides the container
id it may carry a work id (a version tag of the container) and a provider
name (the remote store the container lives in). The work id is not part of
the container's identity: two references are *equivalent* when id and
provider match, whatever their work ids.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, ClassVar, Optional, Tuple


@dataclass(frozen=True, slots=True)
class ContainerRef:
    """Value object referencing a container."""

    id: int
    work_id: int = 0
    provider: Optional[str] = None

    EMPTY: ClassVar["ContainerRef"]

    def __post_init__(self) -> None:
        if self.id < 0:
            raise ValueError(f"Container id cannot be negative: {self.id}")
        if self.work_id < 0:
            raise ValueError(f"Work id cannot be negative: {self.work_id}")

    def __str__(self) -> str:
        if self.provider:
            return f"{self.id}_{self.work_id or ''}_{self.provider}"
        if self.work_id:
            return f"{self.id}_{self.work_id}"
        return str(self.id)

    @property
    def identity(self) -> Tuple[int, Optional[str]]:
        """Identity key of the referenced container, ignoring the work id."""
        return (self.id, self.provider or None)

    @property
    def is_empty(self) -> bool:
        return self.id == 0

    def equivalent(self, other: Any) -> bool:
        """Compare with another reference, ignoring the work id."""
        if not isinstance(other, ContainerRef):
            return False
        return self.identity == other.identity

    def without_version(self) -> "ContainerRef":
        """Return this reference with the work id cleared."""
        if not self.work_id:
            return self
        return replace(self, work_id=0)

    def with_version(self, work_id: int) -> "ContainerRef":
        return replace(self, work_id=work_id)

    @classmethod
    def parse(cls, text: str) -> "ContainerRef":
        """Parse ``id``, ``id_workid`` or ``id_workid_provider``.

        The work id may be left blank when a provider is given (``12__remote``).

        Raises:
            ValueError: If the text is not a valid reference.
        """
        text = text.strip()
        if not text:
            raise ValueError("Empty container reference")

        parts = text.split("_", 2)
        try:
            container_id = int(parts[0])
            work_id = int(parts[1]) if len(parts) > 1 and parts[1] else 0
        except ValueError:
            raise ValueError(f"Invalid container reference: {text!r}") from None

        provider = parts[2] if len(parts) > 2 and parts[2] else None
        return cls(container_id, work_id, provider)


ContainerRef.EMPTY = ContainerRef(0)


def is_value(ref: Any) -> bool:
    """Check that ``ref`` is a usable, non-empty container reference."""
    return isinstance(ref, ContainerRef) and not ref.is_empty


def is_null_or_empty(ref: Any) -> bool:
    """Check whether ``ref`` is missing or the empty reference."""
    return not is_value(ref)
