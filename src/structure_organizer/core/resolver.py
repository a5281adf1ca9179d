"""Parent resolution for organizing containers.

When an item is about to be placed under a container, that container may be
*organizing*: its policy decides that the item actually belongs somewhere
else (e.g. ``News`` routes items to ``News/2024/05``). The target may be
organizing too, so the resolver keeps delegating until it reaches a plain
container, or a container it has already asked.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..domain.contracts import ContainerStore, OrganizingPolicy
from ..domain.references import ContainerRef, is_null_or_empty, is_value
from ..domain.result import Result, try_catch
from ..exceptions import StoreLookupError

logger = logging.getLogger(__name__)


class TerminationReason(Enum):
    """Why a resolution stopped."""
    EMPTY_REFERENCE = "empty_reference"
    NOT_ORGANIZING = "not_organizing"
    CYCLE_DETECTED = "cycle_detected"


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of one resolution, with the chain of containers asked."""

    requested: Optional[ContainerRef]
    resolved: Optional[ContainerRef]
    visited: Tuple[ContainerRef, ...]
    terminated_by: TerminationReason

    @property
    def changed(self) -> bool:
        """True when the item should go somewhere other than requested."""
        if not is_value(self.resolved):
            return False
        return not self.resolved.equivalent(self.requested)


class ParentResolver:
    """Resolves the container an item should actually be placed under."""

    def __init__(self, store: ContainerStore):
        self.store = store

    def resolve(self, requested: Optional[ContainerRef], item: Any) -> Optional[ContainerRef]:
        """Follow organizing containers from ``requested`` to a stable one.

        Raises:
            StoreLookupError: If the store cannot answer a lookup.
        """
        return self.resolve_with_trace(requested, item).resolved

    def try_resolve(
        self,
        requested: Optional[ContainerRef],
        item: Any
    ) -> Result[Optional[ContainerRef], StoreLookupError]:
        """Like ``resolve`` but returns lookup failures as a Failure."""
        return try_catch(lambda: self.resolve(requested, item), StoreLookupError)

    def resolve_with_trace(self, requested: Optional[ContainerRef], item: Any) -> Resolution:
        visited: List[ContainerRef] = []
        current = requested
        policy = self._get_policy(current)

        while policy is not None and not self._already_visited(visited, current):
            visited.append(current)
            candidate = policy.get_target_container(item)
            if is_value(candidate):
                logger.debug(f"Container {current} delegates to {candidate}")
                current = candidate
            else:
                logger.debug(f"Container {current} returned no target, keeping it")
            policy = self._get_policy(current)

        if policy is None:
            reason = (TerminationReason.EMPTY_REFERENCE if is_null_or_empty(current)
                      else TerminationReason.NOT_ORGANIZING)
        else:
            reason = TerminationReason.CYCLE_DETECTED
            logger.info(f"Stopped resolution at already visited container {current}")

        return Resolution(
            requested=requested,
            resolved=current,
            visited=tuple(visited),
            terminated_by=reason,
        )

    def _get_policy(self, ref: Optional[ContainerRef]) -> Optional[OrganizingPolicy]:
        if is_null_or_empty(ref):
            return None
        return self.store.get_organizing_policy(ref)

    @staticmethod
    def _already_visited(visited: List[ContainerRef], ref: ContainerRef) -> bool:
        return any(v.equivalent(ref) for v in visited)
