"""Per-slot in-flight flags shared by every checklist engine in a process."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

SlotKey = tuple[str, str, str]  # (entity collection, entity id, slot id)


class SlotInFlightTracker:
    """At most one upload or delete per slot at a time.

    try_acquire/release are synchronous, so two coroutines cannot both
    acquire the same key on one event loop.
    """

    def __init__(self) -> None:
        self._keys: set[SlotKey] = set()

    def try_acquire(self, key: SlotKey) -> bool:
        if key in self._keys:
            logger.debug("Slot %s already has an operation in flight", "/".join(key))
            return False
        self._keys.add(key)
        return True

    def release(self, key: SlotKey) -> None:
        self._keys.discard(key)

    def __len__(self) -> int:
        return len(self._keys)
