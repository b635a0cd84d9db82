"""
Cooldown Tracker
In-memory per (command, entity) cooldown tracking
"""

import asyncio
import time
from typing import Callable, Dict, Optional, Tuple

from utils.logger import get_logger

Key = Tuple[str, int]
# (last successful invocation, cooldown seconds)
Entry = Tuple[float, float]

# Seconds between prune passes
DEFAULT_PRUNE_INTERVAL = 300


class CooldownLease:
    """
    Result of ``CooldownTracker.reserve``.

    An unthrottled lease holds a provisional stamp for its key until it is
    committed or released, so concurrent dispatches see the key as busy.
    """

    def __init__(
        self,
        tracker: "CooldownTracker",
        command: str,
        entity_id: int,
        cooldown: float,
        remaining: float,
        stamp: Optional[Entry] = None,
        previous: Optional[Entry] = None,
    ):
        self._tracker = tracker
        self.command = command
        self.entity_id = entity_id
        self.cooldown = cooldown
        self.remaining = remaining
        self._stamp = stamp
        self._previous = previous

    @property
    def throttled(self) -> bool:
        return self.remaining > 0

    def commit(self) -> None:
        """Record a successful invocation at the current time."""
        if self._stamp is None:
            return
        self._stamp = None
        self._tracker.record(self.command, self.entity_id, self.cooldown)

    def release(self) -> None:
        """Drop the provisional stamp and restore whatever was there before."""
        if self._stamp is None:
            return
        self._tracker._restore((self.command, self.entity_id), self._stamp, self._previous)
        self._stamp = None


class CooldownTracker:
    """
    Tracks the last successful invocation per (command, entity).

    ``reserve`` checks and stamps a key without awaiting in between, so on
    the event loop it is atomic with respect to every other dispatch of the
    same key, and no lock is held while an entry point runs.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self.logger = get_logger("Cooldowns")
        self._clock = clock or time.monotonic
        # key -> (last successful invocation, cooldown seconds)
        self._entries: Dict[Key, Entry] = {}
        self._prune_task: Optional[asyncio.Task] = None

    def check(self, command: str, entity_id: int, cooldown: Optional[float] = None) -> float:
        """
        Get remaining cooldown time.

        Args:
            command: Command name
            entity_id: Invoking user ID
            cooldown: Cooldown length; defaults to the one stored with the entry

        Returns:
            Remaining seconds (0 if not on cooldown)
        """
        entry = self._entries.get((command, entity_id))
        if entry is None:
            return 0.0

        last, stored = entry
        length = stored if cooldown is None else cooldown
        remaining = last + length - self._clock()
        return remaining if remaining > 0 else 0.0

    def record(self, command: str, entity_id: int, cooldown: float = 0) -> None:
        """
        Record a successful invocation at the current time.

        Args:
            command: Command name
            entity_id: Invoking user ID
            cooldown: Cooldown length, kept for pruning
        """
        key = (command, entity_id)
        now = self._clock()
        previous = self._entries.get(key)
        if previous is not None and previous[0] > now:
            now = previous[0]
        self._entries[key] = (now, cooldown)

    def clear(self, command: str, entity_id: int) -> None:
        """Drop the cooldown for a user and command."""
        self._entries.pop((command, entity_id), None)

    def reserve(self, command: str, entity_id: int, cooldown: float) -> CooldownLease:
        """
        Check a key and, when it is free, claim it for one dispatch.

        A cooldown of 0 never throttles and stores nothing.

        Args:
            command: Command name
            entity_id: Invoking user ID
            cooldown: Cooldown length in seconds

        Returns:
            CooldownLease; commit it after success, release it otherwise
        """
        if cooldown <= 0:
            return CooldownLease(self, command, entity_id, 0, 0.0)

        remaining = self.check(command, entity_id, cooldown)
        if remaining > 0:
            return CooldownLease(self, command, entity_id, cooldown, remaining)

        key = (command, entity_id)
        previous = self._entries.get(key)
        self.record(command, entity_id, cooldown)
        return CooldownLease(self, command, entity_id, cooldown, 0.0, self._entries[key], previous)

    def _restore(self, key: Key, stamp: Entry, previous: Optional[Entry]) -> None:
        # Someone else stamped the key since (or prune evicted it); leave theirs alone
        if self._entries.get(key) is not stamp:
            return
        if previous is None:
            del self._entries[key]
        else:
            self._entries[key] = previous

    def prune(self) -> int:
        """
        Evict entries whose cooldown has elapsed.

        Returns:
            Number of evicted entries
        """
        now = self._clock()
        expired = [key for key, (last, length) in self._entries.items() if last + length <= now]
        for key in expired:
            del self._entries[key]

        if expired:
            self.logger.debug(f"Pruned {len(expired)} expired cooldowns")
        return len(expired)

    def start(self, interval: float = DEFAULT_PRUNE_INTERVAL) -> None:
        """Start periodic pruning."""
        if self._prune_task is None or self._prune_task.done():
            self._prune_task = asyncio.create_task(self._prune_loop(interval))

    async def _prune_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.prune()

    async def stop(self) -> None:
        """Stop periodic pruning."""
        if self._prune_task:
            self._prune_task.cancel()
            try:
                await self._prune_task
            except asyncio.CancelledError:
                pass
            self._prune_task = None

    def __len__(self) -> int:
        return len(self._entries)
