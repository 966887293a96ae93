"""
Sync Loop

Periodically mirrors the current day's file to the remote folder.

Each tick (current DayKey only):
  1. Skip if mirror disabled, sync in flight, or no local file
  2. Digest the local file; skip if unchanged since last upload
  3. find_by_name -> create_or_update -> remember the digest
  4. Any failure is logged; SyncState is left as-is

Prior days are not re-synced once the date rolls over.
"""

import asyncio
import logging
from typing import Callable, Dict, Literal, Optional

from .entry import day_key as current_day_key
from .hasher import digest_async
from .mirror.base import RemoteMirror
from .store import LocalLogStore, file_name

logger = logging.getLogger(__name__)


SyncResult = Literal["disabled", "busy", "missing", "unchanged", "uploaded", "failed"]


class SyncState:
    """
    Last confirmed uploaded digest per DayKey.

    In memory only. Lost on restart, which costs at most one
    extra digest comparison, never a duplicate remote object.
    """

    def __init__(self):
        self._digests: Dict[str, str] = {}

    def get(self, day_key: str) -> Optional[str]:
        return self._digests.get(day_key)

    def mark_uploaded(self, day_key: str, digest: str) -> None:
        self._digests[day_key] = digest

    def __contains__(self, day_key: str) -> bool:
        return day_key in self._digests


class SyncLoop:
    """
    Background mirror of today's day-file.

    Args:
        store: Local day-files
        mirror: Remote mirror, or None when disabled
        state: Shared SyncState
        interval_s: Seconds between ticks
        clock: Returns the current DayKey (overridable for tests)
    """

    def __init__(
        self,
        store: LocalLogStore,
        mirror: Optional[RemoteMirror],
        state: Optional[SyncState] = None,
        interval_s: float = 60.0,
        clock: Callable[[], str] = current_day_key,
    ):
        if interval_s <= 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.store = store
        self.mirror = mirror
        self.state = state if state is not None else SyncState()
        self.interval_s = interval_s
        self.clock = clock
        self._in_flight = False
        self._settled = asyncio.Event()
        self._settled.set()
        self._task: Optional[asyncio.Task] = None

    @property
    def enabled(self) -> bool:
        return self.mirror is not None

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    async def sync_once(self, day_key: Optional[str] = None) -> SyncResult:
        """Run one tick. Never raises."""
        if self.mirror is None:
            return "disabled"
        if self._in_flight:
            return "busy"

        key = day_key or self.clock()
        if not self.store.exists(key):
            return "missing"

        self._in_flight = True
        self._settled.clear()
        try:
            path = self.store.path_for(key)
            digest = await digest_async(path)
            if digest == self.state.get(key):
                return "unchanged"

            name = file_name(key)
            existing_id = await self.mirror.find_by_name(name)
            file_id = await self.mirror.create_or_update(name, path, existing_id)
            self.state.mark_uploaded(key, digest)

            logger.info(
                f"Synced {name} to {self.mirror.name}",
                extra={"day_key": key, "file_id": file_id, "digest": digest},
            )
            return "uploaded"
        except Exception as e:
            logger.error(
                f"Sync of {key} failed: {e}",
                exc_info=True,
                extra={"day_key": key},
            )
            return "failed"
        finally:
            self._in_flight = False
            self._settled.set()

    async def run(self) -> None:
        """Tick forever at the configured interval."""
        while True:
            await asyncio.sleep(self.interval_s)
            await self.sync_once()

    def start(self) -> None:
        if not self.enabled:
            logger.info("Remote mirror disabled; sync loop not started")
            return
        if self._task is not None and not self._task.done():
            return
        self._task = asyncio.get_running_loop().create_task(self.run(), name="eventlog-sync")
        logger.info(f"Sync loop started (every {self.interval_s}s)")

    async def stop(self) -> None:
        """Stop ticking. An in-flight sync is allowed to finish first."""
        if self._task is None:
            return
        await self._settled.wait()
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
