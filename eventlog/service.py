"""
Event log service.

Owns the write queue, the sync loop and their shared state. One
instance is created at process start (FastAPI lifespan) and handed
to everything that records events.

Lifecycle:
  startup:  connectivity check -> seed -> flush worker -> sync loop
  shutdown: drain queue -> stop sync loop -> final sync -> drain -> stop worker
"""

import logging
from typing import Any, Dict, Optional

from .mirror.base import RemoteMirror
from .seeder import seed_from_remote
from .store import LocalLogStore
from .sync import SyncLoop, SyncResult, SyncState
from .write_queue import WriteQueue

logger = logging.getLogger(__name__)


class EventLogService:
    """Durable event log with opportunistic remote backup."""

    def __init__(
        self,
        store: LocalLogStore,
        mirror: Optional[RemoteMirror] = None,
        sync_interval_s: float = 60.0,
    ):
        self.store = store
        self.mirror = mirror
        self.sync_state = SyncState()
        self.queue = WriteQueue(store)
        self.sync_loop = SyncLoop(
            store,
            mirror,
            state=self.sync_state,
            interval_s=sync_interval_s,
        )

    @property
    def mirror_enabled(self) -> bool:
        return self.mirror is not None

    def enqueue(self, kind: str, payload: Optional[Dict[str, Any]] = None) -> None:
        """Record an event. Never blocks, never raises."""
        self.queue.enqueue(kind, payload)

    async def sync_now(self) -> SyncResult:
        return await self.sync_loop.sync_once()

    async def startup(self) -> None:
        if self.mirror is not None:
            await self.mirror.check_connectivity()
            await seed_from_remote(self.store, self.mirror, self.sync_state)
        else:
            logger.info("Remote mirror disabled; logging locally only")

        self.queue.start()
        self.sync_loop.start()
        logger.info(f"Event log ready: {self.store.log_dir}")

    async def shutdown(self) -> None:
        """
        Wait for every enqueued entry to reach disk, then sync once.

        No timeout: buffered entries are never abandoned.
        """
        logger.info(f"Draining event log ({self.queue.pending_count} pending)")
        await self.queue.drain()
        await self.sync_loop.stop()

        try:
            result = await self.sync_loop.sync_once()
            logger.info(f"Final sync: {result}")
        except Exception:
            logger.warning("Final sync failed", exc_info=True)

        # Entries recorded while the final sync ran
        await self.queue.drain()
        await self.queue.stop()
        if self.mirror is not None:
            await self.mirror.aclose()

    def __repr__(self) -> str:
        mirror = self.mirror.name if self.mirror is not None else "disabled"
        return f"EventLogService(store={self.store!r}, mirror={mirror})"
