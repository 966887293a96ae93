"""
Write Queue

Serializes concurrent log appends onto the day-files.

- enqueue() is synchronous and never raises
- A single worker task drains the pending list
- At most one flush is in flight at a time
- A flush takes the whole pending list and writes one chunk per DayKey
- Failed chunks are logged and dropped (no retry)
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .entry import LogEntry
from .store import LocalLogStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingLine:
    """A serialized entry waiting to be flushed."""

    day_key: str
    line: str
    # Set on entries that report a failed write
    write_failure: bool = False


class WriteQueue:
    """
    In-memory buffer in front of the LocalLogStore.

    One instance per process, owned by EventLogService.
    """

    def __init__(self, store: LocalLogStore):
        self.store = store
        self._pending: List[PendingLine] = []
        self._flushing = False
        self._wakeup = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._worker: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    def enqueue(self, kind: str, payload: Optional[Dict[str, Any]] = None) -> None:
        """Record an event. Fire-and-forget."""
        try:
            entry = LogEntry.create(kind, payload)
            self._push(PendingLine(day_key=entry.day_key, line=entry.to_line()))
        except Exception as e:
            logger.error(
                f"Failed to enqueue {kind!r} event: {e}",
                exc_info=True,
                extra={"kind": kind},
            )

    def _push(self, item: PendingLine) -> None:
        self._pending.append(item)
        self._idle.clear()
        self._wakeup.set()
        self._ensure_worker()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def flushing(self) -> bool:
        return self._flushing

    @property
    def is_idle(self) -> bool:
        """Nothing pending and no flush in flight."""
        return not self._pending and not self._flushing

    # ------------------------------------------------------------------
    # Flush
    # ------------------------------------------------------------------

    async def flush(self) -> None:
        """
        Drain the current pending list to disk.

        No-op if a flush is already running or nothing is pending.
        Entries enqueued while this runs go to a fresh list and are
        picked up by the next flush.
        """
        if self._flushing or not self._pending:
            return

        self._flushing = True
        try:
            batch, self._pending = self._pending, []

            groups: Dict[str, List[PendingLine]] = {}
            for item in batch:
                groups.setdefault(item.day_key, []).append(item)

            for key, items in groups.items():
                try:
                    await self.store.append(key, [item.line for item in items])
                except Exception as e:
                    self._report_write_failure(key, items, e)
        finally:
            self._flushing = False
            if self._pending:
                self._wakeup.set()
                self._ensure_worker()
            else:
                self._idle.set()

    def _report_write_failure(
        self,
        key: str,
        items: List[PendingLine],
        error: Exception,
    ) -> None:
        logger.error(
            f"diskLog error: dropped {len(items)} entries for {key}: {error}",
            exc_info=error,
            extra={"day_key": key, "dropped": len(items)},
        )

        # A chunk of failure reports failing again is not reported again
        if all(item.write_failure for item in items):
            return

        try:
            entry = LogEntry.create(
                "error",
                {
                    "where": "diskLog",
                    "day_key": key,
                    "dropped": len(items),
                    "message": str(error),
                },
            )
            self._push(
                PendingLine(day_key=entry.day_key, line=entry.to_line(), write_failure=True)
            )
        except Exception:
            logger.debug("Could not record write failure", exc_info=True)

    # ------------------------------------------------------------------
    # Worker lifecycle
    # ------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        if self._worker is not None and not self._worker.done():
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet; entries wait for start() or flush()
            return
        self._worker = loop.create_task(self._run(), name="eventlog-flush")

    async def _run(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()
            try:
                await self.flush()
            except Exception as e:
                logger.error(f"Flush worker error: {e}", exc_info=True)

    def start(self) -> None:
        """Start the flush worker on the running loop."""
        self._ensure_worker()
        if self._pending:
            self._wakeup.set()

    async def drain(self) -> None:
        """Wait until everything enqueued so far is on disk (or dropped)."""
        self.start()
        while not self.is_idle:
            self._idle.clear()
            await self._idle.wait()

    async def stop(self) -> None:
        """Stop the flush worker. Call drain() first to keep pending entries."""
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
