"""
Event Log - Module Exports

Append-only day-partitioned event log with remote mirroring.
"""

from .entry import EVENT_KINDS, EventKind, LogEntry, day_key
from .hasher import digest, digest_async
from .mirror import (
    GoogleDriveMirror,
    RemoteMirror,
    RemoteMirrorError,
    StubRemoteMirror,
)
from .seeder import seed_from_remote
from .service import EventLogService
from .store import LocalLogStore, file_name
from .sync import SyncLoop, SyncResult, SyncState
from .write_queue import WriteQueue

__all__ = [
    # Entries
    "EventKind",
    "EVENT_KINDS",
    "LogEntry",
    "day_key",
    # Local storage
    "LocalLogStore",
    "file_name",
    "WriteQueue",
    # Hashing
    "digest",
    "digest_async",
    # Remote
    "RemoteMirror",
    "RemoteMirrorError",
    "GoogleDriveMirror",
    "StubRemoteMirror",
    # Sync
    "SyncLoop",
    "SyncResult",
    "SyncState",
    "seed_from_remote",
    # Service
    "EventLogService",
]
