"""
Startup Seeder

Pulls today's day-file from the remote mirror when it is missing
locally. Local data always wins: an existing local file is never
overwritten.
"""

import logging
from typing import Optional

from .entry import day_key as current_day_key
from .hasher import digest_async
from .mirror.base import RemoteMirror
from .store import LocalLogStore, file_name
from .sync import SyncState

logger = logging.getLogger(__name__)


async def seed_from_remote(
    store: LocalLogStore,
    mirror: Optional[RemoteMirror],
    state: Optional[SyncState] = None,
    day_key: Optional[str] = None,
) -> bool:
    """
    Seed today's local file from the remote copy.

    Non-fatal: every failure is logged and reported as False.

    Args:
        store: Local day-files
        mirror: Remote mirror, or None when disabled
        state: If given, records the seeded file's digest so an
            unmodified seeded file is never re-uploaded
        day_key: Override for today's DayKey

    Returns:
        True if a file was downloaded
    """
    if mirror is None:
        return False

    key = day_key or current_day_key()
    if store.exists(key):
        logger.debug(f"Local day-file for {key} present; not seeding")
        return False

    name = file_name(key)
    try:
        file_id = await mirror.find_by_name(name)
        if file_id is None:
            logger.info(f"No remote copy of {name}; starting fresh")
            return False

        path = store.path_for(key)
        await mirror.download(file_id, path)
        if state is not None:
            state.mark_uploaded(key, await digest_async(path))
    except Exception as e:
        logger.error(f"Seeding {name} failed: {e}", exc_info=True)
        return False

    logger.info(
        f"Seeded {name} from {mirror.name}",
        extra={"day_key": key, "file_id": file_id},
    )
    return True
