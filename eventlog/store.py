"""
Local Log Store

Append-only day-files under one directory:
    <log_dir>/waba-events-<YYYYMMDD>.jsonl

The same file name is used on the remote mirror.
"""

import asyncio
import logging
from pathlib import Path
from typing import List, Union

logger = logging.getLogger(__name__)

FILE_PREFIX = "waba-events-"
FILE_SUFFIX = ".jsonl"


def file_name(day_key: str) -> str:
    """Day-file name for a DayKey."""
    return f"{FILE_PREFIX}{day_key}{FILE_SUFFIX}"


class LocalLogStore:
    """
    Owns all local day-file I/O.

    Only the write queue appends. The sync loop and the seeder
    read paths from here but never write through it.
    """

    def __init__(self, log_dir: Union[str, Path]):
        self.log_dir = Path(log_dir)

    def path_for(self, day_key: str) -> Path:
        return self.log_dir / file_name(day_key)

    def exists(self, day_key: str) -> bool:
        return self.path_for(day_key).is_file()

    def append_sync(self, day_key: str, lines: List[str]) -> None:
        """Append already-serialized lines as a single write."""
        if not lines:
            return
        self.log_dir.mkdir(parents=True, exist_ok=True)
        chunk = "".join(lines)
        with open(self.path_for(day_key), "a", encoding="utf-8", newline="") as f:
            f.write(chunk)

    async def append(self, day_key: str, lines: List[str]) -> None:
        """Append lines without blocking the event loop."""
        await asyncio.to_thread(self.append_sync, day_key, lines)

    def __repr__(self) -> str:
        return f"LocalLogStore(log_dir={str(self.log_dir)!r})"
