"""
Content hashing for change detection.

Not an integrity check: the digest is only compared against the
last uploaded digest to decide whether a day-file needs pushing.
"""

import asyncio
import hashlib
from pathlib import Path
from typing import Union

CHUNK_SIZE = 64 * 1024


def digest(path: Union[str, Path]) -> str:
    """SHA-256 hex digest of the file as it is right now."""
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
            h.update(chunk)
    return h.hexdigest()


async def digest_async(path: Union[str, Path]) -> str:
    """Run digest() in a worker thread."""
    return await asyncio.to_thread(digest, path)
