"""
Stub remote mirror for testing and offline development.

Keeps objects in memory and records every call.
"""

import asyncio
import itertools
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from .base import RemoteMirror, RemoteMirrorError


class StubRemoteMirror(RemoteMirror):
    """
    In-memory folder.

    `calls` lists (operation, argument) tuples in call order so tests
    can assert exactly which remote operations a sync performed.
    """

    name = "stub"

    def __init__(self, folder_id: str = "stub-folder", reachable: bool = True):
        self.folder_id = folder_id
        self.reachable = reachable
        self.objects: Dict[str, Tuple[str, bytes]] = {}
        self.calls: List[Tuple[str, str]] = []
        self._ids = itertools.count(1)

    def _check_reachable(self) -> None:
        if not self.reachable:
            raise RemoteMirrorError("stub mirror unreachable")

    def put(self, name: str, content: bytes) -> str:
        """Seed an object directly (test helper, not recorded)."""
        file_id = f"stub-{next(self._ids)}"
        self.objects[file_id] = (name, content)
        return file_id

    def content_of(self, name: str) -> Optional[bytes]:
        for obj_name, content in self.objects.values():
            if obj_name == name:
                return content
        return None

    async def find_by_name(self, name: str) -> Optional[str]:
        self.calls.append(("find_by_name", name))
        self._check_reachable()
        for file_id, (obj_name, _) in self.objects.items():
            if obj_name == name:
                return file_id
        return None

    async def download(self, file_id: str, dest_path: Union[str, Path]) -> None:
        self.calls.append(("download", file_id))
        self._check_reachable()
        if file_id not in self.objects:
            raise RemoteMirrorError(f"No such object: {file_id}")
        dest = Path(dest_path)
        dest.parent.mkdir(parents=True, exist_ok=True)
        await asyncio.to_thread(dest.write_bytes, self.objects[file_id][1])

    async def create_or_update(
        self,
        name: str,
        local_path: Union[str, Path],
        existing_id: Optional[str] = None,
    ) -> str:
        self.calls.append(("create_or_update", name))
        self._check_reachable()
        content = await asyncio.to_thread(Path(local_path).read_bytes)
        if existing_id is not None:
            if existing_id not in self.objects:
                raise RemoteMirrorError(f"No such object: {existing_id}")
            self.objects[existing_id] = (name, content)
            return existing_id
        return self.put(name, content)

    async def check_connectivity(self) -> bool:
        self.calls.append(("check_connectivity", self.folder_id))
        return self.reachable
