"""
Remote Mirror abstract interface.

Role: push/pull whole day-files to/from one remote folder.

Rules:
- Scoped to a single folder (no subfolders)
- Objects are found by exact name; ids are never persisted locally
- Failures raise RemoteMirrorError; callers decide whether to degrade
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Union

MIME_TYPE = "application/json"


class RemoteMirrorError(Exception):
    """Remote object-store operation failed."""
    pass


class RemoteMirror(ABC):
    """
    Abstract remote mirror boundary.
    Sync and seed code must depend ONLY on this interface.
    """

    name: str = "remote"

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[str]:
        """
        Look up an object in the folder by exact name.

        Returns:
            The first matching object id, or None
        """
        raise NotImplementedError

    @abstractmethod
    async def download(self, file_id: str, dest_path: Union[str, Path]) -> None:
        """Stream remote content to dest_path, creating or overwriting it."""
        raise NotImplementedError

    @abstractmethod
    async def create_or_update(
        self,
        name: str,
        local_path: Union[str, Path],
        existing_id: Optional[str] = None,
    ) -> str:
        """
        Upload local_path.

        Overwrites existing_id in place when given, otherwise creates a
        new object named `name` in the folder.

        Returns:
            The (possibly new) object id
        """
        raise NotImplementedError

    @abstractmethod
    async def check_connectivity(self) -> bool:
        """Cheap read of the folder. Never raises."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release network resources."""
        return None
