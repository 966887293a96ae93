"""Pytest configuration and fixtures."""

import asyncio
import json
import sys
from pathlib import Path
from typing import List, Tuple

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from eventlog import LocalLogStore, StubRemoteMirror  # noqa: E402


class GatedStore(LocalLogStore):
    """LocalLogStore whose appends block until `gate` is set."""

    def __init__(self, log_dir):
        super().__init__(log_dir)
        self.gate = asyncio.Event()
        self.calls: List[Tuple[str, List[str]]] = []

    async def append(self, day_key, lines):
        self.calls.append((day_key, list(lines)))
        await self.gate.wait()
        await super().append(day_key, lines)


class FailingStore(LocalLogStore):
    """LocalLogStore that fails appends for the given day keys (all if None)."""

    def __init__(self, log_dir, failing_keys=None):
        super().__init__(log_dir)
        self.failing_keys = failing_keys
        self.calls: List[Tuple[str, List[str]]] = []

    async def append(self, day_key, lines):
        self.calls.append((day_key, list(lines)))
        if self.failing_keys is None or day_key in self.failing_keys:
            raise OSError(28, "No space left on device")
        await super().append(day_key, lines)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


def read_records(path: Path) -> list:
    """Parse a day-file into a list of dicts."""
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


@pytest.fixture
def store(tmp_path):
    return LocalLogStore(tmp_path / "data")


@pytest.fixture
def mirror():
    return StubRemoteMirror()
