"""
Sync Loop and Startup Seeder tests.

Validates:
1. Disabled mirror -> every operation is a no-op
2. Unchanged content -> zero remote calls
3. Changed content -> in-place update, never a second remote object
4. Remote failures leave SyncState untouched so the next tick retries
5. Seeding never overwrites local data and never causes a re-upload
"""

import asyncio

import pytest

from conftest import settle
from eventlog.mirror import StubRemoteMirror
from eventlog.seeder import seed_from_remote
from eventlog.store import file_name
from eventlog.sync import SyncLoop, SyncState

DAY = "20260314"


class GatedMirror(StubRemoteMirror):
    """Stub mirror whose lookups block until `gate` is set."""

    def __init__(self):
        super().__init__()
        self.gate = asyncio.Event()

    async def find_by_name(self, name):
        await self.gate.wait()
        return await super().find_by_name(name)


def make_loop(store, mirror, state=None):
    return SyncLoop(store, mirror, state=state, interval_s=3600, clock=lambda: DAY)


class TestSyncOnce:
    """One tick."""

    @pytest.mark.asyncio
    async def test_disabled_mirror_is_noop(self, store):
        store.append_sync(DAY, ['{"kind":"status"}\n'])
        loop = make_loop(store, None)

        assert not loop.enabled
        assert await loop.sync_once() == "disabled"

    @pytest.mark.asyncio
    async def test_missing_local_file_skips(self, store, mirror):
        loop = make_loop(store, mirror)

        assert await loop.sync_once() == "missing"
        assert mirror.calls == []

    @pytest.mark.asyncio
    async def test_first_sync_creates_remote_object(self, store, mirror):
        store.append_sync(DAY, ['{"kind":"status"}\n'])
        state = SyncState()
        loop = make_loop(store, mirror, state)

        assert await loop.sync_once() == "uploaded"
        assert mirror.calls == [
            ("find_by_name", file_name(DAY)),
            ("create_or_update", file_name(DAY)),
        ]
        assert mirror.content_of(file_name(DAY)) == store.path_for(DAY).read_bytes()
        assert DAY in state

    @pytest.mark.asyncio
    async def test_unchanged_content_makes_no_remote_calls(self, store, mirror):
        store.append_sync(DAY, ['{"kind":"status"}\n'])
        loop = make_loop(store, mirror)
        await loop.sync_once()
        mirror.calls.clear()

        assert await loop.sync_once() == "unchanged"
        assert mirror.calls == []
        assert len(mirror.objects) == 1

    @pytest.mark.asyncio
    async def test_changed_content_updates_in_place(self, store, mirror):
        store.append_sync(DAY, ['{"n":1}\n'])
        loop = make_loop(store, mirror)
        await loop.sync_once()

        store.append_sync(DAY, ['{"n":2}\n'])
        assert await loop.sync_once() == "uploaded"

        assert len(mirror.objects) == 1
        assert mirror.content_of(file_name(DAY)) == b'{"n":1}\n{"n":2}\n'

    @pytest.mark.asyncio
    async def test_existing_remote_object_is_reused(self, store, mirror):
        file_id = mirror.put(file_name(DAY), b"old\n")
        store.append_sync(DAY, ["new\n"])
        loop = make_loop(store, mirror)

        await loop.sync_once()

        assert list(mirror.objects) == [file_id]
        assert mirror.objects[file_id][1] == b"new\n"

    @pytest.mark.asyncio
    async def test_remote_failure_leaves_state_stale(self, store):
        mirror = StubRemoteMirror(reachable=False)
        store.append_sync(DAY, ['{"n":1}\n'])
        state = SyncState()
        loop = make_loop(store, mirror, state)

        assert await loop.sync_once() == "failed"
        assert DAY not in state

        # Next tick retries from scratch
        mirror.reachable = True
        assert await loop.sync_once() == "uploaded"
        assert DAY in state

    @pytest.mark.asyncio
    async def test_sync_in_flight_skips(self, store):
        mirror = GatedMirror()
        store.append_sync(DAY, ['{"n":1}\n'])
        loop = make_loop(store, mirror)

        first = asyncio.create_task(loop.sync_once())
        await settle(20)
        assert loop.in_flight

        assert await loop.sync_once() == "busy"

        mirror.gate.set()
        assert await first == "uploaded"
        assert not loop.in_flight

    @pytest.mark.asyncio
    async def test_only_current_day_synced(self, store, mirror):
        store.append_sync("20260313", ['{"n":0}\n'])
        store.append_sync(DAY, ['{"n":1}\n'])
        loop = make_loop(store, mirror)

        await loop.sync_once()

        assert mirror.content_of(file_name("20260313")) is None
        assert mirror.content_of(file_name(DAY)) is not None


class TestSyncLoopTask:
    """Background ticking."""

    def test_non_positive_interval_rejected(self, store, mirror):
        with pytest.raises(ValueError):
            SyncLoop(store, mirror, interval_s=0)

    @pytest.mark.asyncio
    async def test_loop_ticks_on_interval(self, store, mirror):
        store.append_sync(DAY, ['{"n":1}\n'])
        loop = SyncLoop(store, mirror, interval_s=0.01, clock=lambda: DAY)

        loop.start()
        for _ in range(100):
            if mirror.content_of(file_name(DAY)) is not None:
                break
            await asyncio.sleep(0.01)
        await loop.stop()

        assert mirror.content_of(file_name(DAY)) == b'{"n":1}\n'

    @pytest.mark.asyncio
    async def test_start_without_mirror_does_nothing(self, store):
        loop = make_loop(store, None)
        loop.start()
        await loop.stop()

    @pytest.mark.asyncio
    async def test_stop_waits_for_in_flight_sync(self, store):
        mirror = GatedMirror()
        store.append_sync(DAY, ['{"n":1}\n'])
        loop = make_loop(store, mirror)
        loop.start()

        tick = asyncio.create_task(loop.sync_once())
        await settle(20)

        stopping = asyncio.create_task(loop.stop())
        await settle()
        assert not stopping.done()

        mirror.gate.set()
        await stopping
        assert await tick == "uploaded"


class TestSeeder:
    """Startup seeding from the remote copy."""

    @pytest.mark.asyncio
    async def test_disabled_mirror_is_noop(self, store):
        assert await seed_from_remote(store, None, day_key=DAY) is False
        assert not store.exists(DAY)

    @pytest.mark.asyncio
    async def test_downloads_when_local_missing(self, store, mirror):
        mirror.put(file_name(DAY), b'{"kind":"status"}\n')

        assert await seed_from_remote(store, mirror, day_key=DAY) is True
        assert store.path_for(DAY).read_bytes() == b'{"kind":"status"}\n'

    @pytest.mark.asyncio
    async def test_never_overwrites_local(self, store, mirror):
        mirror.put(file_name(DAY), b"remote\n")
        store.append_sync(DAY, ["local\n"])

        assert await seed_from_remote(store, mirror, day_key=DAY) is False
        assert store.path_for(DAY).read_text() == "local\n"
        assert mirror.calls == []

    @pytest.mark.asyncio
    async def test_no_remote_copy(self, store, mirror):
        assert await seed_from_remote(store, mirror, day_key=DAY) is False
        assert not store.exists(DAY)

    @pytest.mark.asyncio
    async def test_remote_failure_is_non_fatal(self, store):
        mirror = StubRemoteMirror(reachable=False)
        assert await seed_from_remote(store, mirror, day_key=DAY) is False

    @pytest.mark.asyncio
    async def test_seeded_file_is_not_reuploaded(self, store, mirror):
        """Round trip: seed then sync without local changes -> no upload."""
        mirror.put(file_name(DAY), b'{"n":1}\n')
        state = SyncState()

        await seed_from_remote(store, mirror, state, day_key=DAY)
        mirror.calls.clear()

        loop = make_loop(store, mirror, state)
        assert await loop.sync_once() == "unchanged"
        assert mirror.calls == []

    @pytest.mark.asyncio
    async def test_seeded_file_then_appended_is_uploaded(self, store, mirror):
        mirror.put(file_name(DAY), b'{"n":1}\n')
        state = SyncState()
        await seed_from_remote(store, mirror, state, day_key=DAY)

        store.append_sync(DAY, ['{"n":2}\n'])
        loop = make_loop(store, mirror, state)

        assert await loop.sync_once() == "uploaded"
        assert len(mirror.objects) == 1
        assert mirror.content_of(file_name(DAY)) == b'{"n":1}\n{"n":2}\n'
