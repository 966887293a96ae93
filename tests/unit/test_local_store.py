"""
Local Log Store and Hasher tests.
"""

import hashlib

import pytest

from eventlog.hasher import digest, digest_async
from eventlog.store import LocalLogStore, file_name


class TestLocalLogStore:
    """Day-file layout and appends."""

    def test_file_name(self):
        assert file_name("20260314") == "waba-events-20260314.jsonl"

    def test_path_for_is_deterministic(self, tmp_path):
        store = LocalLogStore(tmp_path)
        assert store.path_for("20260314") == tmp_path / "waba-events-20260314.jsonl"
        assert store.path_for("20260314") == store.path_for("20260314")

    def test_exists(self, tmp_path):
        store = LocalLogStore(tmp_path)
        assert not store.exists("20260314")
        store.path_for("20260314").write_text("")
        assert store.exists("20260314")

    def test_append_creates_directory_and_file(self, tmp_path):
        store = LocalLogStore(tmp_path / "nested" / "data")
        store.append_sync("20260314", ['{"a":1}\n', '{"a":2}\n'])

        assert store.path_for("20260314").read_text() == '{"a":1}\n{"a":2}\n'

    def test_append_is_append_only(self, tmp_path):
        store = LocalLogStore(tmp_path)
        store.append_sync("20260314", ["one\n"])
        store.append_sync("20260314", ["two\n"])

        assert store.path_for("20260314").read_text() == "one\ntwo\n"

    def test_empty_append_creates_nothing(self, tmp_path):
        store = LocalLogStore(tmp_path)
        store.append_sync("20260314", [])
        assert not store.exists("20260314")

    @pytest.mark.asyncio
    async def test_async_append(self, tmp_path):
        store = LocalLogStore(tmp_path)
        await store.append("20260314", ["x\n"])
        assert store.path_for("20260314").read_text() == "x\n"


class TestHasher:
    """Content digests."""

    def test_digest_matches_sha256(self, tmp_path):
        path = tmp_path / "f.jsonl"
        path.write_bytes(b'{"kind":"status"}\n')
        assert digest(path) == hashlib.sha256(b'{"kind":"status"}\n').hexdigest()

    def test_digest_changes_with_content(self, tmp_path):
        path = tmp_path / "f.jsonl"
        path.write_bytes(b"a\n")
        first = digest(path)
        with open(path, "ab") as f:
            f.write(b"b\n")
        assert digest(path) != first

    def test_digest_streams_large_files(self, tmp_path):
        path = tmp_path / "big.jsonl"
        data = b"x" * (64 * 1024 * 3 + 17)
        path.write_bytes(data)
        assert digest(path) == hashlib.sha256(data).hexdigest()

    @pytest.mark.asyncio
    async def test_digest_async(self, tmp_path):
        path = tmp_path / "f.jsonl"
        path.write_bytes(b"abc")
        assert await digest_async(path) == digest(path)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            digest(tmp_path / "nope.jsonl")
