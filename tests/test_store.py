"""Tests pour tsmscan.inventory.store (accès lecture seule aux stores LMDB)."""

import fcntl
import os

import pytest

from tsmscan.inventory.exceptions import StoreError, StoreTimeoutError
from tsmscan.inventory.store import open_store, shared_lock


class TestOpenStore:
    def test_bucket_lookup(self, tmp_path, store_factory):
        path = store_factory(tmp_path / "s", meta={"format": "v2"})
        with open_store(path) as store:
            with store.view() as tx:
                meta = tx.bucket("meta")
                assert meta is not None
                assert meta.name == "meta"
                assert meta.get("format") == b"v2"
                assert meta.get(b"format") == b"v2"
                assert meta.get("missing") is None
                assert tx.bucket("other") is None

    def test_store_closed_on_exit(self, tmp_path, store_factory):
        path = store_factory(tmp_path / "s")
        with open_store(path) as store:
            assert not store.closed
        assert store.closed
        with pytest.raises(StoreError, match="closed"):
            with store.view():
                pass

    def test_store_closed_on_error(self, tmp_path, store_factory):
        path = store_factory(tmp_path / "s")
        with pytest.raises(RuntimeError):
            with open_store(path) as store:
                raise RuntimeError("boom")
        assert store.closed

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            with open_store(tmp_path / "absent"):
                pass


class TestSharedLock:
    def test_shared_locks_coexist(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"x")
        with shared_lock(path, timeout=0.1):
            with shared_lock(path, timeout=0.1):
                pass

    def test_exclusive_holder_blocks(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"x")
        fd = os.open(path, os.O_RDONLY)
        fcntl.flock(fd, fcntl.LOCK_EX)
        try:
            with pytest.raises(StoreTimeoutError, match="timeout after 0.05s"):
                with shared_lock(path, timeout=0.05, poll_interval=0.01):
                    pass
        finally:
            os.close(fd)

    def test_zero_timeout_still_tries_once(self, tmp_path):
        path = tmp_path / "f"
        path.write_bytes(b"x")
        with shared_lock(path, timeout=0):
            pass
