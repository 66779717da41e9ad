"""
Single-file embedded store access.

Legacy shards are single-file key-value stores holding top-level buckets.
They are read here through LMDB (``subdir=False``), named sub-databases
playing the role of buckets. Only the operations needed to tell the legacy
formats apart are exposed: open with a bounded timeout, read-only
transaction, bucket lookup, key lookup, close.

A live server holds an exclusive advisory lock on the shard file while it
writes to it. Opening takes a shared ``flock`` first, polling until the
timeout expires, so a locked shard fails fast instead of blocking forever.
POSIX only.
"""

from __future__ import annotations

import fcntl
import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator, Optional, Union

import lmdb

from .exceptions import StoreError, StoreTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_OPEN_TIMEOUT = 1.0
DEFAULT_POLL_INTERVAL = 0.05
MAX_BUCKETS = 16

PathLike = Union[str, "os.PathLike[str]"]


@contextmanager
def shared_lock(
    path: PathLike,
    timeout: float = DEFAULT_OPEN_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[int]:
    """Hold a shared flock on ``path`` for the duration of the block.

    Raises:
        StoreTimeoutError: if an exclusive lock is still held after ``timeout``.
    """
    fd = os.open(path, os.O_RDONLY)
    try:
        deadline = time.monotonic() + timeout
        while True:
            try:
                fcntl.flock(fd, fcntl.LOCK_SH | fcntl.LOCK_NB)
                break
            except BlockingIOError:
                if time.monotonic() >= deadline:
                    raise StoreTimeoutError(os.fspath(path), timeout)
                time.sleep(poll_interval)
        try:
            yield fd
        finally:
            fcntl.flock(fd, fcntl.LOCK_UN)
    finally:
        os.close(fd)


class Bucket:
    """Named top-level namespace seen through a read-only transaction."""

    def __init__(self, name: str, txn: lmdb.Transaction, db):
        self.name = name
        self._txn = txn
        self._db = db

    def get(self, key: Union[str, bytes]) -> Optional[bytes]:
        if isinstance(key, str):
            key = key.encode("utf-8")
        return self._txn.get(key, db=self._db)


class ReadTx:
    """Read-only transaction against an open store."""

    def __init__(self, env: lmdb.Environment, txn: lmdb.Transaction):
        self._env = env
        self._txn = txn

    def bucket(self, name: str) -> Optional[Bucket]:
        """Return the named bucket, or None when the store has no such bucket."""
        try:
            db = self._env.open_db(name.encode("utf-8"), txn=self._txn, create=False)
        except lmdb.NotFoundError:
            return None
        return Bucket(name, self._txn, db)


class EmbeddedStore:
    """Handle on an opened store file; use through ``open_store``."""

    def __init__(self, path: str, env: lmdb.Environment):
        self.path = path
        self._env: Optional[lmdb.Environment] = env

    @property
    def closed(self) -> bool:
        return self._env is None

    @contextmanager
    def view(self) -> Iterator[ReadTx]:
        if self._env is None:
            raise StoreError(f"store {self.path} is closed")
        with self._env.begin(write=False) as txn:
            yield ReadTx(self._env, txn)

    def close(self) -> None:
        if self._env is not None:
            self._env.close()
            self._env = None


@contextmanager
def open_store(
    path: PathLike,
    timeout: float = DEFAULT_OPEN_TIMEOUT,
    poll_interval: float = DEFAULT_POLL_INTERVAL,
) -> Iterator[EmbeddedStore]:
    """Open a store file read-only, waiting at most ``timeout`` seconds for its lock.

    The lock and the environment are both released when the block exits.
    ``lmdb.Error`` raised for corrupt or foreign files propagates unchanged.
    """
    path = os.fspath(path)
    with shared_lock(path, timeout=timeout, poll_interval=poll_interval):
        env = lmdb.open(
            path,
            subdir=False,
            readonly=True,
            lock=False,
            readahead=False,
            max_dbs=MAX_BUCKETS,
        )
        store = EmbeddedStore(path, env)
        try:
            logger.debug(f"Opened store {path}")
            yield store
        finally:
            store.close()


__all__ = [
    "DEFAULT_OPEN_TIMEOUT",
    "DEFAULT_POLL_INTERVAL",
    "Bucket",
    "ReadTx",
    "EmbeddedStore",
    "open_store",
    "shared_lock",
]
