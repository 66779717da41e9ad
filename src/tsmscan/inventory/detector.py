"""
Shard format detection.

A shard stored as a directory was written by the TSM1 engine. A shard stored
as a single file is an embedded store written by B1 or BZ1; BZ1 stores carry a
``meta`` bucket whose ``format`` key is anything but ``"v1"``.
"""

from __future__ import annotations

import logging
import os
import stat
from typing import Tuple

from .models import EngineFormat
from .store import (
    DEFAULT_OPEN_TIMEOUT,
    DEFAULT_POLL_INTERVAL,
    EmbeddedStore,
    PathLike,
    open_store,
)

logger = logging.getLogger(__name__)

META_BUCKET = "meta"
FORMAT_KEY = "format"
LEGACY_FORMAT_VALUE = b"v1"


class ShardFormatDetector:
    """Classify one shard path as B1, BZ1 or TSM1.

    Args:
        open_timeout: Seconds to wait for the store file lock.
        poll_interval: Seconds between lock attempts.
        meta_bucket: Name of the bucket holding engine metadata.
        format_key: Key of the format marker inside ``meta_bucket``.
        legacy_value: Marker value that still denotes B1.
    """

    def __init__(
        self,
        open_timeout: float = DEFAULT_OPEN_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        meta_bucket: str = META_BUCKET,
        format_key: str = FORMAT_KEY,
        legacy_value: bytes = LEGACY_FORMAT_VALUE,
    ):
        if open_timeout <= 0:
            raise ValueError("open_timeout must be > 0")
        if poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")
        self.open_timeout = open_timeout
        self.poll_interval = poll_interval
        self.meta_bucket = meta_bucket
        self.format_key = format_key
        if isinstance(legacy_value, str):
            legacy_value = legacy_value.encode("utf-8")
        self.legacy_value = legacy_value

    @classmethod
    def from_settings(cls, settings) -> "ShardFormatDetector":
        return cls(
            open_timeout=settings.OPEN_TIMEOUT_SEC,
            poll_interval=settings.LOCK_POLL_INTERVAL_SEC,
            meta_bucket=settings.META_BUCKET,
            format_key=settings.FORMAT_KEY,
            legacy_value=settings.LEGACY_FORMAT_VALUE,
        )

    def detect(self, path: PathLike) -> Tuple[EngineFormat, int]:
        """Return ``(format, size_in_bytes)`` for the shard at ``path``.

        The size of a TSM1 shard is the size of the directory entry as
        reported by stat, not the sum of its contents.
        """
        st = os.stat(path)
        if stat.S_ISDIR(st.st_mode):
            logger.debug(f"{path}: directory, tsm1")
            return EngineFormat.TSM1, st.st_size

        with open_store(
            path, timeout=self.open_timeout, poll_interval=self.poll_interval
        ) as store:
            fmt = self.classify_store(store)
        logger.debug(f"{path}: embedded store, {fmt.value}")
        return fmt, st.st_size

    def classify_store(self, store: EmbeddedStore) -> EngineFormat:
        with store.view() as tx:
            meta = tx.bucket(self.meta_bucket)
            # No meta bucket: the original b1 layout.
            if meta is None:
                return EngineFormat.B1
            if meta.get(self.format_key) == self.legacy_value:
                return EngineFormat.B1
            return EngineFormat.BZ1


def detect_format(
    path: PathLike, timeout: float = DEFAULT_OPEN_TIMEOUT
) -> Tuple[EngineFormat, int]:
    """Module-level shortcut for ``ShardFormatDetector(timeout).detect(path)``."""
    return ShardFormatDetector(open_timeout=timeout).detect(path)


__all__ = [
    "META_BUCKET",
    "FORMAT_KEY",
    "LEGACY_FORMAT_VALUE",
    "ShardFormatDetector",
    "detect_format",
]
