"""
Shard discovery.

Expected layout::

    <data-root>/<database>/<retention-policy>/<shard>

Every child of a database directory is taken to be a retention policy and
every child of a retention policy is taken to be a shard. Any OSError during
the walk aborts the scan and reaches the caller unchanged; no partial result
is returned.
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Iterator, List, Optional

from .detector import ShardFormatDetector
from .models import ShardInfo, ShardInventory, sort_shards
from .store import PathLike

logger = logging.getLogger(__name__)


class Database:
    """An entire database on disk."""

    def __init__(self, path: PathLike, detector: Optional[ShardFormatDetector] = None):
        self.path = os.fspath(path)
        self.detector = detector or ShardFormatDetector()

    @property
    def name(self) -> str:
        return os.path.basename(os.path.normpath(self.path))

    def __repr__(self) -> str:
        return f"Database({self.path!r})"

    def iter_shards(self) -> Iterator[ShardInfo]:
        """Yield shards in filesystem order, one store open at a time."""
        name = self.name
        for rp in os.listdir(self.path):
            rp_path = os.path.join(self.path, rp)
            for shard in os.listdir(rp_path):
                fmt, size = self.detector.detect(os.path.join(rp_path, shard))
                yield ShardInfo(
                    database=name,
                    retention_policy=rp,
                    path=shard,
                    format=fmt,
                    size=size,
                )

    def shards(self) -> List[ShardInfo]:
        """Return every shard of the database, sorted."""
        shards = sort_shards(self.iter_shards())
        logger.info(f"Database {self.name}: {len(shards)} shards")
        return shards


def list_databases(data_path: PathLike) -> List[str]:
    """Names of the children of the data root, sorted."""
    return sorted(os.listdir(data_path))


def scan_data_root(
    data_path: PathLike,
    databases: Optional[Iterable[str]] = None,
    detector: Optional[ShardFormatDetector] = None,
) -> ShardInventory:
    """Scan every database under ``data_path`` into one sorted inventory.

    Args:
        data_path: Directory whose children are database directories.
        databases: Restrict the scan to these database names.
        detector: Detector shared by all databases.
    """
    detector = detector or ShardFormatDetector()
    names = list_databases(data_path)
    if databases is not None:
        wanted = set(databases)
        missing = sorted(wanted.difference(names))
        if missing:
            logger.warning(f"Databases not found under {data_path}: {', '.join(missing)}")
        names = [n for n in names if n in wanted]

    shards: List[ShardInfo] = []
    for name in names:
        db = Database(os.path.join(os.fspath(data_path), name), detector=detector)
        shards.extend(db.shards())
    return ShardInventory(shards).sorted()


__all__ = ["Database", "list_databases", "scan_data_root"]
