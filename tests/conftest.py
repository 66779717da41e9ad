"""Configuration pytest pour les tests tsmscan."""

import itertools
import shutil
import sys
from pathlib import Path
from typing import Dict, Optional

import lmdb
import pytest

# Ajouter src au path si nécessaire
REPO_ROOT = Path(__file__).parent.parent
if str(REPO_ROOT / "src") not in sys.path:
    sys.path.insert(0, str(REPO_ROOT / "src"))


# ═══════════════════════════════════════════════════════════════
# FIXTURES - Embedded stores
# ═══════════════════════════════════════════════════════════════


@pytest.fixture
def store_factory(tmp_path):
    """Build single-file LMDB stores shaped like legacy shards.

    Stores are written in a staging directory then moved to their target so
    no side file ever lands next to a shard.

    Returns:
        Callable(target, meta=None) -> Path. ``meta=None`` writes a store
        without a meta bucket; a dict creates the bucket with those keys.
    """
    staging = tmp_path / "_staging"
    staging.mkdir()
    counter = itertools.count()

    def _make(target: Path, meta: Optional[Dict[str, str]] = None) -> Path:
        staging_path = staging / f"store-{next(counter)}"
        env = lmdb.open(
            str(staging_path), subdir=False, lock=False, max_dbs=4, map_size=1 << 20
        )
        try:
            with env.begin(write=True) as txn:
                txn.put(b"series", b"cpu,host=server01")
            if meta is not None:
                bucket = env.open_db(b"meta")
                with env.begin(write=True) as txn:
                    for key, value in meta.items():
                        txn.put(key.encode(), value.encode(), db=bucket)
        finally:
            env.close()

        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(staging_path), str(target))
        return target

    return _make


@pytest.fixture
def data_root(tmp_path, store_factory):
    """Data root with db1 and db2, each holding rp/s_dir (tsm1) and rp/s_flat (b1)."""
    root = tmp_path / "data"
    for db in ("db1", "db2"):
        shard_dir = root / db / "rp" / "s_dir"
        shard_dir.mkdir(parents=True)
        (shard_dir / "000000001-000000001.tsm").write_bytes(b"\x16\xd1\x16\xd1" * 64)
        store_factory(root / db / "rp" / "s_flat")
    return root


@pytest.fixture
def mixed_root(tmp_path, store_factory):
    """Data root mixing the three formats across databases and retention policies."""
    root = tmp_path / "mixed"
    store_factory(root / "telegraf" / "autogen" / "1")
    store_factory(root / "telegraf" / "autogen" / "2", meta={"format": "v1"})
    store_factory(root / "telegraf" / "monthly" / "7", meta={"format": "v2"})
    (root / "telegraf" / "monthly" / "8").mkdir(parents=True)
    (root / "_internal" / "monitor" / "3").mkdir(parents=True)
    store_factory(root / "app" / "default" / "4", meta={"format": "v2"})
    return root
