"""
tsmscan Inventory Models
========================

Shard records and the ordered collection used to report them.

Usage:
    >>> from tsmscan.inventory.models import EngineFormat, ShardInfo, ShardInventory
    >>> si = ShardInfo("db0", "autogen", "1", EngineFormat.BZ1, 4096)
    >>> inventory = ShardInventory([si]).filter(EngineFormat.TSM1)
    >>> inventory.databases()
    ['db0']
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Tuple

import pandas as pd

from .exceptions import InvariantViolation


class EngineFormat(Enum):
    """Storage-engine formats, oldest first."""

    B1 = "b1"
    BZ1 = "bz1"
    TSM1 = "tsm1"

    @classmethod
    def from_label(cls, label: str) -> "EngineFormat":
        """Parse a lowercase tag such as ``"bz1"`` (case-insensitive)."""
        try:
            return cls(label.strip().lower())
        except (AttributeError, ValueError):
            valid = ", ".join(f.value for f in cls)
            raise ValueError(
                f"unknown engine format {label!r} (expected one of: {valid})"
            ) from None

    def __str__(self) -> str:
        return format_label(self)


def format_label(fmt: EngineFormat) -> str:
    """Return the canonical lowercase tag for a format.

    Raises:
        InvariantViolation: if ``fmt`` is not an EngineFormat member.
    """
    if not isinstance(fmt, EngineFormat):
        raise InvariantViolation(f"unrecognized shard engine format: {fmt!r}")
    return fmt.value


@dataclass(frozen=True)
class ShardInfo:
    """Description of one shard on disk.

    Attributes:
        database: Owning database name.
        retention_policy: Owning retention policy within the database.
        path: Shard name inside its retention-policy directory.
        format: Engine format that produced the shard.
        size: Size on disk in bytes.
    """

    database: str
    retention_policy: str
    path: str
    format: EngineFormat
    size: int

    def __post_init__(self) -> None:
        if not isinstance(self.format, EngineFormat):
            raise InvariantViolation(
                f"unrecognized shard engine format: {self.format!r}"
            )
        for name in ("database", "retention_policy", "path"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ValueError(f"ShardInfo.{name} must be a non-empty string")
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise ValueError(f"ShardInfo.size must be a non-negative int, got {self.size!r}")

    @property
    def format_label(self) -> str:
        return format_label(self.format)

    @property
    def sort_key(self) -> Tuple[str, str, str]:
        return (self.database, self.retention_policy, self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "database": self.database,
            "retention_policy": self.retention_policy,
            "path": self.path,
            "format": self.format_label,
            "size": self.size,
        }

    def __str__(self) -> str:
        return (
            f"{self.database}/{self.retention_policy}/{self.path} "
            f"({self.format_label}, {self.size} bytes)"
        )


def sort_shards(shards: Iterable[ShardInfo]) -> List[ShardInfo]:
    """Return shards ordered by database, retention policy, then path."""
    return sorted(shards, key=lambda si: si.sort_key)


class ShardInventory(Sequence):
    """Read-only ordered collection of ShardInfo.

    Every query returns a new inventory; the receiver is never modified.
    """

    FRAME_COLUMNS = ["database", "retention_policy", "path", "format", "size"]

    def __init__(self, shards: Iterable[ShardInfo] = ()):
        self._shards: Tuple[ShardInfo, ...] = tuple(shards)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return ShardInventory(self._shards[index])
        return self._shards[index]

    def __len__(self) -> int:
        return len(self._shards)

    def __iter__(self) -> Iterator[ShardInfo]:
        return iter(self._shards)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ShardInventory):
            return self._shards == other._shards
        return NotImplemented

    def __repr__(self) -> str:
        return f"ShardInventory({len(self._shards)} shards)"

    def sorted(self) -> "ShardInventory":
        return ShardInventory(sort_shards(self._shards))

    def filter(self, excluded: EngineFormat) -> "ShardInventory":
        """Copy of the inventory with shards of the given format removed."""
        format_label(excluded)
        return ShardInventory(si for si in self._shards if si.format != excluded)

    def only(self, fmt: EngineFormat) -> "ShardInventory":
        format_label(fmt)
        return ShardInventory(si for si in self._shards if si.format == fmt)

    def for_databases(self, names: Iterable[str]) -> "ShardInventory":
        wanted = set(names)
        return ShardInventory(si for si in self._shards if si.database in wanted)

    def databases(self) -> List[str]:
        """Sorted, duplicate-free database names."""
        return sorted({si.database for si in self._shards})

    def by_database(self) -> Dict[str, "ShardInventory"]:
        groups: Dict[str, List[ShardInfo]] = {}
        for si in self._shards:
            groups.setdefault(si.database, []).append(si)
        return {name: ShardInventory(groups[name]) for name in sorted(groups)}

    def total_size(self) -> int:
        return sum(si.size for si in self._shards)

    def to_records(self) -> List[Dict[str, Any]]:
        return [si.to_dict() for si in self._shards]

    def to_frame(self) -> pd.DataFrame:
        """One row per shard, format as its label."""
        return pd.DataFrame(self.to_records(), columns=self.FRAME_COLUMNS)

    def summary(self) -> pd.DataFrame:
        """Shard count and bytes per (database, format)."""
        frame = self.to_frame()
        if frame.empty:
            return pd.DataFrame(columns=["database", "format", "shards", "size"])
        return (
            frame.groupby(["database", "format"], sort=True)
            .agg(shards=("path", "count"), size=("size", "sum"))
            .reset_index()
        )


__all__ = [
    "EngineFormat",
    "format_label",
    "ShardInfo",
    "ShardInventory",
    "sort_shards",
]
