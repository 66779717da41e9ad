"""
tsmscan Main Package
====================

Inventory of on-disk shards of a time-partitioned database, classified by
the storage-engine format that wrote them (b1, bz1, tsm1).
"""

__version__ = "1.0.0"
__description__ = "Shard inventory and storage-engine format detection"

from .inventory import (
    Database,
    EngineFormat,
    InvariantViolation,
    InventoryError,
    ShardFormatDetector,
    ShardInfo,
    ShardInventory,
    StoreTimeoutError,
    detect_format,
    format_label,
    scan_data_root,
)

__all__ = [
    "Database",
    "EngineFormat",
    "InvariantViolation",
    "InventoryError",
    "ShardFormatDetector",
    "ShardInfo",
    "ShardInventory",
    "StoreTimeoutError",
    "detect_format",
    "format_label",
    "scan_data_root",
]
