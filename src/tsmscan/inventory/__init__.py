"""
tsmscan Inventory Package
=========================

Shard discovery and storage-engine format classification.

Modules:
- models: EngineFormat, ShardInfo, ShardInventory
- detector: per-shard format detection
- scanner: database and data-root traversal
- store: read-only access to single-file embedded stores
- exceptions: error hierarchy
"""

from .detector import ShardFormatDetector, detect_format
from .exceptions import (
    InvariantViolation,
    InventoryError,
    StoreError,
    StoreTimeoutError,
)
from .models import EngineFormat, ShardInfo, ShardInventory, format_label, sort_shards
from .scanner import Database, list_databases, scan_data_root

__all__ = [
    # Models
    "EngineFormat",
    "ShardInfo",
    "ShardInventory",
    "format_label",
    "sort_shards",
    # Detection and scanning
    "ShardFormatDetector",
    "detect_format",
    "Database",
    "list_databases",
    "scan_data_root",
    # Errors
    "InventoryError",
    "StoreError",
    "StoreTimeoutError",
    "InvariantViolation",
]
