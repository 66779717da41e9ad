"""
tsmscan CLI Module
==================

Command-line interface for shard inventory.

Usage:
    python -m tsmscan.cli --help
    python -m tsmscan.cli shards list <data-path>
"""

from .main import app

__all__ = ["app"]
