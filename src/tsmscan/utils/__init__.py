"""
tsmscan Utils Package
=====================

Available modules:
- log: Centralized logging utilities
"""

from tsmscan.utils.log import configure_logging, get_logger, setup_logging

__all__ = ["configure_logging", "get_logger", "setup_logging"]
