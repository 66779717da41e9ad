"""
tsmscan Inventory Exceptions - Error Hierarchy
==============================================

Exception hierarchy for shard discovery and format detection.

Filesystem failures are never wrapped: ``os`` errors (PermissionError,
FileNotFoundError, NotADirectoryError, ...) reach the caller unchanged, and so
do ``lmdb.Error`` subclasses raised while opening a corrupt store. The classes
below only cover conditions that have no natural library exception.

Usage:
    >>> from tsmscan.inventory.exceptions import StoreTimeoutError
    >>> try:
    ...     detect_format(path)
    ... except StoreTimeoutError as e:
    ...     print(f"Shard locked by a live process: {e}")
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base exception for inventory errors.

    Inherited by every recoverable-at-the-caller error of this package.

    Example:
        >>> try:
        ...     Database(path).shards()
        ... except InventoryError as e:
        ...     print(f"Inventory error: {e}")
    """

    pass


class StoreError(InventoryError):
    """Exception raised while opening a single-file embedded store.

    Raised by the store layer when:
    - the store file cannot be locked in time
    - the store handle is used after it was closed
    """

    pass


class StoreTimeoutError(StoreError):
    """The shared lock on a store file could not be taken before the timeout.

    Another process (typically a running server) holds the shard open for
    writing.

    Example:
        >>> raise StoreTimeoutError("/data/db/rp/1", 1.0)
    """

    def __init__(self, path: str, timeout: float):
        self.path = path
        self.timeout = timeout
        super().__init__(f"timeout after {timeout:g}s waiting for lock on {path}")


class InvariantViolation(AssertionError):
    """Internal defect: a value outside the closed EngineFormat set was seen.

    Deliberately not an InventoryError: it is never expected to be caught,
    retried or reported as an ordinary failure.
    """

    pass


__all__ = [
    "InventoryError",
    "StoreError",
    "StoreTimeoutError",
    "InvariantViolation",
]
