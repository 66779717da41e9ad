"""Configuration-related exceptions for tsmscan."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class ConfigurationError(Exception):
    """Unreadable or invalid ``tsmscan.toml``.

    ``path`` is None when no file was involved (defaults with bad overrides,
    or no file found in any search location).
    """

    path: Optional[str]
    reason: str
    details: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.reason)

    @property
    def user_message(self) -> str:
        location = f" (file: {self.path})" if self.path else ""
        return f"Configuration error{location}: {self.reason}"

    def __str__(self) -> str:
        if self.details:
            return f"{self.user_message}\n{self.details}"
        return self.user_message


class PathValidationError(Exception):
    """The configured data root is missing or not a directory."""

    def __init__(self, path: str, reason: str = "not a directory"):
        self.path = path
        self.reason = reason
        super().__init__(f"Data root {reason}: {path}")
