"""
tsmscan CLI Utilities
=====================

Shared helper functions for CLI commands:
- Logging setup
- JSON and table formatting
- Error handling
"""

import json
import logging
from typing import Any, Dict, List, Optional

import typer

from tsmscan.utils.log import configure_logging

logger = logging.getLogger("tsmscan.cli")


def setup_logger(
    level: int = logging.INFO, log_file: Optional[str] = None, fmt: Optional[str] = None
) -> None:
    """
    Configure logging for CLI with consistent format.

    Logs go to stderr so that stdout only carries the report.

    Args:
        level: Logging level (logging.DEBUG, INFO, WARNING, etc.)
        log_file: Optional rotating log file.
        fmt: Optional message format.
    """
    kwargs: Dict[str, Any] = {"level": logging.getLevelName(level), "log_file": log_file}
    if fmt:
        kwargs["fmt"] = fmt
    configure_logging(**kwargs)
    logger.debug(f"Logger initialized at level {logging.getLevelName(level)}")


def print_json(data: Any, indent: int = 2) -> None:
    """
    Print data as formatted JSON to stdout.

    Args:
        data: JSON-serializable object.
        indent: Number of spaces for indentation (default: 2).
    """
    typer.echo(json.dumps(data, indent=indent, default=str))


def format_size(num_bytes: int) -> str:
    """
    Format a byte count to a human-readable string.

    Returns:
        Formatted string (e.g., "512 B", "4.0 KiB", "1.2 GiB").
    """
    if num_bytes < 1024:
        return f"{num_bytes} B"
    size = float(num_bytes)
    for unit in ("KiB", "MiB", "GiB", "TiB"):
        size /= 1024
        if size < 1024 or unit == "TiB":
            break
    return f"{size:.1f} {unit}"


def print_table(headers: List[str], rows: List[List[Any]]) -> None:
    """Print left-aligned columns sized to their widest cell."""
    cells = [[str(c) for c in row] for row in rows]
    widths = [
        max([len(h)] + [len(row[i]) for row in cells]) for i, h in enumerate(headers)
    ]
    typer.echo("  ".join(h.ljust(w) for h, w in zip(headers, widths)).rstrip())
    typer.echo("  ".join("-" * w for w in widths))
    for row in cells:
        typer.echo("  ".join(c.ljust(w) for c, w in zip(row, widths)).rstrip())


def handle_scan_error(error: Exception, context: str, json_mode: bool = False) -> None:
    """
    Report a scan failure and exit with status 1.

    Args:
        error: Filesystem, store or configuration error.
        context: What was being done (e.g., "access shards under /var/lib/db").
        json_mode: If True, output JSON error; else text.
    """
    if json_mode:
        print_json(
            {
                "status": "error",
                "type": type(error).__name__,
                "message": f"failed to {context}: {error}",
            }
        )
    else:
        logger.debug(f"Scan error: {error!r}")
        typer.echo(f"failed to {context}: {error}", err=True)

    raise typer.Exit(1)
