"""
tsmscan CLI - Main Entry Point
==============================

Main CLI application using Typer framework.

Usage:
    tsmscan --help
    tsmscan shards list /var/lib/influxdb/data
    tsmscan --json shards summary /var/lib/influxdb/data

Global Options:
    --json: Output results as JSON
    --debug: Enable debug logging
    --config: TOML configuration file
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from tsmscan import __version__
from tsmscan.cli import config_cmd, shards_cmd
from tsmscan.cli.utils import handle_scan_error, print_json, setup_logger
from tsmscan.configuration import ConfigurationError, load_settings

app = typer.Typer(
    name="tsmscan",
    help="tsmscan - Shard inventory and storage-engine format detection",
    add_completion=False,
)

app.add_typer(shards_cmd.app, name="shards")
app.add_typer(config_cmd.app, name="config")

logger = logging.getLogger("tsmscan.cli")


@app.callback()
def main(
    ctx: typer.Context,
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output results as JSON instead of human-readable text",
    ),
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug logging (verbose output)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="TOML configuration file (default: ./tsmscan.toml)"
    ),
) -> None:
    """
    tsmscan - inventory shards of a time-partitioned database.

    Walks <data>/<database>/<retention-policy>/<shard> and reports which
    storage-engine format (b1, bz1, tsm1) wrote each shard. Nothing on disk
    is modified.

    Examples:
        # Shards still to convert
        tsmscan shards list /var/lib/influxdb/data

        # Per-database totals
        tsmscan shards summary /var/lib/influxdb/data --dbs telegraf
    """
    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        handle_scan_error(e, "load configuration", json_output)

    level = logging.DEBUG if debug else getattr(logging, settings.LOG_LEVEL, logging.INFO)
    setup_logger(level, log_file=settings.LOG_FILE, fmt=settings.LOG_FORMAT)

    ctx.ensure_object(dict)
    ctx.obj["json"] = json_output
    ctx.obj["debug"] = debug
    ctx.obj["settings"] = settings

    logger.debug(f"CLI initialized: json={json_output}, debug={debug}, config={config}")


@app.command()
def version(ctx: typer.Context) -> None:
    """Display tsmscan version information."""
    py_ver = sys.version_info
    version_info = {
        "tsmscan": __version__,
        "python_version": f"{py_ver.major}.{py_ver.minor}.{py_ver.micro}",
    }

    if ctx.obj and ctx.obj.get("json", False):
        print_json(version_info)
    else:
        typer.echo(f"tsmscan v{version_info['tsmscan']}")
        typer.echo(f"Python: {version_info['python_version']}")


def cli_entry() -> None:
    """Entry point for the ``tsmscan`` console script."""
    app()


if __name__ == "__main__":
    app()
