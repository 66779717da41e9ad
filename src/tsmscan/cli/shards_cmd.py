"""
tsmscan CLI - Shard Commands
============================

Commands for shard inventory.

Usage:
    tsmscan shards list <data-path> [--dbs db1,db2] [--all]
    tsmscan shards summary <data-path>
    tsmscan shards detect <shard-path>
"""

import logging
from pathlib import Path
from typing import List, Optional

import lmdb
import typer

from tsmscan.cli.utils import (
    format_size,
    handle_scan_error,
    print_json,
    print_table,
)
from tsmscan.configuration import (
    DEFAULT_SETTINGS,
    PathValidationError,
    Settings,
    validate_data_root,
)
from tsmscan.inventory import (
    EngineFormat,
    InventoryError,
    ShardFormatDetector,
    ShardInventory,
    scan_data_root,
)

app = typer.Typer(help="Shard discovery and format classification commands")
logger = logging.getLogger("tsmscan.cli.shards")

SCAN_ERRORS = (OSError, InventoryError, lmdb.Error)


def _settings(ctx: typer.Context) -> Settings:
    return (ctx.obj or {}).get("settings", DEFAULT_SETTINGS)


def _json_mode(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("json", False))


def _parse_dbs(dbs: Optional[str], settings: Settings) -> Optional[List[str]]:
    if dbs:
        return [name.strip() for name in dbs.split(",") if name.strip()]
    if settings.DATABASES:
        return list(settings.DATABASES)
    return None


def _scan(ctx: typer.Context, data_path: Optional[Path], dbs: Optional[str]) -> ShardInventory:
    settings = _settings(ctx)
    if data_path is None:
        try:
            data_path = validate_data_root(settings)
        except PathValidationError as e:
            handle_scan_error(e, "use configured data root", _json_mode(ctx))
    detector = ShardFormatDetector.from_settings(settings)
    logger.info(f"Scanning shards under {data_path}")
    try:
        return scan_data_root(data_path, databases=_parse_dbs(dbs, settings), detector=detector)
    except SCAN_ERRORS as e:
        handle_scan_error(e, f"access shards under {data_path}", _json_mode(ctx))


@app.command("list")
def list_shards(
    ctx: typer.Context,
    data_path: Optional[Path] = typer.Argument(
        None, help="Data directory holding one directory per database"
    ),
    dbs: Optional[str] = typer.Option(
        None, "--dbs", help="Comma-delimited list of databases. Default is all"
    ),
    exclude: Optional[str] = typer.Option(
        None,
        "--exclude",
        help="Hide shards of this format (default from config: tsm1; \"\" hides none)",
    ),
    show_all: bool = typer.Option(False, "--all", help="Show shards of every format"),
) -> None:
    """
    List shards sorted by database, retention policy and shard.

    Shards already in the tsm1 format are hidden unless --all is given.
    """
    settings = _settings(ctx)
    json_mode = _json_mode(ctx)

    excluded: Optional[EngineFormat] = None
    if not show_all:
        label = exclude if exclude is not None else settings.EXCLUDE_FORMAT
        if label:
            try:
                excluded = EngineFormat.from_label(label)
            except ValueError as e:
                raise typer.BadParameter(str(e), param_hint="--exclude")

    shards = _scan(ctx, data_path, dbs)
    if excluded is not None:
        shards = shards.filter(excluded)

    if json_mode:
        print_json({"status": "success", "shards": shards.to_records()})
        return

    for i, si in enumerate(shards):
        typer.echo(f"{i}: {si}")
    logger.info(
        f"{len(shards)} shards in {len(shards.databases())} databases "
        f"({format_size(shards.total_size())})"
    )


@app.command()
def summary(
    ctx: typer.Context,
    data_path: Optional[Path] = typer.Argument(
        None, help="Data directory holding one directory per database"
    ),
    dbs: Optional[str] = typer.Option(
        None, "--dbs", help="Comma-delimited list of databases. Default is all"
    ),
) -> None:
    """Count shards and bytes per database and format."""
    shards = _scan(ctx, data_path, dbs)
    frame = shards.summary()
    records = [
        {
            "database": row.database,
            "format": row.format,
            "shards": int(row.shards),
            "size": int(row.size),
        }
        for row in frame.itertuples(index=False)
    ]

    if _json_mode(ctx):
        print_json(
            {
                "status": "success",
                "databases": shards.databases(),
                "total_size": shards.total_size(),
                "summary": records,
            }
        )
        return

    if not records:
        typer.echo("No shards found.")
        return

    print_table(
        ["Database", "Format", "Shards", "Size"],
        [[r["database"], r["format"], r["shards"], format_size(r["size"])] for r in records],
    )
    typer.echo(f"\nTotal: {len(shards)} shards, {format_size(shards.total_size())}")


@app.command()
def detect(
    ctx: typer.Context,
    shard_path: Path = typer.Argument(..., help="Path to one shard file or directory"),
) -> None:
    """Classify a single shard."""
    detector = ShardFormatDetector.from_settings(_settings(ctx))
    try:
        fmt, size = detector.detect(shard_path)
    except SCAN_ERRORS as e:
        handle_scan_error(e, f"detect format of {shard_path}", _json_mode(ctx))

    if _json_mode(ctx):
        print_json(
            {"status": "success", "path": str(shard_path), "format": fmt.value, "size": size}
        )
    else:
        typer.echo(f"{shard_path}: {fmt.value} ({size} bytes)")


if __name__ == "__main__":
    app()
