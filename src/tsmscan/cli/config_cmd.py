"""
tsmscan CLI - Config Commands
=============================

Usage:
    tsmscan config show
    tsmscan --config ./tsmscan.toml --json config show
"""

import dataclasses

import typer

from tsmscan.cli.utils import print_json
from tsmscan.configuration import DEFAULT_SETTINGS, print_config

app = typer.Typer(help="Configuration inspection commands")


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the effective configuration (file, defaults and overrides merged)."""
    obj = ctx.obj or {}
    settings = obj.get("settings", DEFAULT_SETTINGS)
    if obj.get("json", False):
        print_json(dataclasses.asdict(settings))
    else:
        print_config(settings)
