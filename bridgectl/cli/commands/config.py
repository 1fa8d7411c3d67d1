# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""daemon.json commands: reconcile without restarting, show settings."""

from pathlib import Path
from typing import Optional

import click
import yaml

from bridgectl.cli import cli
from bridgectl.cli.commands.apply import network_options
from bridgectl.cli.helpers import _get_host_config, console, handle_errors
from bridgectl.daemon_config import read_config, reconcile as reconcile_config
from bridgectl.pipeline import require_root
from bridgectl.runtime import detect_runtime


@cli.command()
@network_options
@click.option(
    "--path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="daemon.json to edit (default: detected runtime's file).",
)
@handle_errors
def reconcile(
    subnet: Optional[str],
    bip: Optional[str],
    pool_size: Optional[int],
    path: Optional[Path],
):
    """Back up and rewrite daemon.json without restarting Docker.

    Requires root unless --path points somewhere you can write.
    """
    settings = _get_host_config().settings(subnet=subnet, bip=bip, pool_size=pool_size)
    if path is None:
        require_root()
        path = detect_runtime(settings.install.default_kind).profile.config_path

    target = settings.network
    result = reconcile_config(path, target.bip, target.subnet, target.pool_size)

    console.print_json(data=read_config(result.path))
    console.print("[blue]Restart Docker to apply:[/blue] bridgectl apply --skip-validation")


@cli.command("settings")
@handle_errors
def show_settings():
    """Show effective bridgectl settings."""
    host_config = _get_host_config()
    console.print(f"[blue]Settings file:[/blue] {host_config.config_path}")
    if not host_config.config_path.exists():
        console.print("[dim](not present, using defaults)[/dim]")
    console.print(
        yaml.safe_dump(host_config.model.model_dump(), default_flow_style=False, sort_keys=False),
        highlight=False,
        markup=False,
    )
