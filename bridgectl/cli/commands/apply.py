# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Full run: install if needed, reconfigure, restart, validate."""

import sys
from typing import Optional

import click

from bridgectl.cli import cli
from bridgectl.cli.helpers import (
    BANNER,
    _get_host_config,
    console,
    handle_errors,
    show_bridgectl_error,
)
from bridgectl.pipeline import Pipeline, PipelineResult, Stage


def network_options(func):
    """Shared --subnet/--bip/--pool-size options."""
    func = click.option(
        "--pool-size", type=int, default=None, help="Prefix length of allocated networks (default 24)."
    )(func)
    func = click.option(
        "--bip", default=None, help="Bridge interface CIDR (default 10.20.1.1/24)."
    )(func)
    func = click.option(
        "--subnet", default=None, help="Address pool base CIDR (default 10.20.0.0/16)."
    )(func)
    return func


def _print_summary(result: PipelineResult) -> None:
    console.print("")
    console.print("[bold cyan]" + "=" * 41 + "[/bold cyan]")
    if result.ok:
        console.print("[green]✓ All done! Docker is installed/configured.[/green]")
        console.print("[blue]Verify further:[/blue] docker network inspect bridge")
        console.print("[blue]Verify pools:[/blue] docker system info | grep -A 10 'Default Address Pools'")
    else:
        failed = result.steps[-1].stage.value if result.steps else Stage.NOT_STARTED.value
        console.print(f"[red]✗ Aborted at step: {failed}[/red]")
        if result.reconcile and result.reconcile.backup_path:
            console.print(
                f"[yellow]Previous config saved at {result.reconcile.backup_path}[/yellow]"
            )
    console.print("[bold cyan]" + "=" * 41 + "[/bold cyan]")


@cli.command()
@network_options
@click.option(
    "--install-via",
    type=click.Choice(["packaged", "sandboxed"]),
    default=None,
    help="How to install Docker if it is missing (apt docker-ce or snap).",
)
@click.option("--skip-validation", is_flag=True, help="Stop after the daemon is active.")
@handle_errors
def apply(
    subnet: Optional[str],
    bip: Optional[str],
    pool_size: Optional[int],
    install_via: Optional[str],
    skip_validation: bool,
):
    """Install Docker if missing, move the bridge and verify (requires root)."""
    settings = _get_host_config().settings(
        subnet=subnet, bip=bip, pool_size=pool_size, install_via=install_via
    )
    target = settings.network

    console.print("[bold cyan]" + "=" * 41 + "[/bold cyan]")
    console.print(f"[bold]{BANNER}[/bold]")
    console.print(f"Target IP range: {target.subnet} (pools), BIP: {target.bip}")
    console.print("[bold cyan]" + "=" * 41 + "[/bold cyan]")

    result = Pipeline(settings, skip_validation=skip_validation).run()

    if result.error is not None:
        show_bridgectl_error(result.error)
    _print_summary(result)
    sys.exit(result.exit_code)
