# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Check the bridge without changing anything."""

from typing import Optional

import click

from bridgectl.cli import cli
from bridgectl.cli.helpers import _get_host_config, console, handle_errors
from bridgectl.network import NetworkValidator


@cli.command()
@click.option("--bip", default=None, help="Expected bridge CIDR (default from settings).")
@handle_errors
def validate(bip: Optional[str]):
    """Run a test container and compare its gateway with the bridge IP."""
    settings = _get_host_config().settings(bip=bip)
    validator = NetworkValidator(settings.validation)

    validator.check_bridge_network(settings.network.gateway)
    result = validator.check(settings.network.bip)
    console.print(f"[green]Gateway {result.observed_gateway} matches {settings.network.bip}[/green]")
