# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Read-only commands: which runtime is installed, is it running."""

import sys

from rich.table import Table

from bridgectl.cli import cli
from bridgectl.cli.helpers import _get_host_config, console, handle_errors
from bridgectl.installer import Installer
from bridgectl.runtime import detect_runtime
from bridgectl.service import ServiceController


@cli.command()
@handle_errors
def detect():
    """Show how Docker is installed and which daemon.json is used."""
    settings = _get_host_config().model
    detection = detect_runtime(settings.install.default_kind)
    profile = detection.profile

    table = Table(title="Docker Runtime")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("Installed", "yes" if detection.installed else "no")
    table.add_row("Packaging", profile.kind.label)
    table.add_row("daemon.json", str(profile.config_path))
    table.add_row("Restart", " && ".join(" ".join(cmd) for cmd in profile.restart_commands))
    table.add_row("Status check", " ".join(profile.status_command))
    console.print(table)

    if not detection.installed:
        console.print("\n[yellow]bridgectl apply would install Docker with:[/yellow]")
        for line in Installer().planned_commands(profile):
            console.print(f"  {line}", highlight=False)


@cli.command()
@handle_errors
def status():
    """Report whether the Docker daemon is active (exit 1 if not)."""
    settings = _get_host_config().model
    detection = detect_runtime(settings.install.default_kind)
    if not detection.installed:
        console.print("[red]✗ Docker is not installed[/red]")
        sys.exit(1)

    if not ServiceController().verify(detection.profile):
        sys.exit(1)
