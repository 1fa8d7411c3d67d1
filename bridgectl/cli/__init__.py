# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""bridgectl CLI package."""

from pathlib import Path
from typing import Optional

import click

from bridgectl import __version__
from bridgectl.utils.logging import configure_logging


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="bridgectl")
@click.option("--debug", is_flag=True, help="Verbose output (also BRIDGECTL_DEBUG=1).")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Settings file (default: ~/.config/bridgectl/config.yml).",
)
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_path: Optional[Path]):
    """bridgectl - Move the Docker bridge onto a new subnet and verify it.

    Run without a command to do everything: install Docker if missing,
    rewrite daemon.json, restart the daemon and check a test container's
    gateway.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if debug:
        configure_logging(debug=True, force=True)

    if ctx.invoked_subcommand is None:
        from bridgectl.cli.commands.apply import apply

        ctx.invoke(apply)


def main():
    """Main entry point."""
    cli(obj={})


from bridgectl.cli.commands import apply  # noqa: E402,F401
from bridgectl.cli.commands import config  # noqa: E402,F401
from bridgectl.cli.commands import detect  # noqa: E402,F401
from bridgectl.cli.commands import validate  # noqa: E402,F401
