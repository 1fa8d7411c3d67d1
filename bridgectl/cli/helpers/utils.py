# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Utility functions for CLI helpers."""

import functools
import sys
from typing import Callable, Optional

import click
from rich.console import Console
from rich.panel import Panel

from bridgectl.host_config import HostConfig, get_config
from bridgectl.utils.exceptions import BridgectlError

_console = Console()


def show_error_panel(title: str, message: str, hint: Optional[str] = None) -> None:
    """Display a formatted error panel.

    Args:
        title: Panel title (shown in red)
        message: Main error message
        hint: Optional hint text (shown with blue "Hint:" prefix)
    """
    content = message
    if hint:
        content += f"\n\n[blue]Hint:[/blue] {hint}"
    _console.print(Panel(content, title=f"[red]{title}[/red]", border_style="red"))


def show_bridgectl_error(exc: BridgectlError) -> None:
    """Render a BridgectlError as a panel using its title and hint."""
    show_error_panel(exc.title, str(exc), exc.hint)


def handle_errors(func: Callable) -> Callable:
    """Decorator that wraps CLI commands with standard error handling.

    Catches exceptions, prints error with nice formatting, and exits with code 1.
    Special handling for:
    - BridgectlError: Panel titled by error type, with hint if provided
    - ClickException: Left to click
    - Other exceptions: Generic error panel

    Usage:
        @cli.command()
        @handle_errors
        def my_command():
            ...
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except click.ClickException:
            raise
        except BridgectlError as exc:
            show_bridgectl_error(exc)
            sys.exit(1)
        except Exception as exc:
            show_error_panel("Error", str(exc))
            sys.exit(1)

    return wrapper


def _get_host_config() -> HostConfig:
    """HostConfig for the current invocation (honours --config)."""
    ctx = click.get_current_context(silent=True)
    config_path = None
    if ctx is not None and ctx.find_root().obj:
        config_path = ctx.find_root().obj.get("config_path")
    return get_config(config_path)
