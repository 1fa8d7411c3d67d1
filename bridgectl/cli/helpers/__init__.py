# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared helpers for the bridgectl CLI."""

from rich.console import Console

BANNER = "Docker Install, IP Change, Verify, and Cleanup"

console = Console()

from bridgectl.cli.helpers.utils import (  # noqa: E402
    _get_host_config,
    handle_errors,
    show_bridgectl_error,
    show_error_panel,
)

__all__ = [
    "BANNER",
    "console",
    "_get_host_config",
    "handle_errors",
    "show_bridgectl_error",
    "show_error_panel",
]
