# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Thin wrapper around subprocess for host commands (apt, snap, systemctl, ip)."""

import subprocess
from typing import Callable, Optional, Sequence

from bridgectl.utils.exceptions import CommandError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

# Package installs can take a while on slow mirrors
DEFAULT_TIMEOUT = 900

Runner = Callable[..., subprocess.CompletedProcess]


def run_command(
    cmd: Sequence[str],
    check: bool = True,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> subprocess.CompletedProcess:
    """Run a command and capture its output.

    Args:
        cmd: Command and arguments as a list
        check: Raise CommandError on non-zero exit
        timeout: Seconds before the command is killed

    Returns:
        subprocess.CompletedProcess with text stdout/stderr

    Raises:
        CommandError: If the binary is missing, the command times out,
            or it exits non-zero while check=True
    """
    cmd = [str(part) for part in cmd]
    logger.debug(f"Running: {' '.join(cmd)}")
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except FileNotFoundError as e:
        raise CommandError(cmd, stderr=str(e), hint=f"Is {cmd[0]} installed?") from e
    except subprocess.TimeoutExpired as e:
        raise CommandError(cmd, stderr=f"timed out after {timeout}s") from e

    if result.returncode != 0:
        logger.debug(f"Exit {result.returncode}: {result.stderr.strip()}")
        if check:
            raise CommandError(cmd, returncode=result.returncode, stderr=result.stderr)
    return result
