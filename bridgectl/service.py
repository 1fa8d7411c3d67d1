# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Restart the Docker daemon and wait for it to report active."""

import time
from typing import Callable

from bridgectl.runtime import RuntimeKind, RuntimeProfile
from bridgectl.utils.commands import Runner, run_command
from bridgectl.utils.exceptions import CommandError, ServiceError, ServiceTimeoutError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

# Timeout for a single systemctl/snap invocation (seconds)
SERVICE_COMMAND_TIMEOUT = 120

SNAP_DAEMON_SERVICE = "docker.dockerd"


def snap_service_active(output: str, service: str = SNAP_DAEMON_SERVICE) -> bool:
    """Parse `snap services` output and report whether service is active.

    Output looks like:
        Service         Startup  Current   Notes
        docker.dockerd  enabled  active    -
    """
    for line in output.splitlines():
        fields = line.split()
        if len(fields) >= 3 and fields[0] == service:
            return fields[2] == "active"
    return False


def _logs_hint(profile: RuntimeProfile) -> str:
    if profile.kind is RuntimeKind.SANDBOXED:
        return "Check logs with: snap logs docker"
    return "Check logs with: journalctl -u docker"


class ServiceController:
    """Drives the daemon's service manager for one runtime profile."""

    def __init__(
        self,
        runner: Runner = run_command,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.runner = runner
        self.sleep = sleep
        self.clock = clock

    def restart(self, profile: RuntimeProfile) -> None:
        """Run the profile's restart commands in order.

        Raises:
            ServiceError: If any restart command fails
        """
        logger.info("Restarting Docker...")
        for cmd in profile.restart_commands:
            try:
                self.runner(list(cmd), timeout=SERVICE_COMMAND_TIMEOUT)
            except CommandError as e:
                raise ServiceError(
                    f"Failed to restart Docker: {e}", hint=_logs_hint(profile)
                ) from e
        logger.success("Docker restarted.")

    def is_active(self, profile: RuntimeProfile) -> bool:
        """Evaluate the profile's status check once."""
        try:
            result = self.runner(
                list(profile.status_command), check=False, timeout=SERVICE_COMMAND_TIMEOUT
            )
        except CommandError as e:
            logger.debug(f"Status check failed: {e}")
            return False

        if profile.kind is RuntimeKind.SANDBOXED:
            return result.returncode == 0 and snap_service_active(result.stdout)
        return result.returncode == 0 and result.stdout.strip() == "active"

    def verify(self, profile: RuntimeProfile) -> bool:
        """One-shot status check with a status line."""
        active = self.is_active(profile)
        if active:
            logger.success("Docker is active.")
        else:
            logger.error("Docker not active.")
        return active

    def wait_until_active(
        self,
        profile: RuntimeProfile,
        timeout: float = 60.0,
        interval: float = 1.0,
        backoff: float = 2.0,
        max_interval: float = 8.0,
    ) -> float:
        """Poll the status check with exponential backoff until active.

        Args:
            profile: Runtime profile to check
            timeout: Maximum time to wait
            interval: First delay between checks
            backoff: Multiplier applied to the delay after each miss
            max_interval: Upper bound for the delay

        Returns:
            Seconds waited until the daemon reported active

        Raises:
            ServiceTimeoutError: If the deadline passes first
        """
        start = self.clock()
        deadline = start + timeout
        delay = interval
        attempts = 0

        while True:
            attempts += 1
            if self.is_active(profile):
                waited = self.clock() - start
                logger.success(f"Docker is active (after {waited:.1f}s).")
                return waited

            remaining = deadline - self.clock()
            if remaining <= 0:
                break
            logger.debug(f"Docker not active yet (attempt {attempts}), retrying in {delay:.1f}s")
            self.sleep(min(delay, remaining))
            delay = min(delay * backoff, max_interval)

        raise ServiceTimeoutError(
            f"Docker did not become active within {timeout:.0f}s ({attempts} checks)",
            timeout=timeout,
            hint=_logs_hint(profile),
        )
