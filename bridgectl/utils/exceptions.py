# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Exception hierarchy for bridgectl.

Every failure in the pipeline is fatal. Each step raises one of these and the
orchestrator turns it into a failed step result; the CLI renders it as a panel
with an optional hint and exits with code 1.
"""

from typing import Optional, Sequence


class BridgectlError(Exception):
    """Base class for all bridgectl failures."""

    title = "Error"

    def __init__(self, message: str, hint: Optional[str] = None):
        super().__init__(message)
        self.hint = hint


class PrivilegeError(BridgectlError):
    """Raised when bridgectl is not running as root."""

    title = "Permission Denied"


class InstallError(BridgectlError):
    """Raised when any step of the runtime installation fails."""

    title = "Install Failed"


class ConfigError(BridgectlError):
    """Raised when daemon.json cannot be parsed or written."""

    title = "Config Error"


class ServiceError(BridgectlError):
    """Raised when the daemon cannot be restarted or is not active."""

    title = "Service Error"


class ServiceTimeoutError(ServiceError):
    """Raised when the daemon does not become active before the deadline."""

    title = "Service Timeout"

    def __init__(self, message: str, timeout: float, hint: Optional[str] = None):
        super().__init__(message, hint=hint)
        self.timeout = timeout


class ValidationError(BridgectlError):
    """Raised when the bridge change cannot be confirmed."""

    title = "Validation Failed"


class CommandError(BridgectlError):
    """Raised when an external command exits non-zero, times out, or is missing."""

    title = "Command Failed"

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int] = None,
        stderr: str = "",
        hint: Optional[str] = None,
    ):
        self.command = tuple(command)
        self.returncode = returncode
        self.stderr = stderr.strip() if stderr else ""
        message = f"Command failed: {' '.join(self.command)}"
        if returncode is not None:
            message += f" (exit {returncode})"
        if self.stderr:
            message += f"\n{self.stderr}"
        super().__init__(message, hint=hint)
