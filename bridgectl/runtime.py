# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Detect how Docker is installed on this host."""

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple, Union

from bridgectl.paths import DaemonPaths
from bridgectl.utils.commands import Runner, run_command
from bridgectl.utils.exceptions import CommandError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

Command = Tuple[str, ...]


class RuntimeKind(Enum):
    """How the Docker runtime is packaged and managed."""

    PACKAGED = "packaged"  # apt docker-ce, systemd unit
    SANDBOXED = "sandboxed"  # snap, snapd services

    @property
    def label(self) -> str:
        return "apt" if self is RuntimeKind.PACKAGED else "snap"


@dataclass(frozen=True)
class RuntimeProfile:
    """Everything the pipeline needs to know about one packaging style."""

    kind: RuntimeKind
    config_path: Path
    restart_commands: Tuple[Command, ...]
    status_command: Command

    @property
    def description(self) -> str:
        return f"{self.kind.label} Docker"


@dataclass(frozen=True)
class Detection:
    """Result of inspecting the host."""

    profile: RuntimeProfile
    installed: bool


_PROFILES = {
    RuntimeKind.PACKAGED: RuntimeProfile(
        kind=RuntimeKind.PACKAGED,
        config_path=DaemonPaths.PACKAGED,
        restart_commands=(
            ("systemctl", "stop", "docker"),
            ("systemctl", "start", "docker"),
        ),
        status_command=("systemctl", "is-active", "docker"),
    ),
    RuntimeKind.SANDBOXED: RuntimeProfile(
        kind=RuntimeKind.SANDBOXED,
        config_path=DaemonPaths.SANDBOXED,
        restart_commands=(("snap", "restart", "docker"),),
        status_command=("snap", "services", "docker"),
    ),
}


def profile_for(kind: Union[RuntimeKind, str]) -> RuntimeProfile:
    """Return the profile for a runtime kind (enum or its string value)."""
    if isinstance(kind, str):
        kind = RuntimeKind(kind)
    return _PROFILES[kind]


def _snap_has_docker(runner: Runner) -> bool:
    try:
        result = runner(["snap", "list", "docker"], check=False, timeout=30)
    except CommandError:
        return False
    return result.returncode == 0


def detect_runtime(
    default_kind: Union[RuntimeKind, str] = RuntimeKind.PACKAGED,
    which: Callable[[str], Optional[str]] = shutil.which,
    runner: Runner = run_command,
) -> Detection:
    """Inspect the host for an existing Docker installation.

    The snap package wins if both snap Docker and a docker binary are present,
    since the binary on PATH is then usually the snap's own wrapper.

    Args:
        default_kind: Profile to return when nothing is installed
        which: PATH lookup (shutil.which)
        runner: Command runner

    Returns:
        Detection with the chosen profile and whether Docker was found
    """
    if which("snap") and _snap_has_docker(runner):
        logger.success("Detected Snap Docker.")
        return Detection(profile_for(RuntimeKind.SANDBOXED), installed=True)

    if which("docker"):
        logger.success("Detected apt-based Docker.")
        return Detection(profile_for(RuntimeKind.PACKAGED), installed=True)

    profile = profile_for(default_kind)
    logger.warning(f"No Docker detected. Will install via {profile.kind.label}.")
    return Detection(profile, installed=False)
