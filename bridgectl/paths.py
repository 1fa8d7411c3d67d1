# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for bridgectl.

Paths are organized by context:

- HostPaths: bridgectl's own config and state on the host
- DaemonPaths: Docker daemon.json locations per packaging style
- AptPaths: Files written while adding Docker's apt repository

Usage:
    from bridgectl.paths import HostPaths, DaemonPaths

    settings_file = HostPaths.config_file()
    daemon_json = DaemonPaths.PACKAGED
"""

import os
from pathlib import Path


class HostPaths:
    """Paths for bridgectl's own configuration and logs."""

    @staticmethod
    def config_dir() -> Path:
        """~/.config/bridgectl/"""
        xdg = os.getenv("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / "bridgectl"

    @staticmethod
    def config_file() -> Path:
        """~/.config/bridgectl/config.yml (or $BRIDGECTL_CONFIG)"""
        env_path = os.getenv("BRIDGECTL_CONFIG")
        if env_path:
            return Path(env_path)
        return HostPaths.config_dir() / "config.yml"

    @staticmethod
    def state_dir() -> Path:
        """~/.local/state/bridgectl/"""
        xdg = os.getenv("XDG_STATE_HOME")
        base = Path(xdg) if xdg else Path.home() / ".local" / "state"
        return base / "bridgectl"

    @staticmethod
    def log_file() -> Path:
        """~/.local/state/bridgectl/bridgectl.log"""
        return HostPaths.state_dir() / "bridgectl.log"


class DaemonPaths:
    """daemon.json locations for each way Docker can be installed."""

    # docker-ce from download.docker.com (systemd service)
    PACKAGED = Path("/etc/docker/daemon.json")

    # docker snap (snapd service)
    SANDBOXED = Path("/var/snap/docker/current/config/daemon.json")


class AptPaths:
    """Files touched while adding Docker's apt repository."""

    KEYRINGS_DIR = Path("/etc/apt/keyrings")
    DOCKER_KEY = KEYRINGS_DIR / "docker.asc"
    DOCKER_SOURCES = Path("/etc/apt/sources.list.d/docker.list")
    OS_RELEASE = Path("/etc/os-release")
