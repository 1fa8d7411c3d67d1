# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Install Docker via apt (docker-ce) or snap."""

import os
from pathlib import Path
from typing import Dict, List, Optional

from bridgectl.paths import AptPaths
from bridgectl.runtime import RuntimeKind, RuntimeProfile
from bridgectl.utils.commands import Runner, run_command
from bridgectl.utils.exceptions import CommandError, InstallError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

DOCKER_GPG_URL = "https://download.docker.com/linux/ubuntu/gpg"
DOCKER_REPO_URL = "https://download.docker.com/linux/ubuntu"

CONFLICTING_PACKAGES = [
    "docker.io",
    "docker-doc",
    "docker-compose",
    "docker-compose-v2",
    "podman-docker",
    "containerd",
    "runc",
]

DOCKER_PACKAGES = [
    "docker-ce",
    "docker-ce-cli",
    "containerd.io",
    "docker-buildx-plugin",
    "docker-compose-plugin",
]


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse /etc/os-release content into a dict."""
    info = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        info[key.strip()] = value.strip().strip('"').strip("'")
    return info


class Installer:
    """Runs the install sequence for a runtime profile.

    Every command is fail-fast: the first failure raises InstallError and
    nothing already installed is rolled back.
    """

    def __init__(self, runner: Runner = run_command, os_release: Optional[Path] = None):
        self.runner = runner
        self.os_release = os_release or AptPaths.OS_RELEASE

    def install(self, profile: RuntimeProfile) -> None:
        """Install Docker the way the profile describes."""
        try:
            if profile.kind is RuntimeKind.SANDBOXED:
                self._install_snap()
            else:
                self._install_apt()
        except CommandError as e:
            raise InstallError(
                f"Docker installation via {profile.kind.label} failed: {e}",
                hint="Check network access and apt/snap logs, then re-run",
            ) from e

    def _run(self, *cmd: str) -> str:
        return self.runner(list(cmd)).stdout

    def _install_snap(self) -> None:
        logger.info("Installing Docker via Snap...")
        self._run("apt-get", "update")
        self._run("apt-get", "install", "-y", "snapd")
        self._run("snap", "install", "docker")
        logger.success("Docker installed via Snap.")

    def _install_apt(self) -> None:
        logger.info("Installing Docker via apt...")
        self._remove_conflicting_packages()

        self._run("apt-get", "update")
        self._run("apt-get", "install", "-y", "ca-certificates", "curl")
        self._add_docker_key()
        self._add_docker_repo()
        self._run("apt-get", "update")
        self._run("apt-get", "install", "-y", *DOCKER_PACKAGES)
        logger.success("Docker installed via apt.")

    def _remove_conflicting_packages(self) -> None:
        for pkg in CONFLICTING_PACKAGES:
            # Not installed is fine
            self.runner(["apt-get", "remove", "-y", pkg], check=False)

    def _add_docker_key(self) -> None:
        self._run("install", "-m", "0755", "-d", str(AptPaths.KEYRINGS_DIR))
        self._run("curl", "-fsSL", DOCKER_GPG_URL, "-o", str(AptPaths.DOCKER_KEY))
        self._run("chmod", "a+r", str(AptPaths.DOCKER_KEY))

    def repo_line(self) -> str:
        """Build the apt sources line for Docker's repository."""
        arch = self._run("dpkg", "--print-architecture").strip()
        codename = self._codename()
        return (
            f"deb [arch={arch} signed-by={AptPaths.DOCKER_KEY}] "
            f"{DOCKER_REPO_URL} {codename} stable\n"
        )

    def _codename(self) -> str:
        try:
            info = parse_os_release(self.os_release.read_text())
        except OSError as e:
            raise InstallError(f"Cannot read {self.os_release}: {e}") from e

        codename = info.get("UBUNTU_CODENAME") or info.get("VERSION_CODENAME")
        if not codename:
            raise InstallError(
                f"Could not determine distribution codename from {self.os_release}",
                hint="Docker's apt repository needs UBUNTU_CODENAME or VERSION_CODENAME",
            )
        return codename

    def _add_docker_repo(self) -> None:
        line = self.repo_line()
        sources = AptPaths.DOCKER_SOURCES
        try:
            sources.parent.mkdir(parents=True, exist_ok=True)
            sources.write_text(line)
            os.chmod(sources, 0o644)
        except OSError as e:
            raise InstallError(f"Cannot write {sources}: {e}") from e
        logger.debug(f"Repository added to {sources}", console_output=False)

    def planned_commands(self, profile: RuntimeProfile) -> List[str]:
        """Human-readable summary of what install() will do."""
        if profile.kind is RuntimeKind.SANDBOXED:
            return ["apt-get update", "apt-get install -y snapd", "snap install docker"]
        return [
            f"apt-get remove -y {' '.join(CONFLICTING_PACKAGES)} (best effort)",
            "apt-get update",
            "apt-get install -y ca-certificates curl",
            f"curl -fsSL {DOCKER_GPG_URL} -o {AptPaths.DOCKER_KEY}",
            f"write {AptPaths.DOCKER_SOURCES}",
            "apt-get update",
            f"apt-get install -y {' '.join(DOCKER_PACKAGES)}",
        ]
