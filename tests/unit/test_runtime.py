# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Unit tests for runtime detection."""

from pathlib import Path

import pytest

from bridgectl.runtime import RuntimeKind, detect_runtime, profile_for
from bridgectl.utils.exceptions import CommandError


def which_from(*present):
    """Fake shutil.which that knows only the given binaries."""
    return lambda name: f"/usr/bin/{name}" if name in present else None


class TestProfiles:
    """Test the fixed runtime profiles."""

    def test_packaged_profile(self):
        profile = profile_for(RuntimeKind.PACKAGED)

        assert profile.config_path == Path("/etc/docker/daemon.json")
        assert profile.restart_commands == (
            ("systemctl", "stop", "docker"),
            ("systemctl", "start", "docker"),
        )
        assert profile.status_command == ("systemctl", "is-active", "docker")

    def test_sandboxed_profile(self):
        profile = profile_for(RuntimeKind.SANDBOXED)

        assert profile.config_path == Path("/var/snap/docker/current/config/daemon.json")
        assert profile.restart_commands == (("snap", "restart", "docker"),)
        assert profile.status_command == ("snap", "services", "docker")

    def test_profile_for_accepts_string(self):
        assert profile_for("sandboxed").kind is RuntimeKind.SANDBOXED

    def test_profile_is_immutable(self):
        profile = profile_for(RuntimeKind.PACKAGED)
        with pytest.raises(AttributeError):
            profile.config_path = Path("/tmp/daemon.json")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            profile_for("flatpak")


class TestDetectRuntime:
    """Test detection priority and defaults."""

    def test_snap_docker_detected(self, fake_runner):
        fake_runner.on("snap", "list", "docker", stdout="docker 24.0.5 ...")

        detection = detect_runtime(which=which_from("snap"), runner=fake_runner)

        assert detection.installed is True
        assert detection.profile.kind is RuntimeKind.SANDBOXED

    def test_snap_takes_priority_over_docker_binary(self, fake_runner):
        fake_runner.on("snap", "list", "docker")

        detection = detect_runtime(which=which_from("snap", "docker"), runner=fake_runner)

        assert detection.profile.kind is RuntimeKind.SANDBOXED

    def test_snap_present_without_docker_falls_through(self, fake_runner):
        fake_runner.on("snap", "list", "docker", returncode=1, stderr="error: no matching snaps")

        detection = detect_runtime(which=which_from("snap", "docker"), runner=fake_runner)

        assert detection.installed is True
        assert detection.profile.kind is RuntimeKind.PACKAGED

    def test_snap_command_error_falls_through(self, fake_runner):
        fake_runner.on("snap", "list", raises=CommandError(["snap", "list", "docker"]))

        detection = detect_runtime(which=which_from("snap", "docker"), runner=fake_runner)

        assert detection.profile.kind is RuntimeKind.PACKAGED

    def test_apt_docker_detected(self, fake_runner):
        detection = detect_runtime(which=which_from("docker"), runner=fake_runner)

        assert detection.installed is True
        assert detection.profile.kind is RuntimeKind.PACKAGED
        assert not fake_runner.ran("snap")

    @pytest.mark.parametrize("default_kind", ["packaged", "sandboxed"])
    def test_nothing_installed_uses_configured_default(self, fake_runner, default_kind):
        detection = detect_runtime(default_kind, which=which_from(), runner=fake_runner)

        assert detection.installed is False
        assert detection.profile.kind is RuntimeKind(default_kind)
        assert fake_runner.calls == []
