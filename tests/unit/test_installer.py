# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Unit tests for the Docker installer."""

import pytest

from bridgectl import installer as installer_module
from bridgectl.installer import DOCKER_PACKAGES, Installer, parse_os_release
from bridgectl.paths import AptPaths
from bridgectl.runtime import RuntimeKind, profile_for
from bridgectl.utils.exceptions import InstallError

OS_RELEASE = """PRETTY_NAME="Ubuntu 24.04.1 LTS"
NAME="Ubuntu"
VERSION_ID="24.04"
VERSION_CODENAME=noble
ID=ubuntu
UBUNTU_CODENAME=noble
"""


@pytest.fixture
def apt_paths(tmp_path, monkeypatch):
    """Redirect apt keyring/sources paths into tmp_path."""
    keyrings = tmp_path / "keyrings"
    monkeypatch.setattr(AptPaths, "KEYRINGS_DIR", keyrings)
    monkeypatch.setattr(AptPaths, "DOCKER_KEY", keyrings / "docker.asc")
    monkeypatch.setattr(AptPaths, "DOCKER_SOURCES", tmp_path / "sources.list.d" / "docker.list")
    return tmp_path


@pytest.fixture
def os_release(tmp_path):
    path = tmp_path / "os-release"
    path.write_text(OS_RELEASE)
    return path


class TestParseOsRelease:
    """Test /etc/os-release parsing."""

    def test_parses_quoted_and_bare_values(self):
        info = parse_os_release(OS_RELEASE)
        assert info["NAME"] == "Ubuntu"
        assert info["VERSION_CODENAME"] == "noble"

    def test_ignores_comments_and_blank_lines(self):
        info = parse_os_release("# comment\n\nID=debian\n")
        assert info == {"ID": "debian"}


class TestSnapInstall:
    """Test the snap install sequence."""

    def test_runs_snap_sequence(self, fake_runner):
        Installer(runner=fake_runner).install(profile_for(RuntimeKind.SANDBOXED))

        assert fake_runner.calls == [
            ("apt-get", "update"),
            ("apt-get", "install", "-y", "snapd"),
            ("snap", "install", "docker"),
        ]

    def test_failure_raises_install_error(self, fake_runner):
        fake_runner.on("snap", "install", returncode=1, stderr="snap store unreachable")

        with pytest.raises(InstallError, match="snap store unreachable"):
            Installer(runner=fake_runner).install(profile_for(RuntimeKind.SANDBOXED))


class TestAptInstall:
    """Test the docker-ce install sequence."""

    def test_runs_apt_sequence(self, fake_runner, apt_paths, os_release):
        fake_runner.on("dpkg", "--print-architecture", stdout="amd64\n")

        Installer(runner=fake_runner, os_release=os_release).install(
            profile_for(RuntimeKind.PACKAGED)
        )

        assert fake_runner.ran("apt-get", "remove", "-y", "docker.io")
        assert fake_runner.ran("apt-get", "install", "-y", "ca-certificates", "curl")
        assert fake_runner.ran("curl", "-fsSL")
        assert fake_runner.calls[-1] == ("apt-get", "install", "-y", *DOCKER_PACKAGES)
        # update runs before prerequisites and again after adding the repo
        assert fake_runner.calls.count(("apt-get", "update")) == 2

    def test_writes_sources_list(self, fake_runner, apt_paths, os_release):
        fake_runner.on("dpkg", "--print-architecture", stdout="arm64\n")

        Installer(runner=fake_runner, os_release=os_release).install(
            profile_for(RuntimeKind.PACKAGED)
        )

        content = AptPaths.DOCKER_SOURCES.read_text()
        assert content.startswith("deb [arch=arm64 signed-by=")
        assert "https://download.docker.com/linux/ubuntu noble stable" in content

    def test_conflicting_package_removal_is_best_effort(self, fake_runner, apt_paths, os_release):
        fake_runner.on("apt-get", "remove", returncode=100, stderr="Unable to locate package")
        fake_runner.on("dpkg", "--print-architecture", stdout="amd64\n")

        Installer(runner=fake_runner, os_release=os_release).install(
            profile_for(RuntimeKind.PACKAGED)
        )

        assert fake_runner.calls[-1][:3] == ("apt-get", "install", "-y")

    def test_key_download_failure_aborts(self, fake_runner, apt_paths, os_release):
        fake_runner.on("curl", returncode=22, stderr="404 Not Found")

        with pytest.raises(InstallError, match="404"):
            Installer(runner=fake_runner, os_release=os_release).install(
                profile_for(RuntimeKind.PACKAGED)
            )

        assert not fake_runner.ran("apt-get", "install", "-y", "docker-ce")

    def test_missing_codename_aborts(self, fake_runner, apt_paths, tmp_path):
        release = tmp_path / "os-release-nocodename"
        release.write_text("ID=ubuntu\n")
        fake_runner.on("dpkg", "--print-architecture", stdout="amd64\n")

        with pytest.raises(InstallError, match="codename"):
            Installer(runner=fake_runner, os_release=release).install(
                profile_for(RuntimeKind.PACKAGED)
            )

    def test_version_codename_fallback(self, fake_runner, tmp_path):
        release = tmp_path / "os-release-debian"
        release.write_text("ID=debian\nVERSION_CODENAME=bookworm\n")
        fake_runner.on("dpkg", "--print-architecture", stdout="amd64\n")

        line = Installer(runner=fake_runner, os_release=release).repo_line()

        assert " bookworm stable" in line


class TestPlannedCommands:
    """Test the human-readable install plan."""

    def test_plan_mentions_packages(self):
        plan = Installer().planned_commands(profile_for(RuntimeKind.PACKAGED))
        assert any("docker-ce" in line for line in plan)
        assert installer_module.DOCKER_GPG_URL in " ".join(plan)

    def test_snap_plan(self):
        plan = Installer().planned_commands(profile_for(RuntimeKind.SANDBOXED))
        assert plan[-1] == "snap install docker"
