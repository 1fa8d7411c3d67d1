# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pytest fixtures for bridgectl tests.

Unit tests never touch the host: commands go through FakeRunner and Docker
through a MagicMock client.
"""

import subprocess
from typing import Dict, List, Optional, Sequence, Tuple
from unittest.mock import MagicMock

import docker
import pytest

from bridgectl.host_config import reset_config
from bridgectl.utils.exceptions import CommandError


class FakeRunner:
    """Stand-in for run_command that records calls and replays canned results.

    Responses are matched on the longest command prefix registered with on().
    Unmatched commands succeed with empty output.
    """

    def __init__(self):
        self.calls: List[Tuple[str, ...]] = []
        self._responses: Dict[Tuple[str, ...], List] = {}

    def on(self, *prefix: str, returncode: int = 0, stdout: str = "", stderr: str = "", raises=None):
        """Register a response; repeated registrations are consumed in order."""
        self._responses.setdefault(tuple(prefix), []).append((returncode, stdout, stderr, raises))
        return self

    def _match(self, cmd: Tuple[str, ...]) -> Optional[Tuple[str, ...]]:
        best = None
        for prefix in self._responses:
            if cmd[: len(prefix)] == prefix and (best is None or len(prefix) > len(best)):
                best = prefix
        return best

    def __call__(self, cmd: Sequence[str], check: bool = True, timeout=None):
        cmd = tuple(str(c) for c in cmd)
        self.calls.append(cmd)

        returncode, stdout, stderr, raises = 0, "", "", None
        prefix = self._match(cmd)
        if prefix is not None:
            queue = self._responses[prefix]
            returncode, stdout, stderr, raises = queue[0] if len(queue) == 1 else queue.pop(0)

        if raises is not None:
            raise raises
        if returncode != 0 and check:
            raise CommandError(cmd, returncode=returncode, stderr=stderr)
        return subprocess.CompletedProcess(list(cmd), returncode, stdout, stderr)

    def ran(self, *prefix: str) -> bool:
        return any(call[: len(prefix)] == prefix for call in self.calls)


@pytest.fixture
def fake_runner():
    """Command runner that records calls instead of running them."""
    return FakeRunner()


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep settings and logs out of the real home directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
    monkeypatch.delenv("XDG_STATE_HOME", raising=False)
    monkeypatch.delenv("BRIDGECTL_CONFIG", raising=False)
    monkeypatch.setenv("BRIDGECTL_LOG_FILE", str(tmp_path / "bridgectl.log"))
    reset_config()
    yield home
    reset_config()


def make_exec_result(exit_code: int = 0, output: bytes = b""):
    result = MagicMock()
    result.exit_code = exit_code
    result.output = output
    return result


@pytest.fixture
def docker_client():
    """MagicMock Docker client with a running test container.

    - containers.get raises NotFound until a container has been run
    - containers.run returns test_container, whose default route is 10.20.1.1
    - networks.get('bridge') reports gateway 10.20.1.1
    """
    client = MagicMock(name="DockerClient")
    state = {"exists": False}

    container = MagicMock(name="Container")
    container.exec_run.return_value = make_exec_result(
        0, b"default via 10.20.1.1 dev eth0 \n"
    )

    def _remove(force=False):
        state["exists"] = False

    container.remove.side_effect = _remove

    def _run(image, command=None, name=None, detach=False, **kwargs):
        state["exists"] = True
        return container

    def _get(name):
        if state["exists"]:
            return container
        raise docker.errors.NotFound(f"No such container: {name}")

    client.containers.run.side_effect = _run
    client.containers.get.side_effect = _get

    network = MagicMock(name="Network")
    network.attrs = {"IPAM": {"Config": [{"Subnet": "10.20.1.0/24", "Gateway": "10.20.1.1"}]}}
    client.networks.get.return_value = network
    client.networks.prune.return_value = {"NetworksDeleted": ["old-net"]}

    client.test_container = container
    client.test_state = state
    return client


@pytest.fixture
def exec_result():
    """Factory for container.exec_run results."""
    return make_exec_result
