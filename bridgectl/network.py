# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Verify the Docker bridge moved, using a throwaway container."""

import time
from dataclasses import dataclass
from typing import Callable, Optional

import docker
import requests
from docker.models.containers import Container

from bridgectl.models.settings import ValidationConfig
from bridgectl.utils.commands import Runner, run_command
from bridgectl.utils.exceptions import CommandError, ValidationError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

# docker-py only wraps HTTP errors; socket and connection failures come through raw
DOCKER_ERRORS = (docker.errors.DockerException, requests.exceptions.RequestException)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the container gateway check."""

    expected_gateway: str
    observed_gateway: Optional[str]
    bridge_address_seen: bool

    @property
    def ok(self) -> bool:
        return self.observed_gateway == self.expected_gateway


def parse_default_gateway(output: str) -> Optional[str]:
    """Extract the gateway from `ip route show default` output.

    Example line: "default via 10.20.1.1 dev eth0"
    """
    for line in output.splitlines():
        fields = line.split()
        if len(fields) >= 3:
            return fields[2]
    return None


class NetworkValidator:
    """Checks bridge addressing on the host and inside a test container."""

    def __init__(
        self,
        settings: Optional[ValidationConfig] = None,
        client: Optional[docker.DockerClient] = None,
        runner: Runner = run_command,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.settings = settings or ValidationConfig()
        self._client = client
        self.runner = runner
        self.sleep = sleep

    @property
    def client(self) -> docker.DockerClient:
        """Docker client, connected on first use."""
        if self._client is None:
            try:
                self._client = docker.from_env()
            except DOCKER_ERRORS as e:
                raise ValidationError(
                    f"Could not connect to Docker: {e}",
                    hint="Is the daemon running? Try: bridgectl status",
                ) from e
        return self._client

    # ========== Host-side checks ==========

    def check_bridge_interface(self, gateway: str) -> bool:
        """Look for the gateway address on the bridge interface.

        A miss is only a warning: docker0 may not carry the address until a
        container attaches.
        """
        iface = self.settings.bridge_interface
        logger.info("Testing bridge IP...")
        try:
            result = self.runner(["ip", "-4", "addr", "show", iface], check=False, timeout=30)
            seen = result.returncode == 0 and f"inet {gateway}/" in result.stdout
        except CommandError as e:
            logger.debug(f"Interface check failed: {e}")
            seen = False

        if seen:
            logger.success("Bridge IP matches BIP.")
        else:
            logger.warning("Bridge IP not showing yet (normal if no containers).")
        return seen

    def check_bridge_network(self, gateway: str) -> None:
        """Confirm Docker's bridge network reports the new gateway.

        Raises:
            ValidationError: If the gateway is missing from the bridge IPAM config
        """
        name = self.settings.bridge_network
        try:
            network = self.client.networks.get(name)
        except DOCKER_ERRORS as e:
            raise ValidationError(f"Cannot inspect network {name}: {e}") from e

        configs = (network.attrs.get("IPAM") or {}).get("Config") or []
        gateways = [cfg.get("Gateway") for cfg in configs]
        if gateway not in gateways:
            raise ValidationError(
                f"Bridge IP not applied: {name} network reports gateway(s) "
                f"{', '.join(g for g in gateways if g) or 'none'}, expected {gateway}",
                hint=f"Check daemon.json and Docker logs; inspect with: docker network inspect {name}",
            )
        logger.success("Bridge configuration validated.")

    def ensure_bridge_up(self) -> bool:
        """Bring the bridge interface up if the kernel reports it DOWN.

        Returns:
            True if the interface had to be brought up
        """
        iface = self.settings.bridge_interface
        try:
            result = self.runner(["ip", "link", "show", iface], check=False, timeout=30)
            if result.returncode != 0 or "state DOWN" not in result.stdout:
                return False
            self.runner(["ip", "link", "set", iface, "up"], timeout=30)
        except CommandError as e:
            logger.warning(f"Could not bring {iface} up: {e}")
            return False
        logger.success(f"Brought {iface} up.")
        return True

    def prune_networks(self) -> None:
        """Remove unused networks so pools can be reallocated from the new subnet."""
        try:
            result = self.client.networks.prune() or {}
        except DOCKER_ERRORS + (ValidationError,) as e:
            logger.warning(f"Could not prune Docker networks: {e}")
            return
        deleted = result.get("NetworksDeleted") or []
        logger.success(f"Cleaned up old Docker networks ({len(deleted)} removed).")

    # ========== Test container ==========

    def _find_test_container(self) -> Optional[Container]:
        try:
            return self.client.containers.get(self.settings.container_name)
        except docker.errors.NotFound:
            return None

    def remove_test_container(self) -> bool:
        """Force-remove the test container if it exists.

        Returns:
            True if a container was removed
        """
        try:
            container = self._find_test_container()
            if container is None:
                return False
            container.remove(force=True)
        except docker.errors.NotFound:
            return False
        except (docker.errors.APIError, requests.exceptions.RequestException, ValidationError) as e:
            logger.warning(f"Could not remove test container {self.settings.container_name}: {e}")
            return False
        logger.success("Cleaned up test container.")
        return True

    def _read_gateway(self, container: Container) -> Optional[str]:
        try:
            result = container.exec_run(["ip", "route", "show", "default"])
        except DOCKER_ERRORS as e:
            raise ValidationError(f"Cannot read routes from test container: {e}") from e
        output = (result.output or b"").decode("utf-8", errors="replace")
        if result.exit_code != 0:
            logger.debug(f"ip route exited {result.exit_code}: {output.strip()}")
            return None
        return parse_default_gateway(output)

    def validate(self, bip: str) -> ValidationResult:
        """Run a test container and compare its default gateway to bip's host part.

        The test container is removed on every path out of this method.

        Raises:
            ValidationError: If the container cannot be started or inspected
        """
        gateway = bip.split("/", 1)[0]
        bridge_seen = self.check_bridge_interface(gateway)

        logger.info("Testing with temporary container...")
        self.remove_test_container()
        try:
            try:
                container = self.client.containers.run(
                    self.settings.image,
                    self.settings.command,
                    name=self.settings.container_name,
                    detach=True,
                )
            except DOCKER_ERRORS as e:
                raise ValidationError(
                    f"Failed to start test container: {e}",
                    hint=f"Check Docker network settings with: docker network inspect {self.settings.bridge_network}",
                ) from e

            self.sleep(self.settings.settle_seconds)
            observed = self._read_gateway(container)
        finally:
            self.remove_test_container()

        result = ValidationResult(
            expected_gateway=gateway,
            observed_gateway=observed,
            bridge_address_seen=bridge_seen,
        )
        if result.ok:
            logger.success(f"Container gateway: {observed} (SUCCESS)")
        else:
            logger.error(f"Container gateway: {observed} (FAILED)")
        return result

    def check(self, bip: str) -> ValidationResult:
        """validate() that raises on a gateway mismatch."""
        result = self.validate(bip)
        if not result.ok:
            raise ValidationError(
                f"Container gateway {result.observed_gateway} does not match {result.expected_gateway}",
                hint=f"Inspect with: docker network inspect {self.settings.bridge_network}",
            )
        logger.success("IP change verified.")
        return result
