# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for bridgectl settings (~/.config/bridgectl/config.yml)."""

import ipaddress
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NetworkTarget(BaseModel):
    """Target addressing for the Docker default bridge and address pools.

    bip: Interface CIDR for docker0; its host portion becomes the gateway
         every container on the default bridge should see.
    subnet: Base CIDR that user-defined networks are carved from.
    pool_size: Prefix length of each network allocated from subnet.
    """

    model_config = ConfigDict(frozen=True)

    subnet: str = "10.20.0.0/16"
    bip: str = "10.20.1.1/24"
    pool_size: int = Field(default=24, ge=1, le=32)

    @field_validator("subnet")
    @classmethod
    def validate_subnet(cls, v: str) -> str:
        try:
            network = ipaddress.ip_network(v, strict=True)
        except ValueError as e:
            raise ValueError(f"subnet must be a network CIDR like 10.20.0.0/16: {e}") from e
        return str(network)

    @field_validator("bip")
    @classmethod
    def validate_bip(cls, v: str) -> str:
        if "/" not in v:
            raise ValueError("bip must include a prefix length, e.g. 10.20.1.1/24")
        try:
            iface = ipaddress.ip_interface(v)
        except ValueError as e:
            raise ValueError(f"bip must be an interface CIDR like 10.20.1.1/24: {e}") from e
        if iface.ip == iface.network.network_address:
            raise ValueError("bip must be a host address, not the network address")
        return str(iface)

    @model_validator(mode="after")
    def validate_pool_size(self) -> "NetworkTarget":
        prefix = ipaddress.ip_network(self.subnet).prefixlen
        if self.pool_size < prefix:
            raise ValueError(
                f"pool_size /{self.pool_size} is larger than subnet {self.subnet}"
            )
        return self

    @property
    def gateway(self) -> str:
        """Host portion of bip, e.g. 10.20.1.1."""
        return self.bip.split("/", 1)[0]


class InstallConfig(BaseModel):
    """Which packaging path to install when no runtime is found.

    packaged: docker-ce from Docker's apt repository (systemd service)
    sandboxed: docker snap (snapd service)
    """

    default_kind: Literal["packaged", "sandboxed"] = "packaged"


class ServiceConfig(BaseModel):
    """Readiness polling after a daemon restart."""

    timeout: float = Field(default=60.0, gt=0)
    interval: float = Field(default=1.0, gt=0)
    backoff: float = Field(default=2.0, ge=1.0)
    max_interval: float = Field(default=8.0, gt=0)


class ValidationConfig(BaseModel):
    """Throwaway container used to prove the gateway moved."""

    container_name: str = "temp-ip-test"
    image: str = "alpine"
    command: list[str] = Field(default_factory=lambda: ["sleep", "10"])
    settle_seconds: float = Field(default=3.0, ge=0)
    bridge_interface: str = "docker0"
    bridge_network: str = "bridge"


class SettingsModel(BaseModel):
    """Root settings model."""

    version: str = "1.0"
    network: NetworkTarget = Field(default_factory=NetworkTarget)
    install: InstallConfig = Field(default_factory=InstallConfig)
    service: ServiceConfig = Field(default_factory=ServiceConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
