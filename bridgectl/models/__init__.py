# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for bridgectl configuration."""

from bridgectl.models.settings import (
    InstallConfig,
    NetworkTarget,
    ServiceConfig,
    SettingsModel,
    ValidationConfig,
)

__all__ = [
    "InstallConfig",
    "NetworkTarget",
    "ServiceConfig",
    "SettingsModel",
    "ValidationConfig",
]
