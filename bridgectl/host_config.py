# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized settings for bridgectl (~/.config/bridgectl/config.yml)."""

import logging
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import ValidationError

from bridgectl.models.settings import SettingsModel
from bridgectl.paths import HostPaths
from bridgectl.utils.exceptions import ConfigError

logger = logging.getLogger(__name__)


class HostConfig:
    """Loads and validates bridgectl settings.

    A missing file means defaults. An unreadable file or invalid YAML logs a
    warning and uses defaults. Sections that fail validation fall back to
    their defaults individually so one typo doesn't discard the whole file.
    """

    def __init__(self, config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else HostPaths.config_file()
        self._model = self._load()

    def _load(self) -> SettingsModel:
        """Load configuration from file."""
        if not self.config_path.exists():
            return SettingsModel()

        try:
            with open(self.config_path) as f:
                raw_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load config from {self.config_path}: {e}")
            return SettingsModel()

        if not isinstance(raw_config, dict):
            logger.warning(f"Failed to load config from {self.config_path}: not a mapping")
            return SettingsModel()

        try:
            return SettingsModel.model_validate(raw_config)
        except ValidationError as e:
            logger.warning(f"Config validation errors: {e}")
            return self._load_sections(raw_config)

    def _load_sections(self, raw_config: dict) -> SettingsModel:
        """Validate each section on its own, keeping defaults for bad ones."""
        defaults = SettingsModel()
        merged: dict[str, Any] = {}
        for name, field in SettingsModel.model_fields.items():
            if name not in raw_config:
                continue
            value = raw_config[name]
            annotation = field.annotation
            try:
                if hasattr(annotation, "model_validate"):
                    merged[name] = annotation.model_validate(value)
                else:
                    SettingsModel.model_validate({name: value})
                    merged[name] = value
            except ValidationError:
                logger.warning(f"Ignoring invalid '{name}' section, using defaults")
                merged[name] = getattr(defaults, name)
        return SettingsModel.model_validate(merged)

    @property
    def model(self) -> SettingsModel:
        """Validated settings as loaded from disk."""
        return self._model

    def settings(
        self,
        subnet: Optional[str] = None,
        bip: Optional[str] = None,
        pool_size: Optional[int] = None,
        install_via: Optional[str] = None,
    ) -> SettingsModel:
        """Return settings with command-line overrides applied.

        Raises:
            ConfigError: If an override produces an invalid value
        """
        data = self._model.model_dump()
        network = data["network"]
        if subnet is not None:
            network["subnet"] = subnet
        if bip is not None:
            network["bip"] = bip
        if pool_size is not None:
            network["pool_size"] = pool_size
        if install_via is not None:
            data["install"]["default_kind"] = install_via

        try:
            return SettingsModel.model_validate(data)
        except ValidationError as e:
            messages = "; ".join(err["msg"] for err in e.errors())
            raise ConfigError(
                f"Invalid settings: {messages}",
                hint="Check --subnet/--bip/--pool-size or your config.yml",
            ) from e


# Singleton instance
_config: Optional[HostConfig] = None


def get_config(config_path: Optional[Path] = None) -> HostConfig:
    """Get the global configuration, loading it on first use."""
    global _config
    if _config is None or (config_path and Path(config_path) != _config.config_path):
        _config = HostConfig(config_path)
    return _config


def reset_config() -> None:
    """Forget the cached configuration (used by tests)."""
    global _config
    _config = None
