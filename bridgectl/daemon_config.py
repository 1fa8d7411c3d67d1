# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Backup and rewrite Docker's daemon.json.

Only three top-level keys are managed (log-level, bip, default-address-pools)
and the legacy fixed-cidr key is dropped. Everything else in the file is
carried over untouched, in its original order.
"""

import json
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from bridgectl.utils.exceptions import ConfigError
from bridgectl.utils.logging import get_logger

logger = get_logger(__name__)

LOG_LEVEL = "error"
LEGACY_KEYS = ("fixed-cidr",)
CONFIG_MODE = 0o644
BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


@dataclass(frozen=True)
class ReconcileResult:
    """What reconcile() did to the file."""

    path: Path
    backup_path: Optional[Path]
    created: bool


def managed_values(bip: str, subnet: str, pool_size: int) -> Dict[str, Any]:
    """The keys bridgectl owns, with their target values."""
    return {
        "log-level": LOG_LEVEL,
        "bip": bip,
        "default-address-pools": [{"base": subnet, "size": pool_size}],
    }


def merge_managed_keys(
    document: Dict[str, Any], bip: str, subnet: str, pool_size: int
) -> Dict[str, Any]:
    """Return a copy of document with managed keys set and legacy keys removed.

    This is a flat top-level overwrite; nested values are replaced wholesale.
    """
    merged = {key: value for key, value in document.items() if key not in LEGACY_KEYS}
    merged.update(managed_values(bip, subnet, pool_size))
    return merged


def render_config(document: Dict[str, Any]) -> str:
    """Serialize daemon.json deterministically."""
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def read_config(path: Path) -> Dict[str, Any]:
    """Parse daemon.json, raising ConfigError for anything but a JSON object."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    # Docker accepts an empty daemon.json
    if not text.strip():
        return {}

    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"{path} is not valid JSON: {e}",
            hint=f"Fix or remove {path} and re-run",
        ) from e

    if not isinstance(document, dict):
        raise ConfigError(
            f"{path} must contain a JSON object, found {type(document).__name__}",
            hint=f"Fix or remove {path} and re-run",
        )
    return document


def backup_config(path: Path, now: Optional[datetime] = None) -> Path:
    """Copy path to path.backup.<timestamp>, never overwriting an older backup."""
    path = Path(path)
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    backup = path.with_name(f"{path.name}.backup.{stamp}")
    counter = 1
    while backup.exists():
        backup = path.with_name(f"{path.name}.backup.{stamp}.{counter}")
        counter += 1

    try:
        shutil.copy2(path, backup)
    except OSError as e:
        raise ConfigError(f"Cannot back up {path}: {e}") from e
    return backup


def write_atomic(path: Path, content: str, mode: int = CONFIG_MODE) -> None:
    """Write content to path via a temp file in the same directory and a rename.

    Readers see either the old file or the new one, never a partial write.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def reconcile(
    path: Path,
    target_bip: str,
    target_subnet: str,
    target_pool_size: int,
    now: Optional[datetime] = None,
) -> ReconcileResult:
    """Bring daemon.json in line with the target bridge and address pools.

    Args:
        path: daemon.json location for the detected runtime
        target_bip: Bridge interface CIDR, e.g. 10.20.1.1/24
        target_subnet: Address pool base CIDR, e.g. 10.20.0.0/16
        target_pool_size: Prefix length of allocated networks, e.g. 24
        now: Timestamp for the backup name (defaults to the current time)

    Returns:
        ReconcileResult describing the backup and whether the file was new

    Raises:
        ConfigError: If the existing file is not a JSON object or the new
            file cannot be written. The original file is left untouched.
    """
    path = Path(path)
    logger.info("Updating Docker configuration...")

    backup_path = None
    if path.exists():
        backup_path = backup_config(path, now)
        logger.success(f"Backup created: {backup_path}")
        document = merge_managed_keys(
            read_config(path), target_bip, target_subnet, target_pool_size
        )
        created = False
    else:
        logger.info("No existing config to backup.")
        document = managed_values(target_bip, target_subnet, target_pool_size)
        created = True

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        write_atomic(path, render_config(document))
        os.chmod(path, CONFIG_MODE)
    except OSError as e:
        raise ConfigError(
            f"Cannot write {path}: {e}",
            hint="bridgectl must run as root to edit daemon.json",
        ) from e

    logger.success(f"Configuration updated: {path}")
    return ReconcileResult(path=path, backup_path=backup_path, created=created)
