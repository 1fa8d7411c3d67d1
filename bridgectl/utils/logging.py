# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Unified logging for bridgectl.

This module provides:
1. Centralized logging configuration
2. Debug mode via BRIDGECTL_DEBUG env var or programmatic flag
3. Log levels via BRIDGECTL_LOG_LEVEL env var
4. Dual output: Rich console status lines, rotating file log for post-mortems

Usage:
    from bridgectl.utils.logging import get_logger, configure_logging

    # In CLI entry point:
    configure_logging(debug=debug)

    # In any module:
    logger = get_logger(__name__)
    logger.info("Restarting Docker...")
    logger.success("Docker is active")
    logger.error("Gateway mismatch", exc=exception)

Environment Variables:
    BRIDGECTL_DEBUG=1          Enable debug mode (verbose output)
    BRIDGECTL_LOG_LEVEL=DEBUG  Set log level (DEBUG, INFO, WARNING, ERROR)
    BRIDGECTL_LOG_FILE=/path   Override log file location
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from rich.console import Console

# Global state
_configured = False
_debug_mode = False
_log_file: Optional[Path] = None

# Shared Rich console instance
console = Console()

# Custom log level for success messages
SUCCESS_LEVEL = 25
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


def _get_log_file() -> Path:
    """Get the log file path."""
    global _log_file
    if _log_file:
        return _log_file

    env_log_file = os.environ.get("BRIDGECTL_LOG_FILE")
    if env_log_file:
        _log_file = Path(env_log_file)
    else:
        from bridgectl.paths import HostPaths

        _log_file = HostPaths.log_file()

    return _log_file


def is_debug_mode() -> bool:
    """Check if debug mode is enabled."""
    return _debug_mode or os.environ.get("BRIDGECTL_DEBUG", "").lower() in ("1", "true", "yes")


def configure_logging(
    debug: bool = False,
    log_level: Optional[str] = None,
    log_file: Optional[Path] = None,
    force: bool = False,
) -> None:
    """Configure the logging system.

    Should be called once at application startup. Later calls are ignored
    unless force=True (the CLI uses this once it has parsed --debug).

    Args:
        debug: Enable debug mode (debug lines echoed to console)
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Override log file path
        force: Reconfigure even if already configured
    """
    global _configured, _debug_mode, _log_file

    if _configured and not force:
        return

    _debug_mode = debug or is_debug_mode()

    if log_file:
        _log_file = log_file

    if log_level:
        level_name = log_level.upper()
    else:
        level_name = os.environ.get(
            "BRIDGECTL_LOG_LEVEL", "DEBUG" if _debug_mode else "INFO"
        ).upper()

    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger("bridgectl")
    root_logger.setLevel(level)

    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    # File handler with rotation (captures everything)
    try:
        path = _get_log_file()
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(file_handler)
    except OSError:
        # Can't write log file, continue with console output only
        pass

    _configured = True

    root_logger.debug(f"Logging configured: level={level_name}, debug={_debug_mode}")
    if _log_file:
        root_logger.debug(f"Log file: {_log_file}")


class BridgectlLogger:
    """Logger that mirrors records to the Rich console as status lines.

    Provides:
    - Standard log levels (debug, info, warning, error)
    - Success level for green checkmark messages
    - File logging for debugging
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.console = console

    def debug(self, message: str, console_output: bool = False) -> None:
        """Log debug message. Only shown on console in debug mode."""
        self.logger.debug(message)
        if console_output or is_debug_mode():
            self.console.print(f"[dim][DEBUG] {message}[/dim]", markup=True, highlight=False)

    def info(self, message: str, console_output: bool = True) -> None:
        """Log info message."""
        self.logger.info(message)
        if console_output:
            self.console.print(f"[blue]{message}[/blue]", highlight=False)

    def success(self, message: str, console_output: bool = True) -> None:
        """Log success message (green ✓ line)."""
        self.logger.log(SUCCESS_LEVEL, message)
        if console_output:
            self.console.print(f"[green]✓ {message}[/green]", highlight=False)

    def warning(self, message: str, console_output: bool = True) -> None:
        """Log warning message (yellow ⚠ line)."""
        self.logger.warning(message)
        if console_output:
            self.console.print(f"[yellow]⚠ {message}[/yellow]", highlight=False)

    def error(
        self,
        message: str,
        exc: Optional[Exception] = None,
        console_output: bool = True,
    ) -> None:
        """Log error message (red ✗ line).

        Args:
            message: Error message
            exc: Optional exception to include in log
            console_output: Output to console
        """
        if exc:
            self.logger.error(f"{message}: {exc}", exc_info=exc)
            error_msg = f"{message}: {exc}"
        else:
            self.logger.error(message)
            error_msg = message

        if console_output:
            self.console.print(f"[red]✗ {error_msg}[/red]", highlight=False)


def get_logger(name: str) -> BridgectlLogger:
    """Get or create a logger for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        BridgectlLogger instance
    """
    if not _configured:
        configure_logging()

    if not name.startswith("bridgectl"):
        name = f"bridgectl.{name}"

    return BridgectlLogger(name)
