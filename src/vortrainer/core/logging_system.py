"""Logging setup for the trainer and its components.

Loggers are configured from a YAML file (or built-in defaults) and write to a
console handler and a single session log file. The session log lives in a
platform-specific directory and is rotated each time the trainer starts, so
the last few sessions are always available for debugging.

Platform-specific log locations:
    - macOS: ~/Library/Logs/VORTrainer/vortrainer.log
    - Linux: ~/.vortrainer/logs/vortrainer.log
    - Windows: %AppData%/VORTrainer/Logs/vortrainer.log

Typical usage example:
    from vortrainer.core.logging_system import get_logger, initialize_logging

    initialize_logging("config/logging.yaml")
    log = get_logger("flight_timer")
    log.info("Timer scheduled every %d ms", interval_ms)
"""

import logging
import os
import platform
import time
from pathlib import Path
from typing import Any

import yaml

LOG_FILENAME = "vortrainer.log"

_logging_config: dict[str, Any] = {}
_loggers_cache: dict[str, logging.Logger] = {}
_initialized = False


class LoggingError(Exception):
    """Raised when the logging configuration cannot be applied."""


def get_platform_log_dir() -> Path:
    """Return the directory session logs are written to on this platform.

    Returns:
        Platform-appropriate log directory.

    Examples:
        >>> get_platform_log_dir()
        PosixPath('/home/pilot/.vortrainer/logs')
    """
    system = platform.system()

    if system == "Darwin":
        return Path.home() / "Library" / "Logs" / "VORTrainer"
    if system == "Windows":
        appdata = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / "VORTrainer" / "Logs"
    return Path.home() / ".vortrainer" / "logs"


def rotate_logs(log_dir: Path, log_filename: str = LOG_FILENAME, keep_count: int = 5) -> None:
    """Shift the previous session logs one slot up.

    ``vortrainer.log`` becomes ``vortrainer.log.1``, ``.1`` becomes ``.2`` and
    so on. The log in slot ``keep_count`` is removed.

    Args:
        log_dir: Directory containing the logs.
        log_filename: Name of the current session log.
        keep_count: Number of previous sessions to keep.
    """
    log_file = log_dir / log_filename
    if not log_file.exists():
        return

    oldest = log_dir / f"{log_filename}.{keep_count}"
    if oldest.exists():
        oldest.unlink()

    for index in range(keep_count - 1, 0, -1):
        source = log_dir / f"{log_filename}.{index}"
        if source.exists():
            source.rename(log_dir / f"{log_filename}.{index + 1}")

    log_file.rename(log_dir / f"{log_filename}.1")


def initialize_logging(config_path: str | Path | None = None, use_platform_dir: bool = True) -> None:
    """Configure the root logger for a new trainer session.

    Args:
        config_path: Logging YAML file. Built-in defaults are used when None.
        use_platform_dir: Write logs to the platform log directory instead of
            the ``log_dir`` entry of the configuration.

    Raises:
        LoggingError: If the configuration file is missing or unreadable.
    """
    global _logging_config, _initialized

    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise LoggingError(f"Logging config file not found: {config_path}")
        try:
            with config_path.open("r", encoding="utf-8") as f:
                _logging_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise LoggingError(f"Failed to load logging config: {e}") from e
    else:
        _logging_config = _get_default_config()

    if use_platform_dir:
        _logging_config["log_dir"] = str(get_platform_log_dir())

    log_dir = Path(_logging_config.get("log_dir", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)

    session_log = _logging_config.get("session_log", {})
    rotate_logs(
        log_dir,
        session_log.get("filename", LOG_FILENAME),
        session_log.get("backup_count", 5),
    )

    _configure_root_logger()
    _loggers_cache.clear()
    _initialized = True


def _get_default_config() -> dict[str, Any]:
    return {
        "version": 1,
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        "date_format": "%Y-%m-%d %H:%M:%S",
        "log_dir": "logs",
        "session_log": {
            "enabled": True,
            "filename": LOG_FILENAME,
            "backup_count": 5,
        },
        "console": {
            "enabled": True,
            "level": "INFO",
        },
        "components": {},
    }


def _configure_root_logger() -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console = _logging_config.get("console", {})
    if console.get("enabled", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console.get("level", "INFO")))
        console_handler.setFormatter(_get_formatter())
        root_logger.addHandler(console_handler)

    session_log = _logging_config.get("session_log", {})
    if session_log.get("enabled", True):
        log_dir = Path(_logging_config.get("log_dir", "logs"))
        # Rotation already happened, so each session starts a fresh file.
        file_handler = logging.FileHandler(
            log_dir / session_log.get("filename", LOG_FILENAME),
            mode="w",
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(_get_formatter())
        root_logger.addHandler(file_handler)


class MillisecondFormatter(logging.Formatter):
    """Formatter that appends milliseconds to timestamps with a dot."""

    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        stamp = time.strftime(datefmt or "%Y-%m-%d %H:%M:%S", ct)
        return f"{stamp}.{int(record.msecs):03d}"


def _get_formatter() -> logging.Formatter:
    fmt = _logging_config.get("format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    datefmt = _logging_config.get("date_format", "%Y-%m-%d %H:%M:%S")
    return MillisecondFormatter(fmt, datefmt)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a trainer component.

    Loggers are cached. A component may be given its own level, or be
    silenced, under the ``components`` section of the logging YAML.

    Args:
        name: Component name, usually ``__name__``.

    Returns:
        Configured logger instance.

    Examples:
        >>> log = get_logger("vortrainer.engine")
        >>> log.debug("Radial %03d, CDI %.1f", radial, cdi)
    """
    if not _initialized:
        initialize_logging()

    if name in _loggers_cache:
        return _loggers_cache[name]

    logger = logging.getLogger(name)
    component = _logging_config.get("components", {}).get(name, {})

    if component.get("enabled", True):
        if "level" in component:
            logger.setLevel(getattr(logging, component["level"]))
    else:
        logger.disabled = True

    _loggers_cache[name] = logger
    return logger


def shutdown_logging() -> None:
    """Flush and close all handlers at trainer shutdown."""
    global _initialized

    logging.shutdown()
    logging.getLogger().handlers.clear()
    _loggers_cache.clear()
    _initialized = False
