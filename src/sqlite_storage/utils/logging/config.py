"""
Application-wide logging setup.

The library itself only creates module loggers; hosts call setup_logging
(or configure_from_env) once at startup to attach handlers.

Environment variables (read by LoggingConfig.from_env):
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL (default: INFO)
    LOG_FILE: path of a rotating log file (default: none)
    LOG_JSON: "true" for JSON lines on every handler (default: false)
    LOG_CONSOLE: "false" to disable stderr output (default: true)
"""

import dataclasses
import logging
import logging.handlers
import os
import sys
from dataclasses import dataclass
from pathlib import Path

from .formatters import ConsoleFormatter, JSONFormatter

DEFAULT_APP_NAME = "sqlite-storage"
PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

# Third-party loggers that are chatty below WARNING
_QUIET_LOGGERS = ("opentelemetry", "grpc")


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: str | None = None
    console_output: bool = True
    json_format: bool = False
    app_name: str = DEFAULT_APP_NAME
    max_bytes: int = 10 * 1024 * 1024
    backup_count: int = 5

    @property
    def numeric_level(self) -> int:
        level = logging.getLevelName(self.level.upper())
        return level if isinstance(level, int) else logging.INFO

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
            console_output=_env_bool("LOG_CONSOLE", True),
            json_format=_env_bool("LOG_JSON", False),
        )


def _formatter(config: LoggingConfig, console: bool) -> logging.Formatter:
    if config.json_format:
        return JSONFormatter(app_name=config.app_name)
    if console:
        return ConsoleFormatter(use_colors=True)
    return logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def _build_handlers(config: LoggingConfig) -> list[logging.Handler]:
    handlers: list[logging.Handler] = []

    if config.console_output:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(_formatter(config, console=True))
        handlers.append(console)

    if config.log_file:
        path = Path(config.log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            path,
            maxBytes=config.max_bytes,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        rotating.setFormatter(_formatter(config, console=False))
        handlers.append(rotating)

    for handler in handlers:
        handler.setLevel(config.numeric_level)
    return handlers


def _detach_root_handlers(root_logger: logging.Logger) -> None:
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        try:
            handler.close()
        except (OSError, ValueError):
            pass


def setup_logging(config: LoggingConfig | None = None, **overrides) -> LoggingConfig:
    """
    Replace the root logger's handlers according to config.

    Args:
        config: Logging settings (default: LoggingConfig())
        **overrides: Field values replacing those of config,
            e.g. setup_logging(level="DEBUG", json_format=True)

    Returns:
        The effective configuration
    """
    config = dataclasses.replace(config or LoggingConfig(), **overrides)

    root_logger = logging.getLogger()
    _detach_root_handlers(root_logger)
    root_logger.setLevel(config.numeric_level)
    for handler in _build_handlers(config):
        root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(
        f"Logging initialized: level={config.level.upper()}, file={config.log_file or 'none'}, "
        f"console={config.console_output}, json={config.json_format}"
    )
    return config


def configure_from_env() -> LoggingConfig:
    """Set up logging from LOG_* environment variables."""
    return setup_logging(LoggingConfig.from_env())


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flush and close every root handler; call once at process exit."""
    _detach_root_handlers(logging.getLogger())
    logging.shutdown()
