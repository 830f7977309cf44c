"""Logging utilities for nimbus using Loguru.

Two modes are supported:
- CLI usage: file sink with rotation and retention, text or JSON records
- Library usage: logging disabled by default, opt in with nimbus.enable_logging()
"""

import sys
from pathlib import Path
from typing import Literal

import loguru
from loguru import logger
from pydantic import BaseModel, ConfigDict

from nimbus.constants import APP_NAME

from .models import AppDirectories, AppInfo
from .paths import get_data_directory_from_dirs


type LogLevel = Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


class LoggingConfig(BaseModel):
    """The ``logging`` section of the config file; only the CLI reads it."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    log_level: LogLevel = "INFO"
    # Defaults to <data dir>/logs/nimbus.log
    log_file: str | None = None
    rotation: str = "5 MB"
    retention: str = "14 days"
    format: Literal["json", "text"] = "text"


def setup_cli_logging(app_info: AppInfo, config: LoggingConfig, directories: AppDirectories) -> int:
    """Send nimbus records to a rotating file for the lifetime of a CLI run.

    Fetch workers and callback threads log concurrently, so the sink is
    queued (``enqueue=True``) and written from a single loguru thread.
    """
    logger.enable(APP_NAME)
    logger.remove()
    logger.configure(extra={"scope": "cli", "env": app_info.environment})

    log_file = _resolve_log_file(config, directories)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    sink_options: dict[str, object] = (
        {"serialize": True} if config.format == "json" else {"format": _get_text_format()}
    )
    handler_id = logger.add(
        log_file,
        level=config.log_level,
        rotation=config.rotation,
        retention=config.retention,
        encoding="utf-8",
        enqueue=True,
        backtrace=False,
        diagnose=app_info.environment == "dev",
        **sink_options,
    )

    logger.debug("CLI logging initialized", log_file=str(log_file), level=config.log_level, format=config.format)
    return handler_id


def disable_library_logging() -> None:
    logger.disable(APP_NAME)


def enable_library_logging(level: str = "INFO") -> int:
    logger.enable(APP_NAME)
    logger.remove()

    return logger.add(
        sys.stderr,
        level=level,
        format=_get_text_format(),
        colorize=False,
    )


def create_logger(scope: str) -> "loguru.Logger":
    return logger.bind(scope=scope)


def _get_text_format() -> str:
    return (
        "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {thread.name} | "
        "{name}:{function}:{line} - {message} | {extra}\n{exception}"
    )


def _resolve_log_file(config: LoggingConfig, directories: AppDirectories) -> Path:
    if config.log_file:
        return Path(config.log_file).expanduser()
    return get_data_directory_from_dirs(directories) / "logs" / f"{APP_NAME}.log"
