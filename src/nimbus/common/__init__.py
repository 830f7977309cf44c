"""Common models and helpers used across nimbus modules."""

from pydantic import JsonValue

from .logging import LoggingConfig, create_logger, disable_library_logging, enable_library_logging, setup_cli_logging
from .models import AppDirectories, AppInfo, AppPaths
from .paths import get_data_directory_from_dirs, get_global_config_root

__all__ = [
    "AppDirectories",
    "AppInfo",
    "AppPaths",
    "JsonValue",
    "LoggingConfig",
    "create_logger",
    "disable_library_logging",
    "enable_library_logging",
    "get_data_directory_from_dirs",
    "get_global_config_root",
    "setup_cli_logging",
]
