"""Loading nimbus configuration from ~/.config/nimbus/config.yaml."""

from .loader import load_config
from .models import (
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConfigYamlError,
    NimbusConfig,
)
from .store import FileConfigStore, apply_settings_overrides

__all__ = [
    "ConfigError",
    "ConfigIOError",
    "ConfigNotFoundError",
    "ConfigValidationError",
    "ConfigYamlError",
    "FileConfigStore",
    "NimbusConfig",
    "apply_settings_overrides",
    "load_config",
]
