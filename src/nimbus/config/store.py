"""Locating and loading the user's config file."""

from __future__ import annotations

from pathlib import Path

from result import Err, Ok, Result

from nimbus.common import AppDirectories, create_logger, get_global_config_root
from nimbus.settings import Settings

from .loader import load_config
from .models import ConfigError, ConfigNotFoundError, NimbusConfig

logger = create_logger("config")


class FileConfigStore:
    def __init__(self, directories: AppDirectories, filename: str = "config.yaml") -> None:
        self._directories = directories
        self._filename = filename

    @classmethod
    def from_settings(cls, settings: Settings) -> FileConfigStore:
        return cls(settings.to_app_directories(), settings.paths.config_filename)

    @property
    def path(self) -> Path:
        return get_global_config_root(self._directories) / self._filename

    def load(self) -> Result[NimbusConfig, ConfigError]:
        """Load the config file; a missing file yields the defaults."""
        path = self.path
        logger.debug("Loading config", path=str(path))
        match load_config(path):
            case Err(ConfigNotFoundError()):
                return Ok(NimbusConfig())
            case Err(error):
                logger.error("Config load failed", path=str(path), error=error.message)
                return Err(error)
            case ok:
                return ok


def apply_settings_overrides(config: NimbusConfig, settings: Settings) -> NimbusConfig:
    """Overlay server values set through NIMBUS_* environment variables onto the file config."""
    overrides = settings.server.model_dump(exclude_unset=True)
    if not overrides:
        return config
    logger.debug("Applying environment overrides", fields=sorted(overrides))
    server = config.server.model_copy(update=overrides)
    return config.model_copy(update={"server": server})
