from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nimbus.common import AppDirectories, AppInfo, AppPaths
from nimbus.transport import ServerConfig


class Settings(BaseSettings):
    app: AppInfo = AppInfo()
    paths: AppPaths = AppPaths()
    server: ServerConfig = ServerConfig()
    workers: int = Field(default=4, ge=1)
    report_cancellation: bool = False

    model_config = SettingsConfigDict(
        env_prefix="NIMBUS_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    def to_app_directories(self) -> AppDirectories:
        return AppDirectories(
            config_dir_name=self.paths.config_dir_name,
            data_dir_name=self.paths.data_dir_name,
        )

