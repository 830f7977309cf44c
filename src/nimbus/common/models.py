"""Common models used across nimbus."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel

from nimbus.constants import APP_NAME


class AppInfo(BaseModel):
    project_name: str = APP_NAME
    version: str = "0.1.0"
    environment: Literal["test", "dev", "prod"] = "dev"


class AppPaths(BaseModel):
    config_dir_name: str = APP_NAME
    data_dir_name: str = APP_NAME
    config_filename: str = "config.yaml"
    cache_namespace: str = "objects"


@dataclass(frozen=True)
class AppDirectories:
    """Where nimbus keeps its files.

    - ~/.config/{config_dir_name}/
    - ~/.local/share/{data_dir_name}/
    """

    config_dir_name: str = APP_NAME
    data_dir_name: str = APP_NAME
