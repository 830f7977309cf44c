"""Configuration file loading and validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import ValidationError
from result import Err, Ok, Result

from .models import (
    ConfigError,
    ConfigIOError,
    ConfigNotFoundError,
    ConfigValidationError,
    ConfigYamlError,
    NimbusConfig,
)


def load_config(path: Path) -> Result[NimbusConfig, ConfigError]:
    """Load and validate a config file from YAML."""
    if not path.is_file():
        return Err(ConfigNotFoundError(expected_path=path, message="Configuration file not found."))

    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        return Err(ConfigIOError(path=path, message=str(exc)))

    try:
        data = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        mark = getattr(exc, "problem_mark", None)
        line = getattr(mark, "line", None)
        column = getattr(mark, "column", None)
        return Err(
            ConfigYamlError(
                path=path,
                line=(line + 1) if line is not None else None,
                column=(column + 1) if column is not None else None,
                message=str(exc),
            ),
        )

    if not isinstance(data, dict):
        return Err(
            ConfigValidationError(
                path=path,
                message="Configuration root must be a mapping of keys to values.",
            ),
        )

    try:
        return Ok(NimbusConfig.model_validate(data))
    except ValidationError as exc:
        field = None
        message = str(exc)
        if details := exc.errors():
            first = details[0]
            field = ".".join(str(part) for part in first.get("loc") or ()) or None
            message = first.get("msg", message)
        return Err(ConfigValidationError(path=path, field=field, message=message))
