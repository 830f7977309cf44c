from __future__ import annotations

import typer

from nimbus.config import ConfigError


def handle_config_error(error: ConfigError) -> None:
    message = error.message
    expected_path = getattr(error, "expected_path", None)
    error_path = getattr(error, "path", None)
    if expected_path is not None:
        message = f"{message} (expected at {expected_path})"
    elif error_path is not None:
        message = f"{message} ({error_path})"

    field = getattr(error, "field", None)
    if field:
        message = f"{field}: {message}"

    typer.secho(f"error: {message}", err=True, fg=typer.colors.RED)
