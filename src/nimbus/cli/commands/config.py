from __future__ import annotations

import json
from typing import Annotated, Literal

import typer
import yaml

from nimbus.config import FileConfigStore, apply_settings_overrides
from nimbus.settings import Settings

from ..errors import handle_config_error

FormatOption = Annotated[
    Literal["yaml", "json"],
    typer.Option("--format", "-f", show_default=True, case_sensitive=False, help="Output format (yaml or json)."),
]

app = typer.Typer(help="Inspect nimbus configuration.")


@app.callback(invoke_without_command=True)
def _config_root(ctx: typer.Context) -> None:
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("show")
def show(format: FormatOption = "yaml") -> None:
    """Print the effective configuration (config file plus NIMBUS_* overrides)."""
    settings = Settings()
    store = FileConfigStore.from_settings(settings)
    result = store.load().map(lambda config: apply_settings_overrides(config, settings).model_dump(mode="json"))
    if result.is_err():
        handle_config_error(result.unwrap_err())
        raise typer.Exit(code=1)

    typer.echo(_format_payload(result.unwrap(), format.lower()))


@app.command("path")
def path() -> None:
    """Print where the config file is read from."""
    typer.echo(str(FileConfigStore.from_settings(Settings()).path))


def _format_payload(payload: dict[str, object], format: str) -> str:
    if format == "json":
        return json.dumps(payload, indent=2, sort_keys=True)
    return yaml.safe_dump(payload, sort_keys=True)
