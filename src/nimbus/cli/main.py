from __future__ import annotations

import json
import os
from typing import Annotated

import typer
from result import Err, Ok, Result

from nimbus.client import Client
from nimbus.common import LoggingConfig, create_logger, setup_cli_logging
from nimbus.config import FileConfigStore, NimbusConfig, apply_settings_overrides
from nimbus.dispatch import MainThreadContext
from nimbus.objects import (
    ConnectionFailedError,
    FetchError,
    FetchTimeoutError,
    InvalidRequestError,
    ObjectNotFoundError,
    RemoteObject,
    ServerError,
)
from nimbus.settings import Settings
from nimbus.transport import HttpObjectFetcher, ServerConfig

from .commands import config as config_commands
from .errors import handle_config_error

logger = create_logger("cli")

app = typer.Typer(help="nimbus object store command-line interface.")
app.add_typer(config_commands.app, name="config")


@app.callback(invoke_without_command=True)
def _root_callback(
    ctx: typer.Context,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable colored output")] = False,
) -> None:
    # Respect NO_COLOR environment variable and --no-color flag
    if no_color or os.getenv("NO_COLOR"):
        ctx.color = False

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("get")
def get(
    class_name: Annotated[str, typer.Argument(help="Class of the object, e.g. MyClass")],
    object_id: Annotated[str, typer.Argument(help="Id of the object to fetch")],
    server_url: Annotated[str | None, typer.Option("--server-url", help="Override the server URL.")] = None,
    app_id: Annotated[str | None, typer.Option("--app-id", help="Override the application id.")] = None,
    timeout: Annotated[float | None, typer.Option("--timeout", min=0.1, help="Request timeout in seconds.")] = None,
) -> None:
    """Fetch one object by id and print it as JSON.

    Examples:

        nimbus get MyClass abc123

        nimbus get MyClass abc123 --server-url https://api.example.com/parse --app-id my-app
    """
    settings = Settings()
    config = _load_config(settings)

    overrides = {"url": server_url, "application_id": app_id, "timeout": timeout}
    server = config.server.model_copy(update={k: v for k, v in overrides.items() if v is not None})

    context = MainThreadContext()
    outcome: list[Result[RemoteObject, FetchError]] = []

    with (
        create_fetcher(server) as fetcher,
        Client(server, fetcher=fetcher, callback_context=context, max_workers=1) as client,
    ):
        client.query(class_name).get_result_in_background(object_id, outcome.append)
        # The request timeout bounds the fetch; the extra second covers dispatch.
        context.run_until(lambda: bool(outcome), timeout=server.timeout + 1.0)

    if not outcome:
        typer.secho("error: no response before the timeout", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=1)

    match outcome[0]:
        case Ok(obj):
            typer.echo(json.dumps(obj.to_json(), indent=2, sort_keys=True))
        case Err(error):
            _handle_fetch_error(error, server)
            raise typer.Exit(code=1)


def create_fetcher(server: ServerConfig) -> HttpObjectFetcher:
    return HttpObjectFetcher(server)


def _load_config(settings: Settings) -> NimbusConfig:
    match FileConfigStore.from_settings(settings).load():
        case Ok(config):
            return apply_settings_overrides(config, settings)
        case Err(error):
            handle_config_error(error)
            raise typer.Exit(code=1)


def _handle_fetch_error(error: FetchError, server: ServerConfig) -> None:
    """Handle fetch errors with user-friendly messages."""
    match error:
        case ObjectNotFoundError(class_name=class_name, object_id=object_id):
            typer.secho(f"error: {class_name} '{object_id}' not found", err=True, fg=typer.colors.RED)
        case ConnectionFailedError(message=message) | FetchTimeoutError(message=message):
            typer.secho("error: could not reach the server", err=True, fg=typer.colors.RED)
            typer.secho(f"  {message}", err=True)
            hint = f"hint: check that {server.url} is reachable, or pass --server-url"
            typer.secho(hint, err=True, fg=typer.colors.CYAN)
        case ServerError(status_code=status_code, message=message):
            typer.secho(f"error: server failed with status {status_code}", err=True, fg=typer.colors.RED)
            typer.secho(f"  {message}", err=True)
        case InvalidRequestError(code=code, message=message):
            typer.secho(f"error: request rejected ({code.value}): {message}", err=True, fg=typer.colors.RED)
        case _:
            typer.secho(f"error: {error.message}", err=True, fg=typer.colors.RED)


def _setup_logging() -> None:
    settings = Settings()
    config = FileConfigStore.from_settings(settings).load().unwrap_or(None)
    logging_config = config.logging if config else LoggingConfig()

    if logging_config.enabled:
        setup_cli_logging(
            app_info=settings.app,
            config=logging_config,
            directories=settings.to_app_directories(),
        )
        logger.debug("CLI logging initialized", config=logging_config.model_dump())


def main() -> None:
    """Entrypoint for the nimbus CLI."""
    _setup_logging()
    app()
