"""
Command-line entry point for MDB_DATA_API.

Examples:
    mdb-data-api serve
    mdb-data-api serve --port 9000 --env-file .env.local
    mdb-data-api actions
"""

import dataclasses
from pathlib import Path

import click
import uvicorn
from dotenv import load_dotenv

from ..config import ServerSettings
from ..constants import SERVICE_VERSION, SUPPORTED_ACTIONS
from ..exceptions import ConfigurationError
from ..observability import configure_logging
from ..routing import create_app


@click.group()
@click.version_option(SERVICE_VERSION, prog_name="mdb-data-api")
def cli() -> None:
    """MongoDB Data API replacement server."""


@cli.command()
@click.option("--host", default=None, help="Listen host (default: HOST or 0.0.0.0)")
@click.option("--port", type=int, default=None, help="Listen port (default: PORT or 8080)")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Log level (default: LOG_LEVEL)",
)
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Load environment variables from this file first",
)
def serve(host: str | None, port: int | None, log_level: str | None, env_file: Path | None) -> None:
    """
    Run the HTTP server until SIGINT/SIGTERM.

    On shutdown uvicorn stops accepting connections, waits up to
    SHUTDOWN_GRACE_SECONDS for in-flight requests, then the MongoDB client
    is closed and the process exits 0.
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv()

    try:
        settings = ServerSettings.from_env()
        overrides = {
            key: value
            for key, value in (("host", host), ("port", port), ("log_level", log_level))
            if value is not None
        }
        settings = dataclasses.replace(settings, **overrides)
        settings.validate()
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    configure_logging(settings.log_level.upper())
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=settings.shutdown_grace_seconds,
    )


@cli.command()
def actions() -> None:
    """List the supported action names."""
    for action in SUPPORTED_ACTIONS:
        click.echo(action)


def main() -> None:
    cli()
