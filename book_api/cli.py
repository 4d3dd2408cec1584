"""Command line entry point: bootstrap the database and serve the API."""

from pathlib import Path

import typer
import uvicorn
from loguru import logger
from rich.console import Console

from book_api.api.http.app import create_app
from book_api.api.http.app_data import ApplicationDependencies
from book_api.api.utils.app_startup import configure_logging
from book_api.core.services import DatabaseConnectionError, DbSessionService
from book_api.runtime.init_db import init_db
from book_api.runtime.settings import (
    DEFAULT_ENV_FILE,
    ConfigurationError,
    EnvironmentVariables,
    load_settings,
)

console = Console()

app = typer.Typer(
    help="Book API service",
    no_args_is_help=True,
)


def _fatal(message: str) -> typer.Exit:
    logger.critical(message)
    return typer.Exit(code=1)


def _bootstrap(env_file: Path | None) -> tuple[EnvironmentVariables, DbSessionService]:
    """Load settings, configure logging and open the database, or exit."""
    try:
        settings = load_settings(env_file)
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise _fatal(str(e)) from e

    configure_logging(settings)

    try:
        database_service = init_db(settings)
    except (ConfigurationError, DatabaseConnectionError) as e:
        raise _fatal(str(e)) from e

    return settings, database_service


@app.command()
def serve(
    env_file: Path | None = typer.Option(
        Path(DEFAULT_ENV_FILE), help="Environment file to load before starting"
    ),
    no_env_file: bool = typer.Option(
        False, "--no-env-file", help="Read settings from the process environment only"
    ),
    host: str | None = typer.Option(None, help="Host to bind to (default: HOST)"),
    port: int | None = typer.Option(None, help="Port to bind to (default: PORT or 8081)"),
) -> None:
    """Start the HTTP server."""
    settings, database_service = _bootstrap(None if no_env_file else env_file)

    application = create_app(
        settings,
        ApplicationDependencies(database_service=database_service),
    )

    bind_host = host or settings.host
    bind_port = port or settings.port
    logger.info("Serving on {}:{}", bind_host, bind_port)

    try:
        uvicorn.run(
            application,
            host=bind_host,
            port=bind_port,
            access_log=False,  # We handle access logging in middleware
            log_config=None,  # Keep the loguru interception in place
        )
    except SystemExit as e:
        # uvicorn exits on bind failures
        if e.code:
            raise _fatal(f"Server stopped listening on {bind_host}:{bind_port}") from e
    finally:
        database_service.dispose()


@app.command(name="init-db")
def init_db_command(
    env_file: Path | None = typer.Option(
        Path(DEFAULT_ENV_FILE), help="Environment file to load before starting"
    ),
    no_env_file: bool = typer.Option(
        False, "--no-env-file", help="Read settings from the process environment only"
    ),
) -> None:
    """Create the books table if it does not exist."""
    _, database_service = _bootstrap(None if no_env_file else env_file)
    database_service.dispose()
    console.print("[green]Database initialized[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
