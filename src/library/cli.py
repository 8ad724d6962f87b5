"""Command line entry point: run the API server and manage the schema."""

import os
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from src.library.runtime.config.config_template import CONFIG_PATH_ENV_VAR, load_config

console = Console()

app = typer.Typer(
    help="📚 Book Management API - server and database commands",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

ConfigOption = typer.Option(
    None,
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    help=f"Path to config.yaml (defaults to ${CONFIG_PATH_ENV_VAR} or ./config.yaml)",
)


@app.command()
def serve(
    config_path: Path | None = ConfigOption,
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Bind port"),
    graceful_timeout: int | None = typer.Option(
        None,
        "--graceful-timeout",
        help="Seconds to wait for open connections to finish on shutdown",
    ),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Start the HTTP server."""
    import uvicorn

    if config_path is not None:
        # The app factory reads the path again inside the server process
        os.environ[CONFIG_PATH_ENV_VAR] = str(config_path)
    config = load_config(config_path)

    host = host or config.app.host
    port = port or config.app.port
    graceful_timeout = graceful_timeout or config.app.graceful_timeout

    console.print(
        Panel.fit(
            f"[bold blue]{config.app.name}[/bold blue] {config.app.version}\n"
            f"Environment: {config.app.environment}\n"
            f"Listening on http://{host}:{port}",
            border_style="blue",
        )
    )

    uvicorn.run(
        "src.library.api.http.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        timeout_graceful_shutdown=graceful_timeout,
        access_log=False,  # Requests are logged by our middleware
    )


@app.command("init-db")
def init_db_command(config_path: Path | None = ConfigOption) -> None:
    """Create the database tables."""
    from src.library.runtime.init_db import init_db

    try:
        tables = init_db(config_path)
    except Exception as e:
        console.print(f"[red]❌ Database initialization failed: {e}[/red]")
        raise typer.Exit(1) from e

    console.print(f"[green]✅ Tables ready: {', '.join(tables)}[/green]")


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
