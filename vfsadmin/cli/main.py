"""vfsadmin CLI - Main entrypoint."""

from pathlib import Path

import typer
from rich.console import Console

from vfsadmin import __version__
from vfsadmin.cli.commands import config_cmd, fs_cmd, serve_cmd
from vfsadmin.kernel.config import load_config
from vfsadmin.kernel.exceptions import ConfigurationError
from vfsadmin.kernel.logging import configure_logging

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Create the main Typer app
app = typer.Typer(
    name="vfsadmin",
    help="vfsadmin - Admin tooling for a virtual file system.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
)

# Create console for rich output
console = Console()
err_console = Console(stderr=True)

# Add subcommands
app.add_typer(serve_cmd.app, name="serve", help="Run the HTTP admin API")
app.add_typer(fs_cmd.app, name="fs", help="Operate on the file system directly")
app.add_typer(config_cmd.app, name="config", help="Configuration management")


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold blue]vfsadmin[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    *,
    config_path: Path | None = typer.Option(
        None, "--config", "-c", help="Config file (YAML or pyproject.toml)"
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level: debug|info|warning|error|critical"
    ),
    verbose: bool = typer.Option(False, "-V", "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """vfsadmin CLI.

    Global flags are parsed here; the loaded configuration is stored on
    `ctx.obj` for subcommands.
    """
    if ctx.obj is None:
        ctx.obj = {}

    try:
        config = load_config(config_path)
    except (ConfigurationError, FileNotFoundError) as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=2) from e

    # File commands stay quiet unless asked; the server uses the configured level.
    effective_level = "DEBUG" if verbose else (log_level or "WARNING").upper()
    if effective_level not in LOG_LEVELS:
        err_console.print(f"[red]Error:[/red] unknown log level '{log_level}'")
        raise typer.Exit(code=2)

    configure_logging(
        level=effective_level,  # type: ignore[arg-type]
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        include_timestamp=config.logging.include_timestamp,
        force_reconfigure=True,
    )

    ctx.obj.update({
        "config": config,
        "config_path": config_path,
        "log_level": effective_level,
        "log_level_explicit": verbose or log_level is not None,
    })


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
