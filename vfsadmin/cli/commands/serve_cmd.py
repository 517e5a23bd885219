"""vfsadmin serve - Run the HTTP admin API.

Usage:
    vfsadmin serve
    vfsadmin serve --port 9000
"""

import dataclasses

import typer
from rich.console import Console

from vfsadmin import __version__
from vfsadmin.kernel.config import VFSAdminConfig
from vfsadmin.kernel.logging import configure_logging

app = typer.Typer(name="serve", help="Run the HTTP admin API")
console = Console()


@app.callback(invoke_without_command=True)
def serve(
    ctx: typer.Context,
    host: str | None = typer.Option(
        None,
        "--host",
        "-h",
        help="Host to bind to (default from config)",
    ),
    port: int | None = typer.Option(
        None,
        "--port",
        "-p",
        help="Port to bind to (default from config)",
    ),
) -> None:
    """Start the admin API server.

    Examples:
        vfsadmin serve
        vfsadmin -c vfsadmin.yaml serve --host 0.0.0.0
    """
    config: VFSAdminConfig = ctx.obj["config"]
    server = dataclasses.replace(
        config.server,
        host=host if host is not None else config.server.host,
        port=port if port is not None else config.server.port,
    )
    logging_config = config.logging
    if ctx.obj.get("log_level_explicit"):
        logging_config = dataclasses.replace(logging_config, level=ctx.obj["log_level"])
    config = dataclasses.replace(config, server=server, logging=logging_config)

    configure_logging(
        level=config.logging.level,
        format=config.logging.format,
        output_file=config.logging.output_file,
        use_color=config.logging.use_color,
        include_timestamp=config.logging.include_timestamp,
        force_reconfigure=True,
    )

    # Print startup banner
    url = f"http://{server.host}:{server.port}"
    console.print()
    console.print(f"[bold blue]vfsadmin[/bold blue] v{__version__}")
    console.print()
    console.print(f"  [dim]Storage:[/dim]  {config.storage.backend}")
    console.print(f"  [dim]API:[/dim]      [link={url}/api/admin]{url}/api/admin[/link]")
    console.print()

    from vfsadmin.server.main import run_server

    run_server(config)
