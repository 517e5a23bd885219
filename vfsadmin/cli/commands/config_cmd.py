"""Configuration management commands."""

import dataclasses
from typing import Any

import typer
from rich.console import Console

app = typer.Typer(help="Configuration management commands")
console = Console()


@app.command("show")
def show_config(
    ctx: typer.Context,
    key: str | None = typer.Argument(None, help="Dotted key, e.g. storage.backend"),
) -> None:
    """Show the effective configuration or a single key."""
    config: dict[str, Any] = dataclasses.asdict(ctx.obj["config"])
    if key is None:
        console.print_json(data=config)
        return

    value: Any = config
    for part in key.split("."):
        if not isinstance(value, dict) or part not in value:
            console.print(f"[red]Unknown config key:[/red] {key}")
            raise typer.Exit(code=1)
        value = value[part]
    if isinstance(value, dict):
        console.print_json(data=value)
    else:
        console.print(value)
