"""File system commands - direct access to the configured stores.

With the default ``memory`` backend every invocation starts from an empty
file system, so these commands are mostly useful with ``sqlite`` storage::

    export VFSADMIN_STORAGE_BACKEND=sqlite
    vfsadmin fs mkdir docs
    vfsadmin fs write docs/readme.md "hello"
    vfsadmin fs cat docs/readme.md
"""

import asyncio
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import typer
from rich.console import Console
from rich.table import Table

from vfsadmin.api import vfs as vfs_api
from vfsadmin.kernel.config import VFSAdminConfig
from vfsadmin.kernel.exceptions import VFSError
from vfsadmin.kernel.ports.vfs import VFSAdmin

app = typer.Typer(help="Operate on the file system directly")
console = Console()
err_console = Console(stderr=True)

T = TypeVar("T")


def _run(ctx: typer.Context, operation: Callable[[VFSAdmin], Awaitable[T]]) -> T:
    """Run ``operation`` against a freshly built service and close it afterwards."""
    config: VFSAdminConfig = ctx.obj["config"]

    async def _main() -> T:
        async with vfs_api.create_vfs_admin(config) as vfs:
            return await operation(vfs)

    try:
        return asyncio.run(_main())
    except VFSError as e:
        err_console.print(f"[red]Error ({e.kind.value}):[/red] {e}")
        raise typer.Exit(code=1) from e


@app.command("exists")
def exists(ctx: typer.Context, path: str = typer.Argument(..., help="Path to check")) -> None:
    """Print true/false; exit code 1 when the path does not exist."""
    result = _run(ctx, lambda vfs: vfs_api.exists_path(vfs, path))
    console.print("true" if result["exists"] else "false")
    if not result["exists"]:
        raise typer.Exit(code=1)


@app.command("stat")
def stat(ctx: typer.Context, path: str = typer.Argument(..., help="File or directory")) -> None:
    """Show node metadata as JSON."""
    result = _run(ctx, lambda vfs: vfs_api.stat_path(vfs, path))
    console.print_json(data=result["attributes"])


@app.command("cat")
def cat(ctx: typer.Context, path: str = typer.Argument(..., help="File to print")) -> None:
    """Print a file's content."""
    result = _run(ctx, lambda vfs: vfs_api.read_path(vfs, path))
    typer.echo(result["content"], nl=False)


@app.command("write")
def write(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File to create or overwrite"),
    content: str | None = typer.Argument(None, help="Text content"),
    source: Path | None = typer.Option(
        None, "--from", "-f", exists=True, dir_okay=False, help="Read content from a local file"
    ),
) -> None:
    """Create or overwrite a file from an argument or a local file."""
    if (content is None) == (source is None):
        err_console.print("[red]Error:[/red] pass exactly one of CONTENT or --from")
        raise typer.Exit(code=2)
    data: bytes | str = source.read_bytes() if source is not None else str(content)
    _run(ctx, lambda vfs: vfs_api.write_path(vfs, path, data))
    console.print(f"[green]Wrote[/green] {path}")


@app.command("mkdir")
def mkdir(ctx: typer.Context, path: str = typer.Argument(..., help="Directory to create")) -> None:
    """Create a directory (parents must exist)."""
    _run(ctx, lambda vfs: vfs_api.make_directory(vfs, path))
    console.print(f"[green]Created directory[/green] {path}")


@app.command("rm")
def rm(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File or directory to delete"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Delete descendants too"),
) -> None:
    """Delete a file or directory."""
    _run(ctx, lambda vfs: vfs_api.delete_path(vfs, path, recursive=recursive))
    console.print(f"[green]Deleted[/green] {path}")


@app.command("ls")
def ls(
    ctx: typer.Context,
    path: str | None = typer.Argument(None, help="Directory to list (default: root)"),
) -> None:
    """List a directory's direct children."""
    result = _run(ctx, lambda vfs: vfs_api.list_path(vfs, path))
    entries = result["entries"]
    if not entries:
        console.print("[dim]No entries[/dim]")
        return

    table = Table(title=path or "/", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Path", style="dim")
    for entry in entries:
        table.add_row(entry["name"], entry["kind"], entry["path"])
    console.print(table)
