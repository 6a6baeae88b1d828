"""Command-line interface for igprofile."""

import asyncio
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from igprofile import ProfileLookupService, ServiceConfig, save_json, to_json, __version__
from igprofile.config import LogFormat
from igprofile.core.username import is_valid_username, normalize_username
from igprofile.exceptions import ConfigError, InvalidUsernameError, ProfileNotFoundError, UpstreamError
from igprofile.logging import configure_logging
from igprofile.models.result import LookupResult

app = typer.Typer(
    name="igprofile",
    help="Cached Instagram profile lookups",
    add_completion=False,
)
console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"igprofile version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
):
    """igprofile - cached Instagram profile lookups."""
    pass


@app.command()
def lookup(
    username: str = typer.Argument(..., help="Instagram username"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Force refresh, skip cache"
    ),
    as_json: bool = typer.Option(
        False, "--json", help="Print the response body as JSON"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Save the result to a JSON file"
    ),
):
    """Look up a single Instagram profile."""
    config = ServiceConfig(log_format=LogFormat.JSON if as_json else LogFormat.CONSOLE)
    # Keep stdout clean for the JSON body
    configure_logging(config, stream=sys.stderr if as_json else None)

    async def run() -> LookupResult:
        async with ProfileLookupService(config) as service:
            return await service.lookup(username, force_refresh=force)

    try:
        result = asyncio.run(run())
    except (ConfigError, InvalidUsernameError, ProfileNotFoundError, UpstreamError) as e:
        console.print(f"[red]✗[/red] {e}")
        raise typer.Exit(1)

    if as_json:
        console.print_json(to_json(result))
    else:
        _print_profile_table(result)

    if output:
        path = save_json(result, output)
        console.print(f"[dim]Saved to {path}[/dim]")


@app.command()
def check(
    usernames: list[str] = typer.Argument(..., help="Usernames to validate"),
):
    """Validate usernames offline, without calling the provider."""
    invalid = 0
    for raw in usernames:
        normalized = normalize_username(raw)
        if is_valid_username(normalized):
            console.print(f"[green]✓[/green] {raw} -> {normalized}")
        else:
            invalid += 1
            console.print(f"[red]✗[/red] {raw}")

    if invalid:
        raise typer.Exit(1)


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run("igprofile.api:app", host=host, port=port)


def _print_profile_table(result: LookupResult):
    """Print a profile as a table."""
    p = result.profile
    cached_tag = " (cached)" if result.cached else ""

    table = Table(title=f"@{p.username}{cached_tag}", show_header=False)
    table.add_column("Field", style="dim")
    table.add_column("Value")

    table.add_row("ID", str(p.id))
    table.add_row("Full Name", p.full_name or "-")
    table.add_row("Bio", p.biography or "-")
    table.add_row("Website", p.external_url or "-")
    table.add_row("Picture", p.profile_pic_url or "-")
    table.add_row("Private", "✓" if p.is_private else "✗")
    table.add_row("Verified", "✓" if p.is_verified else "✗")
    table.add_row("Business", "✓" if p.is_business else "✗")
    table.add_row("Updated", p.updated_at.isoformat())

    console.print(table)

    if result.cache_error:
        console.print(f"[yellow]Not cached: {result.cache_error}[/yellow]")


if __name__ == "__main__":
    app()
