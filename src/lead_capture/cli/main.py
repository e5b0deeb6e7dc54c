#!/usr/bin/env python3
"""
CLI interface for the lead capture functions.
"""

import click
import uvicorn
from rich.console import Console
from rich.table import Table

from lead_capture import __version__
from lead_capture.config.settings import (
    KAJABI_API_BASE_URL,
    MAKE_WEBHOOK_URL,
    get_kajabi_settings,
    get_settings,
)
from lead_capture.utils.logging import setup_logging

console = Console()


@click.group()
@click.version_option(version=__version__)
def app():
    """Lead capture functions CLI."""
    pass


@app.command()
@click.option("--host", default=None, help="Bind host (defaults to settings)")
@click.option("--port", default=None, type=int, help="Bind port (defaults to settings)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Run the HTTP app locally."""
    settings = get_settings()
    setup_logging(settings.app_name, settings.log_level, enable_json=settings.log_json)

    host = host or settings.host
    port = port or settings.port
    console.print(f"🚀 Serving on http://{host}:{port}")
    console.print(f"   POST http://{host}:{port}/api/webhook-proxy")
    console.print(f"   POST http://{host}:{port}/api/kajabi-tag")

    uvicorn.run(
        "lead_capture.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def config():
    """Show the resolved configuration with secrets masked."""
    settings = get_settings()
    kajabi = get_kajabi_settings()

    table = Table(title="Lead capture configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    table.add_row("environment", settings.environment)
    table.add_row("log_level", settings.log_level)
    table.add_row("upstream_timeout", str(settings.upstream_timeout))
    table.add_row("upstream_max_attempts", str(settings.upstream_max_attempts))
    table.add_row("kajabi_api", KAJABI_API_BASE_URL)
    table.add_row("relay_target", MAKE_WEBHOOK_URL)
    for key, value in kajabi.masked().items():
        table.add_row(f"kajabi.{key}", str(value))

    console.print(table)

    missing = [name for name, tag_id in kajabi.tag_map().items() if not tag_id]
    if not kajabi.has_credentials or not kajabi.site_id:
        console.print("[red]❌ Kajabi credentials or site id missing[/red]")
    elif missing:
        console.print(f"[yellow]⚠️  No tag id for: {', '.join(missing)}[/yellow]")
    else:
        console.print("[green]✅ Kajabi configuration complete[/green]")


if __name__ == "__main__":
    app()
