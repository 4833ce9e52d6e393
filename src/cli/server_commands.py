"""Server and database CLI commands."""

import httpx
import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from src.storefront.runtime.context import get_config

console = Console()

server_app = typer.Typer(help="🚀 Run the API and prepare its database")


@server_app.command(name="start")
def start_server(
    host: str | None = typer.Option(None, help="Host to bind (default: app.host)"),
    port: int | None = typer.Option(None, help="Port to bind (default: app.port)"),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the API server with uvicorn.
    """
    import uvicorn

    config = get_config()
    host = host or config.app.host
    port = port or config.app.port

    console.print(
        Panel.fit(
            "[bold green]Starting Storefront API[/bold green]",
            border_style="green",
        )
    )
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")
    console.print("[dim]Press Ctrl+C to stop the server[/dim]")

    uvicorn.run(
        "src.storefront.api.http.app:app",
        host=host,
        port=port,
        reload=reload,
        reload_dirs=["src"] if reload else None,
        log_level=log_level,
        access_log=False,  # We handle access logging in middleware
    )


@server_app.command(name="init-db")
def init_db() -> None:
    """Create every table that does not exist yet."""
    from src.storefront.runtime.init_db import init_db as create_tables

    try:
        create_tables()
    except Exception as e:
        console.print(f"[red]❌ Failed to initialize the database: {e}[/red]")
        raise typer.Exit(code=1) from e
    console.print(
        f"[green]✅ Database ready:[/green] {get_config().database.url}"
    )


@server_app.command(name="routes")
def list_routes() -> None:
    """List every registered route."""
    from fastapi.routing import APIRoute

    from src.storefront.api.http.app import app

    table = Table(title="Storefront API routes")
    table.add_column("Methods", style="cyan")
    table.add_column("Path", style="green")
    table.add_column("Name", style="magenta")

    for route in app.routes:
        if isinstance(route, APIRoute):
            table.add_row(", ".join(sorted(route.methods)), route.path, route.name)

    console.print(table)


@server_app.command(name="status")
def status(
    url: str | None = typer.Option(None, help="API base URL (default: app.base_url)"),
) -> None:
    """Query the readiness endpoint of a running server."""
    base_url = url or get_config().app.base_url
    try:
        response = httpx.get(f"{base_url}/health/ready", timeout=5)
    except httpx.HTTPError as e:
        console.print(f"[red]❌ API not reachable at {base_url}: {e}[/red]")
        raise typer.Exit(code=1) from e

    body = response.json()
    database = body.get("checks", {}).get("database", {})
    if response.status_code == 200:
        console.print(f"[green]✅ API ready[/green] (database: {database.get('type')})")
        return
    console.print(f"[yellow]⚠️  API not ready:[/yellow] {database}")
    raise typer.Exit(code=1)
