"""
Comanda CLI.

Command-line interface for common operator tasks.
"""

import asyncio
import sys
import time
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="comanda",
    help="Comanda restaurant ordering CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_init():
    """Create all database tables (idempotent)."""
    from shared.infrastructure.db import engine
    from rest_api.models import Base

    console.print(f"[blue]Creating schema on: {engine.url.render_as_string(hide_password=True)}[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Schema creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Schema ready[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed the database with a demo menu, add-ons, tables and staff."""
    from shared.config.settings import settings
    from shared.infrastructure.db import engine, get_db_context
    from rest_api.models import Base
    from rest_api.seed import seed

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    Base.metadata.create_all(bind=engine)
    with get_db_context() as db:
        inserted = seed(db)

    if inserted:
        console.print("[green]✓ Demo data seeded[/green]")
    else:
        console.print("[yellow]Database already has a menu, nothing to do[/yellow]")


# =============================================================================
# Order Commands
# =============================================================================

@app.command()
def orders(
    table: Optional[int] = typer.Option(None, "--table", "-t", help="Only open orders of this table id"),
):
    """Show orders: open orders of one table, or the kitchen queue."""
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import NotFoundError
    from rest_api.repositories import get_order_repository

    with get_db_context() as db:
        repo = get_order_repository(db)
        try:
            rows = repo.list_open_orders_for_table(table) if table is not None else repo.list_kitchen_queue()
        except NotFoundError as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

        title = f"Open orders for table {table}" if table is not None else "Kitchen queue"
        out = Table(title=title)
        out.add_column("ID", style="cyan", justify="right")
        out.add_column("Table", justify="right")
        out.add_column("Status", style="yellow")
        out.add_column("Items")
        out.add_column("Total", style="green", justify="right")
        out.add_column("Created")

        for order in rows:
            items = ", ".join(f"{line.quantity}x {line.item.name}" for line in order.lines)
            out.add_row(
                str(order.id),
                str(order.table.number) if order.table else "counter",
                order.status,
                items,
                f"{order.total_price:.2f}",
                order.created_at.strftime("%Y-%m-%d %H:%M"),
            )

    console.print(out)
    if not rows:
        console.print("[yellow]No orders[/yellow]")


@app.command()
def close_table(
    table_id: int = typer.Argument(..., help="Table id to bill"),
):
    """
    Mark every open order of a table as paid.

    Connected clients are not notified from the CLI; they pick the change
    up on their next refresh.
    """
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import AppException
    from rest_api.repositories import get_order_repository

    with get_db_context() as db:
        try:
            closed = get_order_repository(db).close_table(table_id)
        except AppException as e:
            console.print(f"[red]✗ {e.detail}[/red]")
            raise typer.Exit(1)

    console.print(f"[green]✓ Table {table_id} closed, {len(closed)} order(s) paid[/green]")


# =============================================================================
# Server Commands
# =============================================================================

@app.command()
def serve(
    port: Optional[int] = typer.Option(None, help="Port (defaults to REST_API_PORT)"),
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Run the API and real-time server with uvicorn."""
    import uvicorn
    from shared.config.settings import settings

    uvicorn.run(
        "rest_api.main:app",
        host=host,
        port=port or settings.rest_api_port,
        reload=reload,
    )


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:3000", help="Base URL of the running server"),
):
    """Check a running server's health."""
    import httpx

    table = Table(title="Service Health")
    table.add_column("Check", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Response Time", style="yellow")

    with httpx.Client(timeout=5.0) as client:
        for name, path in [("REST API", "/api/health"), ("Dependencies", "/api/health/detailed")]:
            try:
                start = time.time()
                response = client.get(f"{url}{path}")
                elapsed = (time.time() - start) * 1000
                if response.status_code == 200:
                    table.add_row(name, "✓ Healthy", f"{elapsed:.0f}ms")
                else:
                    table.add_row(name, f"✗ Status {response.status_code}", f"{elapsed:.0f}ms")
            except httpx.HTTPError as e:
                table.add_row(name, f"✗ {type(e).__name__}", "-")

    console.print(table)


@app.command()
def ws_test(
    url: str = typer.Option("ws://localhost:3000/ws", help="WebSocket URL"),
):
    """Test real-time channel connectivity with a heartbeat."""
    import websockets

    async def _test():
        console.print(f"[blue]Testing WebSocket: {url}[/blue]")
        try:
            async with websockets.connect(url, close_timeout=5) as ws:
                await ws.send('{"type":"ping"}')
                response = await asyncio.wait_for(ws.recv(), timeout=5)
                console.print(f"[green]✓ Connected! Response: {response}[/green]")
        except asyncio.TimeoutError:
            console.print("[red]✗ Connection timed out[/red]")
            raise typer.Exit(1)
        except (OSError, websockets.WebSocketException) as e:
            console.print(f"[red]✗ Connection failed: {e}[/red]")
            raise typer.Exit(1)

    asyncio.run(_test())


@app.command()
def version():
    """Show version information."""
    table = Table(title="Comanda Version")
    table.add_column("Component", style="cyan")
    table.add_column("Version", style="green")

    table.add_row("API", "0.1.0")
    table.add_row("Python", sys.version.split()[0])

    console.print(table)


if __name__ == "__main__":
    app()
