"""
Batch cooking admin CLI.

Command-line interface for database setup and bitmask maintenance.

Usage:
    cd backend
    python -m cli --help
"""

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="batch-admin",
    help="Batch cooking admin CLI",
    add_completion=False,
)
console = Console()


# =============================================================================
# Database Commands
# =============================================================================

@app.command()
def db_create():
    """Create missing tables."""
    from admin_api.models import Base
    from shared.infrastructure.db import engine

    console.print("[blue]Creating tables...[/blue]")
    try:
        Base.metadata.create_all(bind=engine)
    except Exception as e:
        console.print(f"[red]✗ Table creation failed: {e}[/red]")
        raise typer.Exit(1)
    console.print("[green]✓ Tables created/verified[/green]")


@app.command()
def db_seed(
    force: bool = typer.Option(False, "--force", "-f", help="Allow seeding in production"),
):
    """Seed the database with development data."""
    from admin_api.seed import seed
    from shared.config.settings import settings
    from shared.infrastructure.db import get_db_context

    if settings.environment == "production" and not force:
        console.print("[red]Cannot seed production without --force[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        seed(db)
    console.print("[green]✓ Seed complete[/green]")


@app.command()
def backfill_bit_indexes():
    """Assign a bit_index to reference rows that have none."""
    from migrations.backfill_bit_indexes import backfill_bit_indexes as run_backfill
    from shared.infrastructure.db import get_db_context

    with get_db_context() as db:
        results = run_backfill(db)

    table = Table(title="bit_index backfill")
    table.add_column("Table", style="cyan")
    table.add_column("Migrated", style="green")
    table.add_column("Skipped", style="yellow")
    table.add_column("Errors", style="red")
    for name, counts in results.items():
        table.add_row(name, str(counts["migrated"]), str(counts["skipped"]), str(counts["errors"]))
    console.print(table)

    if any(counts["errors"] for counts in results.values()):
        raise typer.Exit(1)


# =============================================================================
# Mask Commands
# =============================================================================

@app.command()
def bits(
    reference_table: str = typer.Argument(..., help="allergies, diets, kitchen_equipments, ingredient_search_namespaces or seasonality"),
):
    """Show which item owns each bit of a reference table."""
    from admin_api.services.domain import REFERENCE_TABLES, reference_items, summarize
    from shared.infrastructure.db import get_db_context

    if reference_table not in REFERENCE_TABLES:
        console.print(f"[red]Unknown reference table: {reference_table}[/red]")
        raise typer.Exit(1)

    with get_db_context() as db:
        items = reference_items(db, reference_table)
        summaries = summarize(items, reference_table)
        unassigned = [item.id for item in items if item.bit_index is None]

    table = Table(title=f"Bits of {reference_table}")
    table.add_column("Bit", style="cyan", justify="right")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Label", style="green")
    for summary in sorted(summaries, key=lambda s: s.bit_index):
        table.add_row(str(summary.bit_index), str(summary.id), summary.label)
    console.print(table)

    if unassigned:
        console.print(
            f"[yellow]{len(unassigned)} row(s) without bit_index: {unassigned}. "
            "Run backfill-bit-indexes.[/yellow]"
        )


@app.command()
def mask_decode(
    reference_table: str = typer.Argument(..., help="Reference table the mask refers to"),
    mask: int = typer.Argument(..., help="Mask value"),
):
    """Decode a mask against a reference table."""
    from admin_api.services.domain import REFERENCE_TABLES, reference_items, summarize
    from shared.infrastructure.db import get_db_context
    from shared.utils.exceptions import MaskError
    from shared.utils.masks import bits_of, decode

    if reference_table not in REFERENCE_TABLES:
        console.print(f"[red]Unknown reference table: {reference_table}[/red]")
        raise typer.Exit(1)

    try:
        with get_db_context() as db:
            items = reference_items(db, reference_table)
            decoded = summarize(decode(mask, items), reference_table)
        set_bits = bits_of(mask)
    except MaskError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{mask} in {reference_table}")
    table.add_column("Bit", style="cyan", justify="right")
    table.add_column("Label", style="green")
    labels = {summary.bit_index: summary.label for summary in decoded}
    for position in set_bits:
        table.add_row(str(position), labels.get(position, "[dim]unassigned[/dim]"))
    console.print(table)


# =============================================================================
# Health Commands
# =============================================================================

@app.command()
def health(
    url: str = typer.Option("http://localhost:8000/api/health/detailed", help="Detailed health URL"),
):
    """Check the running API."""
    import httpx

    try:
        response = httpx.get(url, timeout=5.0)
    except httpx.HTTPError as e:
        console.print(f"[red]✗ {type(e).__name__}: {e}[/red]")
        raise typer.Exit(1)

    body = response.json()
    table = Table(title=f"Admin API health: {body.get('status', response.status_code)}")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details", style="yellow")
    for name, component in body.get("dependencies", {}).items():
        details = component.get("error") or component.get("details") or ""
        table.add_row(name, component["status"], str(details))
    console.print(table)

    if response.status_code != 200:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
